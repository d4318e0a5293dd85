"""Shopping list built from a meal plan, grouped by store section."""

import logging
from typing import Dict, Iterable, List

from ..models import Meal, ShoppingItem
from .food_lookup import FoodLookup

logger = logging.getLogger(__name__)

DEFAULT_SECTION = "Outros"


def build_shopping_list(meals: Iterable[Meal], lookup: FoodLookup) -> Dict[str, List[ShoppingItem]]:
    """
    Aggregate the grams of every food in the plan, grouped by section.

    Catalog foods are grouped by catalog name and their weight is estimated
    from the stored calories. Manual items only count when entered in grams.
    """
    by_name: Dict[str, ShoppingItem] = {}

    for meal in meals:
        for item in meal.items:
            food = lookup.get_by_id(item.food_id)
            name = food.name if food else item.name
            section = (food.shopping_category if food else None) or DEFAULT_SECTION

            grams = 0.0
            if food is not None:
                kcal_100g = food.nutrients_per_100g.kcal
                if kcal_100g > 0:
                    grams = (item.calculated_calories or 0) / kcal_100g * 100
            elif item.unit == "g":
                grams = item.quantity

            if name not in by_name:
                by_name[name] = ShoppingItem(name=name, category=section)
            by_name[name].total_grams += grams

    sections: Dict[str, List[ShoppingItem]] = {}
    for entry in by_name.values():
        sections.setdefault(entry.category, []).append(entry)

    logger.debug(f"Shopping list: {len(by_name)} items in {len(sections)} sections")
    return sections

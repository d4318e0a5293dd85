"""
Daily nutrient totals for meal plans.

Macros always come from the values stored on each item so manual edits are
kept. Micros come from the item's snapshot; items created before snapshots
existed are re-derived from the catalog (stored kcal / kcal per 100g).
"""

import logging
from typing import Dict, Iterable, Optional

from ..models import FoodItemCanonical, Meal, MealItem, NutrientTotals
from .food_lookup import FoodLookup

logger = logging.getLogger(__name__)

# Totals field → per-100g field of the canonical food
MICRO_FIELDS: Dict[str, str] = {
    "fiber": "fiber_g",
    "sodium": "sodium_mg",
    "calcium": "calcium_mg",
    "iron": "iron_mg",
    "potassium": "potassium_mg",
    "vitamin_c": "vitamin_c_mg",
}

_SNAPSHOT_ALIASES = {"vitamin_c": "vitaminC"}

# Digits kept per field; None rounds to the integer
ROUNDING: Dict[str, Optional[int]] = {
    "calories": None,
    "protein": 1,
    "carbs": 1,
    "fat": 1,
    "fiber": 1,
    "sodium": None,
    "calcium": None,
    "iron": 1,
    "potassium": None,
    "vitamin_c": None,
}


def _num(value) -> float:
    try:
        return float(value) if value is not None else 0.0
    except (TypeError, ValueError):
        return 0.0


def _snapshot_value(snapshot: Dict[str, Optional[float]], field: str) -> float:
    # Snapshots saved by the web client use camelCase keys ("vitaminC")
    if field in snapshot:
        return _num(snapshot[field])
    return _num(snapshot.get(_SNAPSHOT_ALIASES.get(field, field)))


class NutrientAggregator:
    """Sums nutrients over meal items."""

    def __init__(self, lookup: FoodLookup):
        self.lookup = lookup

    def _catalog_micros(self, item: MealItem) -> Dict[str, float]:
        food: Optional[FoodItemCanonical] = self.lookup.get_by_id(item.food_id)
        if food is None:
            logger.debug(f"Food '{item.food_id}' not in catalog, no micros")
            return {}

        kcal_100g = food.nutrients_per_100g.kcal
        if not kcal_100g or kcal_100g <= 0:
            return {}

        ratio = _num(item.calculated_calories) / kcal_100g
        nutrients = food.nutrients_per_100g
        return {
            field: _num(getattr(nutrients, source)) * ratio
            for field, source in MICRO_FIELDS.items()
        }

    def aggregate(self, items: Iterable[MealItem]) -> NutrientTotals:
        """
        Sum macro and micro nutrients, then round each field.

        Returns:
            Totals with calories as an integer, protein/carbs/fat/fiber/iron
            with one decimal and the other mg fields as integers.
        """
        totals = {field: 0.0 for field in ROUNDING}

        for item in items:
            totals["calories"] += _num(item.calculated_calories)
            totals["protein"] += _num(item.calculated_protein)
            totals["carbs"] += _num(item.calculated_carbs)
            totals["fat"] += _num(item.calculated_fat)

            if item.snapshot is not None:
                micros = {field: _snapshot_value(item.snapshot, field) for field in MICRO_FIELDS}
            else:
                micros = self._catalog_micros(item)

            for field, value in micros.items():
                totals[field] += value

        rounded = {}
        for field, value in totals.items():
            digits = ROUNDING[field]
            rounded[field] = round(value, digits) if digits else round(value)
        return NutrientTotals(**rounded)

    def aggregate_meals(self, meals: Iterable[Meal]) -> NutrientTotals:
        """Daily totals over every item of every meal."""
        return self.aggregate(item for meal in meals for item in meal.items)

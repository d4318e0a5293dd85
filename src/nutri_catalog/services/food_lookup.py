"""
Food lookup facade over the scientific catalog and the legacy food list.

The scientific catalog always takes priority; the small hand-authored legacy
list only widens coverage when the catalog has no match.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

from ..models import FoodItemCanonical, PortionTotals
from .catalog_store import CatalogStore
from .portions import DEFAULT_PORTION

logger = logging.getLogger(__name__)

_DATA_DIR = Path(__file__).parent.parent / "data"
_LEGACY_FILE = _DATA_DIR / "legacy_foods.json"

MIN_QUERY_LENGTH = 2
MAX_COMBINED_RESULTS = 30


class FoodLookup:
    """
    Single search/lookup capability for UI, API and report consumers.

    Features:
    - Scientific catalog results first, legacy items merged by name
    - Lookups by id across both sources
    - Portion and free-weight nutrient totals with clinical rounding
    """

    def __init__(
        self,
        store: Optional[CatalogStore] = None,
        legacy_path: Optional[Path] = None,
        legacy_foods: Optional[List[FoodItemCanonical]] = None,
    ):
        """
        Args:
            store: Scientific catalog. A new empty store is created if omitted.
            legacy_path: JSON file with the legacy foods.
            legacy_foods: Legacy foods given directly (skips the JSON file).
        """
        self.store = store if store is not None else CatalogStore()
        self._legacy_path = legacy_path or _LEGACY_FILE
        self._legacy: Optional[List[FoodItemCanonical]] = legacy_foods

    # ------------------------------------------------------------------
    # Legacy list (lazy)
    # ------------------------------------------------------------------

    @property
    def legacy_foods(self) -> List[FoodItemCanonical]:
        if self._legacy is None:
            self._legacy = self._load_legacy()
        return self._legacy

    def _load_legacy(self) -> List[FoodItemCanonical]:
        try:
            with open(self._legacy_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Legacy food list not found at {self._legacy_path}")
            return []

        foods = [FoodItemCanonical.model_validate(item) for item in data]
        logger.info(f"Loaded {len(foods)} legacy foods")
        return foods

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def search(self, query: str) -> List[FoodItemCanonical]:
        """Search both sources by name; at most 30 results."""
        if not query or len(query) < MIN_QUERY_LENGTH:
            return []

        q = query.lower().strip()
        combined = [self.store.to_canonical(r) for r in self.store.search_by_name(q)]
        seen_names = {food.name.lower() for food in combined}

        for food in self.legacy_foods:
            if len(combined) >= MAX_COMBINED_RESULTS:
                break
            name = food.name.lower()
            if q in name and name not in seen_names:
                combined.append(food)
                seen_names.add(name)

        return combined

    def search_by_category(self, category: str) -> List[FoodItemCanonical]:
        """Scientific category matches, then legacy ones not already present."""
        results = [self.store.to_canonical(r) for r in self.store.search_by_category(category)]

        cat = (category or "").lower().strip()
        if not cat:
            return results

        seen_ids = {food.id for food in results}
        for food in self.legacy_foods:
            if food.id not in seen_ids and cat in food.category.lower():
                results.append(food)
                seen_ids.add(food.id)
        return results

    def get_by_id(self, food_id: str) -> Optional[FoodItemCanonical]:
        """Resolve an id against the legacy list first, then the scientific catalog."""
        for food in self.legacy_foods:
            if food.id == food_id:
                return food

        record = self.store.get_by_id(food_id)
        if record is not None:
            return self.store.to_canonical(record)
        return None

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    @staticmethod
    def calculate_totals(
        food: FoodItemCanonical, portion_index: int, quantity: float
    ) -> PortionTotals:
        """
        Nutrients for `quantity` times one of the food's portions.

        An out-of-range portion index falls back to the first portion.
        """
        portions = food.portions or [DEFAULT_PORTION]
        if 0 <= portion_index < len(portions):
            portion = portions[portion_index]
        else:
            portion = portions[0]
        return FoodLookup.calculate_totals_from_weight(food, portion.grams, quantity)

    @staticmethod
    def calculate_totals_from_weight(
        food: FoodItemCanonical, grams: float, quantity: float
    ) -> PortionTotals:
        """
        Nutrients for a free weight (grams or ml) entered by hand.

        Rounding follows Anvisa IN 75/2020: kcal to the integer, macros to
        one decimal, mg micros to the integer (iron keeps one decimal).
        """
        total_grams = grams * quantity
        ratio = total_grams / 100
        n = food.nutrients_per_100g

        def _optional(value: Optional[float], digits: Optional[int]) -> Optional[float]:
            # Zero or unknown per-100g values are left out of the totals
            if not value:
                return None
            return round(value * ratio, digits) if digits else round(value * ratio)

        return PortionTotals(
            kcal=round(n.kcal * ratio),
            protein=round(n.protein_g * ratio, 1),
            carbs=round(n.carb_g * ratio, 1),
            fat=round(n.fat_g * ratio, 1),
            fiber=round((n.fiber_g or 0) * ratio, 1),
            sodium=round((n.sodium_mg or 0) * ratio),
            calcium=_optional(n.calcium_mg, None),
            iron=_optional(n.iron_mg, 1),
            potassium=_optional(n.potassium_mg, None),
            vitamin_c=_optional(n.vitamin_c_mg, None),
            total_grams=total_grams,
        )

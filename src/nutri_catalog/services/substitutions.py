"""
Calorically equivalent food substitutions.

For an original food and a calorie target, finds foods from the same food
group and the household portion x quantity combination that best hits the
target weight. When no combination lands within 15% of the target, the
suggestion switches to a raw gram weight (manual weight mode).
"""

import logging
import re
from typing import Dict, List, Optional, Tuple

from ..models import FoodItemCanonical, SubstitutionSuggestion
from .food_lookup import FoodLookup

logger = logging.getLogger(__name__)

# Food groups as category keywords (matched as substrings, first group wins)
CATEGORY_GROUPS: Dict[str, List[str]] = {
    "CEREALS": [
        "cereais", "pães", "paes", "massas", "arroz", "farinha", "biscoito", "milho",
        "aveia", "granola", "torrada", "tapioca", "farináceos", "panificação",
    ],
    "TUBERS": ["tubérculos", "batata", "mandioca", "cará", "inhame", "mandioquinha", "raízes"],
    "FRUITS": ["frutas", "fruta", "suco de fruta", "polpa"],
    "LEGUMES": [
        "leguminosas", "feijão", "feijao", "grão", "soja", "lentilha", "ervilha",
        "grão-de-bico", "feijões",
    ],
    "PROTEINS": [
        "carnes", "pescados", "peixes", "aves", "frango", "ovos", "carne", "suínos",
        "bovinos", "miúdos", "vísceras",
    ],
    "DAIRY": ["laticínios", "queijos", "leite", "iogurte", "queijo"],
    "VEGETABLES": ["vegetais", "verduras", "hortaliças", "legumes", "folhas", "hortícolas"],
    "FATS": [
        "óleos", "gorduras", "oleaginosas", "azeite", "manteiga", "margarina", "castanha",
        "amendoim", "sementes", "lípidos",
    ],
}

QUANTITY_MULTIPLIERS = (0.5, 1, 1.5, 2, 3)
MAX_FIT_ERROR_PCT = 15.0
MAX_SUGGESTIONS = 15


def get_category_group(category: str) -> List[str]:
    """
    Keywords of the food group a category belongs to.

    Falls back to the first word of the category when no group matches.
    """
    cat = (category or "").lower()
    for terms in CATEGORY_GROUPS.values():
        if any(term in cat for term in terms):
            return terms
    return [re.split(r"[\s,/-]+", cat)[0]]


def best_portion_fit(
    food: FoodItemCanonical, target_grams: float
) -> Tuple[int, float, float]:
    """
    Search portions x quantity multipliers for the weight closest to target.

    Ties keep the first combination found (portion order, then quantity).

    Returns:
        (portion_index, quantity, grams) of the best combination.
    """
    best: Optional[Tuple[int, float, float]] = None
    min_diff = float("inf")

    for idx, portion in enumerate(food.portions):
        for qty in QUANTITY_MULTIPLIERS:
            grams = portion.grams * qty
            diff = abs(grams - target_grams)
            if diff < min_diff:
                min_diff = diff
                best = (idx, qty, grams)

    return best if best is not None else (-1, 1, target_grams)


class SubstitutionEngine:
    """Suggests same-group foods with a portion matching a calorie target."""

    def __init__(self, lookup: FoodLookup):
        self.lookup = lookup

    def _candidates(self, original: FoodItemCanonical) -> List[FoodItemCanonical]:
        candidates: List[FoodItemCanonical] = []
        seen = set()
        for term in get_category_group(original.category):
            for food in self.lookup.search_by_category(term):
                if food.id not in seen:
                    seen.add(food.id)
                    candidates.append(food)
        return candidates

    def suggest(
        self, candidate: FoodItemCanonical, reference_kcal: float
    ) -> Optional[SubstitutionSuggestion]:
        """Best-fitting portion of one candidate, or None without a calorie density."""
        density = candidate.nutrients_per_100g.kcal
        if not density or density <= 0:
            return None

        target_grams = reference_kcal / density * 100
        portion_index, quantity, grams = best_portion_fit(candidate, target_grams)
        error_pct = abs(grams - target_grams) / target_grams * 100
        is_manual = portion_index < 0 or error_pct > MAX_FIT_ERROR_PCT

        return SubstitutionSuggestion(
            food=candidate,
            portion_index=-1 if is_manual else portion_index,
            quantity=1 if is_manual else quantity,
            weight_grams=round(target_grams),
            target_grams=target_grams,
            fit_error_pct=round(error_pct, 2),
            is_manual_weight=is_manual,
        )

    def find_substitutes(
        self, original_id: str, reference_kcal: float
    ) -> List[SubstitutionSuggestion]:
        """
        Find substitutes for a food, each sized to `reference_kcal`.

        Args:
            original_id: Id of the food being replaced.
            reference_kcal: Calories the substitute should provide.

        Returns:
            Up to 15 suggestions, closest caloric density first. Empty if
            the food is unknown or reference_kcal <= 0.
        """
        original = self.lookup.get_by_id(original_id)
        if original is None or reference_kcal <= 0:
            return []

        suggestions: List[SubstitutionSuggestion] = []
        for candidate in self._candidates(original):
            if candidate.id == original_id:
                continue
            suggestion = self.suggest(candidate, reference_kcal)
            if suggestion is not None:
                suggestions.append(suggestion)

        density = original.nutrients_per_100g.kcal
        suggestions.sort(key=lambda s: abs(s.food.nutrients_per_100g.kcal - density))

        logger.debug(
            f"Substitutes for '{original.name}' ({reference_kcal} kcal): "
            f"{len(suggestions)} candidates"
        )
        return suggestions[:MAX_SUGGESTIONS]

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ...models import (
    CatalogStatus,
    FoodItemCanonical,
    Meal,
    NutrientTotals,
    PortionTotals,
    SubstitutionSuggestion,
)
from ...services import FoodLookup, NutrientAggregator, SubstitutionEngine
from ..dependencies import get_food_lookup, get_nutrient_aggregator, get_substitution_engine

router = APIRouter(prefix="/api/foods", tags=["foods"])


def _get_food_or_404(lookup: FoodLookup, food_id: str) -> FoodItemCanonical:
    food = lookup.get_by_id(food_id)
    if food is None:
        raise HTTPException(status_code=404, detail=f"Food not found: {food_id}")
    return food


@router.get("/search", response_model=List[FoodItemCanonical])
def search_foods(q: str = "", lookup: FoodLookup = Depends(get_food_lookup)):
    """Search foods by name (scientific catalog first, then legacy)."""
    return lookup.search(q)


@router.get("/status", response_model=CatalogStatus)
def get_catalog_status(lookup: FoodLookup = Depends(get_food_lookup)):
    """Which catalog tables are loaded, with their sizes."""
    return lookup.store.status()


@router.get("/category/{category}", response_model=List[FoodItemCanonical])
def list_foods_by_category(category: str, lookup: FoodLookup = Depends(get_food_lookup)):
    return lookup.search_by_category(category)


@router.post("/totals", response_model=NutrientTotals)
def compute_daily_totals(
    meals: List[Meal],
    aggregator: NutrientAggregator = Depends(get_nutrient_aggregator),
):
    """Daily nutrient totals for a list of meals."""
    return aggregator.aggregate_meals(meals)


@router.get("/{food_id}", response_model=FoodItemCanonical)
def get_food(food_id: str, lookup: FoodLookup = Depends(get_food_lookup)):
    return _get_food_or_404(lookup, food_id)


@router.get("/{food_id}/totals", response_model=PortionTotals)
def get_food_totals(
    food_id: str,
    portion_index: int = 0,
    grams: Optional[float] = Query(default=None, gt=0),
    quantity: float = Query(default=1, gt=0),
    lookup: FoodLookup = Depends(get_food_lookup),
):
    """
    Nutrients for a portion of a food.

    A free weight in `grams` takes precedence over `portion_index`.
    """
    food = _get_food_or_404(lookup, food_id)
    if grams is not None:
        return FoodLookup.calculate_totals_from_weight(food, grams, quantity)
    return FoodLookup.calculate_totals(food, portion_index, quantity)


@router.get("/{food_id}/substitutes", response_model=List[SubstitutionSuggestion])
def get_food_substitutes(
    food_id: str,
    kcal: float = Query(gt=0),
    lookup: FoodLookup = Depends(get_food_lookup),
    engine: SubstitutionEngine = Depends(get_substitution_engine),
):
    """Same-group foods sized to provide `kcal` calories."""
    _get_food_or_404(lookup, food_id)
    return engine.find_substitutes(food_id, kcal)

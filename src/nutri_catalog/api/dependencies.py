"""Shared FastAPI dependencies: singleton catalog services."""

import logging
from typing import Optional

from fastapi import Depends

from .. import config
from ..exceptions import CatalogSourceError
from ..services import FoodLookup, NutrientAggregator, SubstitutionEngine, load_catalog_dir

logger = logging.getLogger(__name__)

_food_lookup: Optional[FoodLookup] = None


def get_food_lookup() -> FoodLookup:
    """Provide a shared FoodLookup, loading the configured catalog on first use."""
    global _food_lookup
    if _food_lookup is None:
        lookup = FoodLookup()
        if config.DATA_DIR.is_dir():
            try:
                load_catalog_dir(lookup.store, config.DATA_DIR)
            except CatalogSourceError as e:
                logger.error(f"Scientific catalog not loaded: {e}")
        else:
            logger.warning(f"Catalog directory {config.DATA_DIR} not found, serving legacy foods only")
        _food_lookup = lookup
    return _food_lookup


def get_substitution_engine(lookup: FoodLookup = Depends(get_food_lookup)) -> SubstitutionEngine:
    return SubstitutionEngine(lookup)


def get_nutrient_aggregator(lookup: FoodLookup = Depends(get_food_lookup)) -> NutrientAggregator:
    return NutrientAggregator(lookup)

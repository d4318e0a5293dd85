"""
nutri_catalog package: scientific food catalog, household portions and
calorically equivalent substitutions.
"""

from .services import (
    CatalogStore,
    FoodLookup,
    NutrientAggregator,
    SubstitutionEngine,
    build_shopping_list,
    load_catalog,
    load_catalog_dir,
)

__all__ = [
    "CatalogStore",
    "FoodLookup",
    "NutrientAggregator",
    "SubstitutionEngine",
    "build_shopping_list",
    "load_catalog",
    "load_catalog_dir",
]

"""Catalog parsing, indexing, search, portions, substitutions and totals."""

from .catalog_loader import load_catalog, load_catalog_dir, read_table_text
from .catalog_store import CatalogStore
from .food_lookup import FoodLookup
from .nutrient_calc import NutrientAggregator
from .shopping_list import build_shopping_list
from .substitutions import SubstitutionEngine

__all__ = [
    "CatalogStore",
    "FoodLookup",
    "NutrientAggregator",
    "SubstitutionEngine",
    "build_shopping_list",
    "load_catalog",
    "load_catalog_dir",
    "read_table_text",
]

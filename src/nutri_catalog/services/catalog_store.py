"""
In-memory scientific food catalog.

Four independent indices, each rebuilt by its own load step:
- records:    uid → FoodRecord                  (load_primary)
- synonyms:   normalized term → uid             (load_primary seeds, load_synonyms)
- portions:   uid → [PortionRecord, ...]        (load_portions)
- nutrients:  field → unit                      (load_nutrient_dict)

load_primary should run before load_synonyms: synonyms loaded first are kept,
but the canonical names can no longer take precedence over them.
"""

import logging
from typing import Dict, Iterable, List, Optional

from ..models import (
    CatalogStatus,
    FoodItemCanonical,
    FoodNutrients,
    FoodRecord,
    NutrientFieldDef,
    Portion,
    PortionRecord,
    SynonymEntry,
)
from . import catalog_search
from .portions import merge_portions, smart_portions

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "Geral"


class CatalogStore:
    """
    Owned catalog instance with explicit load/reset lifecycle.

    All query methods are pure reads over the current snapshot.
    """

    def __init__(self):
        self._records: Dict[str, FoodRecord] = {}
        self._synonyms: Dict[str, str] = {}
        self._portions: Dict[str, List[PortionRecord]] = {}
        self._nutrients: Dict[str, str] = {}
        self._status = CatalogStatus()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_primary(self, records: Iterable[FoodRecord]) -> int:
        """
        Replace the primary map and register canonical names as synonyms.

        A canonical name never overwrites a term that is already mapped.

        Returns:
            Number of records indexed.
        """
        self._records.clear()

        for record in records:
            if not record.id or not record.canonical_name:
                continue
            self._records[record.id] = record

            term = catalog_search.normalize_term(record.canonical_name)
            if term and term not in self._synonyms:
                self._synonyms[term] = record.id

        self._status.master_loaded = True
        self._status.master_count = len(self._records)
        self._status.synonym_count = len(self._synonyms)
        logger.info(f"Master catalog loaded: {len(self._records)} foods indexed")
        return len(self._records)

    def load_synonyms(self, entries: Iterable[SynonymEntry]) -> int:
        """
        Add synonym terms that are not mapped yet.

        Returns:
            Number of terms added.
        """
        if not self._status.master_loaded:
            logger.warning(
                "load_synonyms() called before load_primary(): synonyms are kept, "
                "but lookups by uid fail until the master table is loaded"
            )

        added = 0
        skipped = 0
        for entry in entries:
            term = catalog_search.normalize_term(entry.term)
            food_id = (entry.id or "").strip()
            if not term or not food_id or term in self._synonyms:
                skipped += 1
                continue
            self._synonyms[term] = food_id
            added += 1

        self._status.synonyms_loaded = True
        self._status.synonym_count = len(self._synonyms)
        logger.info(
            f"Synonyms loaded: {added} added, {skipped} skipped, "
            f"{len(self._synonyms)} terms in index"
        )
        return added

    def load_portions(self, portions: Iterable[PortionRecord]) -> int:
        """
        Replace the portion table, grouping rows by uid in source order.

        Returns:
            Number of portion rows stored.
        """
        self._portions.clear()

        stored = 0
        for portion in portions:
            food_id = (portion.id or "").strip()
            if not food_id:
                continue
            self._portions.setdefault(food_id, []).append(portion)
            stored += 1

        self._status.portions_loaded = True
        self._status.portion_count = len(self._portions)
        logger.info(f"Portions loaded: {stored} rows for {len(self._portions)} foods")
        return stored

    def load_nutrient_dict(self, defs: Iterable[NutrientFieldDef]) -> int:
        """Replace the field → unit dictionary."""
        self._nutrients.clear()

        for nutrient_def in defs:
            if not nutrient_def.field or not nutrient_def.unit:
                continue
            self._nutrients[nutrient_def.field] = nutrient_def.unit

        self._status.nutrients_loaded = True
        self._status.nutrients_count = len(self._nutrients)
        logger.info(f"Nutrient dictionary loaded: {len(self._nutrients)} fields")
        return len(self._nutrients)

    def reset(self) -> None:
        """Clear all four indices and status flags."""
        self._records.clear()
        self._synonyms.clear()
        self._portions.clear()
        self._nutrients.clear()
        self._status = CatalogStatus()
        logger.info("Catalog reset")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self._status.master_loaded

    def status(self) -> CatalogStatus:
        return self._status.model_copy()

    def get_by_id(self, food_id: str) -> Optional[FoodRecord]:
        return self._records.get((food_id or "").strip())

    def resolve_term(self, term: str) -> Optional[str]:
        """Exact synonym lookup: normalized term → uid."""
        return self._synonyms.get(catalog_search.normalize_term(term))

    def search_by_name(self, query: str, limit: int = 20) -> List[FoodRecord]:
        if not self._status.master_loaded:
            return []
        return catalog_search.search_by_name(self._records, self._synonyms, query, limit)

    def search_by_category(self, category: str, limit: int = 50) -> List[FoodRecord]:
        if not self._status.master_loaded:
            return []
        return catalog_search.search_by_category(self._records, category, limit)

    def get_portions(self, food_id: str) -> List[PortionRecord]:
        """Explicit portion rows for a food (empty if none or not loaded)."""
        return list(self._portions.get((food_id or "").strip(), []))

    def get_nutrient_unit(self, field: str) -> Optional[str]:
        return self._nutrients.get(field)

    def get_all(self, limit: int = 100) -> List[FoodRecord]:
        return list(self._records.values())[:limit]

    def resolve_portions(self, record: FoodRecord) -> List[Portion]:
        """Smart portions merged with explicit rows (explicit wins)."""
        return merge_portions(smart_portions(record), self.get_portions(record.id))

    def to_canonical(self, record: FoodRecord) -> FoodItemCanonical:
        """Build the consumer-facing view of a record."""
        return FoodItemCanonical(
            id=record.id,
            name=record.canonical_name,
            category=record.group or DEFAULT_CATEGORY,
            nutrients_per_100g=FoodNutrients(
                kcal=record.kcal_per_100g,
                protein_g=record.protein_g or 0,
                carb_g=record.carbs_g or 0,
                fat_g=record.fat_g or 0,
                fiber_g=record.fiber_g,
                sodium_mg=record.sodium_mg,
                calcium_mg=record.calcium_mg,
                iron_mg=record.iron_mg,
                potassium_mg=record.potassium_mg,
                vitamin_c_mg=record.vitamin_c_mg,
            ),
            portions=self.resolve_portions(record),
        )

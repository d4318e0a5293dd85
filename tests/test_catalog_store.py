"""Tests for CatalogStore: load lifecycle, synonym priority and canonical view."""

import logging

from nutri_catalog.models import FoodRecord, PortionRecord, SynonymEntry
from nutri_catalog.services import CatalogStore
from nutri_catalog.services.csv_parser import parse_master_csv

from conftest import MASTER_CSV


class TestLoading:

    def test_status_counts(self, loaded_store):
        status = loaded_store.status()
        assert status.master_loaded and status.synonyms_loaded
        assert status.portions_loaded and status.nutrients_loaded
        assert status.master_count == 6
        # 6 canonical names + 7 new synonym terms
        assert status.synonym_count == 13
        assert status.portion_count == 2
        assert status.nutrients_count == 3

    def test_status_is_a_copy(self, loaded_store):
        loaded_store.status().master_count = 0
        assert loaded_store.status().master_count == 6

    def test_records_without_id_or_name_are_ignored(self):
        store = CatalogStore()
        count = store.load_primary([
            FoodRecord(id="", canonical_name="Sem id", kcal_per_100g=10),
            FoodRecord(id="A1", canonical_name="Com id", kcal_per_100g=10),
        ])
        assert count == 1

    def test_reload_replaces_primary_map(self, loaded_store):
        loaded_store.load_primary([FoodRecord(id="N1", canonical_name="Novo", kcal_per_100g=1)])
        assert loaded_store.get_by_id("T001") is None
        assert loaded_store.get_by_id("N1").canonical_name == "Novo"

    def test_portions_are_replaced_not_merged(self, loaded_store):
        loaded_store.load_portions([PortionRecord(id="T004", label="Unidade (90g)", grams=90)])
        assert loaded_store.get_portions("T002") == []
        assert [p.label for p in loaded_store.get_portions("T004")] == ["Unidade (90g)"]

    def test_reset_clears_everything(self, loaded_store):
        loaded_store.reset()
        assert not loaded_store.is_loaded
        assert loaded_store.get_by_id("T001") is None
        assert loaded_store.resolve_term("arroz") is None
        assert loaded_store.get_portions("T002") == []
        assert loaded_store.get_nutrient_unit("sodio_mg_100g") is None
        assert loaded_store.search_by_name("arroz") == []
        assert loaded_store.status().synonym_count == 0


class TestSynonyms:

    def test_terms_resolve_case_insensitively(self, loaded_store):
        assert loaded_store.resolve_term("arroz") == "T002"
        assert loaded_store.resolve_term("  ARROZ ") == "T002"
        assert loaded_store.resolve_term("feijao") == "T003"

    def test_canonical_name_keeps_priority(self, loaded_store):
        added = loaded_store.load_synonyms([SynonymEntry(term="Banana prata", id="T003")])
        assert added == 0
        assert loaded_store.resolve_term("banana prata") == "T004"

    def test_first_synonym_wins(self):
        store = CatalogStore()
        records, _ = parse_master_csv(MASTER_CSV)
        store.load_primary(records)
        store.load_synonyms([
            SynonymEntry(term="aipim", id="T003"),
            SynonymEntry(term="aipim", id="T004"),
        ])
        assert store.resolve_term("aipim") == "T003"

    def test_synonyms_before_master_warns(self, caplog):
        store = CatalogStore()
        with caplog.at_level(logging.WARNING):
            added = store.load_synonyms([SynonymEntry(term="arroz", id="T002")])
        assert added == 1
        assert "before load_primary" in caplog.text
        assert store.resolve_term("arroz") == "T002"
        assert store.search_by_name("arroz") == []


class TestQueries:

    def test_get_by_id_trims(self, loaded_store):
        assert loaded_store.get_by_id(" T003 ").canonical_name == "Feijão carioca cozido"

    def test_nutrient_unit(self, loaded_store):
        assert loaded_store.get_nutrient_unit("sodio_mg_100g") == "mg"
        assert loaded_store.get_nutrient_unit("zinco_mg_100g") is None

    def test_get_all_limit(self, loaded_store):
        assert len(loaded_store.get_all(limit=2)) == 2
        assert len(loaded_store.get_all()) == 6

    def test_queries_before_loading(self):
        store = CatalogStore()
        assert store.search_by_name("arroz") == []
        assert store.search_by_category("cereais") == []
        assert store.get_by_id("T001") is None


class TestCanonicalView:

    def test_explicit_portions_override_smart_ones(self, loaded_store):
        food = loaded_store.to_canonical(loaded_store.get_by_id("T002"))
        assert [(p.label, p.grams) for p in food.portions] == [
            ("Colher de servir (45g)", 50),
            ("Escumadeira (150g)", 150),
            ("Colher de sopa (25g)", 25),
            ("1 colher de sopa", 25),
        ]

    def test_nutrients_and_category(self, loaded_store):
        food = loaded_store.to_canonical(loaded_store.get_by_id("T002"))
        assert food.name == "Arroz branco cozido"
        assert food.category == "Cereais e derivados"
        assert food.nutrients_per_100g.kcal == 130
        assert food.nutrients_per_100g.carb_g == 28.1
        assert food.nutrients_per_100g.iron_mg is None

    def test_missing_macros_and_group_get_defaults(self):
        store = CatalogStore()
        record = FoodRecord(id="X1", canonical_name="Mistério", kcal_per_100g=50)
        store.load_primary([record])
        food = store.to_canonical(record)
        assert food.category == "Geral"
        assert food.nutrients_per_100g.protein_g == 0
        assert food.nutrients_per_100g.fiber_g is None
        assert [p.label for p in food.portions] == ["100g (default)"]

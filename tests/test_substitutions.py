"""Tests for calorically equivalent substitutions."""

import pytest

from nutri_catalog.models import FoodItemCanonical, FoodNutrients, Portion
from nutri_catalog.services import CatalogStore, FoodLookup, SubstitutionEngine, load_catalog
from nutri_catalog.services.substitutions import best_portion_fit, get_category_group


RICE_MASTER_CSV = """uid,nome_canonico,energia_kcal_100g,grupo
f1,Arroz Branco Cozido,128,Cereais
r2,Arroz parboilizado cozido,130,Cereais
"""

RICE_PORTION_CSV = """uid,label,grams
f1,1 colher de sopa,25
"""

# f1 has no group: its category comes from the bundled legacy entry
PLAN_MASTER_CSV = """uid,nome_canonico,energia_kcal_100g,grupo
f1,Arroz Branco Cozido,128,
r2,Arroz parboilizado cozido,130,Cereais
"""


def _food(food_id, kcal, portions, category="Cereais"):
    return FoodItemCanonical(
        id=food_id,
        name=food_id,
        category=category,
        nutrients_per_100g=FoodNutrients(kcal=kcal),
        portions=[Portion(label=label, grams=grams) for label, grams in portions],
    )


@pytest.fixture
def rice_lookup():
    store = CatalogStore()
    load_catalog(store, master=RICE_MASTER_CSV, portions=RICE_PORTION_CSV)
    return FoodLookup(store=store, legacy_foods=[])


# ── Food groups ──────────────────────────────────────────────────────


class TestCategoryGroup:

    def test_known_group(self):
        assert "arroz" in get_category_group("Cereais e derivados")
        assert "queijo" in get_category_group("Laticínios")

    def test_first_word_fallback(self):
        assert get_category_group("Bebidas alcoólicas") == ["bebidas"]
        assert get_category_group("Doces/açúcares") == ["doces"]


# ── Portion fit ──────────────────────────────────────────────────────


class TestBestPortionFit:

    def test_picks_closest_combination(self):
        food = _food("x", 100, [("A", 45), ("B", 150), ("C", 25)])
        assert best_portion_fit(food, 196.9) == (1, 1.5, 225)

    def test_tie_keeps_first_combination(self):
        food = _food("x", 100, [("A", 100), ("B", 100)])
        assert best_portion_fit(food, 100) == (0, 1, 100)

    def test_no_portions(self):
        assert best_portion_fit(_food("x", 100, []), 80) == (-1, 1, 80)


class TestSuggest:

    def test_within_tolerance_uses_named_portion(self, rice_lookup):
        engine = SubstitutionEngine(rice_lookup)
        food = _food("x", 100, [("Unidade (50g)", 50)])
        s = engine.suggest(food, 100)  # target 100g = 2 x 50g
        assert not s.is_manual_weight
        assert (s.portion_index, s.quantity) == (0, 2)
        assert s.fit_error_pct == 0

    def test_beyond_tolerance_falls_back_to_manual_weight(self, rice_lookup):
        engine = SubstitutionEngine(rice_lookup)
        food = _food("x", 100, [("Unidade (50g)", 50)])
        s = engine.suggest(food, 1000)  # target 1000g, best is 150g
        assert s.is_manual_weight
        assert s.portion_index == -1
        assert s.quantity == 1
        assert s.weight_grams == 1000
        assert s.fit_error_pct == 85

    def test_food_without_calories_is_skipped(self, rice_lookup):
        engine = SubstitutionEngine(rice_lookup)
        assert engine.suggest(_food("water", 0, [("Copo", 200)]), 100) is None


# ── End to end ───────────────────────────────────────────────────────


class TestFindSubstitutes:

    def test_original_food_is_searchable(self, rice_lookup):
        assert "f1" in [f.id for f in rice_lookup.search("arroz")]

    def test_rice_for_rice(self, rice_lookup):
        suggestions = SubstitutionEngine(rice_lookup).find_substitutes("f1", 256)
        assert [s.food.id for s in suggestions] == ["r2"]

        s = suggestions[0]
        assert s.target_grams == pytest.approx(196.92, abs=0.01)
        # Escumadeira (150g) x 1.5 = 225g is the closest combination
        assert s.food.portions[s.portion_index].label == "Escumadeira (150g)"
        assert s.quantity == 1.5
        assert s.weight_grams == 197
        assert s.fit_error_pct == pytest.approx(14.26, abs=0.01)
        assert not s.is_manual_weight

    def test_unknown_food_or_no_calories(self, rice_lookup):
        engine = SubstitutionEngine(rice_lookup)
        assert engine.find_substitutes("nope", 256) == []
        assert engine.find_substitutes("f1", 0) == []

    def test_sorted_by_density_and_capped(self):
        legacy = [_food("orig", 100, [("Unidade (100g)", 100)])]
        legacy += [_food(f"c{i}", 100 + i, [("Unidade (100g)", 100)]) for i in range(20, 0, -1)]
        engine = SubstitutionEngine(FoodLookup(legacy_foods=legacy))
        suggestions = engine.find_substitutes("orig", 100)
        assert len(suggestions) == 15
        assert [s.food.id for s in suggestions[:3]] == ["c1", "c2", "c3"]

    def test_candidates_stay_in_the_food_group(self, lookup):
        ids = [s.food.id for s in SubstitutionEngine(lookup).find_substitutes("T002", 260)]
        assert "T002" not in ids
        assert "T001" in ids and "f6" in ids
        assert "T003" not in ids and "f5" not in ids


class TestPlanFoodWithLegacyId:

    @pytest.fixture
    def plan_lookup(self):
        store = CatalogStore()
        load_catalog(store, master=PLAN_MASTER_CSV, portions=RICE_PORTION_CSV)
        return FoodLookup(store=store)

    def test_rice_substitutes_found(self, plan_lookup):
        assert "f1" in [f.id for f in plan_lookup.search("arroz")]

        suggestions = SubstitutionEngine(plan_lookup).find_substitutes("f1", 256)
        assert suggestions[0].food.id == "r2"
        assert suggestions[0].target_grams == pytest.approx(196.92, abs=0.01)
        assert suggestions[0].food.portions[suggestions[0].portion_index].label == "Escumadeira (150g)"
        assert "f1" not in [s.food.id for s in suggestions]

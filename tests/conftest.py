import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from nutri_catalog.services import CatalogStore, FoodLookup, load_catalog


# ── Sample catalog tables ────────────────────────────────────────────


MASTER_CSV = """uid,nome_canonico,energia_kcal_100g,proteina_g_100g,carboidratos_g_100g,lipidios_g_100g,fibra_alimentar_g_100g,sodio_mg_100g,ferro_mg_100g,grupo,__fonte
T001,"Arroz, integral, cozido",124,"2,6",25.8,1.0,2.7,1,0.3,Cereais e derivados,TACO
T002,Arroz branco cozido,130,2.5,28.1,0.2,1.6,1,Tr,Cereais e derivados,TACO
T003,Feijão carioca cozido,76,4.8,13.6,0.5,8.5,2,1.3,Leguminosas e derivados,TACO
T004,Banana prata,98,1.3,26.0,0.1,2.0,*,0.4,Frutas e derivados,TACO
T005,Queijo minas frescal,264,17.4,3.2,20.2,,31,0.9,Leite e derivados,TACO
T006,Leite de vaca integral,61,2.9,4.3,3.3,,64,Tr,Leite e derivados,TACO
"""

SYNONYM_CSV = """uid,nome_canonico,nome_original,chave_strict,chave_loose
T001,"Arroz, integral, cozido",Brown rice cooked,arroz integral cozido,arroz integral
T002,Arroz branco cozido,White rice cooked,arroz branco cozido,arroz
T003,Feijão carioca cozido,,feijao carioca cozido,feijao
"""

PORTION_CSV = """uid,label,grams
T002,Colher de servir (45g),50
T002,1 colher de sopa,25
T004,Unidade média (120g),110
"""

NUTRIENT_CSV = """campo_padronizado,unidade
energia_kcal_100g,kcal
proteina_g_100g,g
sodio_mg_100g,mg
"""


@pytest.fixture
def loaded_store():
    store = CatalogStore()
    load_catalog(
        store,
        master=MASTER_CSV,
        synonyms=SYNONYM_CSV,
        portions=PORTION_CSV,
        nutrients=NUTRIENT_CSV,
    )
    return store


@pytest.fixture
def lookup(loaded_store):
    """Scientific sample catalog plus the bundled legacy foods."""
    return FoodLookup(store=loaded_store)


@pytest.fixture
def legacy_lookup():
    """Empty scientific catalog: only the bundled legacy foods."""
    return FoodLookup()

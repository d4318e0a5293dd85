"""Runtime settings, read from the environment."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables once at the module level
load_dotenv()

DATA_DIR = Path(os.getenv("NUTRI_CATALOG_DATA_DIR", "data/catalog"))

MASTER_FILE = os.getenv("NUTRI_CATALOG_MASTER_FILE", "MASTER_ALIMENTOS_UID_DEDUP_PTBR.csv")
SYNONYM_FILE = os.getenv("NUTRI_CATALOG_SYNONYM_FILE", "DICIONARIO_SINONIMOS_ALIMENTOS_UID.csv")
PORTION_FILE = os.getenv("NUTRI_CATALOG_PORTION_FILE", "PORCOES_ALIMENTOS_UID.csv")
NUTRIENT_FILE = os.getenv("NUTRI_CATALOG_NUTRIENT_FILE", "DICIONARIO_NUTRIENTES_PADRONIZADOS.csv")

HTTP_TIMEOUT = float(os.getenv("NUTRI_CATALOG_HTTP_TIMEOUT", "15"))

PORT = int(os.getenv("PORT", "3001"))

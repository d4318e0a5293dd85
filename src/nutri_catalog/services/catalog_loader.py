"""
Load the catalog tables into a CatalogStore.

Each table is parsed first and only loaded if the parse succeeded, so a
structurally invalid file never replaces the previous index. Tables are
applied in dependency order: master, synonyms, portions, nutrients.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import httpx

from .. import config
from ..exceptions import CatalogSourceError
from ..models import LoadResult
from .catalog_store import CatalogStore
from .csv_parser import (
    parse_master_csv,
    parse_nutrient_csv,
    parse_portion_csv,
    parse_synonym_csv,
)

logger = logging.getLogger(__name__)


def read_table_text(
    source: Union[str, Path],
    client: Optional[httpx.Client] = None,
) -> str:
    """
    Read a table from a local path or an http(s) URL.

    Args:
        source: File path or URL.
        client: Optional httpx client (a short-lived one is created otherwise).

    Returns:
        The decoded text content.

    Raises:
        CatalogSourceError: if the source cannot be read.
    """
    source_str = str(source)

    if source_str.startswith(("http://", "https://")):
        try:
            if client is not None:
                response = client.get(source_str)
            else:
                with httpx.Client(timeout=config.HTTP_TIMEOUT, follow_redirects=True) as own_client:
                    response = own_client.get(source_str)
        except httpx.HTTPError as e:
            raise CatalogSourceError(f"Could not fetch {source_str}: {e}") from e

        if response.status_code != 200:
            raise CatalogSourceError(
                f"Could not fetch {source_str}: HTTP {response.status_code}"
            )
        return response.text

    path = Path(source_str)
    try:
        # utf-8-sig drops the BOM spreadsheet exports often add
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogSourceError(f"Could not read {path}: {e}") from e


def load_catalog(
    store: CatalogStore,
    master: Optional[str] = None,
    synonyms: Optional[str] = None,
    portions: Optional[str] = None,
    nutrients: Optional[str] = None,
) -> Dict[str, LoadResult]:
    """
    Parse the given table texts and load them into the store.

    Tables passed as None are left untouched.

    Returns:
        Mapping of table name ("master", "synonyms", "portions", "nutrients")
        to its parse result.
    """
    steps = [
        ("master", master, parse_master_csv, store.load_primary),
        ("synonyms", synonyms, parse_synonym_csv, store.load_synonyms),
        ("portions", portions, parse_portion_csv, store.load_portions),
        ("nutrients", nutrients, parse_nutrient_csv, store.load_nutrient_dict),
    ]

    results: Dict[str, LoadResult] = {}
    for table, text, parse, load in steps:
        if text is None:
            continue
        items, result = parse(text)
        results[table] = result

        if not result.success:
            logger.warning(f"Table '{table}' rejected, index left unchanged: {'; '.join(result.errors)}")
            continue
        if result.warnings:
            logger.info(f"Table '{table}': {len(result.warnings)} rows skipped")
        load(items)

    return results


def load_catalog_dir(
    store: CatalogStore,
    directory: Optional[Union[str, Path]] = None,
) -> Dict[str, LoadResult]:
    """
    Load the configured table files from a directory.

    Missing files are skipped; unreadable files raise CatalogSourceError.
    """
    base = Path(directory) if directory is not None else config.DATA_DIR
    file_names = {
        "master": config.MASTER_FILE,
        "synonyms": config.SYNONYM_FILE,
        "portions": config.PORTION_FILE,
        "nutrients": config.NUTRIENT_FILE,
    }

    texts: Dict[str, str] = {}
    for table, file_name in file_names.items():
        path = base / file_name
        if not path.exists():
            logger.info(f"No {table} table at {path}, skipped")
            continue
        texts[table] = read_table_text(path)

    return load_catalog(store, **texts)

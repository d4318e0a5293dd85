"""
Parsers for the scientific food catalog tables.

Works on CSV text only (no file or network I/O):
- Delimiter: comma; quoted fields may contain commas and doubled quotes
- Numbers accept a decimal comma (TACO notation)
- Empty cells, "Tr" (trace) and "*" are unknown (None), never 0
- Nothing raises: problems are reported in LoadResult.errors / .warnings

Errors (missing required columns, empty file) reject the whole table.
Warnings reject a single row and parsing continues.
"""

import logging
import math
import re
from typing import Dict, List, Optional, Sequence, Tuple

from ..models import (
    FoodRecord,
    LoadResult,
    NutrientFieldDef,
    PortionRecord,
    SynonymEntry,
)

logger = logging.getLogger(__name__)

_MISSING_MARKERS = {"", "tr", "*"}

# Leading decimal number; trailing text such as units is ignored
_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Master table column → FoodRecord field (optional numeric columns)
_MASTER_NUMERIC_COLS = {
    "proteina_g_100g": "protein_g",
    "carboidratos_g_100g": "carbs_g",
    "lipidios_g_100g": "fat_g",
    "fibra_alimentar_g_100g": "fiber_g",
    "sodio_mg_100g": "sodium_mg",
    "calcio_mg_100g": "calcium_mg",
    "ferro_mg_100g": "iron_mg",
    "potassio_mg_100g": "potassium_mg",
    "vitamina_c_mg_100g": "vitamin_c_mg",
    "__prio": "priority",
}

_MASTER_TEXT_COLS = {
    "grupo": "group",
    "subgrupo": "subgroup",
    "preparo_detectado": "preparation",
    "__fonte": "source",
}

MASTER_REQUIRED_COLS = ["uid", "nome_canonico", "energia_kcal_100g"]
SYNONYM_REQUIRED_COLS = ["uid"]
PORTION_REQUIRED_COLS = ["uid", "label", "grams"]
NUTRIENT_REQUIRED_COLS = ["campo_padronizado", "unidade"]

# Term columns of the synonym table, in priority order
SYNONYM_TERM_COLS = [
    "nome_canonico",   # PT-BR display name
    "nome_original",   # name in the source database language
    "chave_strict",    # no accents / punctuation
    "chave_loose",     # simplified key, better fuzzy coverage
]


# ---------------------------------------------------------------------------
# Low-level helpers
# ---------------------------------------------------------------------------


def split_csv_line(line: str, delimiter: str = ",") -> List[str]:
    """Split one CSV line, honouring quotes and "" escapes (RFC 4180)."""
    fields: List[str] = []
    current: List[str] = []
    in_quotes = False
    i = 0

    while i < len(line):
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            fields.append("".join(current))
            current = []
        else:
            current.append(ch)
        i += 1

    fields.append("".join(current))
    return fields


def to_number(value: Optional[str]) -> Optional[float]:
    """
    Convert a cell to a float.

    "12,5" and "12.5" give the same value and "12g" reads as 12. Empty
    cells, "Tr", "*", text without a leading number and infinite values
    give None. Tiny values such as "1e-05" are kept.
    """
    if value is None:
        return None
    stripped = value.strip()
    if stripped.lower() in _MISSING_MARKERS:
        return None
    match = _LEADING_NUMBER.match(stripped.replace(",", ".", 1))
    if match is None:
        return None
    number = float(match.group())
    return number if math.isfinite(number) else None


def _cell(cells: Sequence[str], idx: Optional[int]) -> str:
    """Trimmed cell at idx, or "" when the column or cell is absent."""
    if idx is None or idx >= len(cells):
        return ""
    return cells[idx].strip()


def _split_lines(text: str) -> List[str]:
    return [line.rstrip("\r") for line in text.split("\n") if line.strip()]


def _read_table(
    text: str, required: Sequence[str]
) -> Tuple[Dict[str, int], List[List[str]], LoadResult]:
    """
    Split text into a header index and data rows, validating required columns.

    Returns (columns, rows, result). When result.success is False the caller
    must return immediately with no records.
    """
    result = LoadResult(success=True)
    lines = _split_lines(text or "")

    if len(lines) < 2:
        result.success = False
        result.errors.append("Empty file or no data rows.")
        return {}, [], result

    columns: Dict[str, int] = {}
    for idx, header in enumerate(split_csv_line(lines[0])):
        key = header.strip().lower()
        if key and key not in columns:
            columns[key] = idx

    for col in required:
        if col not in columns:
            result.errors.append(f'Missing required column: "{col}"')

    if result.errors:
        result.success = False
        return columns, [], result

    rows = [split_csv_line(line) for line in lines[1:]]
    return columns, rows, result


def _finish(result: LoadResult, count: int, table: str) -> LoadResult:
    result.record_count = count
    result.success = not result.errors
    if result.warnings:
        logger.debug(f"{table}: {len(result.warnings)} rows skipped")
    logger.info(f"Parsed {table}: {count} records")
    return result


# ---------------------------------------------------------------------------
# Master nutrition table
# ---------------------------------------------------------------------------


def parse_master_csv(text: str) -> Tuple[List[FoodRecord], LoadResult]:
    """
    Parse the master nutrition table (MASTER_ALIMENTOS_UID_DEDUP_PTBR.csv).

    Args:
        text: Full CSV content.

    Returns:
        (records, result). Rows with a blank uid, blank name or a non-numeric
        energy cell are skipped with one warning each.
    """
    columns, rows, result = _read_table(text, MASTER_REQUIRED_COLS)
    if not result.success:
        return [], result

    idx_uid = columns["uid"]
    idx_name = columns["nome_canonico"]
    idx_kcal = columns["energia_kcal_100g"]

    records: List[FoodRecord] = []
    for offset, cells in enumerate(rows):
        line_num = offset + 2
        uid = _cell(cells, idx_uid)
        name = _cell(cells, idx_name)
        kcal_raw = _cell(cells, idx_kcal)

        if not uid:
            result.warnings.append(f"Line {line_num}: empty uid, skipped.")
            continue
        if not name:
            result.warnings.append(f'Line {line_num}: empty nome_canonico for uid="{uid}", skipped.')
            continue

        kcal = to_number(kcal_raw)
        if kcal is None:
            result.warnings.append(
                f'Line {line_num}: invalid energia_kcal_100g ("{kcal_raw}") for uid="{uid}", skipped.'
            )
            continue

        fields = {
            field: to_number(_cell(cells, columns.get(col)))
            for col, field in _MASTER_NUMERIC_COLS.items()
        }
        for col, field in _MASTER_TEXT_COLS.items():
            fields[field] = _cell(cells, columns.get(col)) or None

        records.append(FoodRecord(id=uid, canonical_name=name, kcal_per_100g=kcal, **fields))

    return records, _finish(result, len(records), "master table")


# ---------------------------------------------------------------------------
# Synonym dictionary
# ---------------------------------------------------------------------------


def parse_synonym_csv(text: str) -> Tuple[List[SynonymEntry], LoadResult]:
    """
    Parse the synonym dictionary (DICIONARIO_SINONIMOS_ALIMENTOS_UID.csv).

    Each row fans out into one entry per non-empty term column. Terms are
    lowercased and trimmed; (term, uid) duplicates are dropped within one call.
    """
    columns, rows, result = _read_table(text, SYNONYM_REQUIRED_COLS)
    if not result.success:
        return [], result

    idx_uid = columns["uid"]
    term_indices = [columns[col] for col in SYNONYM_TERM_COLS if col in columns]
    if not term_indices:
        result.errors.append(
            f"No term column found. Expected at least one of: {', '.join(SYNONYM_TERM_COLS)}"
        )
        result.success = False
        return [], result

    entries: List[SynonymEntry] = []
    seen = set()

    for offset, cells in enumerate(rows):
        line_num = offset + 2
        uid = _cell(cells, idx_uid)
        if not uid:
            result.warnings.append(f"Line {line_num}: empty uid, skipped.")
            continue

        added = 0
        for idx in term_indices:
            term = _cell(cells, idx).lower()
            if not term or (term, uid) in seen:
                continue
            seen.add((term, uid))
            entries.append(SynonymEntry(term=term, id=uid))
            added += 1

        if added == 0:
            result.warnings.append(f'Line {line_num}: no usable term for uid="{uid}", skipped.')

    return entries, _finish(result, len(entries), "synonym dictionary")


# ---------------------------------------------------------------------------
# Portion table
# ---------------------------------------------------------------------------


def parse_portion_csv(text: str) -> Tuple[List[PortionRecord], LoadResult]:
    """Parse the portion table (uid, label, grams). grams must be > 0."""
    columns, rows, result = _read_table(text, PORTION_REQUIRED_COLS)
    if not result.success:
        return [], result

    idx_uid = columns["uid"]
    idx_label = columns["label"]
    idx_grams = columns["grams"]

    portions: List[PortionRecord] = []
    for offset, cells in enumerate(rows):
        line_num = offset + 2
        uid = _cell(cells, idx_uid)
        label = _cell(cells, idx_label)
        grams = to_number(_cell(cells, idx_grams))

        if not uid or not label:
            result.warnings.append(f"Line {line_num}: empty uid or label, skipped.")
            continue
        if grams is None or grams <= 0:
            result.warnings.append(f'Line {line_num}: invalid grams for uid="{uid}", skipped.')
            continue

        portions.append(PortionRecord(id=uid, label=label, grams=grams))

    return portions, _finish(result, len(portions), "portion table")


# ---------------------------------------------------------------------------
# Nutrient unit dictionary
# ---------------------------------------------------------------------------


def parse_nutrient_csv(text: str) -> Tuple[List[NutrientFieldDef], LoadResult]:
    """Parse DICIONARIO_NUTRIENTES_PADRONIZADOS.csv (field → unit)."""
    columns, rows, result = _read_table(text, NUTRIENT_REQUIRED_COLS)
    if not result.success:
        return [], result

    idx_field = columns["campo_padronizado"]
    idx_unit = columns["unidade"]

    defs: List[NutrientFieldDef] = []
    for offset, cells in enumerate(rows):
        line_num = offset + 2
        field = _cell(cells, idx_field)
        unit = _cell(cells, idx_unit)
        if not field or not unit:
            result.warnings.append(f"Line {line_num}: empty field or unit, skipped.")
            continue
        defs.append(NutrientFieldDef(field=field, unit=unit))

    return defs, _finish(result, len(defs), "nutrient dictionary")

"""
Name and category search over the catalog indices.

Name search runs three tiers, in order, until the limit is reached:
1. Exact match in the synonym index (single, highest-priority hit)
2. Substring match on canonical names
3. Substring match on synonym terms (covers abbreviations and key variants)
"""

from typing import Dict, List, Mapping

from ..models import FoodRecord


def normalize_term(text: str) -> str:
    """Normalize a name or query for index lookups (lowercase, trimmed)."""
    return (text or "").lower().strip()


def search_by_name(
    records: Mapping[str, FoodRecord],
    synonyms: Mapping[str, str],
    query: str,
    limit: int = 20,
) -> List[FoodRecord]:
    """
    Search foods by name or synonym.

    Args:
        records: Primary map (id → record).
        synonyms: Synonym index (normalized term → id).
        query: Free text; normalized internally.
        limit: Maximum number of results.

    Returns:
        Records ordered by tier, without duplicates.
    """
    q = normalize_term(query)
    if not q or limit <= 0:
        return []

    results: Dict[str, FoodRecord] = {}

    exact_id = synonyms.get(q)
    if exact_id is not None and exact_id in records:
        results[exact_id] = records[exact_id]

    if len(results) < limit:
        for food_id, record in records.items():
            if len(results) >= limit:
                break
            if food_id not in results and q in record.canonical_name.lower():
                results[food_id] = record

    if len(results) < limit:
        for term, food_id in synonyms.items():
            if len(results) >= limit:
                break
            if food_id in results or q not in term:
                continue
            record = records.get(food_id)
            if record is not None:
                results[food_id] = record

    return list(results.values())[:limit]


def search_by_category(
    records: Mapping[str, FoodRecord],
    category: str,
    limit: int = 50,
) -> List[FoodRecord]:
    """Substring scan of every record's group against the category."""
    cat = normalize_term(category)
    if not cat:
        return []

    results: List[FoodRecord] = []
    for record in records.values():
        if len(results) >= limit:
            break
        if cat in (record.group or "").lower():
            results.append(record)
    return results

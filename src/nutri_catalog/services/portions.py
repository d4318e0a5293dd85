"""
Household portion resolution ("Smart Portions").

Two sources are merged for each food:
- Keyword heuristics based on Anvisa/TBCA/TACO household measures,
  evaluated in a fixed order where the first matching rule wins
- Explicit rows from the portion table, which always win on a label clash

Rule order matters: "suco de fruta" is a liquid before it is a fruit, and
cheeses are excluded from the liquid rule so "queijo de leite" stays solid.
"""

import logging
from typing import Callable, Iterable, List, NamedTuple

from ..models import FoodRecord, Portion, PortionRecord

logger = logging.getLogger(__name__)

DEFAULT_PORTION = Portion(label="100g (default)", grams=100)

_CHEESE_WORDS = ("queijo", "mussarela", "ricota", "parmesão")
_LIQUID_GROUP_WORDS = ("leite", "bebida", "suco")
_LIQUID_NAME_WORDS = (
    "suco", "leite", "café", "chá", "água", "refrigerante", "iogurte líquido",
)
_SUPPLEMENT_NAME_WORDS = (
    "whey", "creatina", "bcaa", "albumina", "colágeno", "maltodextrina",
    "proteína", "pré-treino", "caseína",
)
_FLOUR_SEED_NAME_WORDS = (
    "semente", "farinha", "farelo", "germe", "chia", "linhaça", "gergelim", "aveia",
)


class _Food(NamedTuple):
    """Lowercased name and group used by the rule predicates."""

    name: str
    group: str


def _has(text: str, words: Iterable[str]) -> bool:
    return any(word in text for word in words)


def _is_cheese(food: _Food) -> bool:
    return _has(food.name, _CHEESE_WORDS)


def _is_liquid(food: _Food) -> bool:
    if _is_cheese(food):
        return False
    return _has(food.group, _LIQUID_GROUP_WORDS) or _has(food.name, _LIQUID_NAME_WORDS)


def _fixed(*portions) -> Callable[[_Food], List[Portion]]:
    def generate(food: _Food) -> List[Portion]:
        return [Portion(label=label, grams=grams) for label, grams in portions]
    return generate


def _bread_portions(food: _Food) -> List[Portion]:
    if _has(food.name, ("forma", "integral", "torrada")):
        return [Portion(label="Fatia (25g)", grams=25)]
    return [
        Portion(label="Unidade (50g)", grams=50),
        Portion(label="Fatia (30g)", grams=30),
    ]


def _egg_portions(food: _Food) -> List[Portion]:
    if "clara" in food.name:
        return [Portion(label="Unidade (35g)", grams=35)]
    if "gema" in food.name:
        return [Portion(label="Unidade (15g)", grams=15)]
    return [Portion(label="Unidade (50g)", grams=50)]


def _cake_portions(food: _Food) -> List[Portion]:
    # Bakery goods that are not cakes match this rule but get no portions.
    if "bolo" not in food.name:
        return []
    return [
        Portion(label="Fatia média (60g)", grams=60),
        Portion(label="Pedaço P (40g)", grams=40),
        Portion(label="Pedaço M (80g)", grams=80),
        Portion(label="Pedaço G (120g)", grams=120),
    ]


class PortionRule(NamedTuple):
    name: str
    matches: Callable[[_Food], bool]
    generate: Callable[[_Food], List[Portion]]


SMART_PORTION_RULES: List[PortionRule] = [
    PortionRule(
        "liquids",
        _is_liquid,
        _fixed(("Copo (200ml)", 200), ("Xícara (240ml)", 240), ("Colher de sopa (15ml)", 15)),
    ),
    PortionRule(
        "cheeses",
        _is_cheese,
        _fixed(("Fatia média (30g)", 30), ("Fatia fina (15g)", 15), ("Colher de sopa (20g)", 20)),
    ),
    PortionRule(
        "breads",
        lambda f: "pães" in f.group or _has(f.name, ("pão", "torrada", "biscoito")),
        _bread_portions,
    ),
    PortionRule(
        "legumes",
        lambda f: "leguminosas" in f.group or _has(f.name, ("feijão", "lentilha")),
        _fixed(("Concha média (130g)", 130), ("Colher de sopa (20g)", 20)),
    ),
    PortionRule(
        "rice_pasta",
        lambda f: _has(f.name, ("arroz", "macarrão", "massa", "cuscuz")),
        _fixed(
            ("Colher de servir (45g)", 45),
            ("Escumadeira (150g)", 150),
            ("Colher de sopa (25g)", 25),
        ),
    ),
    PortionRule(
        "fruits",
        lambda f: "frutas" in f.group,
        _fixed(
            ("Unidade pequena (80g)", 80),
            ("Unidade média (120g)", 120),
            ("Fatia média (100g)", 100),
        ),
    ),
    PortionRule(
        "meats",
        lambda f: _has(f.group, ("carnes", "aves", "peixes")),
        _fixed(
            ("Bife médio (100g)", 100),
            ("Filé pequeno (80g)", 80),
            ("Colher de sopa picado (25g)", 25),
        ),
    ),
    PortionRule(
        "fats_oils",
        lambda f: _has(f.group, ("óleos", "gorduras")) or _has(f.name, ("azeite", "manteiga", "margarina")),
        _fixed(
            ("Colher de sopa (10g)", 10),
            ("Colher de chá (4g)", 4),
            ("Fio (só azeite) (5ml)", 5),
        ),
    ),
    PortionRule(
        "nuts",
        lambda f: "oleaginosas" in f.group or _has(f.name, ("castanha", "nozes", "amêndoa")),
        _fixed(("Unidade (5g)", 5), ("Colher de sopa (15g)", 15), ("Punhado (30g)", 30)),
    ),
    PortionRule(
        "eggs",
        lambda f: _has(f.name, ("ovo", "clara", "gema")),
        _egg_portions,
    ),
    PortionRule(
        "cakes",
        lambda f: "bolo" in f.name or "panificação" in f.group,
        _cake_portions,
    ),
    PortionRule(
        "flours_seeds",
        lambda f: _has(f.name, _FLOUR_SEED_NAME_WORDS),
        _fixed(
            ("Colher de sopa (15g)", 15),
            ("Colher de sobremesa (7g)", 7),
            ("Colher de chá (3g)", 3),
        ),
    ),
    PortionRule(
        "supplements",
        lambda f: "suplemento" in f.group or _has(f.name, _SUPPLEMENT_NAME_WORDS),
        _fixed(
            ("Scoop (30g)", 30),
            ("Scoop duplo (60g)", 60),
            ("Colher de sopa (10g)", 10),
            ("Sachê (25g)", 25),
        ),
    ),
]


def smart_portions(record: FoodRecord) -> List[Portion]:
    """Heuristic portions for a food; empty when no rule applies."""
    food = _Food(name=record.canonical_name.lower(), group=(record.group or "").lower())
    for rule in SMART_PORTION_RULES:
        if rule.matches(food):
            logger.debug(f"Smart portions for '{record.canonical_name}': rule '{rule.name}'")
            return rule.generate(food)
    return []


def merge_portions(
    heuristic: Iterable[Portion], explicit: Iterable[PortionRecord]
) -> List[Portion]:
    """
    Merge heuristic and explicit portions, deduplicated by label.

    Explicit rows overwrite heuristic ones with the same label. Never
    returns an empty list.
    """
    by_label = {}
    for portion in heuristic:
        by_label[portion.label] = Portion(label=portion.label, grams=portion.grams)
    for portion in explicit:
        by_label[portion.label] = Portion(label=portion.label, grams=portion.grams)

    merged = list(by_label.values())
    return merged or [DEFAULT_PORTION.model_copy()]

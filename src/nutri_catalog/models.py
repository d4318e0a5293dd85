"""Pydantic models for the food catalog, its load reports and its consumers."""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# ── Catalog entities ─────────────────────────────────────────────────


class FoodRecord(BaseModel):
    """One row of the master nutrition table (values per 100g).

    Optional nutrients are unknown when None, never zero.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable external identifier (uid)")
    canonical_name: str = Field(description="Authoritative display name")
    kcal_per_100g: float

    protein_g: Optional[float] = None
    carbs_g: Optional[float] = None
    fat_g: Optional[float] = None
    fiber_g: Optional[float] = None

    sodium_mg: Optional[float] = None
    calcium_mg: Optional[float] = None
    iron_mg: Optional[float] = None
    potassium_mg: Optional[float] = None
    vitamin_c_mg: Optional[float] = None

    group: Optional[str] = None
    subgroup: Optional[str] = None
    preparation: Optional[str] = None
    source: Optional[str] = Field(default=None, description="TACO, TBCA, INSA, CIQUAL...")
    priority: Optional[float] = None


class SynonymEntry(BaseModel):
    """A normalized search term pointing at a food id."""

    model_config = ConfigDict(frozen=True)

    term: str
    id: str


class PortionRecord(BaseModel):
    """An explicit household measure from the portion table."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    grams: float = Field(gt=0)


class NutrientFieldDef(BaseModel):
    model_config = ConfigDict(frozen=True)

    field: str
    unit: str


class LoadResult(BaseModel):
    """Outcome of parsing one table."""

    success: bool
    record_count: int = 0
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class CatalogStatus(BaseModel):
    """Snapshot of which indices are loaded and how big they are."""

    master_loaded: bool = False
    synonyms_loaded: bool = False
    portions_loaded: bool = False
    nutrients_loaded: bool = False
    master_count: int = 0
    synonym_count: int = 0
    portion_count: int = 0
    nutrients_count: int = 0


# ── Canonical (consumer-facing) view ─────────────────────────────────


class Portion(BaseModel):
    label: str
    grams: float


class FoodNutrients(BaseModel):
    """Nutrients per 100g as exposed to consumers."""

    kcal: float
    protein_g: float = 0
    carb_g: float = 0
    fat_g: float = 0
    fiber_g: Optional[float] = None
    sodium_mg: Optional[float] = None
    calcium_mg: Optional[float] = None
    iron_mg: Optional[float] = None
    potassium_mg: Optional[float] = None
    vitamin_c_mg: Optional[float] = None


class FoodItemCanonical(BaseModel):
    """Read-only projection of a food with its resolved portions."""

    id: str
    name: str
    category: str
    nutrients_per_100g: FoodNutrients
    portions: List[Portion] = Field(default_factory=list)
    shopping_category: Optional[str] = None


class PortionTotals(BaseModel):
    """Nutrients for a given amount of one food."""

    kcal: int
    protein: float
    carbs: float
    fat: float
    fiber: float
    sodium: int
    calcium: Optional[int] = None
    iron: Optional[float] = None
    potassium: Optional[int] = None
    vitamin_c: Optional[int] = None
    total_grams: float


class SubstitutionSuggestion(BaseModel):
    """A calorically equivalent alternative for a food.

    portion_index is -1 when no portion x quantity combination fits the
    target within tolerance (manual weight mode).
    """

    food: FoodItemCanonical
    portion_index: int
    quantity: float
    weight_grams: int
    target_grams: float
    fit_error_pct: float
    is_manual_weight: bool


# ── Meal plan consumers ──────────────────────────────────────────────


class MealItem(BaseModel):
    """A food placed in a meal, with its stored (possibly edited) macros."""

    food_id: str
    name: str = ""
    quantity: float = 0
    unit: str = "g"
    calculated_calories: Optional[float] = None
    calculated_protein: Optional[float] = None
    calculated_carbs: Optional[float] = None
    calculated_fat: Optional[float] = None
    snapshot: Optional[Dict[str, Optional[float]]] = Field(
        default=None,
        description="Micronutrient snapshot taken when the item was created",
    )


class Meal(BaseModel):
    id: str
    name: str
    time: Optional[str] = None
    items: List[MealItem] = Field(default_factory=list)


class NutrientTotals(BaseModel):
    """Daily totals; kcal and mg fields are whole numbers except iron."""

    calories: int = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0
    sodium: int = 0
    calcium: int = 0
    iron: float = 0
    potassium: int = 0
    vitamin_c: int = 0


class ShoppingItem(BaseModel):
    name: str
    category: str
    total_grams: float = 0

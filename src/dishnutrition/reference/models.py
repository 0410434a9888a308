"""Core data types shared by the estimation pipeline."""

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any

from dishnutrition.logging_config import get_logger
from dishnutrition.rounding import round_half_up

logger = get_logger(__name__)


class DishCategory(str, Enum):
    """Dish categories with known serving assumptions."""

    WET_SABZI = "Wet Sabzi"
    DRY_SABZI = "Dry Sabzi"
    DAL = "Dal"
    NON_VEG_CURRY = "Non-Veg Curry"
    RICE_DISH = "Rice Dish"
    ROTI_BREAD = "Roti/Bread"
    SWEET_DESSERT = "Sweet/Dessert"
    UNKNOWN = "Unknown"

    @classmethod
    def labels(cls) -> list[str]:
        """Labels a classifier is allowed to return."""
        return [c.value for c in cls if c is not cls.UNKNOWN]


@dataclass(frozen=True)
class NutritionVector:
    """Absolute nutrition amounts (kcal and grams)."""

    calories: float = 0.0
    protein: float = 0.0
    carbs: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"Nutrition field '{f.name}' must be finite and non-negative, got {value}")

    def __add__(self, other: "NutritionVector") -> "NutritionVector":
        return NutritionVector(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbs=self.carbs + other.carbs,
            fat=self.fat + other.fat,
            fiber=self.fiber + other.fiber,
        )

    def scaled(self, factor: float) -> "NutritionVector":
        """Multiply every field by a non-negative factor."""
        return NutritionVector(
            calories=self.calories * factor,
            protein=self.protein * factor,
            carbs=self.carbs * factor,
            fat=self.fat * factor,
            fiber=self.fiber * factor,
        )

    def rounded(self, ndigits: int = 0) -> "NutritionVector":
        """Round every field half-up."""
        return NutritionVector(**{k: round_half_up(v, ndigits) for k, v in self.as_dict().items()})

    def as_dict(self) -> dict[str, float]:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "NutritionVector":
        """Build from a loosely-typed mapping; missing keys count as zero."""
        return cls(**{f.name: float(data.get(f.name) or 0) for f in fields(cls)})


def _parse_amount(value: Any) -> float:
    """Coerce a spreadsheet cell into a non-negative float."""
    if value is None:
        return 0.0
    try:
        amount = float(str(value).strip() or 0)
    except ValueError:
        return 0.0
    if math.isnan(amount) or amount < 0:
        return 0.0
    return amount


@dataclass(frozen=True)
class NutritionRecord:
    """Reference nutrition values per 100g of a food."""

    food_name: str
    calories_per_100g: float = 0.0
    protein_per_100g: float = 0.0
    carbs_per_100g: float = 0.0
    fat_per_100g: float = 0.0
    fiber_per_100g: float = 0.0

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "NutritionRecord":
        """Parse a reference table row keyed by sheet header."""
        return cls(
            food_name=str(row.get("food_name") or "").strip(),
            calories_per_100g=_parse_amount(row.get("energy_kcal")),
            protein_per_100g=_parse_amount(row.get("protein_g")),
            carbs_per_100g=_parse_amount(row.get("carb_g")),
            fat_per_100g=_parse_amount(row.get("fat_g")),
            fiber_per_100g=_parse_amount(row.get("fibre_g")),
        )

    def per_100g(self) -> NutritionVector:
        return NutritionVector(
            calories=self.calories_per_100g,
            protein=self.protein_per_100g,
            carbs=self.carbs_per_100g,
            fat=self.fat_per_100g,
            fiber=self.fiber_per_100g,
        )


@dataclass(frozen=True)
class Ingredient:
    """Ingredient line as supplied by a recipe."""

    name: str
    original_quantity: str = ""


@dataclass(frozen=True)
class ProcessedIngredient:
    """Per-ingredient pipeline output."""

    name: str
    original_quantity: str
    standard_quantity: str
    weight_in_grams: float
    nutrition: NutritionVector = field(default_factory=NutritionVector)
    matched: bool = False
    source: str = "reference"  # "reference", "estimator", "heuristic", "failed"
    warning: str | None = None


@dataclass(frozen=True)
class ReferenceTables:
    """Reference tables loaded once per cache."""

    nutrition: tuple[NutritionRecord, ...]
    units: tuple[Mapping[str, str], ...] = ()
    categories: tuple[Mapping[str, str], ...] = ()

    @classmethod
    def from_rows(
        cls,
        nutrition_rows: list[dict[str, Any]],
        unit_rows: list[dict[str, Any]] | None = None,
        category_rows: list[dict[str, Any]] | None = None,
    ) -> "ReferenceTables":
        """Coerce raw table rows at the boundary."""
        records = []
        for row in nutrition_rows:
            record = NutritionRecord.from_row(row)
            if not record.food_name:
                logger.debug(f"Skipping nutrition row without food_name: {row}")
                continue
            records.append(record)

        return cls(
            nutrition=tuple(records),
            units=tuple(dict(r) for r in unit_rows or []),
            categories=tuple(dict(r) for r in category_rows or []),
        )

    @property
    def category_labels(self) -> list[str]:
        """Deduplicated category labels from the category table, in order."""
        labels: list[str] = []
        for row in self.categories:
            label = str(row.get("Food_category_name") or "").strip()
            if label and label not in labels:
                labels.append(label)
        return labels

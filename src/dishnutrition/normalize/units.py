"""Quantity parsing and household-unit to gram conversion."""

import math
import re
from dataclasses import dataclass

from dishnutrition.logging_config import get_logger

logger = get_logger(__name__)


# =============================================================================
# Unit Conversion Tables
# =============================================================================

# Grams per unit. Household measures are coarse approximations, not densities.
UNIT_GRAMS: dict[str, float] = {
    "g": 1.0,
    "gram": 1.0,
    "grams": 1.0,
    "kg": 1000.0,
    "kilogram": 1000.0,
    "kilograms": 1000.0,
    "tsp": 5.0,
    "teaspoon": 5.0,
    "teaspoons": 5.0,
    "tbsp": 15.0,
    "tablespoon": 15.0,
    "tablespoons": 15.0,
    "cup": 150.0,
    "cups": 150.0,
}

# Units whose weight depends on the ingredient itself
COUNT_UNITS: frozenset[str] = frozenset({"piece", "pieces", "medium"})

# Grams per piece for common produce (substring match on ingredient name)
PIECE_WEIGHT_OVERRIDES: dict[str, float] = {
    "onion": 150.0,
    "tomato": 120.0,
    "potato": 150.0,
}

DEFAULT_PIECE_GRAMS = 100.0
# Any unit we do not know ("large", "clove", "pinch", no unit)
SMALL_MEASURE_GRAMS = 30.0
# Weight assumed when the quantity cannot be read at all
UNKNOWN_QUANTITY_GRAMS = 30.0

QUANTITY_PATTERN = re.compile(r"^(\d+/\d+|\d+\.?\d*|\.\d+)\s*([a-zA-Z]+)?$")


@dataclass(frozen=True)
class Quantity:
    """A parsed free-text amount."""

    value: float | None
    unit: str | None
    raw: str

    @property
    def is_known(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class WeightEstimate:
    """Result of converting a quantity to grams."""

    standard_quantity: str
    weight_in_grams: float


# =============================================================================
# Parsing Functions
# =============================================================================


def _evaluate_number(token: str) -> float:
    """Evaluate an integer, decimal or simple fraction token."""
    if "/" in token:
        numerator, denominator = token.split("/")
        if float(denominator) == 0:
            return math.inf
        return float(numerator) / float(denominator)
    return float(token)


def parse_quantity(text: str | None) -> Quantity:
    """
    Parse a quantity string into a value and unit.

    Handles formats like:
    - "250g"
    - "2 tbsp"
    - "1/2 cup"
    - ".5 kg"
    - "3"

    Anything else ("to taste", "a pinch", "1 1/2 cups") yields a Quantity whose
    value and unit are None. Never raises.
    """
    raw = text or ""
    if not raw or "to taste" in raw.lower():
        return Quantity(value=None, unit=None, raw=raw)

    match = QUANTITY_PATTERN.match(raw.strip())
    if not match:
        return Quantity(value=None, unit=None, raw=raw)

    value = _evaluate_number(match.group(1))
    unit = (match.group(2) or "").lower()
    return Quantity(value=value, unit=unit, raw=raw)


def _piece_weight(ingredient_name: str) -> float:
    name = ingredient_name.lower()
    for keyword, grams in PIECE_WEIGHT_OVERRIDES.items():
        if keyword in name:
            return grams
    return DEFAULT_PIECE_GRAMS


def grams_per_unit(unit: str, ingredient_name: str = "") -> float:
    """
    Get the gram multiplier for a unit.

    Unknown units fall through to SMALL_MEASURE_GRAMS rather than raising.
    """
    if unit in UNIT_GRAMS:
        return UNIT_GRAMS[unit]
    if unit in COUNT_UNITS:
        return _piece_weight(ingredient_name)
    return SMALL_MEASURE_GRAMS


def is_known_unit(unit: str | None) -> bool:
    return bool(unit) and (unit in UNIT_GRAMS or unit in COUNT_UNITS)


def format_value(value: float) -> str:
    """Format a numeric quantity without trailing zeros."""
    return f"{value:g}"


def to_grams(ingredient_name: str, quantity: Quantity) -> WeightEstimate:
    """
    Estimate the weight in grams of an ingredient quantity.

    Args:
        ingredient_name: Ingredient name, used for per-piece weights.
        quantity: Parsed quantity.

    Returns:
        WeightEstimate with a display quantity and the weight in grams.
    """
    if not quantity.is_known:
        return WeightEstimate(standard_quantity=quantity.raw, weight_in_grams=UNKNOWN_QUANTITY_GRAMS)

    if not math.isfinite(quantity.value):
        logger.warning(
            f"Quantity '{quantity.raw}' for {ingredient_name} is not finite, "
            f"using {UNKNOWN_QUANTITY_GRAMS:g}g"
        )
        return WeightEstimate(standard_quantity=quantity.raw, weight_in_grams=UNKNOWN_QUANTITY_GRAMS)

    unit = quantity.unit or ""
    weight = quantity.value * grams_per_unit(unit, ingredient_name)
    if not math.isfinite(weight):
        logger.warning(
            f"Weight of '{quantity.raw}' for {ingredient_name} overflows, "
            f"using {UNKNOWN_QUANTITY_GRAMS:g}g"
        )
        return WeightEstimate(standard_quantity=quantity.raw, weight_in_grams=UNKNOWN_QUANTITY_GRAMS)

    if is_known_unit(unit):
        standard = f"{format_value(quantity.value)} {unit}"
    else:
        standard = quantity.raw

    return WeightEstimate(standard_quantity=standard, weight_in_grams=weight)

"""Normalize free-text quantities into grams."""

from dishnutrition.normalize.units import (
    UNKNOWN_QUANTITY_GRAMS,
    Quantity,
    WeightEstimate,
    grams_per_unit,
    parse_quantity,
    to_grams,
)

__all__ = [
    "UNKNOWN_QUANTITY_GRAMS",
    "Quantity",
    "WeightEstimate",
    "grams_per_unit",
    "parse_quantity",
    "to_grams",
]

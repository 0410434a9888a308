"""Reference nutrition data: models, cache and ingredient matching."""

from dishnutrition.reference.cache import (
    ReferenceDataCache,
    ReferenceDataLoadError,
    get_reference_cache,
)
from dishnutrition.reference.matching import IngredientResolver, MatchResult
from dishnutrition.reference.models import (
    DishCategory,
    Ingredient,
    NutritionRecord,
    NutritionVector,
    ProcessedIngredient,
    ReferenceTables,
)

__all__ = [
    "DishCategory",
    "Ingredient",
    "IngredientResolver",
    "MatchResult",
    "NutritionRecord",
    "NutritionVector",
    "ProcessedIngredient",
    "ReferenceDataCache",
    "ReferenceDataLoadError",
    "ReferenceTables",
    "get_reference_cache",
]

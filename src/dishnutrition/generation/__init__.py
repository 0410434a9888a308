"""Recipe, category and nutrition generation collaborators."""

from dishnutrition.generation.base import (
    CategoryClassifier,
    GeneratedRecipe,
    GenerationError,
    NutritionEstimator,
    RecipeGenerator,
    RecipeIngredient,
)
from dishnutrition.generation.fallback import coerce_category, fallback_recipe, infer_category
from dishnutrition.generation.gemini import (
    GeminiCategoryClassifier,
    GeminiClient,
    GeminiNutritionEstimator,
    GeminiRecipeGenerator,
)

__all__ = [
    "CategoryClassifier",
    "GeminiCategoryClassifier",
    "GeminiClient",
    "GeminiNutritionEstimator",
    "GeminiRecipeGenerator",
    "GeneratedRecipe",
    "GenerationError",
    "NutritionEstimator",
    "RecipeGenerator",
    "RecipeIngredient",
    "coerce_category",
    "fallback_recipe",
    "infer_category",
]

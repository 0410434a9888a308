"""Nutrition computation, aggregation and serving normalization."""

from dishnutrition.estimate.aggregator import AggregationResult, DishAggregator
from dishnutrition.estimate.calculator import (
    NutritionCalculator,
    NutritionResult,
    estimate_basic_nutrition,
)
from dishnutrition.estimate.serving import SERVING_SIZES, ServingProfile, normalize, serving_profile
from dishnutrition.estimate.service import (
    DishNutritionService,
    build_service,
    estimate_nutrition,
)

__all__ = [
    "SERVING_SIZES",
    "AggregationResult",
    "DishAggregator",
    "DishNutritionService",
    "NutritionCalculator",
    "NutritionResult",
    "ServingProfile",
    "build_service",
    "estimate_basic_nutrition",
    "estimate_nutrition",
    "normalize",
    "serving_profile",
]

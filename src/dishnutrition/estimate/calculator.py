"""Per-ingredient nutrition computation."""

import asyncio
from dataclasses import dataclass

from dishnutrition.generation.base import NutritionEstimator
from dishnutrition.logging_config import get_logger
from dishnutrition.reference.models import NutritionRecord, NutritionVector

logger = get_logger(__name__)


# Per-100g fallback profiles, checked in order; the first keyword hit wins
BASIC_NUTRITION_RULES: list[tuple[tuple[str, ...], NutritionVector]] = [
    (("oil", "ghee", "butter"), NutritionVector(calories=900, protein=0, carbs=0, fat=100, fiber=0)),
    (("sugar", "jaggery"), NutritionVector(calories=400, protein=0, carbs=100, fat=0, fiber=0)),
    (("paneer", "cheese"), NutritionVector(calories=300, protein=20, carbs=5, fat=25, fiber=0)),
    (("chicken", "mutton", "meat"), NutritionVector(calories=200, protein=25, carbs=0, fat=10, fiber=0)),
    (("rice", "wheat", "flour"), NutritionVector(calories=350, protein=8, carbs=75, fat=1, fiber=3)),
    (("vegetable", "sabzi"), NutritionVector(calories=40, protein=2, carbs=8, fat=0.2, fiber=3)),
]

DEFAULT_BASIC_NUTRITION = NutritionVector(calories=50, protein=2, carbs=10, fat=0.5, fiber=1)


def basic_nutrition_profile(ingredient_name: str) -> NutritionVector:
    """Get the per-100g fallback profile for an ingredient name."""
    name = ingredient_name.lower()
    for keywords, profile in BASIC_NUTRITION_RULES:
        if any(keyword in name for keyword in keywords):
            return profile
    return DEFAULT_BASIC_NUTRITION


def estimate_basic_nutrition(ingredient_name: str, weight_in_grams: float) -> NutritionVector:
    """Keyword-based nutrition estimate for the given weight."""
    return basic_nutrition_profile(ingredient_name).scaled(weight_in_grams / 100)


@dataclass(frozen=True)
class NutritionResult:
    """Nutrition for one ingredient and where it came from."""

    nutrition: NutritionVector
    source: str  # "reference", "estimator", "heuristic"

    @property
    def matched(self) -> bool:
        return self.source == "reference"


class NutritionCalculator:
    """Turns a resolved record (or the lack of one) into absolute nutrition."""

    def __init__(self, estimator: NutritionEstimator | None = None, timeout: float | None = None):
        self.estimator = estimator
        self.timeout = timeout

    async def compute(
        self,
        record: NutritionRecord | None,
        weight_in_grams: float,
        ingredient_name: str,
    ) -> NutritionResult:
        """
        Compute nutrition for an ingredient weight.

        Args:
            record: Reference record, or None when the ingredient was not found.
            weight_in_grams: Estimated ingredient weight.
            ingredient_name: Ingredient name, used by the fallbacks.

        Returns:
            NutritionResult. Absent data always resolves to some estimate.
        """
        if record is not None:
            return NutritionResult(record.per_100g().scaled(weight_in_grams / 100), "reference")

        if self.estimator is not None:
            try:
                estimate = await asyncio.wait_for(
                    self.estimator.estimate(ingredient_name, weight_in_grams),
                    timeout=self.timeout,
                )
                if not isinstance(estimate, NutritionVector):
                    estimate = NutritionVector.from_mapping(estimate)
                return NutritionResult(estimate, "estimator")
            except Exception as e:
                logger.warning(f"Nutrition estimator failed for {ingredient_name}: {e}")

        return NutritionResult(estimate_basic_nutrition(ingredient_name, weight_in_grams), "heuristic")

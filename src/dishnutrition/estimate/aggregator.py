"""Dish-level aggregation of per-ingredient nutrition."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field

from dishnutrition.estimate.calculator import NutritionCalculator
from dishnutrition.logging_config import get_logger
from dishnutrition.normalize.units import parse_quantity, to_grams
from dishnutrition.reference.matching import IngredientResolver
from dishnutrition.reference.models import (
    DishCategory,
    Ingredient,
    NutritionVector,
    ProcessedIngredient,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class AggregationResult:
    """Processed ingredients and dish totals."""

    ingredients: list[ProcessedIngredient]
    totals: NutritionVector
    warnings: list[str] = field(default_factory=list)

    @property
    def matched_count(self) -> int:
        return sum(1 for item in self.ingredients if item.matched)


class DishAggregator:
    """Runs the per-ingredient pipeline and sums the results."""

    def __init__(self, resolver: IngredientResolver, calculator: NutritionCalculator):
        self.resolver = resolver
        self.calculator = calculator

    async def process_ingredient(self, ingredient: Ingredient) -> ProcessedIngredient:
        """Parse, weigh, resolve and compute nutrition for one ingredient."""
        quantity = parse_quantity(ingredient.original_quantity)
        weight = to_grams(ingredient.name, quantity)
        record = self.resolver.resolve(ingredient.name)
        result = await self.calculator.compute(record, weight.weight_in_grams, ingredient.name)

        return ProcessedIngredient(
            name=ingredient.name,
            original_quantity=ingredient.original_quantity,
            standard_quantity=weight.standard_quantity,
            weight_in_grams=weight.weight_in_grams,
            nutrition=result.nutrition,
            matched=result.matched,
            source=result.source,
        )

    async def _process_safely(self, ingredient: Ingredient) -> ProcessedIngredient:
        try:
            return await self.process_ingredient(ingredient)
        except Exception as e:
            logger.warning(f"Error processing ingredient {ingredient.name}: {e}")
            return ProcessedIngredient(
                name=ingredient.name,
                original_quantity=ingredient.original_quantity,
                standard_quantity=ingredient.original_quantity,
                weight_in_grams=0.0,
                nutrition=NutritionVector(),
                matched=False,
                source="failed",
                warning=f"Failed to process: {e}",
            )

    async def aggregate(
        self,
        ingredients: Sequence[Ingredient],
        category: DishCategory | str | None = None,
    ) -> AggregationResult:
        """
        Process ingredients concurrently and sum their nutrition.

        A failing ingredient contributes zero nutrition and a warning; it never
        aborts the others. Totals are rounded to one decimal only at the end.

        Args:
            ingredients: Ingredient lines.
            category: Dish category, for logging only.

        Returns:
            AggregationResult with ingredients in input order.
        """
        processed = await asyncio.gather(*(self._process_safely(item) for item in ingredients))

        totals = NutritionVector()
        warnings = []
        for item in processed:
            if item.warning:
                warnings.append(f"{item.name}: {item.warning}")
            try:
                totals = totals + item.nutrition
            except ValueError:
                logger.warning(f"Nutrition of {item.name} overflows the dish total, skipped")
                warnings.append(f"{item.name}: Nutrition too large to add, skipped")

        result = AggregationResult(
            ingredients=list(processed),
            totals=totals.rounded(1),
            warnings=warnings,
        )
        logger.info(
            f"Aggregated {len(result.ingredients)} ingredients "
            f"({result.matched_count} matched, category={category}): "
            f"{result.totals.calories:g} kcal"
        )
        return result

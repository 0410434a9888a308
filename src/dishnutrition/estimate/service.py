"""End-to-end dish nutrition estimation."""

import asyncio
from collections.abc import Sequence

from dishnutrition.config import Settings, get_settings
from dishnutrition.estimate.aggregator import AggregationResult, DishAggregator
from dishnutrition.estimate.calculator import NutritionCalculator
from dishnutrition.estimate.serving import normalize
from dishnutrition.generation.base import (
    CategoryClassifier,
    GeneratedRecipe,
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
from dishnutrition.logging_config import LoggingContext, get_logger
from dishnutrition.reference.cache import ReferenceDataCache, get_reference_cache
from dishnutrition.reference.models import DishCategory, Ingredient
from dishnutrition.rounding import round_half_up
from dishnutrition.schemas import DishEstimate, EstimateError, IngredientUsed, ServingNutrition

logger = get_logger(__name__)


class DishNutritionService:
    """
    Estimates per-serving nutrition for a dish.

    Pipeline:
    1. Load reference tables (fatal if unavailable)
    2. Get a recipe from the generator, or a static fallback recipe
    3. Classify the dish, or infer the category from its name
    4. Aggregate ingredient nutrition into dish totals
    5. Scale totals to one serving for the category

    Collaborator calls get one attempt each, bounded by generation_timeout.
    """

    def __init__(
        self,
        cache: ReferenceDataCache,
        recipe_generator: RecipeGenerator | None = None,
        category_classifier: CategoryClassifier | None = None,
        nutrition_estimator: NutritionEstimator | None = None,
        generation_timeout: float | None = None,
        gemini_client: GeminiClient | None = None,
    ):
        self.cache = cache
        self.recipe_generator = recipe_generator
        self.category_classifier = category_classifier
        self.nutrition_estimator = nutrition_estimator
        self.generation_timeout = generation_timeout
        self._gemini_client = gemini_client

    async def fetch_recipe(self, dish_name: str) -> GeneratedRecipe:
        """Get a recipe from the generator, falling back to the static table."""
        if self.recipe_generator is not None:
            try:
                recipe = await asyncio.wait_for(
                    self.recipe_generator.generate(dish_name),
                    timeout=self.generation_timeout,
                )
                if recipe.ingredients:
                    return recipe
                logger.warning(f"Recipe generator returned no ingredients for {dish_name}")
            except Exception as e:
                logger.error(f"Failed to fetch recipe for {dish_name}: {e}")

        return fallback_recipe(dish_name)

    async def identify_category(self, dish_name: str, recipe: GeneratedRecipe) -> DishCategory:
        """Classify the dish, trusting the classifier only for known labels."""
        if self.category_classifier is not None:
            try:
                label = await asyncio.wait_for(
                    self.category_classifier.classify(dish_name, recipe),
                    timeout=self.generation_timeout,
                )
                category = coerce_category(label)
                if category is not None:
                    return category
                logger.info(f"Classifier label {label!r} is not a known category for {dish_name}")
            except Exception as e:
                logger.error(f"Failed to identify category for {dish_name}: {e}")

        return infer_category(dish_name)

    async def _aggregate(
        self,
        ingredients: Sequence[Ingredient],
        category: DishCategory,
    ) -> AggregationResult:
        resolver = await self.cache.resolver()
        calculator = NutritionCalculator(self.nutrition_estimator, timeout=self.generation_timeout)
        return await DishAggregator(resolver, calculator).aggregate(ingredients, category)

    def _build_estimate(
        self,
        dish_name: str,
        category: DishCategory,
        aggregation: AggregationResult,
    ) -> DishEstimate:
        per_serving = normalize(aggregation.totals, category)
        return DishEstimate(
            dish_name=dish_name,
            dish_type=category.value,
            estimated_nutrition_per_serving=ServingNutrition.from_vector(per_serving),
            ingredients_used=[
                IngredientUsed(
                    ingredient=item.name,
                    quantity=item.original_quantity,
                    weight_grams=int(round_half_up(item.weight_in_grams)),
                    matched=item.matched,
                )
                for item in aggregation.ingredients
            ],
            warnings=aggregation.warnings,
        )

    async def estimate(self, dish_name: str) -> DishEstimate | EstimateError:
        """
        Estimate nutrition per serving for a dish name.

        Returns:
            DishEstimate, or EstimateError if the estimate could not be made.
        """
        with LoggingContext(dish=dish_name):
            try:
                logger.info(f"Estimating nutrition for: {dish_name}")
                await self.cache.get()
                recipe = await self.fetch_recipe(dish_name)
                category = await self.identify_category(dish_name, recipe)
                aggregation = await self._aggregate(recipe.to_ingredients(), category)
                return self._build_estimate(dish_name, category, aggregation)
            except Exception as e:
                logger.error(f"Error processing {dish_name}: {e}")
                return EstimateError(error=f"Failed to process {dish_name}", message=str(e))

    async def estimate_from_ingredients(
        self,
        dish_name: str,
        ingredients: Sequence[Ingredient],
        category: DishCategory | None = None,
    ) -> DishEstimate | EstimateError:
        """
        Estimate nutrition per serving for a caller-supplied ingredient list.

        The category is classified (or inferred) when not given.
        """
        with LoggingContext(dish=dish_name):
            try:
                await self.cache.get()
                if category is None:
                    recipe = GeneratedRecipe(
                        ingredients=[
                            RecipeIngredient(name=i.name, quantity=i.original_quantity)
                            for i in ingredients
                        ]
                    )
                    category = await self.identify_category(dish_name, recipe)
                aggregation = await self._aggregate(ingredients, category)
                return self._build_estimate(dish_name, category, aggregation)
            except Exception as e:
                logger.error(f"Error processing {dish_name}: {e}")
                return EstimateError(error=f"Failed to process {dish_name}", message=str(e))

    async def close(self) -> None:
        """Release HTTP clients held by the source and collaborators."""
        await self.cache.source.close()
        if self._gemini_client is not None:
            await self._gemini_client.close()


def build_service(
    settings: Settings | None = None,
    cache: ReferenceDataCache | None = None,
) -> DishNutritionService:
    """
    Wire the service from configuration.

    Gemini collaborators are only attached when an API key is configured;
    otherwise the local fallbacks answer every request.
    """
    settings = settings or get_settings()
    cache = cache or get_reference_cache()

    if not settings.generation_enabled:
        logger.info("Gemini API key not set, using local fallbacks for generation")
        return DishNutritionService(cache, generation_timeout=settings.generation_timeout)

    client = GeminiClient(
        api_key=settings.gemini_api_key,
        model=settings.gemini_model,
        base_url=settings.gemini_base_url,
        timeout=settings.generation_timeout,
    )
    return DishNutritionService(
        cache,
        recipe_generator=GeminiRecipeGenerator(client),
        category_classifier=GeminiCategoryClassifier(client),
        nutrition_estimator=GeminiNutritionEstimator(client),
        generation_timeout=settings.generation_timeout,
        gemini_client=client,
    )


async def estimate_nutrition(
    dish_name: str,
    service: DishNutritionService | None = None,
) -> DishEstimate | EstimateError:
    """Estimate a dish with the given or a freshly configured service."""
    if service is not None:
        return await service.estimate(dish_name)

    service = build_service()
    try:
        return await service.estimate(dish_name)
    finally:
        await service.close()

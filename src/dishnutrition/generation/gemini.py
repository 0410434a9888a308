"""Gemini-backed generation collaborators.

Each collaborator makes a single request; callers own the fallback path, so
there is no retry here.
"""

import json
import re
from typing import Any

import httpx
from pydantic import BaseModel, Field, ValidationError

from dishnutrition.config import get_settings
from dishnutrition.generation.base import GeneratedRecipe, GenerationError, RecipeIngredient
from dishnutrition.logging_config import get_logger
from dishnutrition.reference.models import DishCategory, NutritionVector

logger = get_logger(__name__)

JSON_BLOCK_PATTERN = re.compile(r"\{[\s\S]*\}")

RECIPE_PROMPT = """
Create a typical recipe for Indian dish: "{dish_name}".
Return ONLY a JSON object with this exact structure:
{{
  "ingredients": [
    {{"name": "ingredient name", "quantity": "approximate quantity"}}
  ]
}}
Include 5-10 main ingredients with quantities in common household measurements (cups, tbsp, tsp, etc.).
"""

CATEGORY_PROMPT = """
Categorize the Indian dish "{dish_name}" into EXACTLY ONE of these categories:
{categories}

Main ingredients: {ingredients}

Return ONLY the category name, nothing else.
"""

NUTRITION_PROMPT = """
Please estimate the nutritional values for {weight:g}g of {ingredient_name}.
Provide ONLY a JSON with exact keys: calories, protein, carbs, fat, fiber.
Values should be numbers only (no units), with calories in kcal and others in grams.
Example: {{"calories": 150, "protein": 5, "carbs": 20, "fat": 3, "fiber": 2}}
"""


class EstimatedNutrition(BaseModel):
    """Nutrition JSON returned by the model."""

    calories: float = Field(default=0, ge=0, allow_inf_nan=False)
    protein: float = Field(default=0, ge=0, allow_inf_nan=False)
    carbs: float = Field(default=0, ge=0, allow_inf_nan=False)
    fat: float = Field(default=0, ge=0, allow_inf_nan=False)
    fiber: float = Field(default=0, ge=0, allow_inf_nan=False)

    def to_vector(self) -> NutritionVector:
        return NutritionVector(**self.model_dump())


def extract_json(text: str) -> dict[str, Any]:
    """
    Pull the first JSON object out of a model response.

    Models often wrap JSON in prose or code fences.

    Raises:
        GenerationError: If no decodable object is present.
    """
    match = JSON_BLOCK_PATTERN.search(text or "")
    if not match:
        raise GenerationError("No JSON object in model response")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise GenerationError(f"Malformed JSON in model response: {e}") from e
    if not isinstance(data, dict):
        raise GenerationError("Model response JSON is not an object")
    return data


class GeminiClient:
    """Async HTTP client for the Gemini generateContent API."""

    DEFAULT_TIMEOUT = 20.0

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key or settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.timeout = timeout or settings.generation_timeout or self.DEFAULT_TIMEOUT
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": self.api_key,
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def generate_text(self, prompt: str) -> str:
        """
        Send a prompt and return the text of the first candidate.

        Raises:
            GenerationError: On transport errors, HTTP errors or an empty answer.
        """
        if not self.api_key:
            raise GenerationError("Gemini API key is not configured")

        client = await self._get_client()
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        try:
            response = await client.post(self.generate_url, json=payload)
        except httpx.HTTPError as e:
            raise GenerationError(f"Gemini request failed: {e}") from e

        if response.status_code >= 400:
            detail = response.text[:300] if response.text else "No details"
            raise GenerationError(f"Gemini returned status {response.status_code}: {detail}")

        try:
            body = response.json()
            return body["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerationError("Unexpected Gemini response shape") from e


class GeminiRecipeGenerator:
    """RecipeGenerator backed by Gemini."""

    def __init__(self, client: GeminiClient):
        self.client = client

    async def generate(self, dish_name: str) -> GeneratedRecipe:
        text = await self.client.generate_text(RECIPE_PROMPT.format(dish_name=dish_name))
        lines = extract_json(text).get("ingredients")
        if not isinstance(lines, list):
            raise GenerationError(f"Invalid recipe for {dish_name}: no ingredient list")

        ingredients = []
        for line in lines:
            try:
                ingredients.append(RecipeIngredient.model_validate(line))
            except ValidationError as e:
                logger.warning(
                    f"Skipping recipe line {line!r} for {dish_name}: {e.errors()[0]['msg']}"
                )
        if not ingredients:
            raise GenerationError(f"Invalid recipe for {dish_name}: no usable ingredients")

        recipe = GeneratedRecipe(ingredients=ingredients)
        logger.debug(f"Generated {len(recipe.ingredients)} ingredients for {dish_name}")
        return recipe


class GeminiCategoryClassifier:
    """CategoryClassifier backed by Gemini."""

    def __init__(self, client: GeminiClient):
        self.client = client

    async def classify(self, dish_name: str, recipe: GeneratedRecipe) -> str:
        prompt = CATEGORY_PROMPT.format(
            dish_name=dish_name,
            categories="\n".join(f"- {label}" for label in DishCategory.labels()),
            ingredients=", ".join(item.name for item in recipe.ingredients) or "unknown",
        )
        return (await self.client.generate_text(prompt)).strip()


class GeminiNutritionEstimator:
    """NutritionEstimator backed by Gemini."""

    def __init__(self, client: GeminiClient):
        self.client = client

    async def estimate(self, ingredient_name: str, weight_in_grams: float) -> NutritionVector:
        prompt = NUTRITION_PROMPT.format(weight=weight_in_grams, ingredient_name=ingredient_name)
        text = await self.client.generate_text(prompt)
        try:
            return EstimatedNutrition.model_validate(extract_json(text)).to_vector()
        except ValidationError as e:
            raise GenerationError(f"Invalid nutrition estimate for {ingredient_name}: {e}") from e

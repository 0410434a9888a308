"""Collaborator interfaces for recipe, category and nutrition generation."""

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dishnutrition.reference.models import Ingredient, NutritionVector


class GenerationError(Exception):
    """Raised when a generation collaborator cannot produce a usable answer."""


class RecipeIngredient(BaseModel):
    """One ingredient line of a generated recipe."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    quantity: str = ""

    @field_validator("quantity", mode="before")
    @classmethod
    def quantity_as_text(cls, value: Any) -> Any:
        # Models sometimes answer a bare count such as 2
        if value is None:
            return ""
        if isinstance(value, bool):
            return value
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            return str(int(value)) if value.is_integer() else str(value)
        return value

    def to_ingredient(self) -> Ingredient:
        return Ingredient(name=self.name.strip(), original_quantity=self.quantity.strip())


class GeneratedRecipe(BaseModel):
    """Recipe as returned by a RecipeGenerator."""

    ingredients: list[RecipeIngredient] = Field(default_factory=list)

    def to_ingredients(self) -> list[Ingredient]:
        return [item.to_ingredient() for item in self.ingredients]


@runtime_checkable
class RecipeGenerator(Protocol):
    """Produces a typical ingredient list for a dish name."""

    async def generate(self, dish_name: str) -> GeneratedRecipe: ...


@runtime_checkable
class CategoryClassifier(Protocol):
    """Labels a dish with one of the known dish categories."""

    async def classify(self, dish_name: str, recipe: GeneratedRecipe) -> str: ...


@runtime_checkable
class NutritionEstimator(Protocol):
    """Estimates absolute nutrition for an ingredient missing from the reference table."""

    async def estimate(self, ingredient_name: str, weight_in_grams: float) -> NutritionVector: ...

"""Request and response schemas for nutrition estimates."""

from pydantic import BaseModel, Field

from dishnutrition.reference.models import DishCategory, NutritionVector


class ServingNutrition(BaseModel):
    """Nutrition for one standard serving, in kcal and grams."""

    calories: int = 0
    protein: int = 0
    carbs: int = 0
    fat: int = 0
    fiber: int = 0

    @classmethod
    def from_vector(cls, vector: NutritionVector) -> "ServingNutrition":
        return cls(**{k: int(v) for k, v in vector.as_dict().items()})


class IngredientUsed(BaseModel):
    """Ingredient line as used in an estimate."""

    ingredient: str
    quantity: str
    weight_grams: int
    matched: bool = False


class DishEstimate(BaseModel):
    """Estimated per-serving nutrition for a dish."""

    dish_name: str
    dish_type: str
    estimated_nutrition_per_serving: ServingNutrition
    ingredients_used: list[IngredientUsed]
    warnings: list[str] = Field(default_factory=list)


class EstimateError(BaseModel):
    """Top-level failure shape."""

    error: str
    message: str


class EstimateRequest(BaseModel):
    """Request to estimate a dish by name."""

    dish_name: str = Field(min_length=1, max_length=200)


class IngredientLine(BaseModel):
    """Caller-supplied ingredient line."""

    name: str = Field(min_length=1)
    quantity: str = ""


class IngredientEstimateRequest(BaseModel):
    """Request to estimate a dish from a known ingredient list."""

    dish_name: str = Field(min_length=1, max_length=200)
    ingredients: list[IngredientLine] = Field(min_length=1)
    category: DishCategory | None = None


class ReferenceStatsResponse(BaseModel):
    """Reference table statistics."""

    loaded: bool
    source: str
    foods: int = 0
    units: int = 0
    categories: int = 0

"""Pytest configuration and shared fixtures."""

import asyncio

import pytest

from dishnutrition.generation.base import GeneratedRecipe, GenerationError, RecipeIngredient
from dishnutrition.ingest.connectors.base import ConnectorError
from dishnutrition.ingest.connectors.static import StaticReferenceSource
from dishnutrition.reference.cache import ReferenceDataCache
from dishnutrition.reference.matching import IngredientResolver
from dishnutrition.reference.models import NutritionVector, ReferenceTables

NUTRITION_TABLE = "Nutrition source"
UNITS_TABLE = "Unit of measurements"
CATEGORIES_TABLE = "Food categories"

# =============================================================================
# Pytest Configuration
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests (require external services)"
    )


# =============================================================================
# Reference Data Fixtures
# =============================================================================


def _food(name, kcal, protein, carbs, fat, fibre):
    return {
        "food_code": name[:3].upper(),
        "food_name": name,
        "energy_kcal": str(kcal),
        "protein_g": str(protein),
        "carb_g": str(carbs),
        "fat_g": str(fat),
        "fibre_g": str(fibre),
    }


@pytest.fixture
def nutrition_rows():
    """Reference nutrition rows in sheet order."""
    return [
        _food("paneer", 300, 20, 5, 25, 0),
        _food("onion seed", 400, 18, 30, 22, 20),
        _food("onion", 40, 1.1, 9, 0.1, 1.7),
        _food("tomato", 18, 0.9, 3.9, 0.2, 1.2),
        _food("butter", 717, 0.9, 0.1, 81, 0),
        _food("black gram dal", 341, 25, 59, 1.6, 18),
        _food("garam masala", 379, 15, 45, 15, 23),
        _food("chaat masala", 200, 8, 40, 2, 10),
        {"food_name": "", "energy_kcal": "100"},
        _food("cream", 340, 2.1, 2.8, 37, 0),
        _food("chicken breast", 165, 31, 0, 3.6, 0),
    ]


@pytest.fixture
def reference_tables_data(nutrition_rows):
    """All three reference tables keyed by sheet name."""
    return {
        NUTRITION_TABLE: nutrition_rows,
        UNITS_TABLE: [
            {"unit": "cup", "grams": "150"},
            {"unit": "tbsp", "grams": "15"},
            {"unit": "tsp", "grams": "5"},
        ],
        CATEGORIES_TABLE: [
            {"Food_category_name": "Wet Sabzi"},
            {"Food_category_name": "Dry Sabzi"},
            {"Food_category_name": "Dal"},
            {"Food_category_name": "Dal"},
            {"Food_category_name": "Non-Veg Curry"},
            {"Food_category_name": "Rice Dish"},
            {"Food_category_name": "Roti/Bread"},
            {"Food_category_name": "Sweet/Dessert"},
        ],
    }


@pytest.fixture
def static_source(reference_tables_data):
    """In-memory reference source."""
    return StaticReferenceSource(reference_tables_data)


@pytest.fixture
def reference_cache(static_source):
    """Cache over the in-memory source."""
    return ReferenceDataCache(
        static_source,
        nutrition_table=NUTRITION_TABLE,
        units_table=UNITS_TABLE,
        categories_table=CATEGORIES_TABLE,
    )


@pytest.fixture
def reference_tables(nutrition_rows):
    """Coerced reference tables."""
    return ReferenceTables.from_rows(nutrition_rows)


@pytest.fixture
def resolver(reference_tables):
    """Resolver over the sample nutrition table."""
    return IngredientResolver(reference_tables.nutrition)


class FailingSource(StaticReferenceSource):
    """Source whose every fetch fails."""

    def __init__(self):
        super().__init__({})

    @property
    def name(self) -> str:
        return "failing"

    async def fetch(self, table_name: str) -> list[dict[str, str]]:
        raise ConnectorError(f"Sheet unreachable: {table_name}", status_code=503)


@pytest.fixture
def failing_cache():
    """Cache whose source is unreachable."""
    return ReferenceDataCache(
        FailingSource(),
        nutrition_table=NUTRITION_TABLE,
        units_table=UNITS_TABLE,
        categories_table=CATEGORIES_TABLE,
    )


# =============================================================================
# Collaborator Stubs
# =============================================================================


class StubRecipeGenerator:
    """Returns a fixed recipe and records the dishes asked for."""

    def __init__(self, lines: list[tuple[str, str]]):
        self.recipe = GeneratedRecipe(
            ingredients=[RecipeIngredient(name=n, quantity=q) for n, q in lines]
        )
        self.calls: list[str] = []

    async def generate(self, dish_name: str) -> GeneratedRecipe:
        self.calls.append(dish_name)
        return self.recipe


class StubClassifier:
    """Returns a fixed label."""

    def __init__(self, label: str):
        self.label = label
        self.calls: list[str] = []

    async def classify(self, dish_name: str, recipe: GeneratedRecipe) -> str:
        self.calls.append(dish_name)
        return self.label


class StubEstimator:
    """Returns a fixed per-call nutrition vector."""

    def __init__(self, vector: NutritionVector):
        self.vector = vector
        self.calls: list[tuple[str, float]] = []

    async def estimate(self, ingredient_name: str, weight_in_grams: float) -> NutritionVector:
        self.calls.append((ingredient_name, weight_in_grams))
        return self.vector


class FailingCollaborator:
    """Implements every collaborator method by raising."""

    async def generate(self, dish_name):
        raise GenerationError("generator down")

    async def classify(self, dish_name, recipe):
        raise GenerationError("classifier down")

    async def estimate(self, ingredient_name, weight_in_grams):
        raise GenerationError("estimator down")


class SlowCollaborator:
    """Implements every collaborator method by sleeping past any test timeout."""

    async def generate(self, dish_name):
        await asyncio.sleep(5)

    async def classify(self, dish_name, recipe):
        await asyncio.sleep(5)

    async def estimate(self, ingredient_name, weight_in_grams):
        await asyncio.sleep(5)


@pytest.fixture
def failing_collaborator():
    return FailingCollaborator()


@pytest.fixture
def slow_collaborator():
    return SlowCollaborator()


@pytest.fixture
def stub_recipe_generator():
    """Factory for recipe generators with a fixed ingredient list."""
    return StubRecipeGenerator


@pytest.fixture
def stub_classifier():
    """Factory for classifiers with a fixed label."""
    return StubClassifier


@pytest.fixture
def stub_estimator():
    """Factory for estimators with a fixed answer."""
    return StubEstimator

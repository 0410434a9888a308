"""Tests for per-ingredient nutrition computation."""

import pytest

from dishnutrition.estimate.calculator import (
    DEFAULT_BASIC_NUTRITION,
    NutritionCalculator,
    basic_nutrition_profile,
    estimate_basic_nutrition,
)
from dishnutrition.reference.models import NutritionRecord, NutritionVector

PANEER = NutritionRecord(
    food_name="paneer",
    calories_per_100g=300,
    protein_per_100g=20,
    carbs_per_100g=5,
    fat_per_100g=25,
    fiber_per_100g=0,
)


class TestReferenceNutrition:
    """Tests for scaling reference records."""

    @pytest.mark.asyncio
    async def test_scales_by_weight(self):
        """Test 250g of paneer is 2.5x the per-100g values."""
        result = await NutritionCalculator().compute(PANEER, 250, "paneer")

        assert result.source == "reference"
        assert result.matched is True
        assert result.nutrition == NutritionVector(
            calories=750, protein=50, carbs=12.5, fat=62.5, fiber=0
        )

    @pytest.mark.asyncio
    async def test_record_skips_estimator(self, stub_estimator):
        """Test the estimator is never asked about matched ingredients."""
        estimator = stub_estimator(NutritionVector(calories=1))
        await NutritionCalculator(estimator).compute(PANEER, 100, "paneer")
        assert estimator.calls == []

    @pytest.mark.asyncio
    async def test_zero_weight(self):
        """Test zero weight yields zero nutrition."""
        result = await NutritionCalculator().compute(PANEER, 0, "paneer")
        assert result.nutrition == NutritionVector()


class TestEstimatorFallback:
    """Tests for ingredients missing from the reference table."""

    @pytest.mark.asyncio
    async def test_estimator_success(self, stub_estimator):
        """Test estimator output is used as-is."""
        vector = NutritionVector(calories=12, protein=1, carbs=2, fat=0.3, fiber=0.5)
        estimator = stub_estimator(vector)

        result = await NutritionCalculator(estimator).compute(None, 40, "saffron")

        assert result.source == "estimator"
        assert result.matched is False
        assert result.nutrition == vector
        assert estimator.calls == [("saffron", 40)]

    @pytest.mark.asyncio
    async def test_estimator_mapping_coerced(self, stub_estimator):
        """Test loosely typed estimator output is coerced."""
        estimator = stub_estimator({"calories": "80", "protein": 3})

        result = await NutritionCalculator(estimator).compute(None, 40, "saffron")

        assert result.nutrition == NutritionVector(calories=80, protein=3)

    @pytest.mark.asyncio
    async def test_estimator_negative_output_rejected(self, stub_estimator):
        """Test invalid estimator output falls back to the heuristic."""
        estimator = stub_estimator({"calories": -5})

        result = await NutritionCalculator(estimator).compute(None, 100, "ghee")

        assert result.source == "heuristic"
        assert result.nutrition.calories == 900

    @pytest.mark.asyncio
    async def test_estimator_infinite_output_rejected(self, stub_estimator):
        """Test an infinite estimate falls back to the heuristic."""
        estimator = stub_estimator({"calories": float("inf"), "protein": 2})

        result = await NutritionCalculator(estimator).compute(None, 1, "saffron")

        assert result.source == "heuristic"
        assert result.nutrition == DEFAULT_BASIC_NUTRITION.scaled(0.01)

    @pytest.mark.asyncio
    async def test_estimator_failure(self, failing_collaborator):
        """Test an estimator error falls back to the heuristic."""
        result = await NutritionCalculator(failing_collaborator).compute(None, 10, "ghee")

        assert result.source == "heuristic"
        assert result.nutrition == NutritionVector(calories=90, protein=0, carbs=0, fat=10, fiber=0)

    @pytest.mark.asyncio
    async def test_estimator_timeout(self, slow_collaborator):
        """Test a slow estimator is abandoned after the timeout."""
        calculator = NutritionCalculator(slow_collaborator, timeout=0.05)

        result = await calculator.compute(None, 100, "jaggery")

        assert result.source == "heuristic"
        assert result.nutrition.carbs == 100

    @pytest.mark.asyncio
    async def test_no_estimator(self):
        """Test the heuristic is used when no estimator is configured."""
        result = await NutritionCalculator().compute(None, 200, "saffron")

        assert result.source == "heuristic"
        assert result.nutrition == DEFAULT_BASIC_NUTRITION.scaled(2)


class TestBasicNutrition:
    """Tests for the keyword heuristic."""

    @pytest.mark.parametrize(
        "name,calories",
        [
            ("mustard oil", 900),
            ("Desi Ghee", 900),
            ("brown sugar", 400),
            ("processed cheese", 300),
            ("mutton", 200),
            ("wheat flour", 350),
            ("mixed vegetable", 40),
            ("saffron", 50),
        ],
    )
    def test_profiles(self, name, calories):
        """Test keyword rules map names to per-100g profiles."""
        assert basic_nutrition_profile(name).calories == calories

    def test_rules_checked_in_order(self):
        """Test the first matching rule wins."""
        # "butter" sits in the fats rule, ahead of paneer/cheese
        assert basic_nutrition_profile("butter paneer").calories == 900

    def test_scaled_by_weight(self):
        """Test heuristic values scale linearly with weight."""
        result = estimate_basic_nutrition("rice", 50)
        assert result == NutritionVector(calories=175, protein=4, carbs=37.5, fat=0.5, fiber=1.5)

    def test_always_non_negative(self):
        """Test every field is populated and non-negative."""
        for name in ["", "oil", "unknown thing", "chicken"]:
            vector = estimate_basic_nutrition(name, 30)
            assert all(value >= 0 for value in vector.as_dict().values())


class TestNutritionVector:
    """Tests for vector invariants."""

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            NutritionVector(calories=-1)

    def test_nan_rejected(self):
        with pytest.raises(ValueError):
            NutritionVector(fat=float("nan"))

    def test_infinity_rejected(self):
        with pytest.raises(ValueError, match="finite"):
            NutritionVector(calories=float("inf"))

    def test_sum_overflow_rejected(self):
        big = NutritionVector(calories=1.7e308)
        with pytest.raises(ValueError):
            big + big

    def test_rounded_half_up(self):
        """Test rounding goes half away from zero rather than to even."""
        vector = NutritionVector(calories=2.5, protein=0.5, carbs=1.25, fat=3.5, fiber=0.05)
        assert vector.rounded(0).as_dict() == {
            "calories": 3,
            "protein": 1,
            "carbs": 1,
            "fat": 4,
            "fiber": 0,
        }
        assert vector.rounded(1).carbs == 1.3
        assert vector.rounded(1).fiber == 0.1

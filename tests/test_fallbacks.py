"""Tests for the local recipe and category fallbacks."""

import pytest

from dishnutrition.generation.fallback import (
    GENERIC_RECIPE,
    coerce_category,
    fallback_recipe,
    infer_category,
)
from dishnutrition.reference.models import DishCategory


class TestFallbackRecipe:
    """Tests for fallback_recipe."""

    def test_known_dish(self):
        recipe = fallback_recipe("Dal Makhani")

        assert [item.name for item in recipe.ingredients] == [
            "black urad dal",
            "rajma",
            "butter",
            "tomato",
            "cream",
        ]
        assert recipe.ingredients[1].quantity == "1/4 cup"

    def test_lookup_ignores_case_and_whitespace(self):
        assert len(fallback_recipe("  PANEER BUTTER MASALA ").ingredients) == 6

    def test_unknown_dish_gets_generic_recipe(self):
        recipe = fallback_recipe("Aloo Gobi")

        assert len(recipe.ingredients) == len(GENERIC_RECIPE) == 5
        assert recipe.ingredients[0].name == "main ingredient"
        assert recipe.ingredients[0].quantity == "250g"


class TestInferCategory:
    """Tests for keyword category inference."""

    @pytest.mark.parametrize(
        "dish,expected",
        [
            ("Dal Makhani", DishCategory.DAL),
            ("Moong Dhal", DishCategory.DAL),
            ("Chicken Curry", DishCategory.NON_VEG_CURRY),
            ("Prawn Masala", DishCategory.NON_VEG_CURRY),
            ("Paneer Butter Masala", DishCategory.WET_SABZI),
            ("Veg Curry", DishCategory.WET_SABZI),
            ("Jeera Rice", DishCategory.RICE_DISH),
            ("Veg Pulao", DishCategory.RICE_DISH),
            ("Mutton Biryani", DishCategory.RICE_DISH),
            ("Butter Naan", DishCategory.ROTI_BREAD),
            ("Aloo Paratha", DishCategory.ROTI_BREAD),
            ("Gajar Halwa", DishCategory.SWEET_DESSERT),
            ("Rice Kheer", DishCategory.RICE_DISH),
            ("Aloo Gobi", DishCategory.DRY_SABZI),
        ],
    )
    def test_rules(self, dish, expected):
        assert infer_category(dish) == expected

    def test_rule_order(self):
        """Test earlier rules win over later ones."""
        # "dal" is checked before "curry"
        assert infer_category("Dal Curry") == DishCategory.DAL


class TestCoerceCategory:
    """Tests for validating classifier labels."""

    def test_known_label(self):
        assert coerce_category("Non-Veg Curry") == DishCategory.NON_VEG_CURRY

    def test_whitespace_stripped(self):
        assert coerce_category("  Roti/Bread\n") == DishCategory.ROTI_BREAD

    @pytest.mark.parametrize("label", [None, "", "Soup", "dal", "Unknown", "Dal."])
    def test_rejected(self, label):
        assert coerce_category(label) is None

"""Deterministic local substitutes for the generation collaborators."""

from dishnutrition.generation.base import GeneratedRecipe, RecipeIngredient
from dishnutrition.reference.models import DishCategory

# Known dishes, keyed by lower-cased name
FALLBACK_RECIPES: dict[str, list[tuple[str, str]]] = {
    "paneer butter masala": [
        ("paneer", "250g"),
        ("butter", "2 tbsp"),
        ("tomato", "3 medium"),
        ("onion", "1 large"),
        ("cream", "2 tbsp"),
        ("garam masala", "1 tsp"),
    ],
    "dal makhani": [
        ("black urad dal", "1 cup"),
        ("rajma", "1/4 cup"),
        ("butter", "2 tbsp"),
        ("tomato", "2 medium"),
        ("cream", "1 tbsp"),
    ],
    "chicken curry": [
        ("chicken", "500g"),
        ("onion", "2 medium"),
        ("tomato", "2 medium"),
        ("oil", "2 tbsp"),
        ("garam masala", "1 tsp"),
    ],
}

GENERIC_RECIPE: list[tuple[str, str]] = [
    ("main ingredient", "250g"),
    ("onion", "1 medium"),
    ("tomato", "2 medium"),
    ("oil", "2 tbsp"),
    ("spices", "2 tsp"),
]

MEAT_KEYWORDS = ("chicken", "mutton", "fish", "prawn")


def fallback_recipe(dish_name: str) -> GeneratedRecipe:
    """Get a known recipe for the dish, or a generic five-ingredient template."""
    lines = FALLBACK_RECIPES.get(dish_name.strip().lower(), GENERIC_RECIPE)
    return GeneratedRecipe(
        ingredients=[RecipeIngredient(name=name, quantity=quantity) for name, quantity in lines]
    )


def infer_category(dish_name: str) -> DishCategory:
    """
    Infer a dish category from keywords in its name.

    Rules are checked in order; the first hit wins and Dry Sabzi is the default.
    """
    dish = dish_name.lower()

    if "dal" in dish or "dhal" in dish:
        return DishCategory.DAL
    if "curry" in dish or "masala" in dish:
        if any(meat in dish for meat in MEAT_KEYWORDS):
            return DishCategory.NON_VEG_CURRY
        return DishCategory.WET_SABZI
    if "rice" in dish or "pulao" in dish or "biryani" in dish:
        return DishCategory.RICE_DISH
    if "roti" in dish or "naan" in dish or "paratha" in dish:
        return DishCategory.ROTI_BREAD
    if "sweet" in dish or "halwa" in dish or "kheer" in dish:
        return DishCategory.SWEET_DESSERT

    return DishCategory.DRY_SABZI


def coerce_category(label: str | None) -> DishCategory | None:
    """Accept a classifier label only if it is exactly one of the known categories."""
    if not label:
        return None
    label = label.strip()
    if label in DishCategory.labels():
        return DishCategory(label)
    return None

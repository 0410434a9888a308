"""Scaling dish totals down to one serving."""

from dataclasses import dataclass

from dishnutrition.reference.models import DishCategory, NutritionVector


@dataclass(frozen=True)
class ServingProfile:
    """Serving size and whole-dish cooked weight for a category."""

    serving_size_grams: int
    total_cooked_weight_grams: int

    @property
    def scale_factor(self) -> float:
        return self.serving_size_grams / self.total_cooked_weight_grams


SERVING_SIZES: dict[DishCategory, ServingProfile] = {
    DishCategory.WET_SABZI: ServingProfile(180, 800),
    DishCategory.DRY_SABZI: ServingProfile(100, 600),
    DishCategory.DAL: ServingProfile(150, 700),
    DishCategory.NON_VEG_CURRY: ServingProfile(180, 800),
    DishCategory.RICE_DISH: ServingProfile(150, 800),
    DishCategory.ROTI_BREAD: ServingProfile(30, 300),
    DishCategory.SWEET_DESSERT: ServingProfile(75, 500),
}

DEFAULT_SERVING = ServingProfile(150, 700)


def serving_profile(category: DishCategory | str | None) -> ServingProfile:
    """Look up the serving profile; unknown categories get the default."""
    try:
        return SERVING_SIZES.get(DishCategory(category), DEFAULT_SERVING)
    except ValueError:
        return DEFAULT_SERVING


def normalize(totals: NutritionVector, category: DishCategory | str | None) -> NutritionVector:
    """
    Rescale dish totals to a single serving.

    Each field becomes round(total * serving_size / total_cooked_weight).
    """
    return totals.scaled(serving_profile(category).scale_factor).rounded(0)

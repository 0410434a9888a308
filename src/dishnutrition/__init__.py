"""Dish nutrition estimation from household-measure recipes."""

__version__ = "0.1.0"

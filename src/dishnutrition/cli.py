"""Command line interface for one-off dish estimates.

Usage:
    dishnutrition "Paneer Butter Masala"
    dishnutrition "My Curry" --ingredients ingredients.json --category "Wet Sabzi"

The ingredients file is a JSON list of {"name": ..., "quantity": ...} objects.
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

from dishnutrition.config import get_settings
from dishnutrition.estimate.service import build_service
from dishnutrition.logging_config import configure_logging, get_logger
from dishnutrition.reference.models import DishCategory, Ingredient
from dishnutrition.schemas import DishEstimate, EstimateError, IngredientLine

logger = get_logger(__name__)


def load_ingredients(path: str) -> list[Ingredient]:
    """Read an ingredient list from a JSON file."""
    lines = json.loads(Path(path).read_text(encoding="utf-8"))
    return [
        Ingredient(name=line.name, original_quantity=line.quantity)
        for line in (IngredientLine.model_validate(item) for item in lines)
    ]


async def run(args: argparse.Namespace) -> DishEstimate | EstimateError:
    service = build_service()
    try:
        if args.ingredients:
            category = DishCategory(args.category) if args.category else None
            return await service.estimate_from_ingredients(
                args.dish_name, load_ingredients(args.ingredients), category
            )
        return await service.estimate(args.dish_name)
    finally:
        await service.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dishnutrition",
        description="Estimate per-serving nutrition for a dish",
    )
    parser.add_argument("dish_name", help="Dish name, e.g. 'Dal Makhani'")
    parser.add_argument(
        "--ingredients",
        help="JSON file with the ingredient list (skips recipe generation)",
    )
    parser.add_argument(
        "--category",
        choices=DishCategory.labels(),
        help="Dish category (skips classification; needs --ingredients)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from settings)")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.category and not args.ingredients:
        parser.error("--category requires --ingredients")
    configure_logging(log_level=args.log_level or get_settings().log_level, json_format=False)

    try:
        result = asyncio.run(run(args))
    except (OSError, ValueError) as e:
        logger.error(f"Cannot read ingredients: {e}")
        return 1

    print(json.dumps(result.model_dump(), indent=2))
    return 1 if isinstance(result, EstimateError) else 0


if __name__ == "__main__":
    sys.exit(main())

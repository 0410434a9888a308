"""Ingredient name to reference record matching."""

from collections.abc import Sequence
from dataclasses import dataclass

from dishnutrition.logging_config import get_logger
from dishnutrition.reference.models import NutritionRecord

logger = get_logger(__name__)

# Tokens shorter than this are too generic to match on ("of", "ml", ...)
MIN_TOKEN_LENGTH = 3


@dataclass(frozen=True)
class MatchResult:
    """Result of resolving an ingredient against the reference table."""

    ingredient_name: str
    record: NutritionRecord
    match_type: str  # "exact", "substring", "token"
    matched_term: str  # The term that matched


class IngredientResolver:
    """
    Resolve ingredient names against the reference nutrition table.

    Matching is tiered and the first tier that finds anything wins:

    1. exact: the record name equals the cleaned ingredient name
    2. substring: the record name contains the cleaned ingredient name
    3. token: the record name contains one of the ingredient's words

    Within a tier the earliest record in table order wins. This favours
    coverage over precision, so "onion" may resolve to "onion seed".
    """

    def __init__(self, records: Sequence[NutritionRecord]):
        # Lower-cased names computed once; the table is read-only after load
        self._entries: list[tuple[str, NutritionRecord]] = [
            (record.food_name.lower(), record) for record in records if record.food_name
        ]

    @staticmethod
    def clean_name(name: str) -> str:
        return (name or "").strip().lower()

    def match(self, ingredient_name: str) -> MatchResult | None:
        """
        Find the best reference record for an ingredient.

        Args:
            ingredient_name: Raw ingredient name.

        Returns:
            MatchResult, or None if no tier matched.
        """
        cleaned = self.clean_name(ingredient_name)
        if not cleaned:
            return None

        # 1. Exact
        for food_name, record in self._entries:
            if food_name == cleaned:
                return MatchResult(ingredient_name, record, "exact", cleaned)

        # 2. Forward substring
        for food_name, record in self._entries:
            if cleaned in food_name:
                return MatchResult(ingredient_name, record, "substring", cleaned)

        # 3. Token level, tokens tried in name order
        for token in cleaned.split():
            if len(token) < MIN_TOKEN_LENGTH:
                continue
            for food_name, record in self._entries:
                if token in food_name:
                    return MatchResult(ingredient_name, record, "token", token)

        return None

    def resolve(self, ingredient_name: str) -> NutritionRecord | None:
        """Resolve an ingredient to a reference record, or None if not found."""
        result = self.match(ingredient_name)
        if result is None:
            logger.debug(f"No reference match for '{ingredient_name}'")
            return None

        logger.debug(
            f"Matched '{ingredient_name}' -> '{result.record.food_name}' "
            f"({result.match_type} on '{result.matched_term}')"
        )
        return result.record

    def __len__(self) -> int:
        return len(self._entries)

"""Process-wide reference table cache with guarded lazy loading."""

import asyncio

from dishnutrition.config import get_settings
from dishnutrition.ingest.connectors.base import ConnectorError, ReferenceDataSource
from dishnutrition.logging_config import get_logger
from dishnutrition.reference.matching import IngredientResolver
from dishnutrition.reference.models import DishCategory, ReferenceTables

logger = get_logger(__name__)


class ReferenceDataLoadError(Exception):
    """Raised when the reference tables cannot be loaded."""


class ReferenceDataCache:
    """
    Holds the nutrition, unit and category tables for the process lifetime.

    The first call to get() loads all three tables while holding a lock;
    callers arriving during the load wait for it and then see the complete
    tables. After that the tables are read-only until reset().
    """

    def __init__(
        self,
        source: ReferenceDataSource,
        nutrition_table: str | None = None,
        units_table: str | None = None,
        categories_table: str | None = None,
    ):
        settings = get_settings()
        self.source = source
        self.nutrition_table = nutrition_table or settings.nutrition_sheet_name
        self.units_table = units_table or settings.measurement_sheet_name
        self.categories_table = categories_table or settings.categories_sheet_name
        self._tables: ReferenceTables | None = None
        self._resolver: IngredientResolver | None = None
        self._lock = asyncio.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._tables is not None

    async def get(self) -> ReferenceTables:
        """
        Get the reference tables, loading them on first use.

        Raises:
            ReferenceDataLoadError: If any table cannot be fetched.
        """
        if self._tables is not None:
            return self._tables

        async with self._lock:
            if self._tables is None:
                tables = await self._load()
                self._resolver = IngredientResolver(tables.nutrition)
                self._tables = tables
        return self._tables

    async def resolver(self) -> IngredientResolver:
        """Get an ingredient resolver over the cached nutrition table."""
        await self.get()
        assert self._resolver is not None
        return self._resolver

    def reset(self) -> None:
        """Drop cached tables so the next get() reloads them."""
        if self._tables is not None:
            logger.info("Reference data cache reset")
        self._tables = None
        self._resolver = None

    async def _load(self) -> ReferenceTables:
        logger.info(f"Loading reference data from {self.source.name}")
        try:
            nutrition_rows, unit_rows, category_rows = await asyncio.gather(
                self.source.fetch(self.nutrition_table),
                self.source.fetch(self.units_table),
                self.source.fetch(self.categories_table),
            )
        except ConnectorError as e:
            logger.error(f"Failed to load reference data: {e}")
            raise ReferenceDataLoadError("Failed to load required data") from e

        tables = ReferenceTables.from_rows(nutrition_rows, unit_rows, category_rows)

        known = set(DishCategory.labels())
        for label in tables.category_labels:
            if label not in known:
                logger.warning(f"Category table label '{label}' has no serving profile")

        logger.info(
            f"Reference data loaded: {len(tables.nutrition)} foods, "
            f"{len(tables.units)} units, {len(tables.categories)} categories"
        )
        return tables


_reference_cache: ReferenceDataCache | None = None


def get_reference_cache(source: ReferenceDataSource | None = None) -> ReferenceDataCache:
    """
    Get the global ReferenceDataCache instance.

    Creates it on first call, using the given source or the configured one.
    """
    global _reference_cache
    if _reference_cache is None:
        _reference_cache = ReferenceDataCache(source or build_reference_source())
    return _reference_cache


def build_reference_source() -> ReferenceDataSource:
    """Build the configured reference data source."""
    from dishnutrition.ingest.connectors.sheets import GoogleSheetsConnector
    from dishnutrition.ingest.connectors.static import StaticReferenceSource

    settings = get_settings()
    if settings.use_static_reference_data:
        return StaticReferenceSource.from_json_file(settings.reference_data_path)
    return GoogleSheetsConnector()

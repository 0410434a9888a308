"""In-memory reference data source."""

import json
from pathlib import Path
from typing import Any

from dishnutrition.ingest.connectors.base import ConnectorError, ReferenceDataSource
from dishnutrition.logging_config import get_logger

logger = get_logger(__name__)


class StaticReferenceSource(ReferenceDataSource):
    """Serve reference tables from memory or a local JSON file."""

    def __init__(self, tables: dict[str, list[dict[str, Any]]]):
        self.tables = tables
        self.fetch_count: dict[str, int] = {}

    @property
    def name(self) -> str:
        return "static"

    @classmethod
    def from_json_file(cls, path: str | Path) -> "StaticReferenceSource":
        """
        Load tables from a JSON object mapping table names to row lists.

        Example:
            {"Nutrition source": [{"food_name": "paneer", "energy_kcal": "300"}]}
        """
        try:
            content = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConnectorError(f"Cannot read reference data file {path}: {e}") from e

        if not isinstance(content, dict):
            raise ConnectorError(f"Reference data file {path} must contain a JSON object")

        logger.info(f"Loaded {len(content)} reference tables from {path}")
        return cls(content)

    async def fetch(self, table_name: str) -> list[dict[str, str]]:
        if table_name not in self.tables:
            raise ConnectorError(f"No data found in table: {table_name}")

        self.fetch_count[table_name] = self.fetch_count.get(table_name, 0) + 1
        return [
            {str(k): "" if v is None else str(v) for k, v in row.items()}
            for row in self.tables[table_name]
        ]

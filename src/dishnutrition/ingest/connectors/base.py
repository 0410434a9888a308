"""Base connector interface for reference data sources."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class ConnectorResponse:
    """Standardized response from connector API calls."""

    data: Any
    status_code: int
    headers: dict[str, str]
    raw_response: dict[str, Any] | list[Any] | None = None


class ConnectorError(Exception):
    """Base exception for connector errors."""

    def __init__(self, message: str, status_code: int | None = None, response: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response = response


class ReferenceDataSource(ABC):
    """Abstract base class for tabular reference data sources."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return source name for logging and identification."""
        pass

    @abstractmethod
    async def fetch(self, table_name: str) -> list[dict[str, str]]:
        """
        Fetch every row of a table.

        Args:
            table_name: Name of the table (sheet) to read.

        Returns:
            List of rows, each a dict keyed by the table header.

        Raises:
            ConnectorError: If the table cannot be read.
        """
        pass

    async def close(self) -> None:
        """Release any held resources."""
        return None

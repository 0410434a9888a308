"""Reference data source connectors."""

from dishnutrition.ingest.connectors.base import (
    ConnectorError,
    ConnectorResponse,
    ReferenceDataSource,
)
from dishnutrition.ingest.connectors.sheets import GoogleSheetsConnector
from dishnutrition.ingest.connectors.static import StaticReferenceSource

__all__ = [
    "ConnectorError",
    "ConnectorResponse",
    "GoogleSheetsConnector",
    "ReferenceDataSource",
    "StaticReferenceSource",
]

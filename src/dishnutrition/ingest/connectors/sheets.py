"""Google Sheets connector for the reference tables."""

from typing import Any
from urllib.parse import quote

import httpx
from tenacity import (
    RetryError,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from dishnutrition.config import get_settings
from dishnutrition.ingest.connectors.base import (
    ConnectorError,
    ConnectorResponse,
    ReferenceDataSource,
)
from dishnutrition.logging_config import get_logger

logger = get_logger(__name__)


def rows_from_values(values: list[list[Any]]) -> list[dict[str, str]]:
    """
    Convert a Sheets `values` matrix into header-keyed rows.

    The first row is the header. Short rows are padded with empty strings.
    """
    if not values:
        return []

    headers = [str(h) for h in values[0]]
    rows = []
    for raw_row in values[1:]:
        row = {}
        for index, header in enumerate(headers):
            cell = raw_row[index] if index < len(raw_row) else ""
            row[header] = "" if cell is None else str(cell)
        rows.append(row)
    return rows


class GoogleSheetsConnector(ReferenceDataSource):
    """Connector for the Google Sheets values API."""

    DEFAULT_TIMEOUT = 30.0
    BACKOFF_BASE = 1
    BACKOFF_MAX = 10

    def __init__(
        self,
        spreadsheet_id: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.spreadsheet_id = spreadsheet_id or settings.spreadsheet_id
        self.api_key = api_key or settings.google_api_key
        self.base_url = (base_url or settings.sheets_base_url).rstrip("/")
        self.timeout = timeout or settings.sheets_timeout or self.DEFAULT_TIMEOUT
        self.max_retries = max_retries or settings.sheets_max_retries
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        """Return connector name."""
        return "google-sheets"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                headers={"Accept": "application/json", "User-Agent": "DishNutrition/1.0"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GoogleSheetsConnector":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def sheet_url(self, sheet_name: str) -> str:
        return f"{self.base_url}/spreadsheets/{self.spreadsheet_id}/values/{quote(sheet_name, safe='')}"

    async def _request(self, sheet_name: str) -> ConnectorResponse:
        """Make an HTTP request with retry logic for transport failures."""
        if not self.spreadsheet_id or not self.api_key:
            raise ConnectorError("Google Sheets spreadsheet id and API key must be configured")

        url = self.sheet_url(sheet_name)
        client = await self._get_client()

        @retry(
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.BACKOFF_BASE, max=self.BACKOFF_MAX),
            reraise=False,
        )
        async def _do_request() -> httpx.Response:
            return await client.get(url, params={"key": self.api_key})

        try:
            response = await _do_request()
        except RetryError as e:
            logger.error(f"Request failed after {self.max_retries} attempts: {url}")
            raise ConnectorError(
                f"Request for sheet '{sheet_name}' failed after {self.max_retries} attempts",
                response=str(e.last_attempt.exception()),
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Request for {url} failed: {e}")
            raise ConnectorError(f"Request for sheet '{sheet_name}' failed: {e}") from e

        if response.status_code >= 400:
            error_detail = response.text[:500] if response.text else "No details"
            logger.error(f"Sheets API error {response.status_code} for {url}: {error_detail}")
            raise ConnectorError(
                f"Sheets request failed with status {response.status_code}",
                status_code=response.status_code,
                response=error_detail,
            )

        try:
            data = response.json() if response.text else {}
        except ValueError as e:
            raise ConnectorError(f"Invalid JSON from sheet '{sheet_name}'", response=str(e)) from e

        return ConnectorResponse(
            data=data,
            status_code=response.status_code,
            headers=dict(response.headers),
            raw_response=data,
        )

    async def fetch(self, table_name: str) -> list[dict[str, str]]:
        """
        Fetch all rows of a sheet.

        Args:
            table_name: Sheet (tab) name.

        Returns:
            List of header-keyed rows.
        """
        response = await self._request(table_name)
        values = response.data.get("values") if isinstance(response.data, dict) else None
        if not values:
            raise ConnectorError(f"No data found in sheet: {table_name}")

        rows = rows_from_values(values)
        logger.info(f"Fetched {len(rows)} rows from sheet '{table_name}'")
        return rows

"""Tests for the Google Sheets reference connector."""

import httpx
import pytest

from dishnutrition.ingest.connectors.base import ConnectorError
from dishnutrition.ingest.connectors.sheets import GoogleSheetsConnector, rows_from_values
from dishnutrition.reference.cache import ReferenceDataCache, ReferenceDataLoadError

SHEET_VALUES = {
    "range": "'Nutrition source'!A1:G3",
    "majorDimension": "ROWS",
    "values": [
        ["food_code", "food_name", "energy_kcal", "protein_g", "carb_g", "fat_g", "fibre_g"],
        ["A001", "paneer", "300", "20", "5", "25", "0"],
        ["A002", "onion", "40", "1.1"],
    ],
}


def _connector(handler, **kwargs):
    return GoogleSheetsConnector(
        spreadsheet_id="sheet-123",
        api_key="test-key",
        base_url="https://sheets.test/v4",
        max_retries=kwargs.pop("max_retries", 1),
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


class TestRowsFromValues:
    """Tests for converting the values matrix."""

    def test_header_keyed_rows(self):
        rows = rows_from_values(SHEET_VALUES["values"])

        assert len(rows) == 2
        assert rows[0]["food_name"] == "paneer"
        assert rows[0]["energy_kcal"] == "300"

    def test_short_rows_padded(self):
        """Test trailing empty cells omitted by the API come back as ''."""
        rows = rows_from_values(SHEET_VALUES["values"])

        assert rows[1]["protein_g"] == "1.1"
        assert rows[1]["fat_g"] == ""
        assert rows[1]["fibre_g"] == ""

    def test_empty(self):
        assert rows_from_values([]) == []
        assert rows_from_values([["food_name"]]) == []


class TestGoogleSheetsConnector:
    """Tests for GoogleSheetsConnector."""

    def test_connector_name(self):
        assert GoogleSheetsConnector(spreadsheet_id="x", api_key="y").name == "google-sheets"

    def test_sheet_url_quotes_name(self):
        connector = _connector(lambda request: httpx.Response(200))
        assert connector.sheet_url("Nutrition source") == (
            "https://sheets.test/v4/spreadsheets/sheet-123/values/Nutrition%20source"
        )

    @pytest.mark.asyncio
    async def test_fetch_success(self):
        """Test a successful fetch sends the key and parses rows."""
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=SHEET_VALUES)

        async with _connector(handler) as connector:
            rows = await connector.fetch("Nutrition source")

        assert [row["food_name"] for row in rows] == ["paneer", "onion"]
        assert seen[0].url.params["key"] == "test-key"
        assert seen[0].url.path.endswith("/spreadsheets/sheet-123/values/Nutrition source")

    @pytest.mark.asyncio
    async def test_fetch_http_error(self):
        """Test HTTP errors raise ConnectorError with the status."""
        connector = _connector(lambda request: httpx.Response(403, text="API key not valid"))

        with pytest.raises(ConnectorError) as exc_info:
            await connector.fetch("Nutrition source")

        assert exc_info.value.status_code == 403
        assert "API key not valid" in exc_info.value.response
        await connector.close()

    @pytest.mark.asyncio
    async def test_fetch_no_values(self):
        """Test a sheet without values is an error."""
        connector = _connector(lambda request: httpx.Response(200, json={"range": "A1"}))

        with pytest.raises(ConnectorError, match="No data found"):
            await connector.fetch("Food categories")
        await connector.close()

    @pytest.mark.asyncio
    async def test_fetch_invalid_json(self):
        connector = _connector(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(ConnectorError, match="Invalid JSON"):
            await connector.fetch("Food categories")
        await connector.close()

    @pytest.mark.asyncio
    async def test_network_error_after_retries(self):
        """Test transport failures become ConnectorError once retries run out."""
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        connector = _connector(handler)

        with pytest.raises(ConnectorError, match="failed after 1 attempts"):
            await connector.fetch("Nutrition source")

        assert len(calls) == 1
        await connector.close()

    @pytest.mark.asyncio
    async def test_protocol_error(self):
        """Test a non-retried transport error is still reported as ConnectorError."""

        def handler(request):
            raise httpx.RemoteProtocolError("Server disconnected", request=request)

        connector = _connector(handler)

        with pytest.raises(ConnectorError, match="Server disconnected"):
            await connector.fetch("Nutrition source")
        await connector.close()

    @pytest.mark.asyncio
    async def test_protocol_error_fails_reference_load(self):
        """Test the cache surfaces a dropped connection as a load error."""

        def handler(request):
            raise httpx.RemoteProtocolError("Server disconnected", request=request)

        connector = _connector(handler)
        cache = ReferenceDataCache(
            connector,
            nutrition_table="Nutrition source",
            units_table="Unit of measurements",
            categories_table="Food categories",
        )

        with pytest.raises(ReferenceDataLoadError):
            await cache.get()
        await connector.close()

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        """Test an unconfigured connector fails without a request."""
        connector = GoogleSheetsConnector(
            spreadsheet_id="sheet-123",
            api_key="",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=SHEET_VALUES)),
        )
        connector.api_key = ""

        with pytest.raises(ConnectorError, match="must be configured"):
            await connector.fetch("Nutrition source")

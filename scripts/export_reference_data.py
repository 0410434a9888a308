"""Script to snapshot the Google Sheets reference tables into a JSON file.

The file can be used offline by pointing REFERENCE_DATA_PATH at it.

Run with: uv run python scripts/export_reference_data.py --output reference.json

Requires GOOGLE_API_KEY and SPREADSHEET_ID to be set.
"""

import argparse
import asyncio
import json
from pathlib import Path

from dishnutrition.config import get_settings
from dishnutrition.ingest.connectors.sheets import GoogleSheetsConnector


async def export_tables(output: Path) -> None:
    """Fetch every reference table and write them to one JSON file."""
    tables = {}
    async with GoogleSheetsConnector() as connector:
        for table_name in get_settings().reference_table_names:
            tables[table_name] = await connector.fetch(table_name)
            print(f"  {table_name}: {len(tables[table_name])} rows")

    output.write_text(json.dumps(tables, indent=2, ensure_ascii=False), encoding="utf-8")
    print(f"\nWrote {output}")


def main():
    parser = argparse.ArgumentParser(description="Export reference tables to JSON")
    parser.add_argument(
        "--output", "-o", default="reference_data.json", help="Destination JSON file"
    )
    args = parser.parse_args()

    asyncio.run(export_tables(Path(args.output)))


if __name__ == "__main__":
    main()

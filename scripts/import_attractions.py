"""
import_attractions.py — CSV import of attractions into the directory.

Writes go through the admin client; ADMIN_DATABASE_URL must be set unless
--dry-run is given.

Usage:
    python scripts/import_attractions.py --csv data/attractions.csv             # import
    python scripts/import_attractions.py --csv data/attractions.csv --dry-run   # parse, no DB writes
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from brewery_directory.config import get_settings
from brewery_directory.database import DirectoryClients
from brewery_directory.errors import AdminClientUnavailable
from brewery_directory.services.directory import DirectoryService
from brewery_directory.services.importer import import_attractions, load_rows
from brewery_directory.services.store import SqlAlchemyStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


async def run_import(csv_path: str, dry_run: bool = False) -> None:
    """Full import pipeline."""
    logger.info("Loading CSV: %s", csv_path)
    rows = load_rows(csv_path)
    logger.info("Loaded %d rows.", len(rows))

    settings = get_settings()
    clients = DirectoryClients.from_settings(settings)
    admin_store = SqlAlchemyStore(clients.admin) if clients.admin is not None else None
    directory = DirectoryService(SqlAlchemyStore(clients.public), admin_store)

    try:
        if dry_run:
            logger.info("-- DRY RUN: parsing only, no DB writes --")
        summary = await import_attractions(directory, rows, dry_run=dry_run)
    except AdminClientUnavailable:
        logger.error("ADMIN_DATABASE_URL is not set; cannot write attractions.")
        sys.exit(1)
    finally:
        await clients.dispose()

    logger.info(
        "Import complete. Inserted: %d, Updated: %d, Skipped: %d",
        summary.inserted, summary.updated, summary.skipped,
    )


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Import attractions from a CSV file.")
    parser.add_argument("--csv", required=True, help="Path to the attractions CSV")
    parser.add_argument("--dry-run", action="store_true", help="Parse only, no DB writes")
    args = parser.parse_args()

    asyncio.run(run_import(csv_path=args.csv, dry_run=args.dry_run))


if __name__ == "__main__":
    main()

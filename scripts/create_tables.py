"""
create_tables.py — idempotent schema setup script.
Run this before starting the service for the first time, or after schema changes.
Safe to run multiple times: tables use IF NOT EXISTS and the PostGIS nearby
functions use CREATE OR REPLACE (PostgreSQL only).

Usage:
    python scripts/create_tables.py            # public DATABASE_URL
    python scripts/create_tables.py --admin    # ADMIN_DATABASE_URL
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Ensure the project root is on the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from brewery_directory.config import get_settings
from brewery_directory.database import build_engine, create_all
from brewery_directory.spatial import create_spatial_functions


async def main(use_admin: bool) -> None:
    """Create all tables, then the server-side nearby functions."""
    settings = get_settings()
    url = settings.admin_database_url if use_admin else settings.database_url
    if not url:
        print("ADMIN_DATABASE_URL is not set.", file=sys.stderr)
        sys.exit(1)

    engine = build_engine(url)
    print("Creating tables...")
    await create_all(engine)
    print("  ✓ All tables created (IF NOT EXISTS)")

    print("Creating nearby-search functions...")
    if await create_spatial_functions(engine, settings):
        print(f"  ✓ {settings.nearby_rpc_name}, {settings.nearby_breweries_rpc_name} ready")
    else:
        print("  - skipped (not PostgreSQL); proximity search will filter client-side")

    print("\nDone. Run `python scripts/import_attractions.py --csv data/attractions.csv` next.")
    await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the directory tables.")
    parser.add_argument("--admin", action="store_true", help="Use ADMIN_DATABASE_URL")
    args = parser.parse_args()
    asyncio.run(main(args.admin))

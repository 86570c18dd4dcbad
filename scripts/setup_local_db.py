#!/usr/bin/env python
"""Set up a local PLM database.

This script:
1. Creates all tables on the configured database
2. Optionally seeds a starter catalog of materials, attributes and
   incompatibilities

Usage:
    # Create tables on the database from settings / .env
    python scripts/setup_local_db.py

    # Use a local SQLite file and seed the catalog
    python scripts/setup_local_db.py --url sqlite+aiosqlite:///./plm.db --seed

    # Drop everything first
    python scripts/setup_local_db.py --url sqlite+aiosqlite:///./plm.db --reset --seed
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from plm.config import settings
from plm.core.errors import AlreadyExistsError
from plm.infra.database import Database
from plm.infra.logging import get_logger, setup_logging
from plm.repositories import EntityStore
from plm.services import AttributeCatalog, AttributeCompatibilityEngine, MaterialCatalog

setup_logging()
logger = get_logger(__name__)


SEED_MATERIALS = ["Cotton", "Polyester", "Linen", "Wool", "Elastane", "Nylon"]
SEED_ATTRIBUTES = ["waterproof", "breathable", "insulated", "mesh", "stretch", "rigid"]
SEED_INCOMPATIBILITIES = [
    ("waterproof", "breathable"),
    ("insulated", "mesh"),
    ("stretch", "rigid"),
]


async def seed_catalog(store: EntityStore) -> None:
    """Insert the starter catalog; names that already exist are skipped."""
    materials = MaterialCatalog(store)
    attributes = AttributeCatalog(store)
    compatibility = AttributeCompatibilityEngine(store)

    for name in SEED_MATERIALS:
        try:
            await materials.create(name)
        except AlreadyExistsError:
            logger.info("Material already present", name=name)

    for name in SEED_ATTRIBUTES:
        try:
            await attributes.create(name)
        except AlreadyExistsError:
            logger.info("Attribute already present", name=name)

    ids = {attribute.name: attribute.id for attribute in await attributes.list_all()}
    for first, second in SEED_INCOMPATIBILITIES:
        await compatibility.record_incompatibility(ids[first], ids[second])


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create (and optionally seed) the PLM database")
    parser.add_argument("--url", help="Database URL (defaults to settings.database_url)")
    parser.add_argument("--seed", action="store_true", help="Insert a starter catalog")
    parser.add_argument("--reset", action="store_true", help="Drop all tables before creating them")
    return parser.parse_args()


async def main() -> int:
    """Main entry point."""
    args = parse_args()
    url = args.url or settings.database_url
    db = Database(url, audit=False)

    try:
        if not await db.verify_connection():
            print(f"Error: cannot connect to {db.engine.url.render_as_string(hide_password=True)}")
            return 1

        if args.reset:
            await db.drop_all()
            print("Dropped all tables")

        await db.create_all()
        print("Tables created")

        if args.seed:
            await seed_catalog(EntityStore(db))
            print(f"Seeded {len(SEED_MATERIALS)} materials and {len(SEED_ATTRIBUTES)} attributes")
        return 0
    finally:
        await db.dispose()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))

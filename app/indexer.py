# app/indexer.py
# -----------------------------------------------------------------------------
# Bulk-load locations from a JSON file into the search index
#   location-indexer data/locations.json --batch-size 200
# -----------------------------------------------------------------------------
import argparse
import asyncio
import sys

from loguru import logger

from app.core.config import Settings, get_settings
from app.core.errors import LocationServiceError
from app.core.logging import setup_logging
from app.services.ingest import ingest_locations, load_locations_file
from app.services.search_index import LocationIndex


async def run(settings: Settings, path: str, batch_size: int) -> dict:
    locations = load_locations_file(path)
    logger.info(f"[Ingest] indexing {len(locations)} locations from {path}")

    index = LocationIndex(
        settings.ELASTICSEARCH_URL,
        settings.LOCATIONS_INDEX,
        timeout=settings.SEARCH_TIMEOUT_S,
    )
    try:
        return await ingest_locations(index, locations, batch_size=batch_size)
    finally:
        await index.aclose()


def main(argv=None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Index location documents.")
    parser.add_argument("path", help="JSON file with an array of locations")
    parser.add_argument("--batch-size", type=int, default=settings.BULK_BATCH_SIZE)
    args = parser.parse_args(argv)

    setup_logging(settings)
    try:
        result = asyncio.run(run(settings, args.path, args.batch_size))
    except LocationServiceError as e:
        logger.error(f"[Ingest] failed: {e}")
        return 1

    logger.info(f"[Ingest] completed: {result}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

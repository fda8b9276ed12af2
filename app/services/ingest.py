# app/services/ingest.py
# -----------------------------------------------------------------------------
# (1) load Location documents from a JSON file
# (2) bulk-index them in fixed-size batches (offline / admin use, not concurrent)
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
from pathlib import Path
from typing import List, Sequence

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from app.core.errors import InvalidRequest
from app.schemas.location import Location
from app.services.mapping import LOCATIONS_MAPPING
from app.services.search_index import LocationIndex

_locations_adapter = TypeAdapter(List[Location])


def load_locations_file(path: str | Path) -> List[Location]:
    """Parse a JSON array of locations; bad JSON or bad fields -> InvalidRequest."""
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return _locations_adapter.validate_python(raw)
    except (OSError, ValueError, ValidationError) as e:
        raise InvalidRequest(
            f"cannot load locations: {e}", operation="load_locations_file", target=str(path)
        ) from e


async def ingest_locations(
    index: LocationIndex, locations: Sequence[Location], *, batch_size: int = 500
) -> dict:
    if batch_size < 1:
        raise InvalidRequest(
            "batch_size must be positive", operation="ingest_locations"
        )

    created = await index.create_index(LOCATIONS_MAPPING)

    total = 0
    batches = 0
    for start in range(0, len(locations), batch_size):
        batch = locations[start : start + batch_size]
        total += await index.bulk_index_locations(batch)
        batches += 1
        logger.info(f"[Ingest] batch {batches}: {len(batch)} docs (total {total})")

    return {
        "status": "ok",
        "index": index.index,
        "index_created": created,
        "indexed": total,
        "batches": batches,
    }

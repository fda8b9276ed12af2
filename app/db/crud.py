# app/db/crud.py
# -----------------------------------------------------------------------------
# Reference store reads + one-off seeding
# - business types / regions, both ordered by name
# - driver/connection failures surface as StorageUnavailable
# -----------------------------------------------------------------------------
from typing import Optional, Sequence

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import StorageUnavailable
from app.db.models import BusinessTypeRow, RegionRow

BUSINESS_TYPES_SEED = [
    ("cafe", "Cafe"),
    ("repair_shop", "Electronics repair"),
    ("tailoring", "Tailoring"),
    ("beauty_salon", "Beauty salon"),
    ("barbershop", "Barbershop"),
    ("laundry", "Laundry"),
    ("restaurant", "Restaurant"),
    ("gym", "Gym"),
    ("pharmacy", "Pharmacy"),
    ("grocery_store", "Grocery store"),
]

# (name, parent name); parents must appear before their children
REGIONS_SEED = [
    ("Russia", None),
    ("Leningrad Oblast", "Russia"),
    ("Saint Petersburg", "Leningrad Oblast"),
    ("Moscow Oblast", "Russia"),
    ("Moscow", "Russia"),
    ("Tambov Municipal District", "Russia"),
    ("Tambov", "Tambov Municipal District"),
]


async def list_business_types(db: AsyncSession) -> Sequence[BusinessTypeRow]:
    stmt = select(BusinessTypeRow).order_by(BusinessTypeRow.name)
    try:
        res = await db.execute(stmt)
    except (SQLAlchemyError, OSError) as e:
        raise StorageUnavailable(
            str(e), operation="list_business_types", target="business_types"
        ) from e
    return res.scalars().all()


async def list_regions(db: AsyncSession) -> Sequence[RegionRow]:
    """All regions; parent_region_id is returned as-is, no tree is built."""
    stmt = select(RegionRow).order_by(RegionRow.name)
    try:
        res = await db.execute(stmt)
    except (SQLAlchemyError, OSError) as e:
        raise StorageUnavailable(
            str(e), operation="list_regions", target="regions"
        ) from e
    return res.scalars().all()


async def _find_region(
    db: AsyncSession, name: str, parent_id: Optional[int]
) -> RegionRow | None:
    parent_clause = (
        RegionRow.parent_region_id.is_(None)
        if parent_id is None
        else RegionRow.parent_region_id == parent_id
    )
    res = await db.execute(select(RegionRow).where(RegionRow.name == name, parent_clause))
    return res.scalar_one_or_none()


async def seed_reference_data(db: AsyncSession) -> dict:
    """
    Insert the fixed lookup values; rows that already exist are skipped,
    so running it on every boot is harmless.
    """
    inserted = {"business_types": 0, "regions": 0}
    try:
        existing = set(
            (await db.execute(select(BusinessTypeRow.name))).scalars().all()
        )
        for name, description in BUSINESS_TYPES_SEED:
            if name not in existing:
                db.add(BusinessTypeRow(name=name, description=description))
                inserted["business_types"] += 1
        await db.flush()

        ids: dict[str, int] = {}
        for name, parent_name in REGIONS_SEED:
            parent_id = ids.get(parent_name) if parent_name else None
            row = await _find_region(db, name, parent_id)
            if row is None:
                row = RegionRow(name=name, parent_region_id=parent_id)
                db.add(row)
                await db.flush()
                inserted["regions"] += 1
            ids[name] = row.id

        await db.commit()
    except (SQLAlchemyError, OSError) as e:
        await db.rollback()
        raise StorageUnavailable(
            str(e), operation="seed_reference_data", target="business_types/regions"
        ) from e

    logger.info(f"[DB] reference seed done: {inserted}")
    return inserted

# app/db/models.py
# -----------------------------------------------------------------------------
# ORM models for the reference tables
# - BusinessTypeRow: business type lookup (unique name)
# - RegionRow: region tree via an optional self-referencing parent
# -----------------------------------------------------------------------------
from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)

from app.db.session import Base


class BusinessTypeRow(Base):
    __tablename__ = "business_types"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (Index("idx_business_types_name", "name"),)


class RegionRow(Base):
    """
    Region reference row
    - parent_region_id: optional parent, forms a tree (cycles are not checked)
    - (name, parent_region_id) is unique, so a name may repeat under other parents
    """

    __tablename__ = "regions"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    parent_region_id = Column(
        Integer, ForeignKey("regions.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("name", "parent_region_id"),
        Index("idx_regions_parent", "parent_region_id"),
    )

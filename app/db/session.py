# app/db/session.py
# -----------------------------------------------------------------------------
# SQLAlchemy async engine / session factory / declarative base
# - PostgreSQL (asyncpg) in production, SQLite (aiosqlite) locally and in tests
# - the session factory lives on app.state; routers get it via Depends(get_session)
# -----------------------------------------------------------------------------
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import declarative_base

from app.core.config import Settings

Base = declarative_base()


def build_engine(settings: Settings) -> AsyncEngine:
    return create_async_engine(settings.database_url, echo=False, pool_pre_ping=True)


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session"""
    async with request.app.state.sessionmaker() as session:
        yield session

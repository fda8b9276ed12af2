# app/main.py
# -----------------------------------------------------------------------------
# FastAPI entrypoint
# - lifespan: logging, reference tables (+ seed), search index client (+ mapping)
# - Swagger UI at /docs, OpenAPI schema at /openapi.json
# -----------------------------------------------------------------------------
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from app.core.config import Settings, get_settings
from app.core.errors import LocationServiceError
from app.core.logging import setup_logging
from app.db.crud import seed_reference_data
from app.db.session import Base, build_engine, build_sessionmaker
from app.routers import locations, reference
from app.services.mapping import LOCATIONS_MAPPING
from app.services.search_index import LocationIndex


def create_app(
    settings: Optional[Settings] = None, *, index: Optional[LocationIndex] = None
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings)
        logger.info(f"{settings.APP_NAME} starting (env={settings.ENV})")

        engine = build_engine(settings)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        app.state.sessionmaker = build_sessionmaker(engine)

        if settings.AUTO_SEED_REFERENCE:
            async with app.state.sessionmaker() as db:
                await seed_reference_data(db)

        app.state.index = index or LocationIndex(
            settings.ELASTICSEARCH_URL,
            settings.LOCATIONS_INDEX,
            timeout=settings.SEARCH_TIMEOUT_S,
        )
        if settings.AUTO_CREATE_INDEX:
            try:
                await app.state.index.create_index(LOCATIONS_MAPPING)
                logger.info(f"[Search] index '{settings.LOCATIONS_INDEX}' ready")
            except LocationServiceError as e:
                # the API still serves reference data without the index
                logger.warning(f"[Search] could not create index: {e}")

        yield

        logger.info("shutting down")
        await app.state.index.aclose()
        await engine.dispose()

    app = FastAPI(title=settings.APP_NAME, version="1.0.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(RequestValidationError)
    async def bad_request(request: Request, exc: RequestValidationError):
        logger.info(f"rejected {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"detail": "Invalid request body"})

    app.include_router(locations.router)
    app.include_router(reference.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.APP_PORT)

# app/core/logging.py
# -----------------------------------------------------------------------------
# Loguru logging setup
# - stderr + rotating file sink, backtrace enabled
# - called once from the app lifespan / CLI entrypoint
# -----------------------------------------------------------------------------
import sys
from pathlib import Path

from loguru import logger

from app.core.config import Settings


def setup_logging(settings: Settings) -> None:
    log_dir = Path(settings.LOG_DIR)
    log_dir.mkdir(exist_ok=True, parents=True)

    logger.remove()  # drop the default handler
    logger.add(sys.stderr, level=settings.LOG_LEVEL)
    logger.add(
        log_dir / "app.log",
        rotation="10 MB",
        retention=10,  # keep the last 10 rotated files
        enqueue=True,  # safe across worker processes
        backtrace=True,
        diagnose=settings.ENV == "dev",
        level=settings.LOG_LEVEL,
    )

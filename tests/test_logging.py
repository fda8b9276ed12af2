from loguru import logger

from app.core.logging import setup_logging


def test_setup_logging_writes_rotating_file(settings, tmp_path):
    setup_logging(settings)
    try:
        logger.warning("[Test] hello from the file sink")
        logger.complete()
    finally:
        logger.remove()

    log_file = tmp_path / "logs" / "app.log"
    assert "hello from the file sink" in log_file.read_text(encoding="utf-8")

"""
Loguru setup shared by the web app, the CLI and the controllers.

Console output uses a compact ``name | line | message`` layout. Outside the
test environment a rotating file sink is added as well.
"""

import sys
from pathlib import Path

from loguru import logger

from .config import settings

CONSOLE_FORMAT = "<blue>{name}</blue> | <magenta>{line}</magenta> | <level>{message}</level>"
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{function}:{line} | {message}"

_configured = False


def _level_for_environment(environment: str) -> str:
    if environment == "production":
        return "INFO"
    if environment == "test":
        return "DEBUG"
    return settings.LOG_LEVEL


def setup_logging(force: bool = False) -> None:
    """Configure loguru sinks once per process."""
    global _configured
    if _configured and not force:
        return

    level = _level_for_environment(settings.ENVIRONMENT)

    # Remove default handler
    logger.remove()
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=level, colorize=True)

    if settings.ENVIRONMENT != "test" and settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation="10 MB",
            retention="7 days",
            enqueue=True,
        )

    _configured = True


def get_logger(name: str | None = None):
    """Get the configured logger, bound to a module name."""
    setup_logging()
    if name:
        return logger.bind(module=name)
    return logger

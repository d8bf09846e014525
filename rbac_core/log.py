import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def resolve_log_level(value: str) -> int:
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(level_name: str | None = None) -> logging.Logger:
    """Apply the log level to the package logger.

    The root logger is only configured when nothing else has configured it.
    """
    if level_name is None:
        level_name = os.getenv("LOG_LEVEL", "INFO")
    level = resolve_log_level(level_name)

    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)

    logger = logging.getLogger("rbac_core")
    logger.setLevel(level)
    return logger

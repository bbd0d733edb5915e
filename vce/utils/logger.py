import logging
import os

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _resolve_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    candidate = level if level else os.getenv("LOG_LEVEL", "INFO")
    resolved = logging.getLevelName(candidate.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: str | int | None = None) -> int:
    """Configures root logging; explicit level beats LOG_LEVEL, which beats INFO."""
    resolved = _resolve_level(level)
    logging.basicConfig(format=LOG_FORMAT, level=resolved, force=True)
    return resolved


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    logger: logging.Logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger

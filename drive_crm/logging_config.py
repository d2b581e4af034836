import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DEFAULT_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the root handler once and return the application logger."""
    resolved = getattr(logging, (level or _DEFAULT_LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT)

    logger = logging.getLogger("drive_crm")
    logger.setLevel(resolved)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    base = logging.getLogger("drive_crm")
    return base.getChild(name) if name else base

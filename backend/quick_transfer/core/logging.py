import logging
import sys

from quick_transfer.core.config import get_settings


LOG_FORMAT = "%(asctime)s level=%(levelname)s logger=%(name)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    settings = get_settings()
    logger = logging.getLogger("quick_transfer")
    logger.setLevel((level or settings.log_level).upper())
    if logger.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

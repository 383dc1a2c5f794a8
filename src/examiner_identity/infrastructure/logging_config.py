"""Logging setup shared by the entry points."""

import logging
import sys
from functools import lru_cache
from typing import Optional

from examiner_config.settings import get_settings


@lru_cache(maxsize=None)
def configure_logging(log_level: Optional[str] = None) -> None:
    """Configure application logging.

    Sets up logging for the examiner packages with:
    - Console output (stderr) with timestamps and module names
    - Configurable log level for examiner modules (from settings)
    - WARNING level for noisy third-party libraries
    """
    log_level_str = (log_level or get_settings().log_level).upper()
    level = getattr(logging, log_level_str, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    logging.getLogger("examiner_auth").setLevel(level)
    logging.getLogger("examiner_identity").setLevel(level)

    # Quiet down noisy third-party loggers
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

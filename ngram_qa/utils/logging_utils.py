"""Logging setup for scripts"""

import logging
from typing import Optional

from ..config import Config


def setup_logging(level: str = Config.LOG_LEVEL, log_file: Optional[str] = None):
    """
    Configure root logging once per process

    Args:
        level: Level name (DEBUG, INFO, WARNING, ...)
        log_file: Optional file receiving the same records as the console
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='[%(asctime)s] %(levelname)s %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers
    )

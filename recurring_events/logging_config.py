"""
Central logging configuration.

Sets the root level from settings and keeps third-party date parsing quiet.
"""

import logging
from typing import Optional

from recurring_events.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

NOISY_LOGGERS = ("dateutil",)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for the package.

    Args:
        level: Override for the root level (DEBUG, INFO, WARNING, ERROR).
            Defaults to the LOG_LEVEL setting.
    """
    level_name = (level or get_settings().log_level).upper()
    root_level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    # Only add a handler if the host application has not installed one
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

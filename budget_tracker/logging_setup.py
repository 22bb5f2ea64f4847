"""Package-wide logging configuration."""

import logging
import os

LOG_LEVEL_ENV = "BUDGET_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = None) -> logging.Logger:
    """
    Attach a single stream handler to the budget_tracker logger.

    Safe to call on every Streamlit rerun; the handler is only added once.
    """
    logger = logging.getLogger("budget_tracker")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    level_name = (level or os.getenv(LOG_LEVEL_ENV) or "INFO").upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    return logger

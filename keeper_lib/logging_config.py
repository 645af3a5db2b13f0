from __future__ import annotations
import logging
from typing import Optional


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Configure root logging for the application.

    `level` is a level name from the server config (e.g. 'INFO'); unknown
    or missing names fall back to WARNING. Returns a module logger for the
    caller.
    """
    DEFAULT_LOG_LEVEL = logging.WARNING
    if level:
        _numeric = getattr(logging, level.upper(), None)
        if isinstance(_numeric, int):
            DEFAULT_LOG_LEVEL = _numeric

    # Reconfigure root handlers to use the selected level and format
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=DEFAULT_LOG_LEVEL, format='%(asctime)s %(levelname)s [%(name)s]: %(message)s')
    logging.log(100, f'[keeper]: Log level set to: {logging.getLevelName(DEFAULT_LOG_LEVEL)}')
    logger = logging.getLogger(__name__)

    # Keep known noisy libraries quiet by default
    logging.getLogger('redis').setLevel(logging.WARNING)
    logging.getLogger('requests').setLevel(logging.WARNING)
    logging.getLogger('urllib3').setLevel(logging.WARNING)
    logger.info("Starting Character Keeper Server")

    return logger

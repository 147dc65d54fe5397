"""
Logging setup for the screen capture analytics backend.
"""
import logging
from typing import Optional

from core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Without an explicit level, an already configured root logger is
    left untouched.
    """
    root = logging.getLogger()
    if level is None and root.handlers:
        return

    resolved = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    if not root.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    root.setLevel(resolved)

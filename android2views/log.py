# android2views/log.py
import logging
import sys
from typing import Optional

__all__ = ["get_logger", "setup_logging"]

ROOT_LOGGER = "android2views"


def setup_logging(level: int = logging.INFO, stream=sys.stderr) -> None:
    """
    Tagged console output: [INFO] ..., [ERROR] ...
    """
    logging.basicConfig(
        level=level,
        format="[%(levelname)s] %(message)s",
        stream=stream,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    if not name:
        return logging.getLogger(ROOT_LOGGER)
    if name.startswith(ROOT_LOGGER):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")

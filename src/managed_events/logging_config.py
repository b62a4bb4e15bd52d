import logging
import sys
from typing import Optional, Union

from .settings import BusSettings

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: Optional[Union[int, str]] = None) -> None:
    """Configure the root logger with a single stream handler.

    The level comes from ``level`` when given, otherwise from
    ``BusSettings.from_sources().log_level`` (settings file, then ME_LOG_LEVEL).
    Calling this again replaces the handler instead of stacking a second one.
    """
    if level is None:
        level = BusSettings.from_sources().log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    # Remove existing handlers to avoid duplicates in repeated test runs
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)

"""Logging setup shared by the API and the command-line scripts."""

import logging
import sys

from src.config import get_settings

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | None = None) -> None:
    """Install a single stdout handler on the root logger.

    Safe to call more than once; an existing handler from a previous call is
    replaced rather than duplicated.
    """
    level_name = (level or get_settings().log_level).upper().strip()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    for handler in list(root.handlers):
        if getattr(handler, "_kitchen_inventory", False):
            root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    handler._kitchen_inventory = True  # type: ignore[attr-defined]
    root.addHandler(handler)

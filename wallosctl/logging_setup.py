"""Logging configuration for the ``wallosctl`` package.

Library modules only call ``logging.getLogger(__name__)``. The CLI calls
``configure_logging`` once at startup, which attaches a single rich handler
to the package root logger.
"""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

_PKG_LOGGER_NAME = "wallosctl"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        level = level.strip().upper()
        if level.isdigit():
            return int(level)
        numeric = getattr(logging, level, None)
        if isinstance(numeric, int):
            return numeric
    env_val = os.getenv("WALLOSCTL_LOG_LEVEL")
    if env_val:
        return _parse_level(env_val)
    return logging.WARNING


def configure_logging(level: int | str | None = None) -> None:
    """Configure the package root logger exactly once.

    Args:
        level: Level as ``int`` or level name. If None, uses
            ``WALLOSCTL_LOG_LEVEL`` when set, otherwise WARNING.
    """
    global _CONFIGURED
    if _CONFIGURED:
        return

    resolved = _parse_level(level)
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(_PKG_LOGGER_NAME)
    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)
    logger.setLevel(resolved)
    logger.addHandler(handler)

    _CONFIGURED = True

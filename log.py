"""Grassmann logging system.

Every module logs under the ``grassmann`` hierarchy through
:func:`get_logger`; nothing in the library calls ``print()``.

Environment variables (read on first use):
    GRASSMANN_LOG_LEVEL: DEBUG / INFO (default) / WARNING / ERROR
    GRASSMANN_LOG_FILE:  optional path; appends plain-text log lines

The CLI may call :func:`configure` explicitly to apply its own settings.
"""

import logging
import os
import sys
from typing import Optional

ROOT_NAME = "grassmann"

_CONFIGURED = False

_LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[35m",
}
_RESET = "\033[0m"


class _ColorFormatter(logging.Formatter):
    """Colours the level name when the stream is a terminal."""

    def __init__(self, fmt: str, use_color: bool = True):
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self.use_color:
            return message
        color = _LEVEL_COLORS.get(record.levelno, "")
        return message.replace(record.levelname, f"{color}{record.levelname}{_RESET}", 1)


def configure(level: Optional[str] = None, log_file: Optional[str] = None,
              force: bool = False) -> logging.Logger:
    """Set up handlers on the ``grassmann`` root logger.

    Args:
        level: Level name; falls back to ``GRASSMANN_LOG_LEVEL`` then INFO.
        log_file: Optional file for plain-text lines; falls back to
            ``GRASSMANN_LOG_FILE``.
        force: Replace handlers installed by an earlier call.

    Returns:
        The configured root logger.
    """
    global _CONFIGURED
    root = logging.getLogger(ROOT_NAME)
    if _CONFIGURED and not force:
        return root
    _CONFIGURED = True

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    level_name = (level or os.environ.get("GRASSMANN_LOG_LEVEL", "INFO")).upper()
    root.setLevel(getattr(logging, level_name, logging.INFO))
    # Handlers live here; records must not reach a root handler installed by hydra
    root.propagate = False

    use_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(_ColorFormatter("%(levelname)s %(name)s: %(message)s", use_color))
    root.addHandler(console)

    log_file = log_file or os.environ.get("GRASSMANN_LOG_FILE")
    if log_file:
        fh = logging.FileHandler(log_file, mode="a")
        fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(fh)

    return root


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the ``grassmann`` hierarchy.

    Args:
        name: Typically ``__name__`` of the calling module.

    Returns:
        A :class:`logging.Logger` instance.
    """
    configure()
    return logging.getLogger(f"{ROOT_NAME}.{name}")

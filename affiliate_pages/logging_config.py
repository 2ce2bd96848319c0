"""Process-wide logging setup for the ``pages`` command.

Called once by the CLI. Modules log through ``logging.getLogger(__name__)``
and inherit this configuration. The level is resolved as: explicit argument,
then ``AFFILIATE_PAGES_LOG_LEVEL``, then ``WARNING``.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV_VAR = "AFFILIATE_PAGES_LOG_LEVEL"

_FMT_MINIMAL = "%(levelname)s: %(message)s"
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_FMT_DEBUG = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"
_DATEFMT = "%H:%M:%S"

_NOISY_LOGGERS = ("urllib3", "requests", "MARKDOWN")


def parse_level(level: str | None) -> int:
    """Convert a level name to its numeric value, defaulting to ``WARNING``.

    Examples
    --------
    >>> parse_level("debug") == logging.DEBUG
    True
    >>> parse_level("chatty") == logging.WARNING
    True
    """
    if not level:
        return logging.WARNING
    numeric = logging.getLevelName(level.strip().upper())
    return numeric if isinstance(numeric, int) else logging.WARNING


def setup_logging(level: str | None = None, *, quiet_third_party: bool = True) -> int:
    """Install a single stderr handler on the root logger.

    Parameters
    ----------
    level : str, optional
        Level name such as ``"INFO"``; falls back to the environment.
    quiet_third_party : bool, optional
        Keep HTTP and Markdown loggers at ``WARNING`` unless debugging.

    Returns
    -------
    int
        The numeric level applied.
    """
    numeric_level = parse_level(level or os.environ.get(LOG_LEVEL_ENV_VAR))

    if numeric_level <= logging.DEBUG:
        formatter = logging.Formatter(_FMT_DEBUG, datefmt=_DATEFMT)
    elif numeric_level <= logging.INFO:
        formatter = logging.Formatter(_FMT_VERBOSE, datefmt=_DATEFMT)
    else:
        formatter = logging.Formatter(_FMT_MINIMAL)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root.setLevel(numeric_level)

    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    return numeric_level


__all__ = ["LOG_LEVEL_ENV_VAR", "parse_level", "setup_logging"]

"""
Logging setup for the dotstrap CLI.

``main.py`` calls ``setup_logging()`` once per invocation; modules just
use ``logging.getLogger(__name__)``. Progress for the user is printed by
the CLI itself, so the console log stays at WARNING unless asked.

Level precedence:
    --debug  >  --verbose  >  --quiet  >  $DOTSTRAP_LOG_LEVEL  >  WARNING

``$DOTSTRAP_LOG_FILE`` adds a file log, at ``$DOTSTRAP_LOG_FILE_LEVEL``
(default: the console level).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping

LEVEL_ENV_VAR = "DOTSTRAP_LOG_LEVEL"
FILE_ENV_VAR = "DOTSTRAP_LOG_FILE"
FILE_LEVEL_ENV_VAR = "DOTSTRAP_LOG_FILE_LEVEL"

# (format, datefmt) per console level; the first whose threshold is >= level wins.
_CONSOLE_FORMATS = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
)
_CONSOLE_DEFAULT = ("%(levelname)s: %(message)s", None)

_FILE_FORMAT = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level name from CLI flags and the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if environ is None else environ
    return env.get(LEVEL_ENV_VAR) or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with dotstrap's.

    Args:
        level: Console level name. Unknown names fall back to WARNING.
        log_file: Also log to this file, always in the detailed format.
        log_file_level: Level for the file; defaults to ``level``.
    """
    console_level = _parse_level(level)
    fmt, datefmt = _console_format(console_level)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.addHandler(console)

    root_level = console_level
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        root.addHandler(file_handler)
        root_level = min(root_level, file_level)

    # The root must let through whatever the most verbose handler wants.
    root.setLevel(root_level)
    logging.raiseExceptions = False


def _console_format(level: int) -> tuple[str, str | None]:
    for threshold, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= threshold:
            return fmt, datefmt
    return _CONSOLE_DEFAULT


def _parse_level(level: str | None) -> int:
    """Level name → numeric level; anything unrecognised is WARNING."""
    if not level:
        return logging.WARNING
    numeric = logging.getLevelName(level.upper())
    return numeric if isinstance(numeric, int) else logging.WARNING

"""
Logging setup for the ``zshinit`` command.

``cli()`` calls :func:`setup_logging` once, before any subcommand runs;
module loggers (``logging.getLogger(__name__)``) inherit from the root.

Console level, highest precedence first:
    --debug / --verbose / --quiet  >  $ZSHINIT_LOG_LEVEL  >  WARNING

A second, usually more detailed, copy can go to ``$ZSHINIT_LOG_FILE``
at ``$ZSHINIT_LOG_FILE_LEVEL``, which helps when a package manager or
installer fails under the spinner and its output scrolls away.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

LEVEL_ENV = "ZSHINIT_LOG_LEVEL"
FILE_ENV = "ZSHINIT_LOG_FILE"
FILE_LEVEL_ENV = "ZSHINIT_LOG_FILE_LEVEL"

# Console, by level
_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
}
# WARNING and above sit between spinner lines; keep them short
_CONSOLE_DEFAULT = ("%(levelname)s: %(message)s", None)

_FILE_FORMAT = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s", "%Y-%m-%d %H:%M:%S")


def resolve_level(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> str:
    """Pick the console level from the global CLI flags or the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    env = os.environ if env is None else env
    return env.get(LEVEL_ENV) or "WARNING"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Install the console handler and, optionally, a file handler.

    Args:
        level: Console level name.
        log_file: Path of a log file; ``~`` is expanded and missing parent
            directories are created.
        log_file_level: Level for the file (default: ``level``).
    """
    console_level = _parse_level(level)
    fmt, datefmt = _CONSOLE_FORMATS.get(console_level, _CONSOLE_DEFAULT)
    if console_level < logging.DEBUG:
        fmt, datefmt = _CONSOLE_FORMATS[logging.DEBUG]

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(*_FILE_FORMAT))
        root.addHandler(fh)

    root.setLevel(root_level)
    logging.raiseExceptions = False


def setup_from_env(level: str, env: Mapping[str, str] | None = None) -> None:
    """:func:`setup_logging` with the file settings taken from the environment."""
    env = os.environ if env is None else env
    setup_logging(
        level=level,
        log_file=env.get(FILE_ENV),
        log_file_level=env.get(FILE_LEVEL_ENV),
    )


def _parse_level(level: str | None) -> int:
    """Level name to number; unknown names fall back to WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric

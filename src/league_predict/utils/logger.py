"""Project logging setup with four verbosity levels.

Logging goes through Python's standard `logging` module under the
``league_predict`` logger hierarchy.  Project verbosity names map to
numeric levels as follows:

    ========  ==============  =====
    Project   Python level    Value
    ========  ==============  =====
    QUIET     WARNING          30
    NORMAL    INFO             20
    VERBOSE   VERBOSE (custom) 15
    DEBUG     DEBUG            10
    ========  ==============  =====

Usage:
    Configure once when the CLI (or a host application) starts, then
    obtain named loggers anywhere::

        >>> from league_predict.utils.logger import configure_logging, get_logger
        >>> configure_logging("VERBOSE")
        >>> log = get_logger("ingest.refresh")
        >>> log.info("Recomputing standings...")

    ``LEAGUE_PREDICT_LOG_LEVEL`` (case-insensitive) supplies the level when
    none is passed explicitly; ``NORMAL`` is the fallback.
"""

from __future__ import annotations

import logging
import os
import sys

VERBOSE: int = 15
"""Custom level between INFO and DEBUG for per-refresh detail."""

logging.addLevelName(VERBOSE, "VERBOSE")

QUIET: int = logging.WARNING
"""Only warnings and errors (WARNING=30)."""

NORMAL: int = logging.INFO
"""Default verbosity (INFO=20)."""

DEBUG: int = logging.DEBUG
"""Everything, including skipped-record diagnostics (DEBUG=10)."""

LEVEL_ENV_VAR: str = "LEAGUE_PREDICT_LOG_LEVEL"

_LEVEL_MAP: dict[str, int] = {
    "QUIET": QUIET,
    "NORMAL": NORMAL,
    "VERBOSE": VERBOSE,
    "DEBUG": DEBUG,
}

_ROOT_LOGGER_NAME: str = "league_predict"
_LOG_FORMAT: str = "%(asctime)s | %(name)s | %(levelname)-8s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Attach a single stderr handler to the ``league_predict`` logger.

    The level is taken from *level* if given, else from
    ``LEAGUE_PREDICT_LOG_LEVEL``, else ``"NORMAL"``.  Calling this again
    replaces the previous handler rather than adding another.

    Args:
        level: ``"QUIET"``, ``"NORMAL"``, ``"VERBOSE"`` or ``"DEBUG"``
            (case-insensitive), or ``None``.

    Raises:
        ValueError: If the resolved level name is not recognised.
    """
    resolved: str = level if level is not None else os.environ.get(LEVEL_ENV_VAR, "NORMAL")
    resolved_upper = resolved.upper()

    if resolved_upper not in _LEVEL_MAP:
        msg = f"Unknown log level {resolved!r}. Valid levels: {', '.join(sorted(_LEVEL_MAP))}"
        raise ValueError(msg)

    numeric_level = _LEVEL_MAP[resolved_upper]

    root = logging.getLogger(_ROOT_LOGGER_NAME)
    root.setLevel(numeric_level)
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)

    # Host applications keep their own root handlers; don't echo into them.
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return ``league_predict.<name>``.

    Example:
        >>> log = get_logger("standings")
        >>> log.debug("ranked %d groups", 2)
    """
    return logging.getLogger(f"{_ROOT_LOGGER_NAME}.{name}")

"""Centralized logging configuration for sfgraph.

Every module obtains its logger through :func:`get_logger`; all of them hang
off a single ``sfgraph`` root logger that owns the only handler.

Log records go to stderr so that reports printed by the CLI on stdout
(Markdown tables, JSON) stay machine-readable. The starting level can be
set with the ``SFGRAPH_LOG_LEVEL`` environment variable (a level name such
as ``debug`` or a number); verbose mode switches to a format that also names
the emitting function and line.
"""

import logging
import os
import sys
from typing import Optional

#: Name of the package root logger.
ROOT_LOGGER_NAME = "sfgraph"

#: Environment variable read once when the root logger is first configured.
LEVEL_ENV_VAR = "SFGRAPH_LOG_LEVEL"

DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
DEBUG_FORMAT = (
    "%(asctime)s %(levelname)-7s %(name)s.%(funcName)s:%(lineno)d: %(message)s"
)

_ROOT_LOGGER_CONFIGURED = False


def level_from_env(default: int = logging.INFO) -> int:
    """Resolve :data:`LEVEL_ENV_VAR` to a numeric level.

    Unset, empty or unrecognised values give ``default``.
    """
    raw = os.environ.get(LEVEL_ENV_VAR, "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def setup_root_logger(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Attach one handler to the ``sfgraph`` root logger.

    Subsequent calls are no-ops until :func:`reset_logging` is called.

    Args:
        level: Logging level; defaults to :func:`level_from_env`.
        format_string: Custom format string; defaults to :data:`DEFAULT_FORMAT`,
            or :data:`DEBUG_FORMAT` when the level is DEBUG.
        handler: Custom handler (defaults to a stderr StreamHandler).
    """
    global _ROOT_LOGGER_CONFIGURED

    if _ROOT_LOGGER_CONFIGURED:
        return

    if level is None:
        level = level_from_env()
    if format_string is None:
        format_string = DEBUG_FORMAT if level <= logging.DEBUG else DEFAULT_FORMAT

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    if handler is None:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string))
    root_logger.addHandler(handler)

    # pytest's caplog hooks the global root logger
    root_logger.propagate = True

    _ROOT_LOGGER_CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Return a child logger of the ``sfgraph`` root logger.

    Args:
        name: Logger name (typically ``__name__`` of the calling module).

    Returns:
        Logger that inherits level and handler from the package root.
    """
    setup_root_logger()
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    return logger


def set_global_log_level(level: int) -> None:
    """Set the log level for all sfgraph loggers and their handlers."""
    setup_root_logger()
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)


def set_log_format(format_string: str) -> None:
    """Replace the formatter of every handler on the package root."""
    setup_root_logger()
    formatter = logging.Formatter(format_string)
    for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
        handler.setFormatter(formatter)


def configure_verbosity(verbose: bool = False, quiet: bool = False) -> int:
    """Map command-line verbosity flags to a level and format and apply them.

    ``verbose`` wins over ``quiet`` and selects :data:`DEBUG_FORMAT`. Without
    either flag the level from :data:`LEVEL_ENV_VAR` (default INFO) applies.

    Returns:
        The level that was applied.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = level_from_env()
    set_global_log_level(level)
    set_log_format(DEBUG_FORMAT if level <= logging.DEBUG else DEFAULT_FORMAT)
    return level


def enable_debug_logging() -> None:
    """Enable debug logging for the entire package."""
    set_global_log_level(logging.DEBUG)


def disable_debug_logging() -> None:
    """Disable debug logging, set to INFO level."""
    set_global_log_level(logging.INFO)


def reset_logging() -> None:
    """Drop the root handler and forget the configuration (used by tests)."""
    global _ROOT_LOGGER_CONFIGURED
    _ROOT_LOGGER_CONFIGURED = False

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.handlers.clear()
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()

"""
Logging for imgen.

Every module logs under the ``imgen`` logger. Nothing is attached to it until
the CLI (or a library user) calls configure_logging, so importing imgen never
produces output on its own.

Levels, from ``-v`` flags or IMGEN_VERBOSITY:
- 0: INFO. Request timing, response size, files written.
- 1: INFO plus the prompt text sent to the API.
- 2: DEBUG. Also request URLs, timeouts, multipart body sizes and config paths.

``--quiet`` drops to WARNING and hides prompts. The API key is never logged;
``--debug-api`` payload dumps replace base64 image data with a length marker.
"""

import logging
import os

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
ROOT_LOGGER_NAME = "imgen"
VERBOSITY_ENV = "IMGEN_VERBOSITY"
MAX_VERBOSITY = 2

_log_prompts: bool = False


def _root_logger() -> logging.Logger:
    """Return the imgen logger, attaching a stderr handler the first time."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return root


def set_verbosity(level: int) -> None:
    """Set the imgen log level from a verbosity of 0, 1 or 2 (clamped)."""
    global _log_prompts
    level = max(0, min(level, MAX_VERBOSITY))
    _root_logger().setLevel(logging.DEBUG if level == MAX_VERBOSITY else logging.INFO)
    _log_prompts = level >= 1


def log_prompts() -> bool:
    """Whether ImagesClient should log the prompt text it sends."""
    return _log_prompts


def configure_logging(verbose_level: int = 0, quiet: bool = False) -> None:
    """Apply a verbosity level, or WARNING with prompts hidden when quiet."""
    global _log_prompts
    if quiet:
        _root_logger().setLevel(logging.WARNING)
        _log_prompts = False
        return
    set_verbosity(verbose_level)


def get_verbosity_from_env() -> int:
    """Read IMGEN_VERBOSITY; anything other than 1 or 2 means 0."""
    raw = os.environ.get(VERBOSITY_ENV, "0").strip()
    return int(raw) if raw in ("1", "2") else 0


def resolve_verbosity(verbose_count: int) -> int:
    """
    Combine repeated ``-v`` flags with IMGEN_VERBOSITY.

    Any ``-v`` on the command line replaces the environment setting; ``-vvv``
    and beyond count as 2.
    """
    if verbose_count > 0:
        return min(verbose_count, MAX_VERBOSITY)
    return get_verbosity_from_env()


def get_logger(name: str) -> logging.Logger:
    """Return a logger under imgen; module names outside the package are nested."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


__all__ = [
    "configure_logging",
    "get_logger",
    "get_verbosity_from_env",
    "log_prompts",
    "resolve_verbosity",
    "set_verbosity",
]

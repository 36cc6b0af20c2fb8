"""
Error handling for the CLI.

This module maps library exceptions to exit codes and user-facing messages.
"""

import sys
from collections.abc import Callable

import click

from imgen.cli import progress
from imgen.cli.utils import (
    EXIT_API_OR_NETWORK,
    EXIT_CANCELLED,
    EXIT_VALIDATION_OR_CONFIG,
)
from imgen.utils.exceptions import (
    APIError,
    ConfigurationError,
    ImgenError,
    InputReadError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)


def map_exception_to_exit(exc: BaseException) -> tuple[int, str]:
    """Map library and known exceptions to (exit_code, user_message)."""
    if isinstance(exc, ValidationError):
        msg = exc.args[0] if exc.args else "Validation failed."
        if getattr(exc, "field", None):
            msg = f"{msg} (field: {exc.field})"
        return (EXIT_VALIDATION_OR_CONFIG, msg)
    if isinstance(exc, ConfigurationError):
        return (EXIT_VALIDATION_OR_CONFIG, exc.args[0] if exc.args else "Invalid configuration.")
    if isinstance(exc, InputReadError):
        return (EXIT_VALIDATION_OR_CONFIG, exc.args[0] if exc.args else "Failed to read input.")
    if isinstance(exc, KeyboardInterrupt):
        return (EXIT_CANCELLED, "Cancelled.")
    if isinstance(exc, APIError):
        msg = exc.args[0] if exc.args else "API error."
        return (EXIT_API_OR_NETWORK, msg)
    if isinstance(exc, (NetworkError, RequestTimeoutError)):
        return (EXIT_API_OR_NETWORK, exc.args[0] if exc.args else "Network error.")
    if isinstance(exc, ImgenError):
        return (EXIT_API_OR_NETWORK, exc.args[0] if exc.args else "An error occurred.")
    if isinstance(exc, OSError):
        return (EXIT_API_OR_NETWORK, f"I/O error: {exc}")
    # Unhandled
    return (EXIT_API_OR_NETWORK, str(exc) if exc.args else "An unexpected error occurred.")


def run_with_error_handling(
    fn: Callable[[], None],
    *,
    quiet: bool = False,
) -> None:
    """
    Run fn(); on exception map to exit code and message, print and sys.exit.
    Used so the command flows stay free of try/except for known errors.
    """
    try:
        fn()
    except KeyboardInterrupt as e:
        code, msg = map_exception_to_exit(e)
        if not quiet:
            progress.print_warning(msg)
        sys.exit(code)
    except ImgenError as e:
        code, msg = map_exception_to_exit(e)
        if quiet:
            click.echo(msg, err=True)
        else:
            progress.print_error(msg)
        sys.exit(code)
    except Exception as e:
        code, msg = map_exception_to_exit(e)
        if quiet:
            click.echo(msg, err=True)
        else:
            progress.print_error(msg)
        sys.exit(EXIT_API_OR_NETWORK)


__all__ = [
    "map_exception_to_exit",
    "run_with_error_handling",
]

"""Decorators for command functions."""

import asyncio
import functools
import time
import traceback
from collections.abc import Callable

import typer

from chromatask_cli.models.exceptions import ChromataskError
from chromatask_cli.services.auth_service import AuthService
from chromatask_cli.services.config_service import get_storage_strategy_context
from chromatask_cli.utils.exit_codes import (
    ERROR_AUTH_FAILURE,
    ERROR_GENERAL,
    exit_code_for,
    get_exit_code_name,
)
from chromatask_cli.utils.logger import get_logger
from chromatask_cli.utils.ui.formatters import format_error


def _require_auth() -> None:
    """Require a signed-in user in the active context."""
    auth = AuthService(get_storage_strategy_context().auth_provider)
    if not auth.is_authenticated():
        format_error("Not logged in. Use 'chromatask auth login' to sign in.")
        raise typer.Exit(ERROR_AUTH_FAILURE)


def command_wrapper(_func: Callable | None = None, *, auth_required: bool = True):
    """Decorator to wrap command functions with common functionality.

    Runs async commands on a fresh event loop, logs timing, and turns
    application errors into a formatted message and a semantic exit code.
    """

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger()
            cmd = func.__name__
            start = time.monotonic()
            logger.info("command started: %s", cmd)
            try:
                if auth_required:
                    _require_auth()

                if asyncio.iscoroutinefunction(func):
                    result = asyncio.run(func(*args, **kwargs))
                else:
                    result = func(*args, **kwargs)

                elapsed = time.monotonic() - start
                logger.info("command completed: %s (%.3fs)", cmd, elapsed)
                return result

            except ChromataskError as e:
                elapsed = time.monotonic() - start
                code = exit_code_for(e)
                logger.error(
                    "command failed: %s (%.3fs) - %s: %s [%s]",
                    cmd,
                    elapsed,
                    type(e).__name__,
                    str(e),
                    get_exit_code_name(code),
                )
                format_error(str(e))
                raise typer.Exit(code=code) from e

            except typer.Exit:
                # Re-raise Typer's own exits (like --help or explicit Exit(0))
                raise

            except Exception as e:
                elapsed = time.monotonic() - start
                logger.error(
                    "command failed: %s (%.3fs) - %s\n%s",
                    cmd,
                    elapsed,
                    str(e),
                    traceback.format_exc(),
                )
                format_error(f"An unexpected error occurred: {str(e)}")
                raise typer.Exit(code=ERROR_GENERAL) from e

        return wrapper

    if _func is None:
        return decorator
    return decorator(_func)

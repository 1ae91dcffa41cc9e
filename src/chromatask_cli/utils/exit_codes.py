"""
Exit codes for Chromatask CLI.

Semantic exit codes so scripts can tell what kind of failure happened.
"""

from chromatask_cli.models.exceptions import (
    AuthError,
    ChromataskError,
    ImportDataError,
    NotFoundError,
    StoreError,
    ValidationError,
)

# Success
SUCCESS = 0

# General error, including a rejected import file
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# Authentication failure (not logged in, sign-in failed)
ERROR_AUTH_FAILURE = 3

# Document store, object storage or network failure
ERROR_STORE = 4

# Task, subtask or tag not found
ERROR_NOT_FOUND = 5


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_AUTH_FAILURE: "ERROR_AUTH_FAILURE",
        ERROR_STORE: "ERROR_STORE",
        ERROR_NOT_FOUND: "ERROR_NOT_FOUND",
    }
    return code_names.get(code, f"UNKNOWN({code})")


def exit_code_for(error: ChromataskError) -> int:
    """Map an application error to its exit code.

    NotFoundError is checked before StoreError since it is a subclass.
    """
    if isinstance(error, ValidationError):
        return ERROR_INVALID_ARGS
    if isinstance(error, AuthError):
        return ERROR_AUTH_FAILURE
    if isinstance(error, NotFoundError):
        return ERROR_NOT_FOUND
    if isinstance(error, StoreError):
        return ERROR_STORE
    if isinstance(error, ImportDataError):
        return ERROR_GENERAL
    return ERROR_GENERAL

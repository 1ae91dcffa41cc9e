"""Tests for semantic exit codes."""

from __future__ import annotations

import pytest

from chromatask_cli.models.exceptions import (
    AuthError,
    ChromataskError,
    ImportDataError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from chromatask_cli.utils.exit_codes import (
    ERROR_AUTH_FAILURE,
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
    ERROR_NOT_FOUND,
    ERROR_STORE,
    SUCCESS,
    exit_code_for,
    get_exit_code_name,
)


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (ValidationError("bad"), ERROR_INVALID_ARGS),
        (AuthError("network"), ERROR_AUTH_FAILURE),
        (NotFoundError("gone"), ERROR_NOT_FOUND),
        (StoreError("down"), ERROR_STORE),
        (ImportDataError("broken"), ERROR_GENERAL),
        (ChromataskError("other"), ERROR_GENERAL),
    ],
)
def test_exit_code_for(error, code):
    assert exit_code_for(error) == code


def test_exit_code_names():
    assert get_exit_code_name(SUCCESS) == "SUCCESS"
    assert get_exit_code_name(ERROR_NOT_FOUND) == "ERROR_NOT_FOUND"
    assert get_exit_code_name(42) == "UNKNOWN(42)"

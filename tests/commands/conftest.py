"""Fixtures for command tests: an in-memory storage context behind every session."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from fakes import FakeStorageContext


@pytest.fixture()
def storage(tmp_config, user) -> FakeStorageContext:
    """Signed-in in-memory storage wired into command sessions."""
    context = FakeStorageContext(user)
    with patch("chromatask_cli.commands.session.get_storage_strategy_context", return_value=context):
        with patch("chromatask_cli.commands.auth.get_storage_strategy_context", return_value=context):
            yield context

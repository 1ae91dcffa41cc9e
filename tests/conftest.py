"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem/API state.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from chromatask_cli.models import User
from chromatask_cli.services.task_service import TaskCollection

from fakes import FakeAuthProvider, InMemoryDocumentStore, InMemoryObjectStorage


# ---------------------------------------------------------------------------
# Filesystem isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True, scope="session")
def isolated_log_dir(tmp_path_factory):
    """Keep the rotating log file out of the real user log directory."""
    log_dir = str(tmp_path_factory.mktemp("logs"))
    with patch("chromatask_cli.utils.logger.user_log_dir", return_value=log_dir):
        yield log_dir


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from chromatask_cli.services.config_service import get_config_service

    tmpdir = str(tmp_path)
    get_config_service.cache_clear()
    with patch("chromatask_cli.services.config_service.user_config_dir", return_value=tmpdir):
        with patch("chromatask_cli.services.config_service.user_data_dir", return_value=tmpdir):
            from chromatask_cli.services.config_service import ConfigService

            svc = ConfigService()
            yield svc
    get_config_service.cache_clear()


# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def user() -> User:
    return User(uid="user-1", email="ada@example.com", display_name="Ada")


@pytest.fixture()
def store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture()
def object_storage() -> InMemoryObjectStorage:
    return InMemoryObjectStorage()


@pytest.fixture()
def auth_provider(user) -> FakeAuthProvider:
    return FakeAuthProvider(user)


@pytest.fixture()
def collection(store, user, object_storage) -> TaskCollection:
    return TaskCollection(store, user, object_storage)


# ---------------------------------------------------------------------------
# Auth bypass
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def bypass_auth():
    """Skip authentication checks in all tests by default."""
    with patch("chromatask_cli.commands.decorators._require_auth"):
        yield

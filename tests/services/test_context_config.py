"""Unit tests for ConfigService (contexts and storage strategy wiring)."""

from __future__ import annotations

import json
import stat

import pytest

from chromatask_cli.models.config_models import Context
from chromatask_cli.models.storage_strategy import LocalStorageStrategy, RemoteStorageStrategy
from chromatask_cli.services.config_service import DEFAULT_REMOTE_URL


def test_first_run_creates_default_config(tmp_config):
    config = tmp_config.config

    assert config.current_context_name == "local"
    assert [c.name for c in config.contexts] == ["local", "remote"]
    assert config.contexts[0].source.endswith("vault.db")
    assert config.contexts[1].source == DEFAULT_REMOTE_URL
    assert tmp_config.config_path.exists()
    assert stat.S_IMODE(tmp_config.config_path.stat().st_mode) == 0o600


def test_config_round_trip(tmp_config):
    tmp_config.add_context(Context(name="work", type="remote", source="https://tasks.example.com"))

    saved = json.loads(tmp_config.config_path.read_text())
    assert [c["name"] for c in saved["contexts"]] == ["local", "remote", "work"]


def test_corrupt_config_raises(tmp_config):
    tmp_config.config_path.write_text("{broken")
    with pytest.raises(RuntimeError, match="Failed to load config"):
        tmp_config.load_config()


def test_use_context_switches_strategy(tmp_config):
    assert isinstance(tmp_config.storage_strategy_context.strategy, LocalStorageStrategy)

    tmp_config.use_context("remote")

    context = tmp_config.storage_strategy_context
    assert isinstance(context.strategy, RemoteStorageStrategy)
    assert context.storage_type == "remote"
    assert tmp_config.get_current_context().name == "remote"


def test_use_unknown_context(tmp_config):
    with pytest.raises(ValueError, match="not found"):
        tmp_config.use_context("nowhere")


def test_add_duplicate_context(tmp_config):
    with pytest.raises(ValueError, match="already exists"):
        tmp_config.add_context(Context(name="local", type="local", source="x.db"))


def test_remove_context_deletes_credentials(tmp_config):
    tmp_config.add_context(Context(name="spare", type="local", source="spare.db"))
    creds = tmp_config.credentials_path("spare")
    creds.write_text("{}")

    tmp_config.remove_context("spare")

    assert not creds.exists()
    assert [c.name for c in tmp_config.list_contexts()] == ["local", "remote"]


def test_cannot_remove_active_context(tmp_config):
    with pytest.raises(ValueError, match="in use"):
        tmp_config.remove_context("local")


def test_local_strategy_paths(tmp_config):
    strategy = tmp_config.build_strategy(tmp_config.get_current_context())
    assert strategy.db_path == tmp_config.get_current_context().source
    assert strategy.get_object_storage().root == tmp_config.objects_dir
    assert strategy.get_auth_provider().credentials_path == tmp_config.credentials_path("local")


def test_blank_context_source_rejected():
    with pytest.raises(ValueError):
        Context(name="x", type="local", source="   ")

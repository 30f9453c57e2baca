"""Tests for ConfigService: config file, dotted settings, contexts, credentials."""

from __future__ import annotations

import json

import pytest

from weekboard.adapters.rest_api import RestApiTaskRepository
from weekboard.adapters.sqlite import SqliteTaskRepository
from weekboard.models.config_models import Context
from weekboard.services.config_service import (
    DEFAULT_REMOTE_SOURCE,
    ConfigService,
    get_config_service,
)
from weekboard.utils.errors import InvalidArgumentError


@pytest.fixture
def config_service(tmp_path):
    return ConfigService(config_dir=tmp_path / "cfg", data_dir=tmp_path / "data")


class TestLoadAndSave:
    def test_first_load_writes_default_config(self, config_service, tmp_path):
        config = config_service.load_config()

        assert config_service.config_path.exists()
        assert config.current_context_name == "local"
        assert [c.name for c in config.contexts] == ["local", "cloud"]
        assert config.get_context("local").source == str(tmp_path / "data" / "weekboard.db")
        assert config.get_context("cloud").source == DEFAULT_REMOTE_SOURCE

    def test_config_file_is_owner_only(self, config_service):
        config_service.load_config()
        assert config_service.config_path.stat().st_mode & 0o777 == 0o600

    def test_changes_survive_reload(self, config_service, tmp_path):
        config_service.set_setting("board.weeks_count", 4)

        reloaded = ConfigService(config_dir=tmp_path / "cfg", data_dir=tmp_path / "data")
        assert reloaded.config.board.weeks_count == 4

    def test_corrupt_config_raises(self, config_service):
        config_service.config_path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RuntimeError, match="Failed to load config"):
            config_service.load_config()

    def test_reset_restores_defaults_and_drops_credentials(self, config_service):
        config_service.set_setting("output.format", "json")
        config_service.save_credentials("secret", context_name="cloud")

        config_service.reset_config()

        assert config_service.config.output.format == "pretty"
        assert config_service.load_context_credentials("cloud") is None


class TestSettings:
    def test_get_nested_setting(self, config_service):
        assert config_service.get_setting("copy_defaults.reset_status") is True
        assert config_service.get_setting("api.retry") == 1

    def test_unknown_key_rejected(self, config_service):
        with pytest.raises(InvalidArgumentError):
            config_service.get_setting("board.colour")
        with pytest.raises(InvalidArgumentError):
            config_service.set_setting("nope", "1")

    def test_string_values_are_coerced(self, config_service):
        config_service.set_setting("copy_defaults.include_comments", "false")
        config_service.set_setting("board.weeks_count", "6")

        assert config_service.config.copy_defaults.include_comments is False
        assert config_service.config.board.weeks_count == 6

    def test_invalid_value_rejected_and_config_unchanged(self, config_service):
        with pytest.raises(InvalidArgumentError):
            config_service.set_setting("board.weeks_count", "many")
        assert config_service.config.board.weeks_count == 8


class TestContexts:
    def test_switching_context_changes_storage(self, config_service):
        assert isinstance(
            config_service.storage_strategy_context.task_repository, SqliteTaskRepository
        )

        config_service.use_context("cloud")

        assert config_service.get_current_context().name == "cloud"
        assert isinstance(
            config_service.storage_strategy_context.task_repository, RestApiTaskRepository
        )

    def test_use_unknown_context(self, config_service):
        with pytest.raises(ValueError):
            config_service.use_context("missing")

    def test_add_and_remove_context(self, config_service):
        config_service.add_context(
            Context(name="team", type="remote", source="https://team.example.com/api")
        )
        config_service.save_credentials("tok", context_name="team")
        assert "team" in [c.name for c in config_service.list_contexts()]

        config_service.remove_context("team")

        assert "team" not in [c.name for c in config_service.list_contexts()]
        assert config_service.load_context_credentials("team") is None

    def test_cannot_remove_active_context(self, config_service):
        with pytest.raises(ValueError, match="active context"):
            config_service.remove_context("local")


class TestCredentials:
    def test_save_and_load_for_current_context(self, config_service):
        config_service.save_credentials("abc123")

        assert config_service.load_credentials() == {"token": "abc123"}
        cred_path = config_service.credentials_dir / "local.json"
        assert cred_path.stat().st_mode & 0o777 == 0o600

    def test_missing_credentials(self, config_service):
        assert config_service.load_context_credentials("cloud") is None

    def test_unreadable_credentials_are_ignored(self, config_service):
        (config_service.credentials_dir / "cloud.json").write_text("{", encoding="utf-8")
        assert config_service.load_context_credentials("cloud") is None

    def test_credentials_file_format(self, config_service):
        config_service.save_credentials("xyz", context_name="cloud")
        data = json.loads((config_service.credentials_dir / "cloud.json").read_text())
        assert data == {"token": "xyz"}


def test_get_config_service_is_cached():
    assert get_config_service() is get_config_service()

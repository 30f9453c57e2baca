"""Configuration service for managing weekboard configuration.

This module provides the ConfigService class, the single source of truth
for configuration in weekboard. It handles:

- Loading and saving config.json
- Dotted-key access to settings (``board.weeks_count``)
- Context management (list, add, remove, switch)
- Credential management for remote contexts
- Building the storage strategy for the active context
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from json import JSONDecodeError
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from weekboard.models.config_models import AppConfig, Context
from weekboard.models.storage_strategy import (
    LocalStorageStrategy,
    RemoteStorageStrategy,
    StorageStrategyContext,
)
from weekboard.services.api.client import APIClient
from weekboard.utils.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

DEFAULT_REMOTE_SOURCE = "https://weekboard.example.com/api"


class ConfigService:
    """Service for managing application configuration.

    Configuration lives in ``config.json`` under the platform config dir;
    per-context credentials are kept next to it in ``credentials/``.
    """

    def __init__(
        self, config_dir: Path | None = None, data_dir: Path | None = None
    ):
        """Initialize the config service."""

        self.config_dir = config_dir or Path(user_config_dir("weekboard"))
        self.config_path = self.config_dir / "config.json"
        self.credentials_dir = self.config_dir / "credentials"
        self.data_dir = data_dir or Path(user_data_dir("weekboard"))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.credentials_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None
        self._storage_strategy_context: StorageStrategyContext | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def storage_strategy_context(self) -> StorageStrategyContext:
        """StorageStrategyContext for the active context, built on first use."""
        if self._storage_strategy_context is None:
            self._storage_strategy_context = self.build_storage_strategy_context()
        return self._storage_strategy_context

    def build_storage_strategy_context(self) -> StorageStrategyContext:
        context = self.get_current_context()
        if context.type == "remote":
            strategy = RemoteStorageStrategy(APIClient(config_service=self))
        else:
            strategy = LocalStorageStrategy(db_path=context.source)
        logger.debug("using %s storage from context %s", strategy.storage_type, context.name)
        return StorageStrategyContext(strategy)

    async def close_storage(self) -> None:
        """Close the storage backend if one was built. It reopens on next use."""
        if self._storage_strategy_context is not None:
            await self._storage_strategy_context.close()

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config  # Return cached config if already loaded

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # Expected on first run
            self._config = self.create_default_config()
        except (OSError, ValidationError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self):
        """Save the current configuration to storage."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))

            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def reset_config(self):
        """Reset configuration to defaults and drop stored credentials."""
        self._config = None
        self._storage_strategy_context = None
        if self.config_path.exists():
            self.config_path.unlink()
        for cred_file in self.credentials_dir.glob("*.json"):
            cred_file.unlink()
        self.create_default_config()

    def create_default_config(self) -> AppConfig:
        """Create a default configuration with a local context.

        A remote context is added too so switching later only needs
        credentials.
        """
        local_context = Context(
            name="local",
            type="local",
            source=str(self.data_dir / "weekboard.db"),
            description="Local SQLite storage",
        )
        cloud_context = Context(
            name="cloud",
            type="remote",
            source=DEFAULT_REMOTE_SOURCE,
            description="Shared document store (requires credentials)",
        )

        self._config = AppConfig(
            current_context_name=local_context.name,
            contexts=[local_context, cloud_context],
        )
        self.save_config()
        logger.info("created default config at %s", self.config_path)
        return self._config

    def get_setting(self, key: str) -> Any:
        """Look up a dotted key such as ``copy_defaults.reset_status``.

        Raises:
            InvalidArgumentError: If the key does not name a setting
        """
        node: Any = self.config
        for part in key.split("."):
            if not isinstance(node, BaseModel) or part not in type(node).model_fields:
                raise InvalidArgumentError(f"Unknown configuration key: {key}")
            node = getattr(node, part)
        return node

    def set_setting(self, key: str, value: Any) -> None:
        """Set a dotted key, validating the whole config before saving."""
        self.get_setting(key)

        data = self.config.model_dump()
        *parents, leaf = key.split(".")
        node = data
        for part in parents:
            node = node[part]
        node[leaf] = value

        try:
            self._config = AppConfig.model_validate(data)
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid value for {key}: {value!r}") from e
        self._storage_strategy_context = None
        self.save_config()

    def list_contexts(self) -> list[Context]:
        """List all available contexts."""
        return self.config.contexts

    def get_current_context(self) -> Context:
        """Get the currently active context.

        Raises:
            ValueError: If the current context is not configured
        """
        return self.config.get_current_context()

    def use_context(self, name: str) -> Context:
        """Set the current context by name."""

        context = self.config.get_context(name)
        self.config.current_context_name = context.name
        self._storage_strategy_context = None
        self.save_config()
        return context

    def add_context(self, context: Context):
        """Add a new context to the configuration."""

        self.config.add_context(context)
        self.save_config()

    def remove_context(self, name: str):
        """Remove a context from the configuration."""

        if name == self.config.current_context_name:
            raise ValueError(f"Cannot remove the active context '{name}'")
        self.config.remove_context(name)
        self.save_config()
        self.remove_context_credentials(name)

    def remove_context_credentials(self, context_name: str):
        """Remove credentials associated with a context."""
        cred_path = self.credentials_dir / f"{context_name}.json"
        if cred_path.exists():
            cred_path.unlink()

    def load_credentials(self) -> dict | None:
        """Load credentials for the current context.

        Returns:
            dict with 'token', or None if not found
        """
        try:
            current_context = self.config.get_current_context()
        except ValueError:
            return None
        return self.load_context_credentials(current_context.name)

    def load_context_credentials(self, context_name: str) -> dict | None:
        """Load credentials for a specific context."""

        cred_path = self.credentials_dir / f"{context_name}.json"
        if not cred_path.exists():
            return None

        try:
            with open(cred_path, encoding="utf-8") as f:
                return json.load(f)
        except JSONDecodeError:
            logger.warning("ignoring unreadable credentials file %s", cred_path)
            return None

    def save_credentials(self, access_token: str, context_name: str | None = None):
        """Save the bearer token for a context (defaults to current context)."""

        if context_name is None:
            context_name = self.config.get_current_context().name

        cred_path = self.credentials_dir / f"{context_name}.json"
        cred_path.parent.mkdir(parents=True, exist_ok=True)

        with open(cred_path, "w", encoding="utf-8") as f:
            json.dump({"token": access_token}, f, indent=2)

        cred_path.chmod(0o600)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service


def get_storage_strategy_context() -> StorageStrategyContext:
    """Get a StorageStrategyContext based on the current configuration."""
    return get_config_service().storage_strategy_context

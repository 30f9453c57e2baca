"""Configuration models.

A context names one task store (local SQLite file or remote document API)
plus the user the CLI acts as by default.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from weekboard.models.task import CopySettings


class APIConfig(BaseModel):
    """Remote store HTTP settings."""

    timeout: int = Field(default=30)
    retry: int = Field(default=1, ge=0)


class OutputConfig(BaseModel):
    """Output configuration."""

    format: str = Field(default="pretty")


class BoardConfig(BaseModel):
    """Kanban board configuration."""

    weeks_count: int = Field(default=8, ge=0)
    column_limits: dict[str, int] = Field(default_factory=dict)


class NotificationConfig(BaseModel):
    """Weekly report configuration."""

    enabled: bool = Field(default=True)
    sender: str = Field(default="weekboard@localhost")


class Context(BaseModel):
    """Context configuration for a storage backend.

    Represents either a local SQLite store or a remote document API.
    """

    name: str = Field(..., description="Unique context name")
    type: Literal["local", "remote"] = Field(..., description="Context type")
    source: str = Field(..., description="Database path or API URL")
    user_id: str | None = Field(
        default=None, description="User the CLI acts as when --user is omitted"
    )
    description: str = Field(default="", description="Human-readable description")

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("source cannot be empty")
        return v.strip()


class AppConfig(BaseModel):
    """Main weekboard configuration"""

    current_context_name: str = Field(
        default="local", description="Active context name"
    )
    contexts: list[Context] = Field(
        default_factory=list, description="Available contexts"
    )

    api: APIConfig = Field(default_factory=APIConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    copy_defaults: CopySettings = Field(default_factory=CopySettings)
    board: BoardConfig = Field(default_factory=BoardConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)

    def get_context(self, name: str) -> Context:
        """Get context by name."""
        for ctx in self.contexts:
            if ctx.name == name:
                return ctx
        raise ValueError(f"Context '{name}' not found")

    def get_current_context(self) -> Context:
        """Get the currently active context."""
        return self.get_context(self.current_context_name)

    def add_context(self, context: Context) -> None:
        """Add a new context.

        Raises:
            ValueError: If context with the same name already exists
        """
        if any(ctx.name == context.name for ctx in self.contexts):
            raise ValueError(
                f"Context '{context.name}' already exists."
                " Use a different name or remove the existing context first."
            )
        self.contexts.append(context)

    def remove_context(self, name: str) -> None:
        """Remove a context by name."""
        original_len = len(self.contexts)
        self.contexts = [ctx for ctx in self.contexts if ctx.name != name]
        if len(self.contexts) == original_len:
            raise ValueError(f"Context '{name}' not found")

"""Custom exceptions for the settings_provider package."""

from __future__ import annotations


class SettingsError(Exception):
    """Base exception for all settings-related errors."""


class StoreError(SettingsError):
    """Raised when a document store operation fails."""

    def __init__(self, operation: str, path: str, detail: str = "") -> None:
        self.operation = operation
        self.path = path
        msg = f"Store error during '{operation}' at '{path}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class InvalidScopeError(SettingsError, TypeError):
    """Raised when a value cannot be resolved to a settings scope."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(
            f"Invalid guild specified: {value!r}. "
            'Must be a guild, guild ID, "global", or None.'
        )


class ShardMessageError(SettingsError):
    """Raised when a shard broadcast payload cannot be decoded."""


class ProviderConfigError(SettingsError):
    """Raised when the provider or its store is misconfigured."""

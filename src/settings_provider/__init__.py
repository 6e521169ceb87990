"""settings_provider — per-guild settings for bots, cached in memory and kept in a document store.

The provider loads every scope's settings once, pushes them onto the host
(prefixes, command and group toggles) and writes each change through to
the store as it happens.
"""

from settings_provider.config import ProviderConfig, StoreConfig, create_provider, create_store
from settings_provider.exceptions import (
    InvalidScopeError,
    ProviderConfigError,
    SettingsError,
    ShardMessageError,
    StoreError,
)
from settings_provider.providers import DocumentStoreProvider, SettingProvider
from settings_provider.scope import GLOBAL

__all__ = [
    "GLOBAL",
    "DocumentStoreProvider",
    "InvalidScopeError",
    "ProviderConfig",
    "ProviderConfigError",
    "SettingProvider",
    "SettingsError",
    "ShardMessageError",
    "StoreConfig",
    "StoreError",
    "create_provider",
    "create_store",
]

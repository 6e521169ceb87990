"""Settings provider implementations."""

from settings_provider.providers.base import SettingProvider
from settings_provider.providers.document_store import DocumentStoreProvider

__all__ = ["DocumentStoreProvider", "SettingProvider"]

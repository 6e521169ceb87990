"""Configuration models and factories for building a provider.

Example:
    config = load_config('{"store": {"type": "sqlite", "path": "bot.db"}}')
    provider = create_provider(config)
    await provider.init(client)
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, ValidationError

from settings_provider.exceptions import ProviderConfigError
from settings_provider.providers.document_store import DocumentStoreProvider
from settings_provider.scope import DEFAULT_GLOBAL_KEY
from settings_provider.stores import (
    DocumentStore,
    FirebaseStore,
    InMemoryDocumentStore,
    SQLiteDocumentStore,
)


class StoreConfig(BaseModel):
    """Which document store to persist settings in.

    Attributes:
        type:       Store type ("memory", "sqlite" or "firebase")
        path:       Path to SQLite database file (for sqlite type)
        url:        Database URL (for firebase type; env fallback applies)
        auth_token: Database auth token (for firebase type; env fallback applies)
        timeout:    HTTP timeout in seconds (for firebase type)
    """

    type: Literal["memory", "sqlite", "firebase"] = "memory"
    path: str = ""
    url: str = ""
    auth_token: str = ""
    timeout: float = Field(default=30.0, gt=0)


class ProviderConfig(BaseModel):
    """Provider configuration.

    Attributes:
        collection: Top-level store path holding one document per scope
        global_key: Document key the global scope is stored under
        store:      Store configuration
    """

    collection: str = Field(default="settings", min_length=1, pattern=r"^[^/]+$")
    global_key: str = Field(default=DEFAULT_GLOBAL_KEY, min_length=1)
    store: StoreConfig = Field(default_factory=StoreConfig)


def load_config(raw: str | bytes) -> ProviderConfig:
    """Parse a JSON document into a :class:`ProviderConfig`.

    Raises:
        ProviderConfigError: If the document does not validate.
    """
    try:
        return ProviderConfig.model_validate_json(raw)
    except ValidationError as exc:
        raise ProviderConfigError(f"Invalid provider configuration: {exc}") from exc


def create_store(config: StoreConfig) -> DocumentStore:
    """Create a store from configuration.

    Raises:
        ProviderConfigError: If the configuration is incomplete.
    """
    if config.type == "sqlite":
        if not config.path:
            raise ProviderConfigError("SQLite store requires 'path' configuration")
        return SQLiteDocumentStore(config.path)
    if config.type == "firebase":
        return FirebaseStore(
            config.url or None,
            auth_token=config.auth_token or None,
            timeout=config.timeout,
        )
    return InMemoryDocumentStore()


def create_provider(
    config: ProviderConfig | None = None,
    store: DocumentStore | None = None,
) -> DocumentStoreProvider:
    """Build a provider from configuration.

    An explicitly passed *store* wins over ``config.store``.
    """
    config = config or ProviderConfig()
    return DocumentStoreProvider(
        store or create_store(config.store),
        collection=config.collection,
        global_key=config.global_key,
    )

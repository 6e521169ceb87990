"""Storage backends for settings persistence."""

from settings_provider.stores.base import DocumentStore
from settings_provider.stores.firebase import FirebaseStore
from settings_provider.stores.memory import InMemoryDocumentStore
from settings_provider.stores.sqlite import SQLiteDocumentStore

__all__ = ["DocumentStore", "FirebaseStore", "InMemoryDocumentStore", "SQLiteDocumentStore"]

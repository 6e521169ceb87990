"""SettingProvider ABC — the capability set a host expects from a settings backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from settings_provider.scope import resolve_scope

if TYPE_CHECKING:
    from settings_provider.host import Client


class SettingProvider(ABC):
    """Base class for every settings provider.

    A provider owns the settings for every scope (``"global"`` or a guild
    id) and keeps the host's live objects in line with them.

    Lifecycle:
    * ``init(client)`` is awaited once the host is ready.
    * ``destroy()`` is called when the host swaps providers or shuts down.

    Every ``guild`` argument accepts a guild object, a guild id,
    ``"global"`` or ``None`` (see :meth:`get_guild_id`).
    """

    @abstractmethod
    async def init(self, client: Client) -> None:
        """Load settings and start listening to *client*."""
        ...

    @abstractmethod
    def destroy(self) -> None:
        """Stop listening to the client."""
        ...

    @abstractmethod
    def get(self, guild: Any, key: str, default: Any = None) -> Any:
        """Return the setting *key* for *guild*, or *default*."""
        ...

    @abstractmethod
    async def set(self, guild: Any, key: str, value: Any) -> Any:
        """Set *key* to *value* for *guild* and return *value*."""
        ...

    @abstractmethod
    async def remove(self, guild: Any, key: str) -> Any:
        """Remove *key* for *guild* and return its old value (``None`` if unset)."""
        ...

    @abstractmethod
    async def clear(self, guild: Any) -> None:
        """Remove every setting for *guild*."""
        ...

    @staticmethod
    def get_guild_id(guild: Any) -> str:
        """Resolve *guild* to a scope identifier.

        Raises:
            InvalidScopeError: If *guild* is not a guild, id, ``"global"`` or ``None``.
        """
        return resolve_scope(guild)

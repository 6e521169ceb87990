"""DocumentStoreProvider — settings cached in memory, persisted to a document store."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

from settings_provider.exceptions import InvalidScopeError, SettingsError
from settings_provider.host import (
    COMMAND_PREFIX_CHANGE,
    COMMAND_REGISTER,
    COMMAND_STATUS_CHANGE,
    GROUP_REGISTER,
    GROUP_STATUS_CHANGE,
    GUILD_CREATE,
)
from settings_provider.providers.base import SettingProvider
from settings_provider.scope import (
    DEFAULT_GLOBAL_KEY,
    GLOBAL,
    from_store_key,
    resolve_scope,
    to_store_key,
)
from settings_provider.sharding import ShardSettingUpdate, decode_update, encode_update
from settings_provider.stores.base import PATH_SEPARATOR
from settings_provider.stores.memory import InMemoryDocumentStore

if TYPE_CHECKING:
    from settings_provider.host import Client, Command, CommandGroup, Guild, Listener
    from settings_provider.stores.base import DocumentStore

logger = logging.getLogger(__name__)


class DocumentStoreProvider(SettingProvider):
    """Keeps every scope's settings in memory and writes changes through to a store.

    On :meth:`init` the whole collection is loaded in one fetch and pushed
    onto the host (prefixes, command and group enabled flags).  After that
    reads are served from memory only, and every mutation updates memory
    first and then awaits the store write.

    Changes to global settings are broadcast to sibling shards when the
    host runs sharded; see :meth:`apply_shard_update` for the receiving end.

    Parameters:
        store:      Persistence backend.  Defaults to
                    :class:`InMemoryDocumentStore` when omitted.
        collection: Top-level path holding one document per scope.
        global_key: Document key the global scope is stored under.
    """

    def __init__(
        self,
        store: DocumentStore | None = None,
        *,
        collection: str = "settings",
        global_key: str = DEFAULT_GLOBAL_KEY,
    ) -> None:
        self._store: DocumentStore = store or InMemoryDocumentStore()
        self._collection = collection
        self._global_key = global_key
        self._client: Client | None = None
        # scope -> settings record
        self._settings: dict[str, dict[str, Any]] = {}
        # event name -> listener attached to the client
        self._listeners: dict[str, Listener] = {}
        self._broadcasts: set[asyncio.Future[Any]] = set()

    # ── lifecycle ────────────────────────────────────────────

    async def init(self, client: Client) -> None:
        self.destroy()
        self._client = client
        try:
            collection = await self._store.fetch(self._collection) or {}
            loaded: dict[str, dict[str, Any]] = {}
            for stored_key, record in collection.items():
                scope = from_store_key(str(stored_key), self._global_key)
                loaded[scope] = dict(record) if isinstance(record, dict) else {}
            for scope, settings in loaded.items():
                self.setup_guild(scope, settings)
        except Exception:
            self._client = None
            raise
        self._settings = loaded
        logger.debug("Loaded settings for %d scope(s) from '%s'", len(loaded), self._collection)

        self._listeners = {
            COMMAND_PREFIX_CHANGE: self._on_command_prefix_change,
            COMMAND_STATUS_CHANGE: self._on_command_status_change,
            GROUP_STATUS_CHANGE: self._on_group_status_change,
            GUILD_CREATE: self._on_guild_create,
            COMMAND_REGISTER: self._on_command_register,
            GROUP_REGISTER: self._on_group_register,
        }
        for event, listener in self._listeners.items():
            client.on(event, listener)
        logger.info("Settings provider attached %d listener(s)", len(self._listeners))

    def destroy(self) -> None:
        if self._client is not None:
            for event, listener in self._listeners.items():
                self._client.remove_listener(event, listener)
            if self._listeners:
                logger.info("Settings provider detached %d listener(s)", len(self._listeners))
        self._listeners.clear()

    # ── accessors ────────────────────────────────────────────

    def get(self, guild: Any, key: str, default: Any = None) -> Any:
        settings = self._settings.get(resolve_scope(guild))
        if settings is None:
            return default
        return settings.get(key, default)

    async def set(self, guild: Any, key: str, value: Any) -> Any:
        scope = resolve_scope(guild)
        settings = self._settings.setdefault(scope, {})
        settings[key] = value
        logger.debug("Set '%s' on scope %s", key, scope)

        await self._store.update(self._path(scope), dict(settings))

        if scope == GLOBAL:
            self._update_other_shards(key, value)
        return value

    async def remove(self, guild: Any, key: str) -> Any:
        scope = resolve_scope(guild)
        settings = self._settings.get(scope)
        if settings is None or key not in settings:
            return None

        value = settings.pop(key)
        if not settings:
            del self._settings[scope]
        logger.debug("Removed '%s' from scope %s", key, scope)

        # Rewrite the whole document; a key need not be a valid path segment
        path = self._path(scope)
        await self._store.remove(path)
        if settings:
            await self._store.update(path, dict(settings))

        if scope == GLOBAL:
            self._update_other_shards(key, deleted=True)
        return value

    async def clear(self, guild: Any) -> None:
        scope = resolve_scope(guild)
        if scope not in self._settings:
            return
        del self._settings[scope]
        logger.debug("Cleared scope %s", scope)
        await self._store.remove(self._path(scope))

    # ── re-application ───────────────────────────────────────

    def setup_guild(self, guild_id: str, settings: dict[str, Any]) -> None:
        """Push a scope's cached settings onto the live host objects.

        A prefix for a guild the host does not know yet stays in the cache
        and is applied once the guild shows up (``guild_create``).

        Raises:
            InvalidScopeError: If *guild_id* is not a string.
        """
        if not isinstance(guild_id, str):
            raise InvalidScopeError(guild_id)
        client = self.client
        guild = self._live_guild(guild_id)

        if "prefix" in settings:
            if guild is not None:
                guild.command_prefix = settings["prefix"]
            elif guild_id == GLOBAL:
                client.command_prefix = settings["prefix"]

        if guild is None and guild_id != GLOBAL:
            return
        for command in client.registry.commands.values():
            self.setup_guild_command(guild, command, settings)
        for group in client.registry.groups.values():
            self.setup_guild_group(guild, group, settings)

    def setup_guild_command(
        self,
        guild: Guild | None,
        command: Command,
        settings: dict[str, Any],
    ) -> None:
        key = f"cmd-{command.name}"
        if key in settings:
            command.set_enabled_in(guild, settings[key])

    def setup_guild_group(
        self,
        guild: Guild | None,
        group: CommandGroup,
        settings: dict[str, Any],
    ) -> None:
        key = f"grp-{group.id}"
        if key in settings:
            group.set_enabled_in(guild, settings[key])

    # ── shard sync ───────────────────────────────────────────

    def apply_shard_update(self, payload: str | bytes | dict[str, Any]) -> bool:
        """Apply a change broadcast by another shard to the local cache only.

        Returns ``True`` if the cache changed, ``False`` if the message came
        from this process's own shard(s) and was ignored.

        Raises:
            ShardMessageError: If *payload* is not a valid update.
        """
        update = decode_update(payload)
        shard = self._client.shard if self._client is not None else None
        if shard is not None and update.is_from(shard.ids):
            return False

        settings = self._settings.setdefault(update.scope, {})
        update.apply(settings)
        logger.debug(
            "Applied shard update for '%s' on scope %s (deleted=%s)",
            update.key,
            update.scope,
            update.deleted,
        )
        return True

    def _update_other_shards(self, key: str, value: Any = None, *, deleted: bool = False) -> None:
        shard = self._client.shard if self._client is not None else None
        if shard is None:
            return

        if deleted:
            message = ShardSettingUpdate.tombstone(shard.ids, key)
        else:
            message = ShardSettingUpdate.assign(shard.ids, key, value)

        try:
            future = asyncio.ensure_future(shard.broadcast(encode_update(message)))
        except Exception:
            logger.warning("Failed to broadcast global setting '%s' to shards", key, exc_info=True)
            return
        self._broadcasts.add(future)
        future.add_done_callback(self._on_broadcast_done)

    def _on_broadcast_done(self, future: asyncio.Future[Any]) -> None:
        self._broadcasts.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.warning("Shard broadcast failed", exc_info=exc)

    # ── host listeners ───────────────────────────────────────

    async def _on_command_prefix_change(self, guild: Any, prefix: str | None) -> None:
        await self.set(guild, "prefix", prefix)

    async def _on_command_status_change(self, guild: Any, command: Command, enabled: bool) -> None:
        await self.set(guild, f"cmd-{command.name}", enabled)

    async def _on_group_status_change(self, guild: Any, group: CommandGroup, enabled: bool) -> None:
        await self.set(guild, f"grp-{group.id}", enabled)

    def _on_guild_create(self, guild: Guild) -> None:
        scope = resolve_scope(guild)
        settings = self._settings.get(scope)
        if settings is None:
            return
        self.setup_guild(scope, settings)

    def _on_command_register(self, command: Command) -> None:
        for scope, settings in self._settings.items():
            guild = self._live_guild(scope)
            if guild is None and scope != GLOBAL:
                continue
            self.setup_guild_command(guild, command, settings)

    def _on_group_register(self, group: CommandGroup) -> None:
        for scope, settings in self._settings.items():
            guild = self._live_guild(scope)
            if guild is None and scope != GLOBAL:
                continue
            self.setup_guild_group(guild, group, settings)

    # ── helpers ──────────────────────────────────────────────

    def _live_guild(self, scope: str) -> Guild | None:
        if scope == GLOBAL:
            return None
        return self.client.guilds.get(scope)

    def _path(self, scope: str) -> str:
        return PATH_SEPARATOR.join((self._collection, to_store_key(scope, self._global_key)))

    # ── introspection ────────────────────────────────────────

    @property
    def client(self) -> Client:
        if self._client is None:
            raise SettingsError("Settings provider has not been initialised with a client")
        return self._client

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def collection(self) -> str:
        return self._collection

    def scopes(self) -> list[str]:
        """Return every scope currently cached."""
        return list(self._settings)

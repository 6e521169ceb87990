"""What the provider expects from the bot it is plugged into.

These are structural protocols: any host whose objects expose the same
attributes works, no subclassing required.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Protocol

# Events the provider listens for on the host client.
COMMAND_PREFIX_CHANGE = "command_prefix_change"
COMMAND_STATUS_CHANGE = "command_status_change"
GROUP_STATUS_CHANGE = "group_status_change"
GUILD_CREATE = "guild_create"
COMMAND_REGISTER = "command_register"
GROUP_REGISTER = "group_register"

Listener = Callable[..., Any]


class Guild(Protocol):
    id: Any
    command_prefix: str | None


class Command(Protocol):
    name: str

    def set_enabled_in(self, guild: Guild | None, enabled: bool) -> None: ...


class CommandGroup(Protocol):
    id: str

    def set_enabled_in(self, guild: Guild | None, enabled: bool) -> None: ...


class Registry(Protocol):
    commands: Mapping[str, Command]
    groups: Mapping[str, CommandGroup]


class ShardClient(Protocol):
    """Sharding facility of a multi-process deployment.

    ``broadcast`` hands a serialized message to every shard process,
    whose host routes it to
    :meth:`~settings_provider.providers.DocumentStoreProvider.apply_shard_update`.
    """

    ids: list[int]

    def broadcast(self, payload: str) -> Awaitable[Any]: ...


class Client(Protocol):
    """The host application.

    Listeners registered with ``on`` may be coroutine functions; the host
    is expected to await (or schedule) whatever they return.
    """

    guilds: Mapping[str, Guild]
    registry: Registry
    command_prefix: str | None
    shard: ShardClient | None

    def on(self, event: str, listener: Listener) -> Any: ...

    def remove_listener(self, event: str, listener: Listener) -> Any: ...

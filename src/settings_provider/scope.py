"""Scope identifiers and the global-sentinel mapping used by stores."""

from __future__ import annotations

from typing import Any

from settings_provider.exceptions import InvalidScopeError

GLOBAL = "global"

# Document key the store uses for the global scope.
DEFAULT_GLOBAL_KEY = "0"


def resolve_scope(guild: Any) -> str:
    """Turn whatever the host hands us into a scope identifier.

    ``None`` and ``"global"`` map to :data:`GLOBAL`.  Guild objects map to
    their ``id``; plain ids (``str`` or ``int``) are used as-is.
    """
    if guild is None or guild == GLOBAL:
        return GLOBAL
    if isinstance(guild, bool):
        raise InvalidScopeError(guild)
    if isinstance(guild, str):
        if not guild:
            raise InvalidScopeError(guild)
        return guild
    if isinstance(guild, int):
        return str(guild)
    guild_id = getattr(guild, "id", None)
    if guild_id is None or isinstance(guild_id, bool):
        raise InvalidScopeError(guild)
    return str(guild_id)


def to_store_key(scope: str, global_key: str = DEFAULT_GLOBAL_KEY) -> str:
    """Map a scope identifier to the document key it is stored under."""
    return global_key if scope == GLOBAL else scope


def from_store_key(key: str, global_key: str = DEFAULT_GLOBAL_KEY) -> str:
    """Inverse of :func:`to_store_key`."""
    return GLOBAL if key == global_key else key

"""Messages used to keep global settings in sync across shard processes.

A shard that changes a global setting broadcasts a
:class:`ShardSettingUpdate`; every other shard applies it to its own
in-memory cache without touching the store, since the origin shard has
already persisted it.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, ValidationError

from settings_provider.exceptions import ShardMessageError
from settings_provider.scope import GLOBAL


class ShardSettingUpdate(BaseModel):
    """A single key change on one scope.

    Attributes:
        origin_shard_ids: Shard ids of the process that made the change.
                          Receivers sharing any of these ids drop the message.
        scope:            Scope identifier the key belongs to.
        key:              Setting key.
        value:            New value (ignored when ``deleted`` is set).
        deleted:          ``True`` when the key was removed.
    """

    origin_shard_ids: list[int] = Field(default_factory=list)
    scope: str = GLOBAL
    key: str
    value: Any = None
    deleted: bool = False

    @classmethod
    def assign(cls, shard_ids: list[int], key: str, value: Any) -> ShardSettingUpdate:
        return cls(origin_shard_ids=list(shard_ids), key=key, value=value)

    @classmethod
    def tombstone(cls, shard_ids: list[int], key: str) -> ShardSettingUpdate:
        return cls(origin_shard_ids=list(shard_ids), key=key, deleted=True)

    def is_from(self, shard_ids: list[int]) -> bool:
        """Return ``True`` if the message originated from one of *shard_ids*."""
        return bool(set(self.origin_shard_ids) & set(shard_ids))

    def apply(self, record: dict[str, Any]) -> None:
        """Apply this change to a settings record in place."""
        if self.deleted:
            record.pop(self.key, None)
        else:
            record[self.key] = self.value


def encode_update(update: ShardSettingUpdate) -> str:
    return update.model_dump_json()


def decode_update(payload: str | bytes | dict[str, Any]) -> ShardSettingUpdate:
    """Parse a broadcast payload.

    Raises:
        ShardMessageError: If the payload is not a valid update message.
    """
    try:
        if isinstance(payload, dict):
            return ShardSettingUpdate.model_validate(payload)
        return ShardSettingUpdate.model_validate_json(payload)
    except ValidationError as exc:
        raise ShardMessageError(f"Invalid shard settings update: {exc}") from exc

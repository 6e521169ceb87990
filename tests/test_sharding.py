"""Tests for the shard update message."""

import pytest

from settings_provider import GLOBAL, ShardMessageError
from settings_provider.sharding import ShardSettingUpdate, decode_update, encode_update


def test_assign_defaults():
    update = ShardSettingUpdate.assign([0, 1], "prefix", "$")
    assert update.scope == GLOBAL
    assert update.deleted is False
    assert update.value == "$"


def test_encode_decode():
    update = ShardSettingUpdate.assign([2], "limits", {"max": 3, "names": ["a"]})
    assert decode_update(encode_update(update)) == update


def test_decode_dict_payload():
    update = decode_update({"origin_shard_ids": [1], "key": "prefix", "value": None})
    assert update.key == "prefix"
    assert update.value is None


def test_decode_invalid():
    with pytest.raises(ShardMessageError):
        decode_update(b"{")


def test_is_from():
    update = ShardSettingUpdate.assign([0, 1], "prefix", "$")
    assert update.is_from([1, 2])
    assert not update.is_from([2, 3])
    assert not update.is_from([])


def test_apply_assign():
    record = {"color": "red"}
    ShardSettingUpdate.assign([0], "prefix", "$").apply(record)
    assert record == {"color": "red", "prefix": "$"}


def test_apply_tombstone():
    record = {"prefix": "!"}
    ShardSettingUpdate.tombstone([0], "prefix").apply(record)
    assert record == {}
    ShardSettingUpdate.tombstone([0], "prefix").apply(record)  # already gone
    assert record == {}

"""Shared test fixtures."""

import pytest

from settings_provider import DocumentStoreProvider
from tests.fakes.host import FakeClient, FakeCommand, FakeGroup, FakeGuild, RecordingStore


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def provider(store):
    return DocumentStoreProvider(store)


@pytest.fixture
def guild():
    return FakeGuild("g1")


@pytest.fixture
def ping():
    return FakeCommand("ping")


@pytest.fixture
def util():
    return FakeGroup("util")


@pytest.fixture
def client(guild, ping, util):
    return FakeClient(guilds=[guild], commands=[ping], groups=[util])

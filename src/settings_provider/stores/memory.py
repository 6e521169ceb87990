"""InMemoryDocumentStore — zero-config, dict-backed storage for development and testing."""

from __future__ import annotations

import copy
from typing import Any

from settings_provider.exceptions import StoreError
from settings_provider.stores.base import DocumentStore, split_path


class InMemoryDocumentStore(DocumentStore):
    """In-memory tree of nested dicts.  Data is lost on process exit.

    Values handed out by :meth:`fetch` are deep copies, so callers can
    never mutate what is stored.  Removing the last child of a node
    removes the node too, and updating a field to ``None`` removes it.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(data) if data else {}

    async def fetch(self, path: str) -> Any | None:
        node: Any = self._data
        for segment in split_path(path):
            if not isinstance(node, dict) or segment not in node:
                return None
            node = node[segment]
        if node == {}:
            return None
        return copy.deepcopy(node)

    async def update(self, path: str, fields: dict[str, Any]) -> None:
        segments = split_path(path)
        if not segments:
            raise StoreError("update", path, "cannot update the root")

        node = self._data
        for segment in segments:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        for key, value in fields.items():
            if value is None:
                node.pop(key, None)
            else:
                node[key] = copy.deepcopy(value)
        if not node:
            self._remove(segments)

    async def remove(self, path: str) -> None:
        segments = split_path(path)
        if not segments:
            self._data.clear()
            return
        self._remove(segments)

    def _remove(self, segments: list[str]) -> None:
        trail: list[dict[str, Any]] = [self._data]
        for segment in segments[:-1]:
            child = trail[-1].get(segment)
            if not isinstance(child, dict):
                return
            trail.append(child)
        trail[-1].pop(segments[-1], None)

        # Prune parents left empty by the removal
        for parent, segment in zip(reversed(trail[:-1]), reversed(segments[:-1])):
            if parent.get(segment) == {}:
                del parent[segment]
            else:
                break

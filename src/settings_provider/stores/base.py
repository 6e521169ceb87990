"""DocumentStore protocol — path-addressed JSON document persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

PATH_SEPARATOR = "/"


def split_path(path: str) -> list[str]:
    """Split ``"settings/123/prefix"`` into its non-empty segments."""
    return [segment for segment in path.split(PATH_SEPARATOR) if segment]


class DocumentStore(ABC):
    """Abstract base for all document store backends.

    Data is a tree of JSON values addressed by ``/``-separated paths, the
    way a realtime database lays it out.  The provider keeps one
    *collection* (``"settings"``) with one document per scope, so the
    paths it uses are ``settings``, ``settings/<key>`` and
    ``settings/<key>/<field>``.
    """

    @abstractmethod
    async def fetch(self, path: str) -> Any | None:
        """Return the value at *path*, or ``None`` if nothing is stored there."""
        ...

    @abstractmethod
    async def update(self, path: str, fields: dict[str, Any]) -> None:
        """Merge *fields* into the mapping at *path*, creating it if absent.

        Keys not named in *fields* are left untouched, and a key whose
        value is ``None`` is removed.
        """
        ...

    @abstractmethod
    async def remove(self, path: str) -> None:
        """Delete everything at *path*.  No-op if nothing is stored there."""
        ...

    async def close(self) -> None:  # noqa: B027
        """Release any resources held by the backend."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Generic, Hashable, Iterable, Iterator, TypeVar

T = TypeVar("T", bound=Hashable)

SIGNATURE = "CACHE MANIFEST"


class FormatError(ValueError):
    """Raised when manifest text lacks the ``CACHE MANIFEST`` signature."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class Setting(str, Enum):
    PREFER_ONLINE = "prefer-online"

    @classmethod
    def from_token(cls, token: str) -> "Setting | None":
        for member in cls:
            if member.value == token:
                return member
        return None


class OrderedSet(Generic[T]):
    """
    Insertion-ordered set: a list for order plus a set for membership.
    Iteration always yields elements in the order they were first added;
    adding an element that is already present leaves the order unchanged.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: list[T] = []
        self._index: set[T] = set()
        self.extend(items)

    def add(self, item: T) -> bool:
        if item in self._index:
            return False
        self._index.add(item)
        self._items.append(item)
        return True

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.add(item)

    def discard(self, item: T) -> None:
        if item in self._index:
            self._index.remove(item)
            self._items.remove(item)

    def to_list(self) -> list[T]:
        return list(self._items)

    def __contains__(self, item: object) -> bool:
        return item in self._index

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"OrderedSet({self._items!r})"


@dataclass
class Version:
    revision: int = 0
    date: datetime | None = None

    def __post_init__(self) -> None:
        if self.revision < 0:
            raise ValueError(f"revision must be non-negative, got {self.revision}")


@dataclass
class Manifest:
    version: Version = field(default_factory=Version)
    cache: list[str] = field(default_factory=list)
    network: list[str] = field(default_factory=list)
    fallback: list[str] = field(default_factory=list)
    settings: list[Setting] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "version": {
                "revision": self.version.revision,
                "date": self.version.date.isoformat() if self.version.date else None,
            },
            "cache": list(self.cache),
            "network": list(self.network),
            "fallback": list(self.fallback),
            "settings": [setting.value for setting in self.settings],
        }


@dataclass
class ResourceLists:
    cache: list[str] = field(default_factory=list)
    network: list[str] = field(default_factory=list)
    fallback: list[str] = field(default_factory=list)

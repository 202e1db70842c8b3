# flagtree CLI Toolkit — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Provides `Registry`, the dual-key store used for both flags and subcommands.

Each registered item is stored exactly once under an internal numeric id.
A secondary `name -> id` index maps up to two aliases (a long and a short
name) onto that id, so lookups by either alias return the very same object
and `count()` always reflects distinct items rather than alias entries.

Key Features:
- Ids start at 1 and are never reused after `unregister()` (0 is invalid)
- Registering a name that is already taken is rejected
- `unregister()` by any alias removes every alias of the item
- `register_many()` validates a whole batch before committing any of it
- Thread-safe: every registry owns its own re-entrant lock

Example:
    registry: Registry[Flag] = Registry()
    registry.register(verbose_flag, "verbose", "v")
    registry.get("v") is registry.get("verbose")  # True
    registry.unregister("verbose")
    registry.has("v")  # False
"""
from __future__ import annotations

import threading
from typing import Callable, Generic, Iterable, TypeVar

from flagtree.exceptions import AlreadyExistsError, InvalidNameError, NotFoundError

T = TypeVar("T")


class Registry(Generic[T]):
    """
    Index-based registry storing one payload per id with long/short aliases.

    Attributes:
        label (str): Kind of item stored, used in error messages (e.g. "flag").
    """

    def __init__(self, label: str = "item") -> None:
        self.label: str = label
        self._lock = threading.RLock()
        self._items: dict[int, T] = {}
        self._name_index: dict[str, int] = {}
        self._next_id: int = 1

    def _check_names(
        self, long_name: str, short_name: str, pending: set[str] | None = None
    ) -> None:
        if not long_name and not short_name:
            raise InvalidNameError(
                f"{self.label} long name and short name cannot both be empty"
            )
        if long_name and long_name == short_name:
            raise InvalidNameError(
                f"{self.label} long name and short name cannot be the same: '{long_name}'"
            )
        for name in (long_name, short_name):
            if not name:
                continue
            if name in self._name_index or (pending is not None and name in pending):
                raise AlreadyExistsError(f"{self.label} '{name}' already exists")

    def _commit(self, item: T, long_name: str, short_name: str) -> int:
        item_id = self._next_id
        self._next_id += 1
        self._items[item_id] = item
        if long_name:
            self._name_index[long_name] = item_id
        if short_name:
            self._name_index[short_name] = item_id
        return item_id

    def register(self, item: T, long_name: str = "", short_name: str = "") -> int:
        """
        Register an item under a long and/or short name.

        Args:
            item (T): The payload to store.
            long_name (str): Long alias, may be empty if `short_name` is given.
            short_name (str): Short alias, may be empty if `long_name` is given.

        Returns:
            int: The id allocated for the item.

        Raises:
            InvalidNameError: If both names are empty.
            AlreadyExistsError: If either name is already registered.
        """
        with self._lock:
            self._check_names(long_name, short_name)
            return self._commit(item, long_name, short_name)

    def register_many(self, entries: Iterable[tuple[T, str, str]]) -> list[int]:
        """
        Register a batch of `(item, long_name, short_name)` entries atomically.

        The whole batch is validated, including collisions between members of
        the batch, before anything is stored.
        """
        entries = list(entries)
        with self._lock:
            pending: set[str] = set()
            for _, long_name, short_name in entries:
                self._check_names(long_name, short_name, pending)
                pending.update(name for name in (long_name, short_name) if name)
            return [self._commit(*entry) for entry in entries]

    def unregister(self, name: str) -> T:
        """
        Remove an item and all of its aliases.

        Returns:
            T: The removed item.

        Raises:
            NotFoundError: If no item is registered under `name`.
        """
        with self._lock:
            item_id = self._name_index.get(name)
            if item_id is None:
                raise NotFoundError(f"{self.label} '{name}' not found")
            for alias in [a for a, i in self._name_index.items() if i == item_id]:
                del self._name_index[alias]
            return self._items.pop(item_id)

    def get(self, name: str, default: T | None = None) -> T | None:
        """Return the item registered under `name`, or `default`."""
        with self._lock:
            item_id = self._name_index.get(name)
            if item_id is None:
                return default
            return self._items.get(item_id, default)

    def has(self, name: str) -> bool:
        with self._lock:
            return name in self._name_index

    def names(self) -> list[str]:
        """Return every registered alias."""
        with self._lock:
            return list(self._name_index)

    def list(self) -> list[T]:
        """Return every distinct item in registration order."""
        with self._lock:
            return [self._items[item_id] for item_id in sorted(self._items)]

    def count(self) -> int:
        with self._lock:
            return len(self._items)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self._name_index.clear()
            self._next_id = 1

    def range(self, visit: Callable[[str, T], bool | None]) -> None:
        """
        Call `visit(name, item)` for every alias. Returning `False` stops the walk.

        The walk runs over a snapshot, so `visit` may call back into the registry.
        """
        with self._lock:
            snapshot = [
                (name, self._items[item_id])
                for name, item_id in self._name_index.items()
                if item_id in self._items
            ]
        for name, item in snapshot:
            if visit(name, item) is False:
                break

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        return self.count()

    def __iter__(self):
        return iter(self.list())

    def __repr__(self) -> str:
        return f"Registry(label={self.label!r}, items={self.count()}, names={len(self.names())})"

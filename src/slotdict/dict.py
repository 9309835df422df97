"""Dict: a string-keyed map over a slot store.

Storage is three plain structures:

- _index: normalized key -> slot number
- _store: list of slots, live values or the _TOMBSTONE marker
- _free:  stack of tombstoned slot numbers, reused before the store grows

Every mutation is bracketed by before/after change notifications when a
MapChanges dispatcher is attached and enabled. The before-notification
fires before anything visible changes; the after-notification fires once
the change is committed, so listeners reading the Dict see the new state.

Single-threaded: each operation runs to completion. Listeners may call
back into the Dict; the index is re-read after every before-notification
so reentrant mutation cannot duplicate index entries or free a slot twice.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterator, TypeVar

from slotdict._keys import normalize_key, restore_key
from slotdict.changes import MISSING, MapChanges
from slotdict.generic import GenericMap, bind_context

V = TypeVar("V")

logger = logging.getLogger("slotdict.dict")

_OMITTED: Any = object()


class _Tombstone:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<tombstone>"


_TOMBSTONE: Any = _Tombstone()


def _no_default(key: str) -> None:
    return None


class Dict(GenericMap[V]):
    """String-keyed map with slot reuse, default values and change hooks.

    Usage:
        d = Dict({"a": 1}, get_default=lambda key: 0)
        d.get("a")        # 1
        d.get("missing")  # 0, from get_default
        d.get("missing", None)  # None, explicit fallback wins
        d.set("b", 2)     # True, inserted
        d.set("b", 3)     # False, updated
        d.delete("b")     # True
    """

    __slots__ = ("get_default", "_index", "_store", "_free", "_length", "_changes")

    def __init__(
        self,
        values: Any = None,
        get_default: Callable[[str], V] | None = None,
    ) -> None:
        self.get_default: Callable[[str], V] = get_default or _no_default
        self._index: dict[str, int] = {}
        self._changes: MapChanges | None = None
        self._initialize_storage()
        self.add_each(values)

    def _initialize_storage(self) -> None:
        self._store: list[Any] = []
        self._free: list[int] = []
        self._length = 0

    def construct_clone(self, values: Any = None) -> Dict[V]:
        return type(self)(values, self.get_default)

    # --- Change dispatch wiring ---

    def map_changes(self) -> MapChanges:
        """The dispatcher for this Dict, attached on first use."""
        if self._changes is None:
            self._changes = MapChanges()
            logger.debug("Map change dispatch attached to %s", type(self).__name__)
        return self._changes

    @property
    def dispatches_map_changes(self) -> bool:
        return self._changes is not None and self._changes.enabled

    # --- Reads ---

    def get(self, key: str, default: Any = _OMITTED) -> V:
        """Value for key; else the explicit default; else get_default(key)."""
        safe = normalize_key(key)
        slot = self._index.get(safe)
        if slot is not None:
            return self._store[slot]
        if default is not _OMITTED:
            return default
        return self.get_default(key)

    def has(self, key: str) -> bool:
        safe = normalize_key(key)
        return safe in self._index and self._index[safe] is not None

    @property
    def length(self) -> int:
        return self._length

    def __len__(self) -> int:
        return self._length

    def __iter__(self) -> Iterator[str]:
        # Snapshot: callers may mutate while iterating.
        return iter([restore_key(safe) for safe in self._index])

    # --- Writes ---

    def set(self, key: str, value: V) -> bool:
        """Insert or overwrite. Returns True when key was not present."""
        safe = normalize_key(key)
        slot = self._index.get(safe)
        inserted = slot is None
        if self.dispatches_map_changes:
            old = MISSING if inserted else self._store[slot]
            self._changes.dispatch_before(key, old, self)
            slot = self._index.get(safe)
        if slot is None:
            slot = self._allocate(safe)
        self._store[slot] = value
        if self.dispatches_map_changes:
            self._changes.dispatch_after(key, value, self)
        return inserted

    def _allocate(self, safe: str) -> int:
        self._length += 1
        if self._free:
            slot = self._free.pop()
        else:
            slot = len(self._store)
            self._store.append(_TOMBSTONE)
        self._index[safe] = slot
        return slot

    def delete(self, key: str) -> bool:
        """Remove key. Returns whether it was present."""
        safe = normalize_key(key)
        slot = self._index.get(safe)
        if slot is None:
            return False
        if self.dispatches_map_changes:
            self._changes.dispatch_before(key, self._store[slot], self)
        self._release(safe)
        if self.dispatches_map_changes:
            self._changes.dispatch_after(key, MISSING, self)
        return True

    def _release(self, safe: str) -> None:
        slot = self._index.pop(safe, None)
        if slot is None:
            return  # a listener already removed it
        self._store[slot] = _TOMBSTONE
        self._free.append(slot)
        self._length -= 1

    def clear(self) -> None:
        """Remove every entry, notifying per key when dispatch is on."""
        if self.dispatches_map_changes:
            for safe in list(self._index):
                slot = self._index.get(safe)
                if slot is None:
                    continue
                key = restore_key(safe)
                self._changes.dispatch_before(key, self._store[slot], self)
                self._release(safe)
                self._changes.dispatch_after(key, MISSING, self)
            if self._index:
                return  # a listener inserted during the clear; keep its entries
        self._index.clear()
        self._initialize_storage()

    # --- Folding ---

    def reduce(self, combine: Callable, basis: Any, context: object = None) -> Any:
        """Fold combine(acc, value, key, self) over the keys in index order.

        Keys are snapshotted when the fold starts and each value is read
        through the index, so combine may mutate the Dict: removed keys are
        skipped, added keys are not visited.
        """
        return self._fold(list(self._index), combine, basis, context)

    def reduce_right(self, combine: Callable, basis: Any, context: object = None) -> Any:
        """reduce over the reversed key snapshot."""
        return self._fold(list(reversed(self._index)), combine, basis, context)

    def _fold(self, keys: list[str], combine: Callable, basis: Any, context: object) -> Any:
        combine = bind_context(combine, context)
        for safe in keys:
            slot = self._index.get(safe)
            if slot is None:
                continue
            basis = combine(basis, self._store[slot], restore_key(safe), self)
        return basis

    def one(self, default: Any = MISSING) -> V | Any:
        """Some value from the Dict, or default (MISSING) when empty.

        No ordering promised. MISSING keeps an empty Dict distinguishable
        from one holding None.
        """
        for slot in self._index.values():
            return self._store[slot]
        return default

    def to_json(self) -> dict[str, V]:
        return self.to_object()

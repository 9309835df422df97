"""Map change dispatch: before/after notifications around every mutation.

A MapChanges instance belongs to exactly one map and owns its observers.
The map only decides *where* to call dispatch_before/dispatch_after and
with which arguments; registration and fan-out live here.

Listeners are called as ``listener(key, value, mapping)``. For a
before-change, ``value`` is the value about to be replaced; for an
after-change it is the value now stored. MISSING stands for "the key did
not exist" or "the key no longer exists".
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator

logger = logging.getLogger("slotdict.changes")

Listener = Callable[[str, Any, Any], None]
Disposer = Callable[[], None]


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class MapChanges:
    """Observer registry for one map."""

    __slots__ = ("_before", "_after", "_suspend_depth")

    def __init__(self) -> None:
        self._before: list[Listener] = []
        self._after: list[Listener] = []
        # When > 0, dispatch is off.
        self._suspend_depth = 0

    @property
    def enabled(self) -> bool:
        return self._suspend_depth == 0

    def add_listener(self, listener: Listener, *, before: bool = False) -> Disposer:
        """Register a listener. Returns a function that removes it."""
        listeners = self._before if before else self._after
        listeners.append(listener)
        removed = False

        def _remove() -> None:
            nonlocal removed
            if removed:
                return
            removed = True
            try:
                listeners.remove(listener)
            except ValueError:
                pass  # already removed

        return _remove

    def listener_count(self) -> int:
        return len(self._before) + len(self._after)

    def dispatch_before(self, key: str, old: Any, mapping: Any) -> None:
        # Snapshot: listeners may add or remove listeners while running.
        for listener in list(self._before):
            listener(key, old, mapping)

    def dispatch_after(self, key: str, new: Any, mapping: Any) -> None:
        for listener in list(self._after):
            listener(key, new, mapping)

    @contextmanager
    def suspend(self) -> Iterator[None]:
        """Turn dispatch off for the duration of the block. Nestable.

        Usage:
            with d.map_changes().suspend():
                d.add_each(bulk)  # no notifications
        """
        self._suspend_depth += 1
        if self._suspend_depth == 1:
            logger.debug("Map change dispatch suspended")
        try:
            yield
        finally:
            self._suspend_depth -= 1
            if self._suspend_depth == 0:
                logger.debug("Map change dispatch resumed")

    def __repr__(self) -> str:
        state = "enabled" if self.enabled else "suspended"
        return (
            f"MapChanges(before={len(self._before)}, "
            f"after={len(self._after)}, {state})"
        )


def add_map_change_listener(mapping, listener: Listener) -> Disposer:
    """Call listener(key, new_value, mapping) after every change to mapping.

    Wires a dispatcher onto mapping if it has none yet.

    Usage:
        d = Dict()
        log = []
        dispose = add_map_change_listener(d, lambda k, v, m: log.append((k, v)))
        d.set("a", 1)   # log == [("a", 1)]
        d.delete("a")   # log == [("a", 1), ("a", MISSING)]
        dispose()
    """
    return mapping.map_changes().add_listener(listener)


def add_before_map_change_listener(mapping, listener: Listener) -> Disposer:
    """Call listener(key, old_value, mapping) before every change to mapping."""
    return mapping.map_changes().add_listener(listener, before=True)

"""Generic collection and map operations derived from a few primitives.

A concrete map implements the primitives (get, set, has, delete, clear,
__len__, __iter__ over keys, construct_clone) and inherits everything
else from here. Nothing in this module touches storage directly.
"""

from __future__ import annotations

import operator
import types
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Callable, Generic, Iterable, Iterator, TypeVar

V = TypeVar("V")

_OMITTED: Any = object()


def bind_context(fn: Callable, context: object = None) -> Callable:
    """Bind context as fn's first argument, the way a method receives self."""
    if context is None:
        return fn
    return types.MethodType(fn, context)


class GenericCollection(ABC, Generic[V]):
    """Operations shared by every collection: folding, mapping, filtering."""

    __slots__ = ()

    @abstractmethod
    def reduce(self, combine: Callable, basis: Any, context: object = None) -> Any:
        """Fold combine(acc, value, key, collection) over all entries."""

    @abstractmethod
    def construct_clone(self, values: Any = None) -> GenericCollection[V]:
        """Build an empty collection of the same kind, optionally loaded with values."""

    @abstractmethod
    def add_each(self, values: Any) -> GenericCollection[V]: ...

    def for_each(self, callback: Callable, context: object = None) -> None:
        callback = bind_context(callback, context)
        self.reduce(lambda _, value, key, obj: callback(value, key, obj), None)

    def map(self, callback: Callable, context: object = None) -> list:
        """Collect callback(value, key, collection) for every entry."""
        callback = bind_context(callback, context)
        result: list = []
        self.reduce(
            lambda _, value, key, obj: result.append(callback(value, key, obj)),
            None,
        )
        return result

    def filter(self, callback: Callable, context: object = None) -> GenericCollection[V]:
        """New collection of the same kind holding entries callback accepts."""
        callback = bind_context(callback, context)
        kept: list = []

        def _keep(_, value, key, obj):
            if callback(value, key, obj):
                kept.append((key, value))

        self.reduce(_keep, None)
        return self.construct_clone(kept)

    def some(self, callback: Callable, context: object = None) -> bool:
        callback = bind_context(callback, context)
        return any(callback(value, key, self) for key, value in self.entries())

    def every(self, callback: Callable, context: object = None) -> bool:
        callback = bind_context(callback, context)
        return all(callback(value, key, self) for key, value in self.entries())

    def to_array(self) -> list[V]:
        return self.map(lambda value, key, obj: value)

    def clone(self) -> GenericCollection[V]:
        """Shallow copy: same kind, same entries, same default supplier."""
        return self.construct_clone(self.entries())

    def entries(self) -> list[tuple[str, V]]:
        return self.map(lambda value, key, obj: (key, value))


class GenericMap(GenericCollection[V]):
    """String-keyed map operations plus the Python mapping protocol."""

    __slots__ = ()

    # --- Primitives ---

    @abstractmethod
    def get(self, key: str, default: Any = _OMITTED) -> V: ...

    @abstractmethod
    def set(self, key: str, value: V) -> bool: ...

    @abstractmethod
    def has(self, key: str) -> bool: ...

    @abstractmethod
    def delete(self, key: str) -> bool: ...

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def __iter__(self) -> Iterator[str]:
        """Enumerate live keys in their raw form."""

    # --- Derived ---

    def reduce(self, combine: Callable, basis: Any, context: object = None) -> Any:
        combine = bind_context(combine, context)
        for key in list(self):
            if self.has(key):
                basis = combine(basis, self.get(key), key, self)
        return basis

    def add_each(self, values: Any) -> GenericMap[V]:
        """Load a mapping, another map, or an iterable of (key, value) pairs."""
        if values is None:
            return self
        if isinstance(values, (GenericMap, Mapping)):
            pairs: Iterable = values.items()
        else:
            pairs = values
        for key, value in pairs:
            self.set(key, value)
        return self

    def delete_each(self, keys: Iterable[str]) -> None:
        for key in keys:
            self.delete(key)

    def keys(self) -> list[str]:
        return list(self)

    def values(self) -> list[V]:
        return self.to_array()

    def items(self) -> list[tuple[str, V]]:
        return self.entries()

    def to_object(self) -> dict[str, V]:
        """Plain dict snapshot of the live entries."""
        return dict(self.entries())

    def equals(self, other: Any, equals: Callable[[Any, Any], bool] = operator.eq) -> bool:
        """Same key set and pairwise-equal values."""
        if not isinstance(other, (GenericMap, Mapping)):
            return False
        if len(self) != len(other):
            return False
        for key, value in self.entries():
            if key not in other or not equals(value, other[key]):
                return False
        return True

    # --- Python mapping protocol ---

    def __getitem__(self, key: str) -> V:
        if not self.has(key):
            raise KeyError(key)
        return self.get(key)

    def __setitem__(self, key: str, value: V) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        if not self.delete(key):
            raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, (GenericMap, Mapping)):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_object()!r})"

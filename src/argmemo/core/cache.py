"""Per-owner cache store.

An OwnerCacheState holds every memoized result of one owner (an instance, or
a class for class-scope methods). It is partitioned by layout:

    values[method_name]          SCALAR: zero-argument methods
    tables[method_name][key]     TABLE: one-argument and splat methods
    values[key]                  SHARED: multi-argument methods, with every
                                 key also indexed in hashes[method_name] so a
                                 whole-method reset can find it

The state is made of plain dicts, sets and ints so generic serialization
(pickle, copy.deepcopy) round-trips it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .types import CallableDescriptor, Layout


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<missing>"


_MISSING = _Missing()


@dataclass
class OwnerCacheState:
    """Memoized results of one owner."""

    values: dict[Any, Any] = field(default_factory=dict)
    tables: dict[str, dict[Any, Any]] = field(default_factory=dict)
    hashes: dict[str, set[Any]] = field(default_factory=dict)
    hits: int = 0
    misses: int = 0
    # id() of the owner this state belongs to; None until first bound
    owner_id: int | None = field(default=None, compare=False, repr=False)

    def get(self, descriptor: CallableDescriptor, key: Any) -> tuple[bool, Any]:
        """Retrieve a memoized result.

        Args:
            descriptor: Descriptor of the memoized method.
            key: Key produced by ``encoding.encode``.

        Returns:
            ``(True, value)`` if memoized, even when value is falsy, else
            ``(False, None)``.
        """
        layout = descriptor.layout
        if layout is Layout.TABLE:
            table = self.tables.get(descriptor.name)
            value = _MISSING if table is None else table.get(key, _MISSING)
        else:
            value = self.values.get(key, _MISSING)

        if value is _MISSING:
            if descriptor.track_stats:
                self.misses += 1
            return False, None
        if descriptor.track_stats:
            self.hits += 1
        return True, value

    def put(self, descriptor: CallableDescriptor, key: Any, value: Any) -> None:
        """Store a result. A second put for the same key overwrites the first."""
        layout = descriptor.layout
        if layout is Layout.TABLE:
            # setdefault publishes a new table atomically, so a concurrent
            # reader sees either no table or the one every writer shares
            self.tables.setdefault(descriptor.name, {})[key] = value
        elif layout is Layout.SHARED:
            self.hashes.setdefault(descriptor.name, set()).add(key)
            self.values[key] = value
        else:
            self.values[key] = value

    def delete_one(self, descriptor: CallableDescriptor, key: Any) -> None:
        """Forget one result. Unknown keys are ignored."""
        layout = descriptor.layout
        if layout is Layout.TABLE:
            table = self.tables.get(descriptor.name)
            if table is not None:
                table.pop(key, None)
        elif layout is Layout.SHARED:
            keys = self.hashes.get(descriptor.name)
            if keys is not None:
                keys.discard(key)
            self.values.pop(key, None)
        else:
            self.values.pop(key, None)

    def delete_all_for_method(self, descriptor: CallableDescriptor) -> None:
        """Forget every result of one method, whatever its arguments."""
        name = descriptor.name
        layout = descriptor.layout
        if layout is Layout.TABLE:
            self.tables.pop(name, None)
        elif layout is Layout.SHARED:
            for key in tuple(self.hashes.pop(name, ())):
                self.values.pop(key, None)
        else:
            self.values.pop(name, None)

    def clear_all(self) -> None:
        """Forget every result of every method, and reset statistics."""
        self.values.clear()
        self.tables.clear()
        self.hashes.clear()
        self.hits = 0
        self.misses = 0

    def detached(self, owner_id: int) -> OwnerCacheState:
        """Return a copy with its own containers, bound to another owner."""
        return OwnerCacheState(
            values=dict(self.values),
            tables={name: dict(table) for name, table in self.tables.items()},
            hashes={name: set(keys) for name, keys in self.hashes.items()},
            hits=self.hits,
            misses=self.misses,
            owner_id=owner_id,
        )

    def __len__(self) -> int:
        return len(self.values) + sum(len(t) for t in self.tables.values())

    @property
    def stats(self) -> dict[str, int]:
        """Return cache statistics."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "size": len(self),
        }

"""Owner cache state lifecycle.

Every memoizing owner carries exactly one OwnerCacheState: instances under
STATE_ATTR, classes (for class-scope methods) under CLASS_STATE_ATTR in
their own ``__dict__``, so a subclass never shares its parent's state.

State is created on first use, so owners built without running
``__init__`` (``object.__new__``, ``copy``, unpickling of pre-memoization
objects) and frozen dataclasses are covered without hooking construction.

A state records the id() of its owner. A state found on a different owner
(``copy.copy`` copies the reference, unpickling and ``copy.deepcopy``
rebuild it) is replaced by a detached copy before use, so no two live
owners ever share one.

Ordinary instances publish their state with ``dict.setdefault``, which is
atomic. Class objects (read-only ``__dict__`` proxy), ``__slots__``
instances and state detachment take the lock-guarded path instead.
"""

from __future__ import annotations

import threading
from typing import Any

from .cache import OwnerCacheState
from .constants import CLASS_STATE_ATTR, STATE_ATTR

_INIT_LOCK = threading.Lock()


def _read(owner: Any) -> OwnerCacheState | None:
    if isinstance(owner, type):
        return owner.__dict__.get(CLASS_STATE_ATTR)
    namespace = getattr(owner, "__dict__", None)
    if namespace is not None:
        state = namespace.get(STATE_ATTR)
        if state is not None:
            return state
    return getattr(owner, STATE_ATTR, None)


def _store(owner: Any, state: OwnerCacheState) -> None:
    if isinstance(owner, type):
        type.__setattr__(owner, CLASS_STATE_ATTR, state)
        return
    namespace = getattr(owner, "__dict__", None)
    if type(namespace) is dict:
        namespace[STATE_ATTR] = state
    else:
        object.__setattr__(owner, STATE_ATTR, state)


def _adopt(owner: Any) -> OwnerCacheState | None:
    with _INIT_LOCK:
        state = _read(owner)
        if state is not None and state.owner_id != id(owner):
            state = state.detached(id(owner))
            _store(owner, state)
    return state


def peek_state(owner: Any) -> OwnerCacheState | None:
    """Return the owner's state, or None if it has none yet."""
    state = _read(owner)
    if state is None or state.owner_id == id(owner):
        return state
    return _adopt(owner)


def state_for(owner: Any) -> OwnerCacheState:
    """Return the owner's state, creating it on first use.

    Args:
        owner: Instance, or class for class-scope methods.

    Returns:
        The owner's OwnerCacheState.

    Raises:
        AttributeError: If an instance has neither a ``__dict__`` nor a
            STATE_ATTR slot.
    """
    if not isinstance(owner, type):
        namespace = getattr(owner, "__dict__", None)
        if type(namespace) is dict:
            state = namespace.get(STATE_ATTR)
            if state is None:
                state = namespace.setdefault(STATE_ATTR, OwnerCacheState(owner_id=id(owner)))
            if state.owner_id == id(owner):
                return state
            return _adopt(owner)

    state = peek_state(owner)
    if state is not None:
        return state

    with _INIT_LOCK:
        state = _read(owner)
        if state is None:
            state = OwnerCacheState(owner_id=id(owner))
            _store(owner, state)
    return state

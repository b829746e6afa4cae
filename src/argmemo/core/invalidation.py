"""Reset and preset of memoized results.

Reset modes:
    reset(owner)                    all methods of the owner
    reset(owner, name)              every argument set of one method
    reset(owner, name, *args, **kw) one argument set of one method

Preset stores a caller-supplied result without ever calling the memoized
method for those arguments.

Both re-derive keys through ``encoding.encode`` so they always address the
same entries as ordinary calls. Every precondition failure raises
UsageError synchronously.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from .encoding import MISMATCH, encode
from .errors import UsageError
from .logging import get_logger
from .registry import REGISTRY, MethodRegistry
from .state import peek_state, state_for

logger = get_logger(__name__)


def _owner_label(owner: Any) -> str:
    klass = owner if isinstance(owner, type) else type(owner)
    return klass.__qualname__


def reset(
    owner: Any,
    method_name: str | None = None,
    args: tuple = (),
    kwargs: Mapping[str, Any] | None = None,
    *,
    registry: MethodRegistry = REGISTRY,
) -> None:
    """Forget memoized results of an owner.

    Args:
        owner: Instance, or class for class-scope methods.
        method_name: Memoized method to reset; None resets every method.
        args: Positional arguments selecting one entry.
        kwargs: Keyword arguments selecting one entry.
        registry: Registry to resolve ``method_name`` in.

    Raises:
        UsageError: If arguments are given without a method name, or the
            method is not memoized for this owner.
    """
    kwargs = kwargs or {}

    if method_name is None:
        if args:
            raise UsageError("Provided args when method_name = None")
        if kwargs:
            raise UsageError("Provided kwargs when method_name = None")
        state = peek_state(owner)
        if state is not None:
            state.clear_all()
        logger.debug("reset all methods", owner=_owner_label(owner))
        return

    descriptor = registry.require(owner, method_name)
    state = peek_state(owner)
    if state is None:
        return

    if not args and not kwargs:
        state.delete_all_for_method(descriptor)
        logger.debug("reset method", owner=_owner_label(owner), method=method_name)
        return

    key = encode(descriptor, tuple(args), kwargs)
    if key is not MISMATCH:
        state.delete_one(descriptor, key)
    logger.debug("reset entry", owner=_owner_label(owner), method=method_name)


def preset(
    owner: Any,
    method_name: str,
    block: Callable[[], Any] | None,
    args: tuple = (),
    kwargs: Mapping[str, Any] | None = None,
    *,
    registry: MethodRegistry = REGISTRY,
) -> None:
    """Store ``block()`` as the memoized result for the given arguments.

    The memoized method itself is never called.

    Args:
        owner: Instance, or class for class-scope methods.
        method_name: Memoized method to preset.
        block: Zero-argument callable producing the result to store.
        args: Positional arguments the result is stored for.
        kwargs: Keyword arguments the result is stored for.
        registry: Registry to resolve ``method_name`` in.

    Raises:
        UsageError: If ``block`` is not callable, the method is not memoized
            for this owner, or the arguments cannot address an entry.
    """
    if not callable(block):
        raise UsageError(f"Pass a callable producing the value to preset for {method_name}, {args}")

    descriptor = registry.require(owner, method_name)
    key = encode(descriptor, tuple(args), kwargs or {})
    if key is MISMATCH:
        raise UsageError(f"Arguments {args}, {kwargs or {}} do not match {descriptor.owner_name}.{method_name}")

    state_for(owner).put(descriptor, key, block())
    logger.debug("preset entry", owner=_owner_label(owner), method=method_name)


def clear(owner: Any) -> None:
    """Forget every memoized result of an owner."""
    reset(owner)

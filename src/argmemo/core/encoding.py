"""Cache key encoding.

Turns the arguments of one call into the key a CallableDescriptor stores its
result under. The encoding depends only on the shape, key scheme and layout
recorded at registration, so lookups, presets and resets always derive the
same key for the same arguments.

Keys per shape:
    NONE                    method name
    ONE_POSITIONAL          the argument itself
    ONE_KEYWORD             the argument itself
    MULTIPLE_REQUIRED       components in declaration order, see KeyScheme
    SPLAT                   the positional tuple
    DOUBLE_SPLAT            the keyword mapping, order-insensitive
    SPLAT_AND_DOUBLE_SPLAT  CallKey(args, kwargs), see KeyScheme
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import numpy as np

from .types import ArgumentShape, CallableDescriptor, KeyScheme, ParamKind


class _Mismatch:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISMATCH"

    def __reduce__(self) -> str:
        return "MISMATCH"


# Returned when a call cannot match the recorded shape, or an argument
# cannot be turned into a key.
MISMATCH = _Mismatch()

_EMPTY_KWARGS: Mapping[str, Any] = {}


@dataclass(frozen=True)
class FrozenArgument:
    """Hashable stand-in for an unhashable argument.

    The original type is part of the key so that values Python considers
    unequal (``[1]`` and ``(1,)``) never share an entry.
    """

    kind: type
    payload: Any


@dataclass(frozen=True)
class CallKey:
    """Positional and keyword parts of one call, as a single key."""

    args: tuple
    kwargs: frozenset


def _freeze_unhashable(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        if value.dtype.hasobject:
            # raw bytes of an object array are addresses, not values
            items = tuple(freeze(v) for v in value.ravel().tolist())
            return FrozenArgument(np.ndarray, (value.dtype.str, value.shape, items))
        return FrozenArgument(np.ndarray, (value.dtype.str, value.shape, value.tobytes()))
    if isinstance(value, tuple):
        return tuple(freeze(v) for v in value)
    if isinstance(value, list):
        return FrozenArgument(list, tuple(freeze(v) for v in value))
    if isinstance(value, dict):
        return FrozenArgument(dict, frozenset((k, freeze(v)) for k, v in value.items()))
    if isinstance(value, (set, frozenset)):
        return frozenset(value)
    if isinstance(value, bytearray):
        return bytes(value)
    raise TypeError(f"cannot use {type(value).__name__!r} as a cache key")


def freeze(value: Any) -> Any:
    """Return ``value`` if hashable, else a hashable equivalent.

    Raises:
        TypeError: If ``value`` is unhashable and has no frozen form.
    """
    try:
        hash(value)
    except TypeError:
        return _freeze_unhashable(value)
    return value


def freeze_args(args: tuple) -> tuple:
    """Freeze a positional-arguments tuple."""
    try:
        hash(args)
    except TypeError:
        return tuple(freeze(v) for v in args)
    return args


def freeze_kwargs(kwargs: Mapping[str, Any]) -> frozenset:
    """Freeze a keyword mapping into an order-insensitive key."""
    return frozenset((k, freeze(v)) for k, v in kwargs.items())


def _required_components(descriptor: CallableDescriptor, args: tuple, kwargs: Mapping[str, Any]):
    if len(args) + len(kwargs) != len(descriptor.parameters):
        return MISMATCH

    components = []
    index = 0
    for param in descriptor.parameters:
        if param.kind is ParamKind.REQUIRED_POSITIONAL and index < len(args):
            components.append(freeze(args[index]))
            index += 1
        elif param.name in kwargs and (param.keyword_ok or not param.is_positional):
            components.append(freeze(kwargs[param.name]))
        else:
            return MISMATCH

    if index != len(args):
        return MISMATCH
    return tuple(components)


def _shared_key(descriptor: CallableDescriptor, components: tuple) -> Any:
    scheme = descriptor.key_scheme
    if scheme is KeyScheme.FLAT:
        return (descriptor.name, *components)
    if scheme is KeyScheme.HASHED:
        return hash((descriptor.name, *components))
    return components


def _sole_argument(descriptor: CallableDescriptor, args: tuple, kwargs: Mapping[str, Any]):
    param = descriptor.sole_parameter
    if descriptor.shape is ArgumentShape.ONE_POSITIONAL and len(args) == 1 and not kwargs:
        return freeze(args[0])
    if not args and len(kwargs) == 1 and param.name in kwargs:
        if descriptor.shape is ArgumentShape.ONE_KEYWORD or param.keyword_ok:
            return freeze(kwargs[param.name])
    return MISMATCH


def encode(
    descriptor: CallableDescriptor,
    args: tuple = (),
    kwargs: Mapping[str, Any] | None = None,
) -> Any:
    """Derive the cache key for one call.

    Args:
        descriptor: Registered descriptor of the called method.
        args: Positional arguments, owner excluded.
        kwargs: Keyword arguments.

    Returns:
        The storage key, or MISMATCH when the arguments cannot match the
        recorded shape or cannot be frozen into a key.
    """
    if kwargs is None:
        kwargs = _EMPTY_KWARGS
    shape = descriptor.shape

    try:
        if shape is ArgumentShape.NONE:
            return descriptor.name if not args and not kwargs else MISMATCH

        if shape is ArgumentShape.ONE_POSITIONAL or shape is ArgumentShape.ONE_KEYWORD:
            return _sole_argument(descriptor, args, kwargs)

        if shape is ArgumentShape.MULTIPLE_REQUIRED:
            components = _required_components(descriptor, args, kwargs)
            if components is MISMATCH:
                return MISMATCH
            return _shared_key(descriptor, components)

        if shape is ArgumentShape.SPLAT:
            if len(args) > descriptor.positional_count and not _has_rest(descriptor, ParamKind.REST_POSITIONAL):
                return MISMATCH
            if not kwargs:
                return freeze_args(args)
            return CallKey(freeze_args(args), freeze_kwargs(kwargs))

        if shape is ArgumentShape.DOUBLE_SPLAT:
            if not args:
                return freeze_kwargs(kwargs)
            return MISMATCH

        return _shared_key(descriptor, (CallKey(freeze_args(args), freeze_kwargs(kwargs)),))
    except TypeError:
        return MISMATCH


def _has_rest(descriptor: CallableDescriptor, kind: ParamKind) -> bool:
    return any(p.kind is kind for p in descriptor.parameters)

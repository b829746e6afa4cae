"""Memoized call, the hot path.

Interface:
    get_or_compute(state, descriptor, args, kwargs, compute_fn) -> value

Flow:
    1. encode(descriptor, args, kwargs) -> key
    2. state.get(descriptor, key) -> (found, value); return value if found
    3. compute_fn(*args, **kwargs) -> value, at most once for this call
    4. state.put(descriptor, key, value)

If compute_fn raises, nothing is stored and the exception propagates, so a
failed computation never poisons the cache. A call whose arguments cannot
match the recorded shape bypasses the cache entirely.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from .cache import OwnerCacheState
from .encoding import MISMATCH, encode
from .logging import get_logger
from .types import CallableDescriptor

logger = get_logger(__name__)


def get_or_compute(
    state: OwnerCacheState,
    descriptor: CallableDescriptor,
    args: tuple,
    kwargs: Mapping[str, Any],
    compute_fn: Callable[..., Any],
) -> Any:
    """Return the memoized result for a call, computing it on a miss.

    Args:
        state: Cache state of the owner the method is called on.
        descriptor: Descriptor of the called method.
        args: Positional arguments, owner excluded.
        kwargs: Keyword arguments.
        compute_fn: The original method bound to its owner.

    Returns:
        The memoized or freshly computed result.
    """
    key = encode(descriptor, args, kwargs)
    if key is MISMATCH:
        logger.debug("uncacheable call", method=descriptor.name, owner=descriptor.owner_name)
        return compute_fn(*args, **kwargs)

    found, value = state.get(descriptor, key)
    if found:
        return value

    value = compute_fn(*args, **kwargs)
    state.put(descriptor, key, value)
    return value

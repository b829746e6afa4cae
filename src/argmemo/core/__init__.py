"""Core module: shapes, keys, cache store, registry, invalidation."""

from .cache import OwnerCacheState
from .classify import classify, parameters_from_callable, visibility_for_name
from .encoding import MISMATCH, encode, freeze
from .engine import get_or_compute
from .errors import UsageError
from .invalidation import clear, preset, reset
from .registry import REGISTRY, MethodRegistry, get_registry, register
from .state import peek_state, state_for
from .types import (
    ArgumentShape,
    CallableDescriptor,
    KeyScheme,
    Layout,
    Parameter,
    ParamKind,
    Scope,
    Visibility,
)

__all__ = [
    "ArgumentShape",
    "CallableDescriptor",
    "KeyScheme",
    "Layout",
    "Parameter",
    "ParamKind",
    "Scope",
    "Visibility",
    "OwnerCacheState",
    "UsageError",
    "MethodRegistry",
    "REGISTRY",
    "get_registry",
    "register",
    "classify",
    "parameters_from_callable",
    "visibility_for_name",
    "encode",
    "freeze",
    "MISMATCH",
    "get_or_compute",
    "reset",
    "preset",
    "clear",
    "state_for",
    "peek_state",
]

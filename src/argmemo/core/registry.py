"""Method registry.

Records, per owner type, which methods are memoized and how. Registration
is the only place a parameter list is inspected; the resulting
CallableDescriptor is immutable.
"""

from __future__ import annotations

import threading
import weakref
from collections.abc import Sequence
from typing import Any

from .classify import classify
from .config import ArgmemoConfig, get_config
from .errors import UsageError
from .logging import get_logger
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

logger = get_logger(__name__)

_MULTI_ARGUMENT = frozenset({ArgumentShape.MULTIPLE_REQUIRED, ArgumentShape.SPLAT_AND_DOUBLE_SPLAT})


def validate_method_name(method_name: Any) -> str:
    """Raise UsageError unless ``method_name`` is an identifier string."""
    if not isinstance(method_name, str) or not method_name.isidentifier():
        raise UsageError(f"{method_name!r} must be a method name")
    return method_name


def layout_for(shape: ArgumentShape, scheme: KeyScheme) -> Layout:
    """Pick the storage partition for a shape under a key scheme."""
    if shape is ArgumentShape.NONE:
        return Layout.SCALAR
    if shape in _MULTI_ARGUMENT and scheme is not KeyScheme.NESTED:
        return Layout.SHARED
    return Layout.TABLE


class MethodRegistry:
    """Memoized methods per owner type. Owner types are held weakly."""

    def __init__(self) -> None:
        self._methods: weakref.WeakKeyDictionary[type, dict[str, CallableDescriptor]] = (
            weakref.WeakKeyDictionary()
        )
        self._lock = threading.Lock()

    def register(
        self,
        owner_type: type,
        method_name: str,
        parameters: Sequence[Parameter],
        visibility: Visibility = Visibility.PUBLIC,
        *,
        scope: Scope = Scope.INSTANCE,
        config: ArgmemoConfig | None = None,
    ) -> CallableDescriptor:
        """Register a method for memoization.

        Args:
            owner_type: Class the method is defined on.
            method_name: Attribute name of the method.
            parameters: Declared parameters, owner parameter excluded.
            visibility: Visibility to preserve at the integration boundary.
            scope: Whether instances or the class own the cache state.
            config: Configuration to take the key scheme and stats flag from;
                defaults to the process-wide configuration.

        Returns:
            The new CallableDescriptor.

        Raises:
            UsageError: On a non-identifier name, a block-taking callable, or
                a name already registered on this exact owner type.
        """
        validate_method_name(method_name)
        parameters = tuple(parameters)
        owner_name = getattr(owner_type, "__qualname__", repr(owner_type))

        if any(p.kind is ParamKind.BLOCK for p in parameters):
            raise UsageError(f"{owner_name}.{method_name} produces one-shot results and cannot be memoized")

        config = config or get_config()
        shape = classify(parameters)
        scheme = config.keys.scheme
        descriptor = CallableDescriptor(
            name=method_name,
            shape=shape,
            parameters=parameters,
            visibility=visibility,
            scope=scope,
            key_scheme=scheme,
            layout=layout_for(shape, scheme),
            track_stats=config.stats.enabled,
            owner_name=owner_name,
        )

        with self._lock:
            methods = self._methods.setdefault(owner_type, {})
            if method_name in methods:
                raise UsageError(f"{owner_name}.{method_name} is already memoized")
            methods[method_name] = descriptor

        logger.debug(
            "registered memoized method",
            owner=owner_name,
            method=method_name,
            shape=shape.value,
            layout=descriptor.layout.value,
            scope=scope.value,
        )
        return descriptor

    def methods(self, owner_type: type) -> dict[str, CallableDescriptor]:
        """Return the methods registered directly on ``owner_type``."""
        return dict(self._methods.get(owner_type, {}))

    def lookup(self, owner: Any, method_name: str) -> CallableDescriptor | None:
        """Find the descriptor an owner resolves ``method_name`` to.

        A class owner is searched along its own MRO, an instance along its
        type's MRO, so subclasses see memoized methods they inherit.
        """
        mro = owner.__mro__ if isinstance(owner, type) else type(owner).__mro__
        for klass in mro:
            methods = self._methods.get(klass)
            if methods is not None and method_name in methods:
                return methods[method_name]
        return None

    def require(self, owner: Any, method_name: str) -> CallableDescriptor:
        """Like lookup, but raise UsageError if ``owner`` cannot use the method.

        Raises:
            UsageError: If the name is not an identifier, not memoized, or
                memoized with a scope that does not match the owner.
        """
        validate_method_name(method_name)
        descriptor = self.lookup(owner, method_name)
        if descriptor is None:
            raise UsageError(f"{method_name} is not a memoized method")

        expected = Scope.CLASS if isinstance(owner, type) else Scope.INSTANCE
        if descriptor.scope is not expected:
            raise UsageError(f"{method_name} is memoized per {descriptor.scope.value}, not per {expected.value}")
        return descriptor


# Global instance
REGISTRY = MethodRegistry()


def get_registry() -> MethodRegistry:
    """Get the process-wide method registry."""
    return REGISTRY


def register(
    owner_type: type,
    method_name: str,
    parameters: Sequence[Parameter],
    visibility: Visibility = Visibility.PUBLIC,
    **kwargs: Any,
) -> CallableDescriptor:
    """Register a method on the process-wide registry."""
    return REGISTRY.register(owner_type, method_name, parameters, visibility, **kwargs)

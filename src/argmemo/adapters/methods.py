"""Class integration for memoized methods.

Usage:
    class Geometry(MemoWise):
        def __init__(self, radius):
            self.radius = radius

        @memo_wise
        def area(self):
            return math.pi * self.radius**2

        @memo_wise
        @classmethod
        def unit(cls):
            return cls(1.0)

    g = Geometry(2.0)
    g.area()                        # computed
    g.area()                        # memoized
    g.reset_memo_wise("area")       # forget it
    Geometry.preset_memo_wise("unit", lambda: Geometry(1.0))

``memo_wise`` is a descriptor: it registers the method when the class body
is executed (``__set_name__``) and routes every call through the engine.
The wrapped function keeps its name, docstring and signature.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from types import MethodType
from typing import Any

from ..core.classify import parameters_from_callable, visibility_for_name
from ..core.constants import STATE_ATTR
from ..core.engine import get_or_compute
from ..core.errors import UsageError
from ..core.invalidation import clear, preset, reset
from ..core.registry import REGISTRY, MethodRegistry, validate_method_name
from ..core.state import state_for
from ..core.types import CallableDescriptor, Scope


class memo_wise:
    """Memoize a method per owner and per argument set.

    Wraps a plain function (instance scope) or a classmethod (class scope,
    one cache per class object). staticmethods have no owner to keep state
    on and are rejected.
    """

    def __init__(self, func: Callable[..., Any], *, registry: MethodRegistry = REGISTRY) -> None:
        scope = Scope.INSTANCE
        if isinstance(func, staticmethod):
            raise UsageError("staticmethod has no owner to memoize on; use a classmethod instead")
        if isinstance(func, classmethod):
            func = func.__func__
            scope = Scope.CLASS
        if not callable(func):
            raise UsageError(f"{func!r} is not callable")

        self.func = func
        self.scope = scope
        self.registry = registry
        self.descriptor: CallableDescriptor | None = None
        functools.update_wrapper(self, func)

    def __set_name__(self, owner: type, name: str) -> None:
        if self.scope is Scope.INSTANCE and owner.__dictoffset__ == 0 and not hasattr(owner, STATE_ATTR):
            raise UsageError(
                f"{owner.__qualname__} uses __slots__ without __dict__; "
                f"add {STATE_ATTR!r} to its __slots__ to memoize {name}"
            )
        self.descriptor = self.registry.register(
            owner,
            name,
            parameters_from_callable(self.func),
            visibility_for_name(name, owner.__name__),
            scope=self.scope,
        )

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if self.scope is Scope.CLASS:
            return MethodType(self, owner if owner is not None else type(instance))
        if instance is None:
            return self
        return MethodType(self, instance)

    def __call__(self, owner: Any, /, *args: Any, **kwargs: Any) -> Any:
        descriptor = self.descriptor
        if descriptor is None:
            raise UsageError(f"{self.__qualname__} was never attached to a class")
        return get_or_compute(state_for(owner), descriptor, args, kwargs, MethodType(self.func, owner))

    def __repr__(self) -> str:
        return f"<memo_wise {self.__qualname__}>"


def memoize_method(cls: type, name: str, *, registry: MethodRegistry = REGISTRY) -> memo_wise:
    """Memoize a method of an already-defined class in place.

    Args:
        cls: Class defining the method.
        name: Name of the method in ``cls.__dict__``.
        registry: Registry to record the method in.

    Returns:
        The installed memo_wise wrapper.

    Raises:
        UsageError: If ``name`` is not a method defined on ``cls`` or is
            already memoized there.
    """
    validate_method_name(name)
    try:
        attr = cls.__dict__[name]
    except KeyError:
        raise UsageError(f"{name} is not defined on {cls.__qualname__}") from None

    if isinstance(attr, memo_wise):
        # re-registering raises the usual "already memoized" error
        attr = classmethod(attr.func) if attr.scope is Scope.CLASS else attr.func

    wrapper = memo_wise(attr, registry=registry)
    wrapper.__set_name__(cls, name)
    setattr(cls, name, wrapper)
    return wrapper


class hybridmethod:
    """Bind to the instance when called on one, else to the class."""

    def __init__(self, func: Callable[..., Any]) -> None:
        self.func = func
        functools.update_wrapper(self, func)

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        return MethodType(self.func, owner if instance is None else instance)


class MemoWise:
    """Mixin exposing reset and preset as methods.

    Called on an instance they act on its instance-scope methods; called on
    the class they act on its class-scope methods.
    """

    __slots__ = ()

    @hybridmethod
    def reset_memo_wise(self, method_name: str | None = None, /, *args: Any, **kwargs: Any) -> None:
        """Forget memoized results. See ``argmemo.core.invalidation.reset``."""
        reset(self, method_name, args, kwargs)

    @hybridmethod
    def preset_memo_wise(
        self,
        method_name: str,
        block: Callable[[], Any] | None = None,
        /,
        *args: Any,
        **kwargs: Any,
    ) -> None:
        """Store ``block()`` as the result of ``method_name(*args, **kwargs)``."""
        preset(self, method_name, block, args, kwargs)


def reset_memo_wise(owner: Any, method_name: str | None = None, /, *args: Any, **kwargs: Any) -> None:
    """Forget memoized results of any owner, mixin or not."""
    reset(owner, method_name, args, kwargs)


def preset_memo_wise(
    owner: Any,
    method_name: str,
    block: Callable[[], Any] | None = None,
    /,
    *args: Any,
    **kwargs: Any,
) -> None:
    """Store ``block()`` as the memoized result for the given arguments."""
    preset(owner, method_name, block, args, kwargs)


def clear_memo_wise(owner: Any) -> None:
    """Forget every memoized result of an owner."""
    clear(owner)

"""Argument-shape classification.

Classification runs once per method, at registration time. Every call
afterwards dispatches on the recorded ArgumentShape.

Rules (first match wins):
    1. no parameters                                -> NONE
    2. exactly one required positional             -> ONE_POSITIONAL
    3. exactly one required keyword                -> ONE_KEYWORD
    4. two or more, all required                   -> MULTIPLE_REQUIRED
    5. positional kinds only                       -> SPLAT
    6. keyword kinds only                          -> DOUBLE_SPLAT
    7. anything else                               -> SPLAT_AND_DOUBLE_SPLAT
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Sequence
from typing import Any

from .constants import BLOCK_COROUTINE, BLOCK_GENERATOR
from .errors import UsageError
from .types import (
    KEYWORD_KINDS,
    POSITIONAL_KINDS,
    REQUIRED_KINDS,
    ArgumentShape,
    Parameter,
    ParamKind,
    Visibility,
)

_OWNER_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def classify(parameters: Sequence[Parameter]) -> ArgumentShape:
    """Classify a parameter list into one of the seven argument shapes.

    Args:
        parameters: Declared parameters in order, owner parameter excluded.

    Returns:
        The ArgumentShape governing key encoding and storage.
    """
    kinds = [p.kind for p in parameters]

    if not kinds:
        return ArgumentShape.NONE
    if kinds == [ParamKind.REQUIRED_POSITIONAL]:
        return ArgumentShape.ONE_POSITIONAL
    if kinds == [ParamKind.REQUIRED_KEYWORD]:
        return ArgumentShape.ONE_KEYWORD
    if all(k in REQUIRED_KINDS for k in kinds):
        return ArgumentShape.MULTIPLE_REQUIRED
    if all(k in POSITIONAL_KINDS for k in kinds):
        return ArgumentShape.SPLAT
    if all(k in KEYWORD_KINDS for k in kinds):
        return ArgumentShape.DOUBLE_SPLAT
    return ArgumentShape.SPLAT_AND_DOUBLE_SPLAT


def _convert(param: inspect.Parameter) -> Parameter:
    has_default = param.default is not inspect.Parameter.empty

    if param.kind is inspect.Parameter.POSITIONAL_ONLY:
        kind = ParamKind.OPTIONAL_POSITIONAL if has_default else ParamKind.REQUIRED_POSITIONAL
        return Parameter(kind, param.name, keyword_ok=False)
    if param.kind is inspect.Parameter.POSITIONAL_OR_KEYWORD:
        kind = ParamKind.OPTIONAL_POSITIONAL if has_default else ParamKind.REQUIRED_POSITIONAL
        return Parameter(kind, param.name)
    if param.kind is inspect.Parameter.VAR_POSITIONAL:
        return Parameter(ParamKind.REST_POSITIONAL, param.name, keyword_ok=False)
    if param.kind is inspect.Parameter.KEYWORD_ONLY:
        kind = ParamKind.OPTIONAL_KEYWORD if has_default else ParamKind.REQUIRED_KEYWORD
        return Parameter(kind, param.name)
    return Parameter(ParamKind.REST_KEYWORD, param.name)


def parameters_from_callable(func: Callable[..., Any]) -> tuple[Parameter, ...]:
    """Describe a method's parameters, dropping the owner parameter.

    The leading ``self``/``cls`` parameter is dropped. A method declared as
    ``def f(*args)`` receives its owner inside ``args`` and keeps the rest
    parameter. Generator, coroutine and async-generator functions get a
    trailing BLOCK parameter, since their results are one-shot objects.

    Args:
        func: Plain function as found in a class body.

    Returns:
        Tuple of Parameter, in declaration order.

    Raises:
        UsageError: If ``func`` declares no parameter to receive its owner.
    """
    params = list(inspect.signature(func).parameters.values())

    if params and params[0].kind in _OWNER_KINDS:
        params = params[1:]
    elif not params or params[0].kind is not inspect.Parameter.VAR_POSITIONAL:
        name = getattr(func, "__qualname__", repr(func))
        raise UsageError(f"{name} takes no parameter to receive its owner")

    converted = [_convert(p) for p in params]

    if inspect.isgeneratorfunction(func) or inspect.isasyncgenfunction(func):
        converted.append(Parameter(ParamKind.BLOCK, BLOCK_GENERATOR, keyword_ok=False))
    elif inspect.iscoroutinefunction(func):
        converted.append(Parameter(ParamKind.BLOCK, BLOCK_COROUTINE, keyword_ok=False))

    return tuple(converted)


def visibility_for_name(name: str, owner_name: str | None = None) -> Visibility:
    """Map Python naming conventions onto a Visibility.

    Name-mangled attributes (``_Owner__x``) are private, other underscore
    names are protected, and dunders and plain names are public.
    """
    if name.startswith("__") and name.endswith("__"):
        return Visibility.PUBLIC
    if owner_name:
        mangled_prefix = f"_{owner_name.lstrip('_')}__"
        if name.startswith(mangled_prefix):
            return Visibility.PRIVATE
    if name.startswith("_"):
        return Visibility.PROTECTED
    return Visibility.PUBLIC

"""Tests for argument-shape classification."""

import pytest

from argmemo.core.classify import classify, parameters_from_callable, visibility_for_name
from argmemo.core.errors import UsageError
from argmemo.core.types import ArgumentShape, Parameter, ParamKind, Visibility

REQ = ParamKind.REQUIRED_POSITIONAL
OPT = ParamKind.OPTIONAL_POSITIONAL
REST = ParamKind.REST_POSITIONAL
KEYREQ = ParamKind.REQUIRED_KEYWORD
KEY = ParamKind.OPTIONAL_KEYWORD
KEYREST = ParamKind.REST_KEYWORD


def params(*kinds):
    return tuple(Parameter(kind, f"p{i}") for i, kind in enumerate(kinds))


@pytest.mark.parametrize(
    "kinds, expected",
    [
        ((), ArgumentShape.NONE),
        ((REQ,), ArgumentShape.ONE_POSITIONAL),
        ((KEYREQ,), ArgumentShape.ONE_KEYWORD),
        ((REQ, REQ), ArgumentShape.MULTIPLE_REQUIRED),
        ((KEYREQ, KEYREQ), ArgumentShape.MULTIPLE_REQUIRED),
        ((REQ, KEYREQ), ArgumentShape.MULTIPLE_REQUIRED),
        ((OPT,), ArgumentShape.SPLAT),
        ((REQ, OPT), ArgumentShape.SPLAT),
        ((REST,), ArgumentShape.SPLAT),
        ((KEY,), ArgumentShape.DOUBLE_SPLAT),
        ((KEYREQ, KEY), ArgumentShape.DOUBLE_SPLAT),
        ((KEYREST,), ArgumentShape.DOUBLE_SPLAT),
        ((REQ, KEY), ArgumentShape.SPLAT_AND_DOUBLE_SPLAT),
        ((REST, KEYREST), ArgumentShape.SPLAT_AND_DOUBLE_SPLAT),
        ((OPT, KEYREQ), ArgumentShape.SPLAT_AND_DOUBLE_SPLAT),
    ],
)
def test_classify_rules(kinds, expected):
    assert classify(params(*kinds)) is expected


def test_parameters_drop_owner():
    def method(self, a, /, b, c=1, *args, d, e=2, **kwargs):
        pass

    result = parameters_from_callable(method)

    assert [p.kind for p in result] == [REQ, REQ, OPT, REST, KEYREQ, KEY, KEYREST]
    assert [p.name for p in result] == ["a", "b", "c", "args", "d", "e", "kwargs"]
    assert result[0].keyword_ok is False
    assert result[1].keyword_ok is True


def test_parameters_owner_inside_rest():
    def method(*args):
        pass

    result = parameters_from_callable(method)
    assert [p.kind for p in result] == [REST]


def test_parameters_without_owner_raise():
    def function():
        pass

    with pytest.raises(UsageError, match="takes no parameter to receive its owner"):
        parameters_from_callable(function)


def test_generator_and_coroutine_get_block():
    def gen(self):
        yield 1

    async def coro(self, a):
        return a

    async def agen(self):
        yield 1

    assert parameters_from_callable(gen)[-1].kind is ParamKind.BLOCK
    assert parameters_from_callable(coro)[-1].kind is ParamKind.BLOCK
    assert parameters_from_callable(agen)[-1].kind is ParamKind.BLOCK
    assert parameters_from_callable(coro)[0] == Parameter(REQ, "a")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("area", Visibility.PUBLIC),
        ("__len__", Visibility.PUBLIC),
        ("_helper", Visibility.PROTECTED),
        ("_Shape__secret", Visibility.PRIVATE),
        ("_Other__secret", Visibility.PROTECTED),
    ],
)
def test_visibility_for_name(name, expected):
    assert visibility_for_name(name, "Shape") is expected


def test_visibility_for_leading_underscore_owner():
    assert visibility_for_name("_Shape__secret", "_Shape") is Visibility.PRIVATE

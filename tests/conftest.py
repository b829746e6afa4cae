"""Pytest configuration for argmemo.

Every test runs against a fresh process-wide configuration with no
ARGMEMO_CONFIG file, and with library logging back at WARN afterwards.
Classes are built per test by ``build_calculator`` so registrations never
leak between tests.
"""

from __future__ import annotations

from collections import Counter

import pytest

from argmemo.adapters import MemoWise, memo_wise
from argmemo.core.config import reset_config
from argmemo.core.constants import ENV_CONFIG_PATH
from argmemo.core.logging import set_log_level


@pytest.fixture(autouse=True)
def _isolated_config(monkeypatch):
    monkeypatch.delenv(ENV_CONFIG_PATH, raising=False)
    reset_config()
    yield
    reset_config()
    set_log_level("WARN")


def build_calculator():
    """Return a new class with one memoized method per argument shape.

    Each instance counts calls per method in ``self.calls``; the class-scope
    method counts in ``cls.class_calls``.
    """

    class Calculator(MemoWise):
        class_calls = 0

        def __init__(self):
            self.calls = Counter()

        @memo_wise
        def no_args(self):
            """Return a constant."""
            self.calls["no_args"] += 1
            return "no_args"

        @memo_wise
        def with_one_positional(self, a):
            self.calls["with_one_positional"] += 1
            return f"a: {a}"

        @memo_wise
        def with_one_keyword(self, *, a):
            self.calls["with_one_keyword"] += 1
            return f"a: {a}"

        @memo_wise
        def with_positional(self, a, b):
            self.calls["with_positional"] += 1
            return f"a: {a}, b: {b}"

        @memo_wise
        def with_keywords(self, *, a, b):
            self.calls["with_keywords"] += 1
            return f"a: {a}, b: {b}"

        @memo_wise
        def with_optional_positional(self, a, b=2):
            self.calls["with_optional_positional"] += 1
            return f"a: {a}, b: {b}"

        @memo_wise
        def with_splat(self, *args):
            self.calls["with_splat"] += 1
            return f"args: {args}"

        @memo_wise
        def with_optional_keyword(self, *, a=1):
            self.calls["with_optional_keyword"] += 1
            return f"a: {a}"

        @memo_wise
        def with_double_splat(self, **kwargs):
            self.calls["with_double_splat"] += 1
            return f"kwargs: {sorted(kwargs.items())}"

        @memo_wise
        def with_mixed(self, a, *args, b, **kwargs):
            self.calls["with_mixed"] += 1
            return f"a: {a}, args: {args}, b: {b}, kwargs: {sorted(kwargs.items())}"

        @memo_wise
        def returns_false(self):
            self.calls["returns_false"] += 1
            return False

        @memo_wise
        def returns_none(self, a):
            self.calls["returns_none"] += 1
            return None

        @memo_wise
        def _protected_method(self):
            self.calls["_protected_method"] += 1
            return "protected"

        @memo_wise
        def __private_method(self):
            self.calls["__private_method"] += 1
            return "private"

        def call_private(self):
            return self.__private_method()

        @memo_wise
        @classmethod
        def class_value(cls):
            cls.class_calls += 1
            return f"class: {cls.__name__}"

        @memo_wise
        @classmethod
        def class_with_arg(cls, a):
            cls.class_calls += 1
            return f"class a: {a}"

    return Calculator


@pytest.fixture
def calculator_class():
    return build_calculator()


@pytest.fixture
def calculator(calculator_class):
    return calculator_class()

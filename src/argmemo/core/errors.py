"""Error taxonomy.

Only caller-fixable usage errors are defined here. Whatever a memoized
computation raises is propagated untouched and never wrapped.
"""

from __future__ import annotations


class UsageError(ValueError):
    """Raised synchronously for misuse of the memoization API.

    Covers unregistered or non-identifier method names, presets without a
    result callable, arguments given to reset-all, double registration and
    registration of callables whose results cannot be memoized.
    """

"""Adapters: attach memoization to Python classes."""

from .methods import (
    MemoWise,
    clear_memo_wise,
    hybridmethod,
    memo_wise,
    memoize_method,
    preset_memo_wise,
    reset_memo_wise,
)

__all__ = [
    "memo_wise",
    "memoize_method",
    "MemoWise",
    "hybridmethod",
    "reset_memo_wise",
    "preset_memo_wise",
    "clear_memo_wise",
]

#!/usr/bin/env python3
"""Benchmark memoized reads under each key scheme.

Times the cache-hit path of memoized methods for every argument shape under
the FLAT, NESTED and HASHED key schemes, with ``functools.lru_cache`` on an
equivalent method as a baseline.

Usage:
    python scripts/benchmark_schemes.py --calls 100000 --repeats 5
    python scripts/benchmark_schemes.py --output bench.json --log-level DEBUG
"""

from __future__ import annotations

import argparse
import functools
import json
import time
from pathlib import Path

import numpy as np

from argmemo.adapters import memo_wise
from argmemo.core.config import default_config, merge_config, set_config
from argmemo.core.logging import get_logger
from argmemo.core.types import KeyScheme

logger = get_logger("benchmark_schemes")

# method name -> (args, kwargs) of the benchmarked call
CALLS = {
    "no_args": ((), {}),
    "one_positional": ((7,), {}),
    "one_keyword": ((), {"a": 7}),
    "positional": ((7, 8), {}),
    "keywords": ((), {"a": 7, "b": 8}),
    "splat": ((7, 8, 9), {}),
    "double_splat": ((), {"a": 7, "b": 8}),
    "mixed": ((7,), {"b": 8, "c": 9}),
}


def build_subject(scheme: KeyScheme, log_level: str = "WARN") -> type:
    """Build a class whose methods are registered under ``scheme``."""
    overrides = {"keys": {"scheme": scheme.value}, "logging": {"level": log_level}}
    set_config(merge_config(default_config(), overrides))

    class Subject:
        @memo_wise
        def no_args(self):
            return 0

        @memo_wise
        def one_positional(self, a):
            return a

        @memo_wise
        def one_keyword(self, *, a):
            return a

        @memo_wise
        def positional(self, a, b):
            return a + b

        @memo_wise
        def keywords(self, *, a, b):
            return a + b

        @memo_wise
        def splat(self, *args):
            return sum(args)

        @memo_wise
        def double_splat(self, **kwargs):
            return sum(kwargs.values())

        @memo_wise
        def mixed(self, a, *args, **kwargs):
            return a + sum(kwargs.values())

    return Subject


class LruSubject:
    @functools.lru_cache(maxsize=None)
    def no_args(self):
        return 0

    @functools.lru_cache(maxsize=None)
    def one_positional(self, a):
        return a

    @functools.lru_cache(maxsize=None)
    def one_keyword(self, *, a):
        return a

    @functools.lru_cache(maxsize=None)
    def positional(self, a, b):
        return a + b

    @functools.lru_cache(maxsize=None)
    def keywords(self, *, a, b):
        return a + b

    @functools.lru_cache(maxsize=None)
    def splat(self, *args):
        return sum(args)

    @functools.lru_cache(maxsize=None)
    def double_splat(self, **kwargs):
        return sum(kwargs.values())

    @functools.lru_cache(maxsize=None)
    def mixed(self, a, *args, **kwargs):
        return a + sum(kwargs.values())


def time_hits(subject: object, calls: int, repeats: int) -> dict[str, float]:
    """Median nanoseconds per cache hit, per method."""
    results = {}
    for name, (args, kwargs) in CALLS.items():
        method = getattr(subject, name)
        method(*args, **kwargs)

        samples = []
        for _ in range(repeats):
            start = time.perf_counter()
            for _ in range(calls):
                method(*args, **kwargs)
            samples.append((time.perf_counter() - start) / calls * 1e9)
        results[name] = float(np.median(samples))
    return results


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Benchmark memoization key schemes")
    parser.add_argument("--calls", type=int, default=100_000, help="Calls per sample")
    parser.add_argument("--repeats", type=int, default=5, help="Samples per method")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARN", "ERROR"],
        default="WARN",
        help="DEBUG reports sweep durations",
    )
    parser.add_argument("--output", type=str, default=None, help="Write results as JSON")
    args = parser.parse_args(argv)

    table = {}
    for scheme in KeyScheme:
        subject = build_subject(scheme, args.log_level)()
        with logger.timer(f"{scheme.value} sweep", calls=args.calls, repeats=args.repeats):
            table[scheme.value] = time_hits(subject, args.calls, args.repeats)
    with logger.timer("lru_cache sweep", calls=args.calls, repeats=args.repeats):
        table["lru_cache"] = time_hits(LruSubject(), args.calls, args.repeats)

    columns = list(table)
    print("=" * 60)
    print(f"{'ns per hit':<16}" + "".join(f"{c:>11}" for c in columns))
    print("-" * 60)
    for name in CALLS:
        print(f"{name:<16}" + "".join(f"{table[c][name]:>11.1f}" for c in columns))
    print("=" * 60)

    if args.output:
        path = Path(args.output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(table, indent=2))
        print(f"Results written to: {path}")

    return 0


if __name__ == "__main__":
    import sys

    sys.exit(main())

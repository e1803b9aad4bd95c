"""Sorting random doubles and polar pairs with three-way comparison functions."""

from __future__ import annotations

import random
import re
import sys
from dataclasses import dataclass
from functools import cmp_to_key

DEFAULT_SEED = 1

_INTEGER = re.compile(r"\s*([+-]?\d+)")


@dataclass(frozen=True)
class Polar:
    """A point in polar form."""

    mag: float
    ang: float


def compare_doubles(a: float, b: float) -> int:
    """Three-way comparison: -1, 0 or 1."""
    return (a > b) - (a < b)


def compare_polar(a: Polar, b: Polar) -> int:
    """Order by magnitude, then by angle."""
    if a.mag > b.mag:
        return 1
    if a.mag < b.mag:
        return -1
    return compare_doubles(a.ang, b.ang)


def _random_value(rng: random.Random) -> float:
    return rng.randrange(1001) / 10.0 - 50.0


def random_doubles(count: int, rng: random.Random | None = None) -> list[float]:
    """Return ``count`` values in [-50, 50] on a 0.1 grid."""
    if count < 0:
        raise ValueError("count must not be negative")
    if rng is None:
        rng = random.Random(DEFAULT_SEED)
    return [_random_value(rng) for _ in range(count)]


def random_polars(count: int, rng: random.Random | None = None) -> list[Polar]:
    """Return ``count`` random polars; the last shares its magnitude with the one before."""
    if count < 2:
        raise ValueError("at least two entries are needed")
    if rng is None:
        rng = random.Random(DEFAULT_SEED)
    polars = [Polar(_random_value(rng), _random_value(rng)) for _ in range(count - 1)]
    polars.append(Polar(polars[-1].mag, _random_value(rng)))
    return polars


def _entry_count(args: list[str], prog: str) -> int | None:
    if len(args) != 1:
        print(f"Usage: {prog} <number of entries>", file=sys.stderr)
        return None
    match = _INTEGER.match(args[0])
    count = int(match.group(1)) if match else 0
    if count < 2:
        print("Error: Number of entries must be at least 2", file=sys.stderr)
        return None
    return count


def main_doubles(argv: list[str] | None = None) -> int:
    """Sort and print a given number of random doubles."""
    args = sys.argv[1:] if argv is None else list(argv)
    count = _entry_count(args, "sort-doubles")
    if count is None:
        return 1
    for value in sorted(random_doubles(count), key=cmp_to_key(compare_doubles)):
        print(f"{value: 10.1f}")
    print()
    return 0


def main_polar(argv: list[str] | None = None) -> int:
    """Sort and print a given number of random polar pairs."""
    args = sys.argv[1:] if argv is None else list(argv)
    count = _entry_count(args, "sort-polar")
    if count is None:
        return 1
    for polar in sorted(random_polars(count), key=cmp_to_key(compare_polar)):
        print(f"{polar.mag:10.1f} {polar.ang:10.1f}")
    print()
    return 0
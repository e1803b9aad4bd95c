import math
import random
from functools import cmp_to_key

import pytest

from numlabs.sorting import (
    Polar,
    compare_doubles,
    compare_polar,
    main_doubles,
    main_polar,
    random_doubles,
    random_polars,
)


def test_compare_doubles_three_way():
    assert compare_doubles(1.0, 2.0) == -1
    assert compare_doubles(2.0, 1.0) == 1
    assert compare_doubles(3.5, 3.5) == 0


def test_compare_doubles_nan_is_unordered():
    assert compare_doubles(math.nan, 1.0) == 0


def test_compare_polar_uses_magnitude_first():
    assert compare_polar(Polar(1.0, 40.0), Polar(2.0, -40.0)) == -1
    assert compare_polar(Polar(3.0, -40.0), Polar(2.0, 40.0)) == 1


def test_compare_polar_breaks_ties_on_angle():
    assert compare_polar(Polar(1.0, -5.0), Polar(1.0, 5.0)) == -1
    assert compare_polar(Polar(1.0, 5.0), Polar(1.0, -5.0)) == 1
    assert compare_polar(Polar(1.0, 5.0), Polar(1.0, 5.0)) == 0


def test_sorting_with_compare_polar_is_ordered():
    polars = random_polars(50, random.Random(7))
    ordered = sorted(polars, key=cmp_to_key(compare_polar))
    keys = [(p.mag, p.ang) for p in ordered]
    assert keys == sorted(keys)


def test_random_doubles_range_and_grid():
    values = random_doubles(200, random.Random(3))
    assert len(values) == 200
    assert all(-50.0 <= v <= 50.0 for v in values)
    assert all(abs(v * 10 - round(v * 10)) < 1e-9 for v in values)


def test_random_doubles_is_reproducible():
    first = random_doubles(20)
    assert len(first) == 20
    assert all(-50.0 <= v <= 50.0 for v in first)
    assert first == random_doubles(20)

    seeded = random_doubles(20, random.Random(5))
    assert len(seeded) == 20
    assert seeded == random_doubles(20, random.Random(5))


def test_random_doubles_rejects_negative_count():
    with pytest.raises(ValueError):
        random_doubles(-1)


def test_random_polars_last_shares_magnitude():
    polars = random_polars(10, random.Random(11))
    assert len(polars) == 10
    assert polars[-1].mag == polars[-2].mag
    assert all(-50.0 <= p.ang <= 50.0 for p in polars)


def test_random_polars_needs_two_entries():
    with pytest.raises(ValueError):
        random_polars(1)


def _printed_lines(out):
    lines = out.splitlines()
    assert lines[-1] == ""
    return lines[:-1]


def test_main_doubles_prints_sorted_values(capsys):
    assert main_doubles(["15"]) == 0
    lines = _printed_lines(capsys.readouterr().out)
    values = [float(line) for line in lines]
    assert len(values) == 15
    assert values == sorted(values)


@pytest.mark.parametrize("args", [[], ["1"], ["abc"], ["3", "4"]])
def test_main_doubles_rejects_bad_arguments(args, capsys):
    assert main_doubles(args) == 1
    assert capsys.readouterr().err


def test_main_polar_prints_sorted_pairs(capsys):
    assert main_polar(["12"]) == 0
    lines = _printed_lines(capsys.readouterr().out)
    pairs = [tuple(float(part) for part in line.split()) for line in lines]
    assert len(pairs) == 12
    assert pairs == sorted(pairs)
    mags = [mag for mag, _ in pairs]
    assert len(set(mags)) < len(mags)


def test_main_polar_rejects_small_count(capsys):
    assert main_polar(["0"]) == 1
    assert "at least 2" in capsys.readouterr().err
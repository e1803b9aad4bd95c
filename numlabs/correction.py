"""Sensor correction: subtract a fitted quadratic error from raw readings."""

from __future__ import annotations

import struct
import sys
from typing import Iterable, Iterator

from numlabs.errors import ExitCode, LabError

A2 = -0.000358309
A1 = 1.24539
A0 = -395.213


def _single(value: float) -> float:
    """Round ``value`` to single precision."""
    return struct.unpack("f", struct.pack("f", value))[0]


def correction_offset(real: int) -> float:
    """Evaluate the error polynomial at ``real`` by Horner's rule in single precision."""
    res = _single(A2)
    res = _single(res * real + A1)
    res = _single(res * real + A0)
    return res


def correct(real: int) -> int:
    """Return the corrected reading, rounding the offset half away from zero."""
    res = correction_offset(real)
    rounded = int(res + 0.5) if res >= 0 else int(res - 0.5)
    return real - rounded


def _pairs(lines: Iterable[str]) -> Iterator[tuple[int, int]]:
    tokens = (token for line in lines for token in line.split())
    for ideal_text in tokens:
        real_text = next(tokens, None)
        if real_text is None:
            raise LabError("Error: reading without a matching value", ExitCode.DATA_READ_ERROR)
        try:
            yield int(ideal_text), int(real_text)
        except ValueError:
            raise LabError(
                f"Error: cannot parse '{ideal_text} {real_text}' as integers",
                ExitCode.DATA_READ_ERROR,
            ) from None


def correct_lines(lines: Iterable[str]) -> Iterator[str]:
    """Yield ``"ideal corrected"`` for each whitespace-separated ideal/real pair."""
    for ideal, real in _pairs(lines):
        yield f"{ideal} {correct(real)}"


def main(argv: list[str] | None = None) -> int:
    """Read ideal/real pairs from stdin and print the corrected data."""
    try:
        for line in correct_lines(sys.stdin):
            print(line)
    except LabError as err:
        print(err, file=sys.stderr)
        return int(err.code)
    return int(ExitCode.SUCCESS)
"""Polynomial least-squares fitting through the normal equations A'Az = A'b."""

from __future__ import annotations

import math
import re
import sys
from dataclasses import dataclass
from typing import IO, Iterable, Sequence

from numlabs.dynarray import GROWTH_AMOUNT, DynamicArray
from numlabs.errors import ExitCode, LabError

Point = tuple[float, float]
Matrix = list[list[float]]

_NUMBER = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_INTEGER = re.compile(r"\s*([+-]?\d+)")

_LONG_OPTIONS = {"order": True, "points": True, "verbose": False}
_SHORT_OPTIONS = {"o": "order", "p": "points", "v": "verbose"}


def _atof(text: str) -> float:
    """Parse the longest numeric prefix of ``text``; 0.0 when there is none."""
    match = _NUMBER.match(text)
    return float(match.group(1)) if match else 0.0


def _atoi(text: str) -> int:
    """Parse the longest integer prefix of ``text``; 0 when there is none."""
    match = _INTEGER.match(text)
    return int(match.group(1)) if match else 0


def read_points(stream: Iterable[str]) -> DynamicArray[Point]:
    """Read ``x y`` pairs, one per line, into a dynamic array.

    Blank lines are skipped; a line holding a single value is an error.
    """
    points: DynamicArray[Point] = DynamicArray(GROWTH_AMOUNT)
    for line_number, line in enumerate(stream, start=1):
        tokens = line.split()
        if not tokens:
            continue
        if len(tokens) < 2:
            raise LabError(
                f"Error: line {line_number} holds no y value", ExitCode.DATA_READ_ERROR
            )
        points.push((_atof(tokens[0]), _atof(tokens[1])))
    return points


def design_matrix(points: Iterable[Point], nc: int) -> tuple[Matrix, list[float]]:
    """Build the matrix of powers of x (``nc`` columns) and the vector of y values."""
    if nc < 1:
        raise ValueError("the matrix needs at least one column")
    pairs = list(points)
    a = [[1.0] + [math.pow(x, power) for power in range(1, nc)] for x, _ in pairs]
    b = [float(y) for _, y in pairs]
    return a, b


def _transpose(matrix: Sequence[Sequence[float]]) -> Matrix:
    return [list(column) for column in zip(*matrix)]


def _dot(u: Iterable[float], v: Iterable[float]) -> float:
    return math.fsum(p * q for p, q in zip(u, v))


def qr_solve(a: Sequence[Sequence[float]], b: Sequence[float]) -> list[float]:
    """Solve ``a x = b`` (least squares when ``a`` is tall) by Householder QR."""
    rows = len(a)
    if rows == 0:
        raise ValueError("the matrix has no rows")
    cols = len(a[0])
    if any(len(row) != cols for row in a):
        raise ValueError("the matrix rows differ in length")
    if len(b) != rows:
        raise ValueError("the vector length does not match the matrix rows")
    if rows < cols:
        raise ValueError("the matrix has fewer rows than columns")

    r = [[float(value) for value in row] for row in a]
    y = [float(value) for value in b]

    for k in range(cols):
        column = [row[k] for row in r[k:]]
        norm = math.hypot(*column)
        if norm == 0.0:
            raise LabError("Error: matrix is singular", ExitCode.NO_SOLUTION)
        alpha = -math.copysign(norm, column[0])
        v = [column[0] - alpha] + column[1:]
        v_norm2 = _dot(v, v)
        if v_norm2 == 0.0:
            continue
        for j in range(k, cols):
            factor = 2.0 * _dot(v, (row[j] for row in r[k:])) / v_norm2
            for vi, row in zip(v, r[k:]):
                row[j] -= factor * vi
        factor = 2.0 * _dot(v, y[k:]) / v_norm2
        y[k:] = [yi - factor * vi for yi, vi in zip(y[k:], v)]

    x = [0.0] * cols
    for i in reversed(range(cols)):
        pivot = r[i][i]
        if pivot == 0.0 or not math.isfinite(pivot):
            raise LabError("Error: matrix is singular", ExitCode.NO_SOLUTION)
        x[i] = (y[i] - _dot(r[i][i + 1 :], x[i + 1 :])) / pivot
    return x


@dataclass(frozen=True)
class LeastSquaresFit:
    """The matrices of a normal-equation fit and its coefficients, lowest power first."""

    a: Matrix
    b: list[float]
    at: Matrix
    ata: Matrix
    atb: list[float]
    coefficients: list[float]

    @property
    def order(self) -> int:
        """Degree of the fitted polynomial."""
        return len(self.coefficients) - 1


def fit_normal(points: Iterable[Point], order: int) -> LeastSquaresFit:
    """Fit a polynomial of ``order`` to ``points`` by solving A'Az = A'b with QR."""
    if order < 1:
        raise ValueError("order must be 1 or more")
    a, b = design_matrix(points, order + 1)
    at = _transpose(a) if a else [[] for _ in range(order + 1)]
    ata = [[_dot(ci, cj) for cj in at] for ci in at]
    atb = [_dot(ci, b) for ci in at]
    coefficients = qr_solve(ata, atb)
    return LeastSquaresFit(a=a, b=b, at=at, ata=ata, atb=atb, coefficients=coefficients)


def format_polynomial(coefficients: Sequence[float]) -> str:
    """Render ``f(x) = c0 + c1x + c2x^2 ...`` the way the report prints it."""
    last = len(coefficients) - 1
    parts = ["  f(x) ="]
    for power, value in enumerate(coefficients):
        if power == 0:
            parts.append(f" {value:g} +")
            continue
        term = f" {value:g}x " if power == 1 else f" {value:g}x^{power} "
        parts.append(term + ("+" if power < last else ""))
    return "".join(parts)


def _matrix_block(name: str, matrix: Sequence[Sequence[float]], rows: int, cols: int) -> list[str]:
    lines = [f"{name} ({rows} x {cols})"]
    lines.extend(
        f"{i}: " + "".join(f"{value:.5f} " for value in row) for i, row in enumerate(matrix)
    )
    return lines


def _vector_block(name: str, vector: Sequence[float]) -> list[str]:
    lines = [f"{name} ({len(vector)} x 1)"]
    lines.extend(f"{i}: {value:.5f}" for i, value in enumerate(vector))
    return lines


def format_verbose(fit: LeastSquaresFit) -> str:
    """Render the intermediate matrices and vectors of a fit."""
    nr = len(fit.a)
    nc = len(fit.coefficients)
    lines = ["Verbose data:"]
    lines += _matrix_block("A", fit.a, nr, nc)
    lines += _vector_block("b", fit.b)
    lines += _matrix_block("AT", fit.at, nc, nr)
    lines += _matrix_block("ATA", fit.ata, nc, nc)
    lines += _vector_block("ATB", fit.atb)
    return "\n".join(lines)


def _usage() -> str:
    return "\n".join(
        [
            "This program uses least squares to generate approximate functions for data.",
            "usage: hw11   -o[rder] num   -p[oints] file   [-v[erb[ose]]] ",
            "Where: -order  - required, order of the equation to use.  Must be 1 or more",
            "       -points - required, list of points to evaluate (2 col data)",
            "       -verbose     - optional verbose flag",
            " e.g: ./hw12 -order 2   -points  points.txt   - use Norm Gaussian elimination"
            " for a 2nd order equation",
        ]
    )


class _UsageError(Exception):
    pass


def _parse_args(argv: list[str]) -> dict[str, str | bool]:
    """Parse options the way getopt_long_only does: long names may be abbreviated."""
    options: dict[str, str | bool] = {}
    args = iter(argv)
    for arg in args:
        if arg == "--":
            break
        if not arg.startswith("-") or arg == "-":
            continue
        body = arg.lstrip("-")
        name, eq, inline = body.partition("=")
        matches = [long for long in _LONG_OPTIONS if name and long.startswith(name)]
        if len(matches) == 1:
            option = matches[0]
            value: str | None = inline if eq else None
        elif not arg.startswith("--") and body[:1] in _SHORT_OPTIONS:
            option = _SHORT_OPTIONS[body[0]]
            rest = body[1:]
            value = rest or None
            if not _LONG_OPTIONS[option] and rest:
                raise _UsageError(f"unrecognized option '{arg}'")
        else:
            raise _UsageError(f"unrecognized option '{arg}'")
        if _LONG_OPTIONS[option]:
            if value is None:
                value = next(args, None)
                if value is None:
                    raise _UsageError(f"option '{arg}' requires an argument")
            options[option] = value
        else:
            options[option] = True
    return options


def main(argv: list[str] | None = None) -> int:
    """Fit a polynomial to a file of points and print the result."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        options = _parse_args(args)
    except _UsageError as err:
        print(err, file=sys.stderr)
        print("Usage: hw11 -order num -points file [-verbose]", file=sys.stderr)
        return 1

    order = _atoi(str(options.get("order", "0")))
    in_name = options.get("points")
    verbose = bool(options.get("verbose", False))

    if order < 1 or not isinstance(in_name, str):
        print(_usage(), file=sys.stderr)
        return int(ExitCode.SYNTAX_ERROR)

    try:
        with open(in_name, encoding="utf-8") as handle:
            points = read_points(handle)
    except OSError:
        print(f"Error: unable to open data points file '{in_name}'", file=sys.stderr)
        return int(ExitCode.PGM_FILE_NOT_FOUND)
    except LabError as err:
        print(err, file=sys.stderr)
        return int(err.code)

    try:
        fit = fit_normal(points, order)
    except LabError as err:
        print(err, file=sys.stderr)
        return int(err.code)

    if verbose:
        print(format_verbose(fit))
    print("Least Squares Solution via Norm factorization:")
    if verbose:
        for i, value in enumerate(fit.coefficients):
            print(f" x_ls[{i:1d}] = {value:20.16f} ")
        print()
    print(format_polynomial(fit.coefficients))
    print()
    return int(ExitCode.SUCCESS)


def _run(stream: IO[str]) -> DynamicArray[Point]:
    return read_points(stream)
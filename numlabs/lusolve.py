"""Solve a square linear system Ax = b, read from a text file, by permuted LU factorisation."""

from __future__ import annotations

import math
import re
import sys
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Sequence

from numlabs.errors import ExitCode, LabError

Matrix = list[list[float]]

_DIMENSIONS = re.compile(r"\s*\+?(\d+)(?!\d)\s*\+?(\d+)")
_NUMBER = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

_NO_SOLUTION_MESSAGE = "Error: Matrix does not have a solution. "

_USAGE = "\n".join(
    [
        "This program using GSL PLU factorization to solve a system ",
        "of algebraic equations via Ax=b",
        "usage: hw12  -i[n[put]] file [-v[erb[ose] [-d[ata]",
        "Where: -input file - the matrix file to process.",
        "                     first line contains the number",
        "                     rows and columns in the subsequent",
        "                     data",
        "        -data       - Print the input A and b data",
        "       -verbose    - Enable optional debugging information",
        "",
        "e.g.   hw12 -i rand.txt ",
    ]
)


def _atof(text: str) -> float:
    """Parse the longest numeric prefix of ``text``; 0.0 when there is none."""
    match = _NUMBER.match(text)
    return float(match.group(1)) if match else 0.0


def read_dimensions(lines: Iterator[str]) -> tuple[int, int]:
    """Consume lines up to the dimension line and return ``(rows, cols)`` of ``[A b]``.

    Lines starting with ``#`` are comments.  The column count must be one more
    than the row count, since the last column holds ``b``.
    """
    for line in lines:
        if line.startswith("#"):
            continue
        match = _DIMENSIONS.match(line)
        if match is None:
            raise LabError("Error reading matrix dimensions.", ExitCode.SYNTAX_ERROR)
        rows, cols = int(match.group(1)), int(match.group(2))
        if cols != rows + 1:
            raise LabError(
                "Error: Number of columns must be one more than the number of rows.",
                ExitCode.TOO_MANY_COLS,
            )
        if rows == 0:
            raise LabError("Memory allocation failed for the matrix.", ExitCode.CALLOC_ERROR)
        return rows, cols
    raise LabError(
        "No valid matrix dimensions line found in the file.", ExitCode.FILE_NOT_FOUND
    )


def read_system(stream: Iterable[str]) -> tuple[Matrix, list[float]]:
    """Read an augmented matrix file and return the matrix ``A`` and the vector ``b``."""
    lines = iter(stream)
    rows, cols = read_dimensions(lines)
    width = cols - 1
    a: Matrix = [[0.0] * width for _ in range(rows)]
    b = [0.0] * rows
    row = 0
    for line in lines:
        if line.startswith("#"):
            continue
        tokens = line.split()
        if len(tokens) > cols:
            raise LabError("Error: Too many columns of data", ExitCode.TOO_MANY_COLS)
        if len(tokens) < cols:
            raise LabError("Error: Not enough columns of data", ExitCode.NOT_ENOUGH_COLS)
        if row >= rows:
            raise LabError("Error: Too many rows of data", ExitCode.TOO_MANY_ROWS)
        values = [_atof(token) for token in tokens]
        a[row] = values[:width]
        b[row] = values[width]
        row += 1
    if row < rows:
        raise LabError("Error: Not enough rows of data", ExitCode.NOT_ENOUGH_ROWS)
    return a, b


@dataclass(frozen=True)
class LUDecomposition:
    """A packed ``PA = LU`` factorisation.

    ``lu`` holds ``U`` on and above the diagonal and the multipliers of the
    unit lower triangle ``L`` below it.  ``permutation[i]`` is the original row
    placed at row ``i``; ``signum`` is the sign of that permutation.
    """

    lu: Matrix
    permutation: tuple[int, ...]
    signum: int

    @property
    def size(self) -> int:
        """Number of rows (and columns) of the factorised matrix."""
        return len(self.lu)

    @property
    def lower(self) -> Matrix:
        """The unit lower-triangular factor."""
        return [
            [row[j] if j < i else (1.0 if j == i else 0.0) for j in range(self.size)]
            for i, row in enumerate(self.lu)
        ]

    @property
    def upper(self) -> Matrix:
        """The upper-triangular factor."""
        return [
            [value if j >= i else 0.0 for j, value in enumerate(row)]
            for i, row in enumerate(self.lu)
        ]


def lu_decompose(matrix: Sequence[Sequence[float]]) -> LUDecomposition:
    """Factorise a square matrix with partial pivoting.

    A singular matrix still factorises; solving with it then fails.
    """
    n = len(matrix)
    if n == 0 or any(len(row) != n for row in matrix):
        raise LabError("Error: matrix is not square", ExitCode.MATRIX_NOT_SQUARE)
    lu = [[float(value) for value in row] for row in matrix]
    permutation = list(range(n))
    signum = 1
    for j in range(n):
        pivot_row = max(range(j, n), key=lambda i: abs(lu[i][j]))
        if pivot_row != j:
            lu[j], lu[pivot_row] = lu[pivot_row], lu[j]
            permutation[j], permutation[pivot_row] = permutation[pivot_row], permutation[j]
            signum = -signum
        pivot_values = lu[j]
        pivot = pivot_values[j]
        if pivot == 0.0:
            continue
        for row in lu[j + 1 :]:
            factor = row[j] / pivot
            row[j] = factor
            row[j + 1 :] = [v - factor * u for v, u in zip(row[j + 1 :], pivot_values[j + 1 :])]
    return LUDecomposition(lu=lu, permutation=tuple(permutation), signum=signum)


def _dot(u: Iterable[float], v: Iterable[float]) -> float:
    return math.fsum(p * q for p, q in zip(u, v))


def lu_solve(decomposition: LUDecomposition, b: Sequence[float]) -> list[float]:
    """Solve ``A x = b`` using the factorisation of ``A``."""
    n = decomposition.size
    if len(b) != n:
        raise ValueError("the vector length does not match the matrix size")
    lu = decomposition.lu
    if any(row[i] == 0.0 for i, row in enumerate(lu)):
        raise LabError(_NO_SOLUTION_MESSAGE, ExitCode.NO_SOLUTION)
    y = [float(b[p]) for p in decomposition.permutation]
    for i, row in enumerate(lu):
        y[i] -= _dot(row[:i], y[:i])
    x = [0.0] * n
    for i in reversed(range(n)):
        row = lu[i]
        x[i] = (y[i] - _dot(row[i + 1 :], x[i + 1 :])) / row[i]
    return x


def _format_data(a: Matrix, b: Sequence[float]) -> str:
    lines = ["Matrix A:"]
    lines.extend("".join(f"{value:8.4f} " for value in row) for row in a)
    lines.append("Vector b:")
    lines.extend(f"{value:8.4f}" for value in b)
    return "\n".join(lines)


def _format_decomposition(decomposition: LUDecomposition) -> str:
    n = decomposition.size
    lines = [
        f"Signum {decomposition.signum}  ",
        "P = [" + "".join(f" {index}" for index in decomposition.permutation) + " ] ",
        "LU matrix = ",
        f"Matrix LU:{n} x {n}:",
    ]
    lines.extend("".join(f"{value:7.2g} " for value in row) for row in decomposition.lu)
    return "\n".join(lines)


_LONG_OPTIONS = {
    "data": ("data", False),
    "in": ("input", True),
    "input": ("input", True),
    "verb": ("verbose", False),
    "verbose": ("verbose", False),
}
_SHORT_OPTIONS = {"i": ("input", True), "v": ("verbose", False), "d": ("data", False)}


class _UsageError(Exception):
    pass


@dataclass
class _Options:
    input: str | None = None
    verbose: bool = False
    data: bool = False
    positional: list[str] = field(default_factory=list)


def _match_long(name: str) -> tuple[str, bool] | None:
    if name in _LONG_OPTIONS:
        return _LONG_OPTIONS[name]
    found = {target for option, target in _LONG_OPTIONS.items() if name and option.startswith(name)}
    if len(found) > 1:
        raise _UsageError(f"option '{name}' is ambiguous")
    return found.pop() if found else None


def _parse_args(argv: list[str]) -> _Options:
    """Parse options as getopt_long_only does; bad options are reported and skipped."""
    options = _Options()
    args = iter(argv)

    def warn(message: str) -> None:
        print(f"hw12: {message}", file=sys.stderr)

    def apply(key: str, takes_value: bool, inline: str | None, label: str) -> None:
        if takes_value:
            value = inline if inline is not None else next(args, None)
            if value is None:
                warn(f"option '{label}' requires an argument")
                return
            options.input = value
        elif key == "verbose":
            options.verbose = True
        else:
            options.data = True

    for arg in args:
        if arg == "--":
            options.positional.extend(args)
            break
        if not arg.startswith("-") or arg == "-":
            options.positional.append(arg)
            continue
        double = arg.startswith("--")
        body = arg[2:] if double else arg[1:]
        if not double and len(body) == 1 and body in _SHORT_OPTIONS:
            key, takes_value = _SHORT_OPTIONS[body]
            apply(key, takes_value, None, arg)
            continue
        name, eq, inline = body.partition("=")
        try:
            match = _match_long(name)
        except _UsageError as err:
            warn(str(err))
            continue
        if match is not None:
            key, takes_value = match
            if eq and not takes_value:
                warn(f"option '{arg}' doesn't allow an argument")
                continue
            apply(key, takes_value, inline if eq else None, arg)
            continue
        if double:
            warn(f"unrecognized option '{arg}'")
            continue
        for position, char in enumerate(body):
            if char not in _SHORT_OPTIONS:
                warn(f"invalid option -- '{char}'")
                continue
            key, takes_value = _SHORT_OPTIONS[char]
            if takes_value:
                apply(key, takes_value, body[position + 1 :] or None, f"-{char}")
                break
            apply(key, takes_value, None, f"-{char}")
    return options


def main(argv: list[str] | None = None) -> int:
    """Read a system from a file, factorise it and print the solution."""
    options = _parse_args(sys.argv[1:] if argv is None else list(argv))
    if options.positional or options.input is None:
        print(_USAGE, file=sys.stderr)
        return int(ExitCode.SYNTAX_ERROR)

    print(f"Processing {options.input}", flush=True)
    try:
        handle = open(options.input, encoding="utf-8")
    except OSError:
        print(f"Error: input file '{options.input}' not found")
        return int(ExitCode.FILE_NOT_FOUND)

    with handle:
        try:
            a, b = read_system(handle)
        except LabError as err:
            print(err, file=sys.stderr)
            return int(err.code)

    if options.data:
        print(_format_data(a, b))

    try:
        decomposition = lu_decompose(a)
    except LabError:
        print(_NO_SOLUTION_MESSAGE)
        return int(ExitCode.NO_SOLUTION)

    if options.verbose:
        print(_format_decomposition(decomposition))

    try:
        x = lu_solve(decomposition, b)
    except LabError:
        print(_NO_SOLUTION_MESSAGE)
        return int(ExitCode.NO_SOLUTION)

    print("Solution x:")
    for value in x:
        print(f"{value:8.4f}")
    print()
    return int(ExitCode.SUCCESS)
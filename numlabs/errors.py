"""Exit codes shared by the command-line tools and the exception that carries them."""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit statuses reported by the tools."""

    MALLOC_ERROR = -99
    CALLOC_ERROR = -100
    REALLOC_ERROR = -101
    STR_LENGTH_ERROR = 100

    SUCCESS = 0
    SYNTAX_ERROR = 20
    PGM_FILE_NOT_FOUND = 10
    INTERNAL_ERROR = 99
    DATA_READ_ERROR = 98
    FILE_NOT_FOUND = 97

    NO_PIVOT_FOUND = 3
    TOO_MANY_COLS = 4
    NOT_ENOUGH_COLS = 5
    TOO_MANY_ROWS = 6
    NOT_ENOUGH_ROWS = 7
    MATRIX_NOT_SQUARE = 8
    NO_SOLUTION = 9


class LabError(Exception):
    """An error that maps onto one of the tools' exit codes."""

    def __init__(self, message: str, code: ExitCode | int) -> None:
        super().__init__(message)
        self.message = message
        self.code = ExitCode(code)

    def __str__(self) -> str:
        return self.message
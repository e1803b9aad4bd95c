import pytest

from numlabs.errors import ExitCode, LabError


def test_lab_error_keeps_message():
    err = LabError("too many columns", ExitCode.TOO_MANY_COLS)
    assert str(err) == "too many columns"
    assert err.message == "too many columns"


def test_lab_error_coerces_integer_code():
    err = LabError("bad", 4)
    assert err.code is ExitCode.TOO_MANY_COLS


def test_lab_error_rejects_unknown_code():
    with pytest.raises(ValueError):
        LabError("bad", 12345)


def test_lab_error_is_raised_and_caught():
    err = LabError("no solution", ExitCode.NO_SOLUTION)
    assert int(err.code) == 9
    assert str(err) == "no solution"
    with pytest.raises(LabError) as info:
        raise err
    assert info.value is err
    assert info.value.code is ExitCode.NO_SOLUTION


@pytest.mark.parametrize(
    "value, expected",
    [
        (20, ExitCode.SYNTAX_ERROR),
        (97, ExitCode.FILE_NOT_FOUND),
        (10, ExitCode.PGM_FILE_NOT_FOUND),
        (-100, ExitCode.CALLOC_ERROR),
    ],
)
def test_exit_codes_match_source_values(value, expected):
    err = LabError("failure", value)
    assert err.code is expected
    assert int(err.code) == value


def test_exit_code_lookup_by_value():
    assert ExitCode(98) is ExitCode.DATA_READ_ERROR
    assert ExitCode(7) is ExitCode.NOT_ENOUGH_ROWS
import threading
from array import array
from unittest.mock import patch

import pytest

from numlabs.errors import ExitCode, LabError
from numlabs.fill import (
    MAX_THREADS,
    STATUS_UPDATE_RATE,
    SharedProgress,
    fill_parallel,
    fill_segment,
    main,
    mutex_check,
    verify,
)


def _zeros(size):
    return array("I", bytes(array("I").itemsize * size))


def test_fill_parallel_produces_verified_data():
    data, codes = fill_parallel(1000, 4, False, False)
    assert len(data) == 1000
    assert verify(data) == 1000
    assert codes == [index + 10 for index in range(4)]


def test_fill_parallel_items_are_multiples_of_four():
    data, _ = fill_parallel(120, 3, False, False)
    assert list(data) == [4 * i for i in range(120)]


def test_fill_parallel_leaves_remainder_unfilled():
    data, _ = fill_parallel(10, 3, False, False)
    assert data[9] == 0
    with pytest.raises(LabError) as info:
        verify(data)
    assert info.value.code == ExitCode.INTERNAL_ERROR


@pytest.mark.parametrize("threads", [0, MAX_THREADS + 1])
def test_fill_parallel_rejects_thread_count(threads):
    with pytest.raises(ValueError):
        fill_parallel(100, threads, False, False)


def test_fill_parallel_with_status_tracking_still_verifies():
    data, codes = fill_parallel(400, 2, True, False)
    assert verify(data) == 400
    assert codes == [10, 11]


def test_fill_segment_touches_only_its_segment():
    data = _zeros(30)
    code = fill_segment(data, 1, 10, SharedProgress(), False, False)
    assert code == 11
    assert list(data[10:20]) == [4 * i for i in range(10, 20)]
    assert all(value == 0 for value in data[:10])
    assert all(value == 0 for value in data[20:])


def test_fill_segment_reports_full_progress():
    progress = SharedProgress()
    fill_segment(_zeros(100), 0, 100, progress, True, False)
    assert progress.progress == STATUS_UPDATE_RATE


def test_fill_segment_without_tracking_keeps_progress():
    progress = SharedProgress()
    fill_segment(_zeros(50), 0, 50, progress, False, False)
    assert progress.progress == 0


def test_verify_reports_first_bad_index():
    data, _ = fill_parallel(64, 2, False, False)
    data[37] = 5
    with pytest.raises(LabError) as info:
        verify(data)
    assert "inData[37]" in str(info.value)


def test_verify_of_empty_data():
    assert verify(array("I")) == 0


def test_shared_progress_counts_across_threads():
    progress = SharedProgress()

    def work():
        for _ in range(1000):
            progress.advance()

    workers = [threading.Thread(target=work) for _ in range(8)]
    for worker in workers:
        worker.start()
    for worker in workers:
        worker.join()
    assert progress.progress == 8000


def test_advance_returns_new_total():
    progress = SharedProgress()
    assert [progress.advance() for _ in range(3)] == [1, 2, 3]


def test_mutex_check_runs_rounds_and_restores_value(capsys):
    progress = SharedProgress()
    with patch("time.sleep"):
        rounds = mutex_check(progress, 2)
    assert rounds == 2
    assert progress.processed == 0
    out = capsys.readouterr().out
    assert "*** mutex_check thread started" in out
    assert "*** Mutex_check thread ended" in out


def test_mutex_check_restarts_on_change():
    progress = SharedProgress()
    progress.processed = 5
    with patch("time.sleep"):
        rounds = mutex_check(progress, 2)
    assert rounds > 2
    assert progress.processed == 5


def test_main_help_succeeds(capsys):
    assert main(["-h"]) == ExitCode.SUCCESS
    assert "--threads" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [["-t", "0"], ["-t", "9"], ["-t", "2", "extra"]])
def test_main_syntax_errors(argv, capsys):
    assert main(argv) == ExitCode.SYNTAX_ERROR
    assert "usage: hw13" in capsys.readouterr().err


def test_main_unknown_option():
    assert main(["-x"]) == ExitCode.INTERNAL_ERROR
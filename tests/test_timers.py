from unittest.mock import patch

import pytest

from numlabs.timers import CpuTimer


def test_single_session_accumulates_difference():
    timer = CpuTimer("t")
    with patch("time.process_time", side_effect=[1.0, 3.5]):
        timer.start()
        timer.stop()
    assert timer.elapsed == pytest.approx(2.5)
    assert timer.running is False


def test_sessions_accumulate():
    timer = CpuTimer("t")
    with patch("time.process_time", side_effect=[0.0, 1.0, 5.0, 7.0]):
        timer.start()
        timer.stop()
        timer.start()
        timer.stop()
    assert timer.elapsed == pytest.approx(3.0)


def test_stopping_a_stopped_timer_reports_and_keeps_total(capsys):
    timer = CpuTimer("t")
    with patch("time.process_time", side_effect=[0.0, 2.0, 9.0]):
        timer.start()
        timer.stop()
        timer.stop()
    assert timer.elapsed == pytest.approx(2.0)
    assert "Error, stopped timer t stopped again." in capsys.readouterr().err


def test_starting_a_running_timer_reports(capsys):
    timer = CpuTimer("clock")
    with patch("time.process_time", side_effect=[0.0, 1.0]):
        timer.start()
        timer.start()
    assert timer.running is True
    assert "Error, running timer clock started." in capsys.readouterr().err


def test_report_stops_a_running_timer():
    timer = CpuTimer("t")
    with patch("time.process_time", side_effect=[0.0, 2.0]):
        timer.start()
        text = timer.report()
    assert text == "Elapsed CPU Time t = 2.00 seconds"
    assert timer.running is False


def test_report_per_iteration():
    timer = CpuTimer("t")
    with patch("time.process_time", side_effect=[0.0, 2.0]):
        timer.start()
        text = timer.report_per_iteration(4)
    assert text == "Elapsed CPU Time per Iteration (t, 4) = 5.000000e-01 seconds"


def test_report_per_iteration_rejects_zero():
    with pytest.raises(ValueError):
        CpuTimer("t").report_per_iteration(0)


def test_reset_clears_total():
    timer = CpuTimer("t")
    with patch("time.process_time", side_effect=[0.0, 4.0]):
        timer.start()
        timer.stop()
    timer.reset()
    assert timer.elapsed == 0.0


def test_context_manager_times_block():
    with patch("time.process_time", side_effect=[10.0, 10.25]):
        with CpuTimer("block") as timer:
            assert timer.running is True
    assert timer.elapsed == pytest.approx(0.25)
    assert timer.running is False
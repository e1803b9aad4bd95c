"""Fill a large array with multiples of four from several threads, then verify it."""

from __future__ import annotations

import argparse
import re
import sys
import threading
import time
from array import array
from typing import Sequence

from numlabs.errors import ExitCode, LabError
from numlabs.timers import CpuTimer

DATA_SIZE = 136 * 3 * 5 * 7 * 146 * 512
DEBUG_DATA_SIZE = 136 * 3 * 5 * 7 * 146
VALGRIND_DATA_SIZE = 30 * 3 * 5 * 7 * 8 * 1024

MAX_THREADS = 8
STATUS_UPDATE_RATE = 10
MUTEX_CHECK_COUNT = 2

_MASK = 0xFFFFFFFF
_VERIFY_CHUNK = 1 << 20
_INTEGER = re.compile(r"\s*([+-]?\d+)")


class SharedProgress:
    """Counters shared between threads and guarded by one lock."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.progress = 0
        self.processed = 0

    def advance(self) -> int:
        """Count one more progress step and return the new total."""
        with self.lock:
            self.progress += 1
            return self.progress


def _quadruples(first: int, last: int) -> array:
    """The values ``4*i`` (as unsigned 32-bit) for ``first <= i < last``."""
    if last <= first:
        return array("I")
    if 4 * (last - 1) <= _MASK:
        return array("I", range(4 * first, 4 * last, 4))
    return array("I", ((4 * i) & _MASK for i in range(first, last)))


def _first_reaching(percent: float, offset: int, seg_size: int) -> int:
    """Smallest ``k >= offset`` with ``100*k/seg_size >= percent``, or ``seg_size``."""
    k = max(offset, int(percent * seg_size / 100.0))
    while k > offset and 100.0 * (k - 1) / seg_size >= percent:
        k -= 1
    while k < seg_size and 100.0 * k / seg_size < percent:
        k += 1
    return k


def fill_segment(
    data: array,
    thread_index: int,
    seg_size: int,
    progress: SharedProgress,
    track_status: bool,
    verbose: bool,
) -> int:
    """Write ``4*i`` into this thread's segment of ``data``; return the task code.

    With ``track_status`` the shared progress advances at every tenth of the
    segment and once more at the end.
    """
    start = seg_size * thread_index
    if verbose:
        print(
            f"Thread index:{thread_index} track status:{int(track_status)} "
            f"seg size:{seg_size}K data ptr:{id(data):#x}",
            flush=True,
        )

    offset = 0
    percent = 10.0
    while offset < seg_size:
        if track_status and percent < 100.0:
            trigger = _first_reaching(percent, offset, seg_size)
        else:
            trigger = seg_size
        stop = min(trigger + 1, seg_size)
        data[start + offset : start + stop] = _quadruples(start + offset, start + stop)
        if trigger < seg_size:
            progress.advance()
            percent += 10
            if verbose:
                print(f"{thread_index} ", end="", flush=True)
        offset = stop

    if track_status:
        progress.advance()
    return thread_index + 10


def _report_status(
    progress: SharedProgress, workers: Sequence[threading.Thread], data_size: int, threads: int
) -> None:
    target = threads * STATUS_UPDATE_RATE
    while True:
        with progress.lock:
            done = progress.progress
        if done == target or not any(worker.is_alive() for worker in workers):
            return
        time.sleep(1)
        with progress.lock:
            done = progress.progress
            lines = (data_size // target) * done
            print(f"Processed: {lines} lines {done * 100 // target}% completed", flush=True)


def fill_parallel(
    data_size: int, threads: int, track_status: bool, verbose: bool
) -> tuple[array, list[int]]:
    """Fill an array of ``data_size`` items using ``threads`` workers.

    Returns the array and each worker's task code.  Items beyond the last
    whole segment are left at zero.
    """
    if not 1 <= threads <= MAX_THREADS:
        raise ValueError(f"threads must be between 1 and {MAX_THREADS}")
    if data_size < 0:
        raise ValueError("data size must not be negative")

    seg_size = data_size // threads
    data = array("I", bytes(array("I").itemsize * data_size))
    progress = SharedProgress()
    codes = [0] * threads

    def run(index: int) -> None:
        codes[index] = fill_segment(data, index, seg_size, progress, track_status, verbose)

    workers = [threading.Thread(target=run, args=(index,)) for index in range(threads)]
    for index, worker in enumerate(workers):
        worker.start()
        if verbose:
            print(f"Thread index:{index}  ID:{worker.ident} started")

    if track_status:
        _report_status(progress, workers, data_size, threads)

    for index, worker in enumerate(workers):
        worker.join()
        if verbose:
            print(f"Thread index {index}, join RC 0, task rc {codes[index]}", flush=True)
    return data, codes


def verify(data: Sequence[int]) -> int:
    """Check that item ``i`` holds ``4*i``; return the number of items checked."""
    size = len(data)
    for first in range(0, size, _VERIFY_CHUNK):
        last = min(first + _VERIFY_CHUNK, size)
        expected = _quadruples(first, last)
        block = data[first:last]
        if block != expected:
            for offset, (value, wanted) in enumerate(zip(block, expected)):
                if value != wanted:
                    index = first + offset
                    raise LabError(
                        f"Error inData[{index}]= {value} != {wanted}",
                        ExitCode.INTERNAL_ERROR,
                    )
    return size


def mutex_check(progress: SharedProgress, rounds: int = MUTEX_CHECK_COUNT) -> int:
    """Repeatedly hold the lock while ``processed`` holds a bogus value.

    Runs until ``processed`` stays unchanged for ``rounds`` rounds and
    returns the number of rounds run.
    """
    print("*** mutex_check thread started", flush=True)
    copy = 0
    count = rounds
    performed = 0
    while count > 0:
        count -= 1
        with progress.lock:
            if copy != progress.processed:
                count = rounds
            copy = progress.processed
            progress.processed = -999999
            time.sleep(1)
            progress.processed = copy
        time.sleep(1)
        performed += 1
    print("*** Mutex_check thread ended", flush=True)
    return performed


_USAGE = "\n".join(
    [
        "This program demonstrates threading performance.",
        "usage: hw13 -t[hreads] num [-s[tatus]] [-f[ast]] [-m[utex[check]]] [-v[erbose]] ",
        f"Where: -t[hreads] num  - number of threads 1 to {MAX_THREADS},required",
        "       -s[tatus]       - display thread progress, optional",
        "       -v[erbose]      - verbose flag, optional",
        "       -f[ast]         - shorter run for Valgrind, optional",
        "       -m[utex[check]] - add a progress variable mutex text verification step",
        "       -h[elp]         - this help message",
        "eg: hw13 -t 3 -status",
    ]
)

_HELP = "\n".join(
    [
        "Usage: hw13 -t[hreads] num [-s[tatus]] [-f[ast]] [-m[utex[check]]] [-v[erbose]]",
        "Options:",
        f"  -t, --threads=num    Specify the number of threads (1 to {MAX_THREADS}), required",
        "  -s, --status         Display thread progress, optional",
        "  -v, --verbose        Enable verbose output, optional",
        "  -f, --fast           Use a smaller data size for faster runs, optional",
        "  -m, --mutexcheck     Enable mutex check, optional",
        "  -h, --help           Display this help and exit",
        "",
        "Examples:",
        "  hw13 -t 3 -s -v       # Runs with 3 threads, status enabled, in verbose mode",
        "  hw13 -t 2 -f          # Runs with 2 threads and uses smaller data size for fast"
        " execution",
        "  hw13 -h               # Displays this help information",
    ]
)


class _UsageError(Exception):
    pass


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:  # type: ignore[override]
        raise _UsageError(message)


def _atoi(text: str) -> int:
    match = _INTEGER.match(text)
    return int(match.group(1)) if match else 0


def _build_parser() -> _Parser:
    parser = _Parser(prog="hw13", add_help=False)
    parser.add_argument("-t", "--threads", default="1")
    parser.add_argument("-s", "--status", action="store_true")
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("-f", "--fast", action="store_true")
    parser.add_argument("-m", "--mutexcheck", action="store_true")
    parser.add_argument("-h", "--help", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Fill and verify the array from the command line."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        options, extras = _build_parser().parse_known_args(args)
    except _UsageError as err:
        print(f"Internal error: {err}")
        return int(ExitCode.INTERNAL_ERROR)

    unknown = [arg for arg in extras if arg.startswith("-") and arg != "-"]
    if unknown:
        print(f"Internal error: undefined option {unknown[0]}")
        return int(ExitCode.INTERNAL_ERROR)

    if options.help:
        print(_HELP, file=sys.stderr)
        return int(ExitCode.SUCCESS)

    threads = _atoi(options.threads)
    if extras or not 1 <= threads <= MAX_THREADS:
        print(_USAGE, file=sys.stderr, flush=True)
        return int(ExitCode.SYNTAX_ERROR)

    data_size = VALGRIND_DATA_SIZE if options.fast else DATA_SIZE
    verbose = options.verbose
    print(f"\nStarting {threads} threads generating {data_size} numbers\n")

    timer = CpuTimer("timer")
    timer.start()
    wall_start = time.time()

    checker: threading.Thread | None = None
    if options.mutexcheck:
        checker = threading.Thread(target=mutex_check, args=(SharedProgress(), MUTEX_CHECK_COUNT))
        checker.start()
        if verbose:
            print(f"Mutex check thread index:{checker.ident}", flush=True)

    data, _ = fill_parallel(data_size, threads, options.status, verbose)

    timer.stop()
    wall_time = int(time.time() - wall_start)
    print(timer.report(), file=sys.stderr)
    print(f"Total wall time = {wall_time} sec", file=sys.stderr)

    print("Verifying results...  ", end="")
    try:
        verify(data)
    except LabError as err:
        print(err)
        return int(err.code)
    print("success\n")

    if checker is not None:
        checker.join()
        if verbose:
            print("Mutex check thread terminated", flush=True)
    return int(ExitCode.SUCCESS)
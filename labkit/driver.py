"""Check the correctness and cache performance of registered transpose functions."""

from __future__ import annotations

import getopt
import re
import signal
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Sequence

from .csim import simulate
from .summary import TransRegistry
from .trans import TRANSPOSE_SUBMIT_DESC, register_functions
from .tracegen import MAX_DIM, generate_trace, validate

INT_MAX = 2**31 - 1
TIME_LIMIT = 120


@dataclass
class Results:
    """Correctness and performance of the submitted transpose function."""

    funcid: int = -1
    correct: bool = False
    misses: int = INT_MAX


def eval_perf(
    m: int,
    n: int,
    s: int,
    e: int,
    b: int,
    registry: TransRegistry | None = None,
) -> Results:
    """Validate each registered function and simulate its trace on the cache."""
    if registry is None:
        registry = TransRegistry()
        register_functions(registry)
    results = Results()
    total = len(registry)

    for i, entry in enumerate(registry):
        if entry.description == TRANSPOSE_SUBMIT_DESC:
            results.funcid = i

        print(
            f"\nFunction {i} ({total} total)\n"
            "Step 1: Validating and generating memory traces"
        )
        try:
            trace, a, mat_b = generate_trace(entry.func, m, n)
            valid = validate(i, m, n, a, mat_b)
        except Exception:  # a crashing function counts as invalid
            valid = False
        if not valid:
            print(
                f"Validation error at function {i}! Run ./tracegen -M {m} -N {n} "
                f"-F {i} for details.\n"
                "Skipping performance evaluation for this function."
            )
            continue

        entry.correct = True
        if results.funcid == i:
            results.correct = True

        print(f"Step 2: Evaluating performance (s={s}, E={e}, b={b})")
        stats = simulate(trace.lines(), s, e, b)
        entry.num_hits = stats.hits
        entry.num_misses = stats.misses
        entry.num_evictions = stats.evictions
        print(
            f"func {i} ({entry.description}): hits:{stats.hits}, "
            f"misses:{stats.misses}, evictions:{stats.evictions}"
        )
        if results.funcid == i:
            results.misses = stats.misses
    return results


def usage(prog: str) -> str:
    """Return the usage message."""
    return (
        f"Usage: {prog} [-h] -M <rows> -N <cols>\n"
        "Options:\n"
        "  -h          Print this help message.\n"
        f"  -M <rows>   Number of matrix rows (max {MAX_DIM})\n"
        f"  -N <cols>   Number of  matrix columns (max {MAX_DIM})\n"
        f"Example: {prog} -M 8 -N 8\n"
    )


class _Timeout(Exception):
    pass


@contextmanager
def _time_limit(seconds: int) -> Iterator[None]:
    usable = hasattr(signal, "SIGALRM") and (
        threading.current_thread() is threading.main_thread()
    )
    if not usable:
        yield
        return

    def _expired(signum, frame):
        raise _Timeout()

    previous = signal.signal(signal.SIGALRM, _expired)
    signal.alarm(seconds)
    try:
        yield
    finally:
        signal.alarm(0)
        signal.signal(signal.SIGALRM, previous)


def _atoi(value: str) -> int:
    match = re.match(r"\s*[+-]?\d+", value)
    return int(match.group()) if match else 0


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    prog = "test-trans"
    try:
        opts, _ = getopt.getopt(args, "M:N:h")
    except getopt.GetoptError:
        sys.stdout.write(usage(prog))
        return 1

    m = n = 0
    for flag, value in opts:
        if flag == "-M":
            m = _atoi(value)
        elif flag == "-N":
            n = _atoi(value)
        elif flag == "-h":
            sys.stdout.write(usage(prog))
            return 0

    if m == 0 or n == 0:
        print("Error: Missing required argument")
        sys.stdout.write(usage(prog))
        return 1
    if m > MAX_DIM or n > MAX_DIM:
        print(f"Error: M or N exceeds {MAX_DIM}")
        sys.stdout.write(usage(prog))
        return 1

    try:
        with _time_limit(TIME_LIMIT):
            results = eval_perf(m, n, 5, 1, 5)
    except _Timeout:
        print("Error: Program timed out.")
        print("TEST_TRANS_RESULTS=0:0")
        return 1

    if results.funcid == -1:
        print("\nError: We could not find your transpose_submit() function")
        print(
            "Error: Please ensure that description field is exactly "
            f'"{TRANSPOSE_SUBMIT_DESC}"'
        )
        print("\nTEST_TRANS_RESULTS=0:0")
    else:
        print(
            f"\nSummary for official submission (func {results.funcid}): "
            f"correctness={int(results.correct)} misses={results.misses}"
        )
        print(f"\nTEST_TRANS_RESULTS={int(results.correct)}:{results.misses}")
    return 0
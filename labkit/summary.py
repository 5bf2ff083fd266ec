"""Shared helpers for the cache simulator and the transpose driver."""

from __future__ import annotations

import random
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

MAX_TRANS_FUNCS = 100
RAND_MAX = 2**31 - 1
RESULTS_FILE = ".csim_results"

Matrix = list[list[int]]
TransposeFn = Callable[[int, int, Matrix, Matrix], None]


@dataclass
class TransFunc:
    """A registered transpose function and its evaluation results."""

    func: TransposeFn
    description: str
    correct: bool = False
    num_hits: int = 0
    num_misses: int = 0
    num_evictions: int = 0


class TransRegistry:
    """An ordered collection of transpose functions to be evaluated."""

    def __init__(self, capacity: int = MAX_TRANS_FUNCS) -> None:
        self.capacity = capacity
        self._funcs: list[TransFunc] = []

    def register(self, func: TransposeFn, description: str) -> TransFunc:
        """Add a transpose function; raises ValueError when the registry is full."""
        if len(self._funcs) >= self.capacity:
            raise ValueError(
                f"cannot register more than {self.capacity} transpose functions"
            )
        entry = TransFunc(func=func, description=description)
        self._funcs.append(entry)
        return entry

    def __len__(self) -> int:
        return len(self._funcs)

    def __iter__(self) -> Iterator[TransFunc]:
        return iter(self._funcs)

    def __getitem__(self, index: int) -> TransFunc:
        return self._funcs[index]


def print_summary(
    hits: int, misses: int, evictions: int, path: str | Path = RESULTS_FILE
) -> None:
    """Print the simulation statistics and record them in the results file."""
    print(f"hits:{hits} misses:{misses} evictions:{evictions}")
    Path(path).write_text(f"{hits} {misses} {evictions}\n")


def init_matrix(
    m: int, n: int, rng: random.Random | None = None
) -> tuple[Matrix, Matrix]:
    """Return a random N x M matrix A and a random M x N matrix B."""
    rng = rng or random.Random()
    a: Matrix = [[0] * m for _ in range(n)]
    b: Matrix = [[0] * n for _ in range(m)]
    for i in range(n):
        for j in range(m):
            a[i][j] = rng.randint(0, RAND_MAX)
            b[j][i] = rng.randint(0, RAND_MAX)
    return a, b


def rand_matrix(m: int, n: int, rng: random.Random | None = None) -> Matrix:
    """Return a random N x M matrix."""
    rng = rng or random.Random()
    return [[rng.randint(0, RAND_MAX) for _ in range(m)] for _ in range(n)]


def correct_trans(m: int, n: int, a: Matrix, b: Matrix) -> None:
    """Baseline transpose: fill the M x N matrix b with the transpose of a."""
    for i, row in enumerate(a[:n]):
        for j, value in enumerate(row[:m]):
            b[j][i] = value
"""Record the memory accesses a transpose function makes on its matrices."""

from __future__ import annotations

import getopt
import random
import re
import sys
from dataclasses import dataclass, field
from typing import Iterator, Sequence

from .summary import Matrix, TransRegistry, TransposeFn, correct_trans, init_matrix
from .trans import register_functions

ELEMENT_SIZE = 4
MAX_DIM = 256
A_BASE = 0x0030A080
B_BASE = A_BASE + MAX_DIM * MAX_DIM * ELEMENT_SIZE

_OPS = frozenset("LSM")


@dataclass
class MemoryTrace:
    """An ordered log of data memory accesses."""

    accesses: list[tuple[str, int, int]] = field(default_factory=list)

    def record(self, op: str, address: int, size: int) -> None:
        """Append one access; op is 'L' (load), 'S' (store) or 'M' (modify)."""
        if op not in _OPS:
            raise ValueError(f"unknown memory operation {op!r}")
        if address < 0 or size <= 0:
            raise ValueError("address must be non-negative and size positive")
        self.accesses.append((op, address, size))

    def lines(self) -> list[str]:
        """Return the trace as lines in the ' L addr,size' format."""
        return [f" {op} {address:08x},{size}\n" for op, address, size in self.accesses]

    def __len__(self) -> int:
        return len(self.accesses)

    def __iter__(self) -> Iterator[tuple[str, int, int]]:
        return iter(self.accesses)


class _TracedRow:
    def __init__(self, matrix: TracedMatrix, row: int) -> None:
        self._matrix = matrix
        self._row = row

    def __getitem__(self, col: int) -> int:
        value = self._matrix._values[self._row][col]
        self._matrix._touch("L", self._row, col)
        return value

    def __setitem__(self, col: int, value: int) -> None:
        self._matrix._values[self._row][col] = value
        self._matrix._touch("S", self._row, col)

    def __len__(self) -> int:
        return len(self._matrix._values[self._row])


class TracedMatrix:
    """A matrix view that logs every element read and write to a trace."""

    def __init__(
        self, values: Matrix, base: int, columns: int, trace: MemoryTrace
    ) -> None:
        self._values = values
        self.base = base
        self.columns = columns
        self.trace = trace

    def address(self, row: int, col: int) -> int:
        """Byte address of an element in a row-major layout."""
        return self.base + (row * self.columns + col) * ELEMENT_SIZE

    def _touch(self, op: str, row: int, col: int) -> None:
        self.trace.record(op, self.address(row, col), ELEMENT_SIZE)

    def __getitem__(self, row: int) -> _TracedRow:
        if not 0 <= row < len(self._values):
            raise IndexError("matrix row out of range")
        return _TracedRow(self, row)

    def __len__(self) -> int:
        return len(self._values)

    def to_list(self) -> Matrix:
        """Return a plain copy of the matrix contents."""
        return [list(row) for row in self._values]


def validate(fn: int, m: int, n: int, a: Matrix, b: Matrix) -> bool:
    """Check that b (M x N) is the transpose of a (N x M)."""
    expected: Matrix = [[0] * n for _ in range(m)]
    correct_trans(m, n, a, expected)
    for i in range(m):
        for j in range(n):
            if b[i][j] != expected[i][j]:
                print(
                    f"Validation failed on function {fn}! Expected "
                    f"{expected[i][j]} but got {b[i][j]} at B[{i}][{j}]"
                )
                return False
    return True


def generate_trace(
    func: TransposeFn, m: int, n: int, rng: random.Random | None = None
) -> tuple[MemoryTrace, Matrix, Matrix]:
    """Run func on random matrices; return its trace and the resulting A and B."""
    if not (0 < m <= MAX_DIM and 0 < n <= MAX_DIM):
        raise ValueError(f"matrix dimensions must be between 1 and {MAX_DIM}")
    a, b = init_matrix(m, n, rng)
    trace = MemoryTrace()
    func(m, n, TracedMatrix(a, A_BASE, m, trace), TracedMatrix(b, B_BASE, n, trace))
    return trace, a, b


def _atoi(value: str) -> int:
    match = re.match(r"\s*[+-]?\d+", value)
    return int(match.group()) if match else 0


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        opts, _ = getopt.getopt(args, "M:N:F:")
    except getopt.GetoptError:
        print("./tracegen failed to parse its options.")
        return 1

    m = n = 0
    selected = -1
    for flag, value in opts:
        if flag == "-M":
            m = _atoi(value)
        elif flag == "-N":
            n = _atoi(value)
        elif flag == "-F":
            selected = _atoi(value)

    registry = TransRegistry()
    register_functions(registry)

    if selected == -1:
        chosen = list(enumerate(registry))
    elif 0 <= selected < len(registry):
        chosen = [(selected, registry[selected])]
    else:
        print(f"./tracegen: no transpose function {selected}")
        return 1

    for index, entry in chosen:
        try:
            trace, a, b = generate_trace(entry.func, m, n)
        except ValueError as exc:
            print(f"./tracegen: {exc}")
            return 1
        sys.stdout.writelines(trace.lines())
        if not validate(index, m, n, a, b):
            return index + 1
    return 0
"""Matrix transpose functions B = A^T, tuned for a small direct-mapped cache."""

from __future__ import annotations

from .summary import Matrix, TransRegistry

TRANSPOSE_SUBMIT_DESC = "Transpose submission"
TRANS_DESC = "Simple row-wise scan transpose"


def _blocked(m: int, n: int, a: Matrix, b: Matrix, size: int) -> None:
    for i in range(0, n, size):
        for j in range(0, m, size):
            for row in range(i, i + size):
                values = [a[row][col] for col in range(j, j + size)]
                for col, value in enumerate(values, start=j):
                    b[col][row] = value


def _blocked_clipped(m: int, n: int, a: Matrix, b: Matrix, size: int) -> None:
    for i in range(0, n, size):
        for j in range(0, m, size):
            for row in range(i, min(i + size, n)):
                for col in range(j, min(j + size, m)):
                    b[col][row] = a[row][col]


def transpose_submit(m: int, n: int, a: Matrix, b: Matrix) -> None:
    """Blocked transpose: 8x8 blocks for M=32, 4x4 for M=64, 16x16 otherwise."""
    if m == 32:
        _blocked(m, n, a, b, 8)
    elif m == 64:
        _blocked(m, n, a, b, 4)
    else:
        _blocked_clipped(m, n, a, b, 16)


def trans(m: int, n: int, a: Matrix, b: Matrix) -> None:
    """Simple row-wise scan transpose."""
    for i in range(n):
        for j in range(m):
            b[j][i] = a[i][j]


def is_transpose(m: int, n: int, a: Matrix, b: Matrix) -> bool:
    """Return True if b is the transpose of a."""
    return all(a[i][j] == b[j][i] for i in range(n) for j in range(m))


def register_functions(registry: TransRegistry) -> None:
    """Register the transpose functions to be evaluated."""
    registry.register(transpose_submit, TRANSPOSE_SUBMIT_DESC)
    registry.register(trans, TRANS_DESC)
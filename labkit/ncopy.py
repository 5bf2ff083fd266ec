"""Copy a sequence of words, counting the positive ones."""

from __future__ import annotations

from typing import Sequence


def ncopy(src: Sequence[int]) -> tuple[list[int], int]:
    """Return a copy of src and the number of positive values in it."""
    dst = list(src)
    return dst, sum(1 for value in dst if value > 0)


def main(argv: Sequence[str] | None = None) -> int:
    _, count = ncopy(range(1, 9))
    print(f"count={count}")
    return 0
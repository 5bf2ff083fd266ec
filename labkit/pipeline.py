"""Pipeline registers for a pipelined processor simulator, plus word formatting."""

from __future__ import annotations

import copy
import enum
from typing import Any, Generic, Iterator, TextIO, TypeVar

MAX_STAGE = 10
WORD_BITS = 64
_WORD_MASK = (1 << WORD_BITS) - 1
_DIGITS = "0123456789ABCDEF"

T = TypeVar("T")


class PipeOp(enum.Enum):
    """How a pipeline register is updated at the next clock edge."""

    LOAD = "load"  # copy next state to current
    STALL = "stall"  # keep current state unchanged
    BUBBLE = "bubble"  # set current state to the bubble value
    ERROR = "error"  # both stall and bubble were requested


class PipeRegister(Generic[T]):
    """A pipeline register holding a current and a next state."""

    def __init__(self, bubble: T) -> None:
        self.bubble = bubble
        self.current: T = copy.deepcopy(bubble)
        self.next: T = copy.deepcopy(bubble)
        self.op = PipeOp.LOAD

    def update(self) -> None:
        """Apply the pending operation; the operation then reverts to LOAD unless it is ERROR."""
        if self.op in (PipeOp.BUBBLE, PipeOp.ERROR):
            self.current = copy.deepcopy(self.bubble)
        elif self.op is PipeOp.LOAD:
            self.current = copy.deepcopy(self.next)
        if self.op is not PipeOp.ERROR:
            self.op = PipeOp.LOAD

    def clear(self) -> None:
        """Set both states to the bubble value and the operation to LOAD."""
        self.current = copy.deepcopy(self.bubble)
        self.next = copy.deepcopy(self.bubble)
        self.op = PipeOp.LOAD


class PipelineRegisters:
    """The set of pipeline registers of a processor, updated together."""

    def __init__(self, capacity: int = MAX_STAGE) -> None:
        self.capacity = capacity
        self._pipes: list[PipeRegister[Any]] = []

    def new_pipe(self, bubble: T) -> PipeRegister[T]:
        """Create a register whose initial and bubble state is `bubble`."""
        if len(self._pipes) >= self.capacity:
            raise ValueError(f"cannot create more than {self.capacity} pipe registers")
        pipe = PipeRegister(bubble)
        self._pipes.append(pipe)
        return pipe

    def update_all(self) -> None:
        """Clock every register."""
        for pipe in self._pipes:
            pipe.update()

    def clear_all(self) -> None:
        """Reset every register to its bubble value."""
        for pipe in self._pipes:
            pipe.clear()

    def __len__(self) -> int:
        return len(self._pipes)

    def __iter__(self) -> Iterator[PipeRegister[Any]]:
        return iter(self._pipes)


def wstring(x: int, bpd: int, bpw: int) -> str:
    """Format x in a base of 2**bpd with leading zeros, covering bpw bits."""
    if not 1 <= bpd <= 4:
        raise ValueError("bits per digit must be between 1 and 4")
    if bpw < 1:
        raise ValueError("bits per word must be positive")
    x &= _WORD_MASK
    mask = (1 << bpd) - 1
    return "".join(
        _DIGITS[(x >> (digit * bpd)) & mask]
        for digit in range((bpw - 1) // bpd, -1, -1)
    )


def wprint(x: int, bpd: int, bpw: int, fp: TextIO) -> None:
    """Write x formatted as by wstring to fp."""
    fp.write(wstring(x, bpd, bpw))
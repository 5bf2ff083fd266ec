"""Stage control for a pipelined processor: stalls, bubbles and simulator modes."""

from __future__ import annotations

import enum
from typing import Any, Callable, Mapping

from .pipeline import PipeOp, PipeRegister

LogFn = Callable[[str], None]


class StageId(enum.IntEnum):
    """Pipeline stage identifiers for stage operation control."""

    IF = 0
    ID = 1
    EX = 2
    MEM = 3
    WB = 4

    @property
    def register_name(self) -> str:
        """Name of the pipeline register feeding this stage, as used in logs."""
        return _REGISTER_NAMES[self]


_REGISTER_NAMES = {
    StageId.IF: "PC",
    StageId.ID: "ID",
    StageId.EX: "EX",
    StageId.MEM: "MEM",
    StageId.WB: "WB",
}


class SimMode(enum.IntEnum):
    """How the simulator handles data hazards."""

    WEDGED = 0
    STALL = 1
    FORWARD = 2


class MuxSource(enum.IntEnum):
    """Where an execute-stage operand was forwarded from."""

    NONE = 0
    EX_A = 1
    EX_B = 2
    MEM_E = 3
    WB_M = 4
    WB_E = 5

    @property
    def label(self) -> str:
        """Short display name of the source."""
        return _MUX_LABELS[self]


_MUX_LABELS = {
    MuxSource.NONE: "none",
    MuxSource.EX_A: "ea",
    MuxSource.EX_B: "eb",
    MuxSource.MEM_E: "me",
    MuxSource.WB_M: "wm",
    MuxSource.WB_E: "we",
}

_MODES = {
    "wedged": SimMode.WEDGED,
    "stall": SimMode.STALL,
    "forward": SimMode.FORWARD,
}


def pipe_cntl(
    name: str, stall: Any, bubble: Any, log: LogFn | None = None
) -> PipeOp:
    """Choose the register operation from the stall and bubble signals.

    Asking for both at once is an error; it is reported through ``log``.
    """
    if stall:
        if bubble:
            if log is not None:
                log(f"{name}: Conflicting control signals for pipe register\n")
            return PipeOp.ERROR
        return PipeOp.STALL
    return PipeOp.BUBBLE if bubble else PipeOp.LOAD


def parse_sim_mode(name: str) -> SimMode:
    """Return the simulator mode called ``name``; raise ValueError if unknown."""
    try:
        return _MODES[name]
    except KeyError:
        raise ValueError(f"Unknown mode '{name}'") from None


class StageControl:
    """Sets the pending operation of the pipeline register of each stage."""

    def __init__(self, pipes: Mapping[StageId, PipeRegister[Any]]) -> None:
        missing = [stage.name for stage in StageId if stage not in pipes]
        if missing:
            raise ValueError(f"missing pipe registers for stages: {', '.join(missing)}")
        self._pipes = {stage: pipes[stage] for stage in StageId}

    def __getitem__(self, stage: StageId) -> PipeRegister[Any]:
        return self._pipes[StageId(stage)]

    def bubble_stage(self, stage: StageId) -> None:
        """Insert a bubble into the stage at the next update."""
        self[stage].op = PipeOp.BUBBLE

    def stall_stage(self, stage: StageId) -> None:
        """Hold the stage's current state at the next update."""
        self[stage].op = PipeOp.STALL

    def apply(
        self, stage: StageId, stall: Any, bubble: Any, log: LogFn | None = None
    ) -> PipeOp:
        """Set the stage's operation from stall and bubble signals and return it."""
        stage = StageId(stage)
        op = pipe_cntl(stage.register_name, stall, bubble, log)
        self._pipes[stage].op = op
        return op
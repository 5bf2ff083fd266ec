"""Simulator command-line options, logging and cycles-per-instruction accounting."""

from __future__ import annotations

import getopt
import re
from dataclasses import dataclass
from typing import Sequence, TextIO

DEFAULT_INSTR_LIMIT = 10000
DEFAULT_VERBOSITY = 2


@dataclass
class PerfCounter:
    """Counts simulated cycles and instructions retired through write-back.

    Cycles spent filling the pipeline before the first instruction retires
    are not counted.
    """

    cycles: int = 0
    instructions: int = 0
    starting_up: bool = True

    def record(self, completed: bool) -> None:
        """Account for one clock cycle; ``completed`` if an instruction retired."""
        if completed:
            self.starting_up = False
            self.instructions += 1
            self.cycles += 1
        elif not self.starting_up:
            self.cycles += 1

    def cpi(self) -> float:
        """Cycles per instruction, or 1.0 before any instruction has retired."""
        return self.cycles / self.instructions if self.instructions > 0 else 1.0

    def report(self) -> str:
        """The one-line CPI summary printed at the end of a run."""
        return (
            f"CPI: {self.cycles} cycles/{self.instructions} instructions"
            f" = {self.cpi():.2f}"
        )

    def reset(self) -> None:
        """Return to the state before any cycle was simulated."""
        self.cycles = 0
        self.instructions = 0
        self.starting_up = True


@dataclass
class SimLog:
    """Writes detailed trace messages to a dump file, when one is set."""

    dumpfile: TextIO | None = None

    def log(self, fmt: str, *args: object) -> None:
        """Write ``fmt % args`` to the dump file; do nothing without one."""
        if self.dumpfile is None:
            return
        self.dumpfile.write(fmt % args if args else fmt)


@dataclass
class SimOptions:
    """Settings taken from the simulator's command line."""

    gui_mode: bool = False
    object_filename: str | None = None
    verbosity: int = DEFAULT_VERBOSITY
    instr_limit: int = DEFAULT_INSTR_LIMIT
    do_check: bool = False


class UsageError(Exception):
    """The command line asks for the usage message.

    ``message`` holds any complaint to print before it; it is empty when
    help was requested with -h.
    """

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


def _atoi(value: str) -> int:
    match = re.match(r"\s*[+-]?\d+", value)
    return int(match.group()) if match else 0


def parse_sim_args(argv: Sequence[str]) -> SimOptions:
    """Parse simulator arguments (without the program name).

    Raises UsageError for -h, an invalid option, a bad verbosity or
    too many file arguments.
    """
    try:
        opts, rest = getopt.gnu_getopt(list(argv), "htgl:v:")
    except getopt.GetoptError as exc:
        raise UsageError(f"Invalid option '{exc.opt}'") from None

    options = SimOptions()
    for flag, value in opts:
        if flag == "-h":
            raise UsageError()
        if flag == "-l":
            options.instr_limit = _atoi(value)
        elif flag == "-v":
            verbosity = _atoi(value)
            if not 0 <= verbosity <= 2:
                raise UsageError(f"Invalid verbosity {verbosity}")
            options.verbosity = verbosity
        elif flag == "-t":
            options.do_check = True
        elif flag == "-g":
            options.gui_mode = True

    if len(rest) > 1:
        raise UsageError("Too many command line arguments: " + " ".join(rest))
    if rest:
        options.object_filename = rest[0]
    return options


def usage_text(
    name: str,
    instr_limit: int = DEFAULT_INSTR_LIMIT,
    verbosity: int = DEFAULT_VERBOSITY,
) -> str:
    """The usage message, showing the given defaults."""
    return (
        f"Usage: {name} [-htg] [-l m] [-v n] file.yo\n"
        "file.yo arg required in GUI mode, optional in TTY mode (default stdin)\n"
        "   -h     Print this message\n"
        "   -g     Run in GUI mode instead of TTY mode (default TTY)\n"
        f"   -l m   Set instruction limit to m [TTY mode only] (default {instr_limit})\n"
        f"   -v n   Set verbosity level to 0 <= n <= 2 [TTY mode only] (default {verbosity})\n"
        "   -t     Test result against ISA simulator [TTY mode only]\n"
    )
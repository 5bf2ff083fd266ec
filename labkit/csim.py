"""A cache simulator with LRU replacement driven by memory traces."""

from __future__ import annotations

import getopt
import re
import string
import sys
from dataclasses import dataclass
from operator import attrgetter
from typing import Iterable, Sequence, TextIO

from .summary import print_summary

HIT = "hit"
MISS = "miss"
EVICTION = "eviction"

HELP_TEXT = (
    "Usage: ./csim [-hv] -s <num> -E <num> -b <num> -t <file>\n"
    "Options:\n"
    "  -h Print this help message.\n"
    "  -v Optional verbose flag.\n"
    "  -s <num> Number of set index bits.\n"
    "  -E <num> Number of lines per set.\n"
    "  -b <num> Number of block offset bits.\n"
    "  -t <file> Trace file.\n"
    "\n"
    "Examples :\n"
    " linux> ./csim -s 4 -E 1 -b 4 -t traces/yi.trace\n"
    " linux>  ./csim -v -s 8 -E 2 -b 4 -t traces/yi.trace\n"
    " "
)

_ACCESSES = {"I": 0, "L": 1, "S": 1, "M": 2}
_ADDRESS_MASK = 0xFFFFFFFF


@dataclass(frozen=True)
class TraceRecord:
    """One parsed trace line."""

    op: str | None
    address: int
    size: int

    @property
    def accesses(self) -> int:
        """How many times the operation touches the data cache."""
        return _ACCESSES.get(self.op, 0) if self.op else 0


@dataclass
class SimulationStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0


@dataclass
class _Line:
    valid: bool = False
    tag: int = 0
    stamp: int = 0


class Cache:
    """A set-associative cache that evicts the least recently used line."""

    def __init__(self, set_bits: int, lines_per_set: int, block_bits: int) -> None:
        if set_bits < 0 or block_bits < 0:
            raise ValueError("set and block bits must not be negative")
        if lines_per_set < 1:
            raise ValueError("a set needs at least one line")
        self.set_bits = set_bits
        self.lines_per_set = lines_per_set
        self.block_bits = block_bits
        self._sets = [
            [_Line() for _ in range(lines_per_set)] for _ in range(1 << set_bits)
        ]

    def access(self, address: int, time: int) -> tuple[str, ...]:
        """Access an address at the given time; return the events it caused."""
        set_index = (address >> self.block_bits) & ((1 << self.set_bits) - 1)
        tag = address >> (self.set_bits + self.block_bits)
        lines = self._sets[set_index]

        for line in lines:
            if line.valid and line.tag == tag:
                line.stamp = time
                return (HIT,)

        free = next((line for line in lines if not line.valid), None)
        if free is not None:
            free.valid, free.tag, free.stamp = True, tag, time
            return (MISS,)

        victim = min(lines, key=attrgetter("stamp"))
        victim.valid, victim.tag, victim.stamp = True, tag, time
        return (MISS, EVICTION)


def _hex_digit(ch: str) -> int:
    return int(ch, 16) if ch in string.hexdigits else 0


def parse_trace_line(line: str) -> TraceRecord:
    """Parse a trace line such as ' L 10,1'."""
    op: str | None = None
    address = 0
    size = 0
    after_comma = False
    for ch in line:
        if ch == "\n":
            break
        if ch == " ":
            continue
        if ch in _ACCESSES:
            op = ch
        elif ch == ",":
            after_comma = True
        elif after_comma:
            size = _hex_digit(ch)
        else:
            address = (address * 16 + _hex_digit(ch)) & _ADDRESS_MASK
    return TraceRecord(op=op, address=address, size=size)


def _tally(stats: SimulationStats, event: str) -> None:
    if event == HIT:
        stats.hits += 1
    elif event == MISS:
        stats.misses += 1
    else:
        stats.evictions += 1


def simulate(
    lines: Iterable[str],
    set_bits: int,
    lines_per_set: int,
    block_bits: int,
    verbose_out: TextIO | None = None,
) -> SimulationStats:
    """Run a trace through a fresh cache and return the totals."""
    cache = Cache(set_bits, lines_per_set, block_bits)
    stats = SimulationStats()
    for time, line in enumerate(lines, start=1):
        record = parse_trace_line(line)
        if not record.accesses:
            continue
        if verbose_out is not None:
            verbose_out.write("\n" + line)
        events = list(cache.access(record.address, time))
        if record.accesses == 2:
            events.append(HIT)
        for event in events:
            _tally(stats, event)
            if verbose_out is not None:
                verbose_out.write(" " + event)
    if verbose_out is not None:
        verbose_out.write("\n")
    return stats


def _atoi(value: str) -> int:
    match = re.match(r"\s*[+-]?\d+", value)
    return int(match.group()) if match else 0


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    prog = "csim"
    usage = f"Usage: {prog} [-hv] -s <num> -E <num> -b <num> -t <file>\n"
    try:
        opts, _ = getopt.getopt(args, "hvs:E:b:t:")
    except getopt.GetoptError:
        sys.stderr.write(usage)
        return 1

    set_bits = lines_per_set = block_bits = 0
    trace = ""
    verbose = False
    for flag, value in opts:
        if flag == "-s":
            set_bits = _atoi(value)
        elif flag == "-E":
            lines_per_set = _atoi(value)
        elif flag == "-b":
            block_bits = _atoi(value)
        elif flag == "-t":
            trace = value
        elif flag == "-v":
            verbose = True
        elif flag == "-h":
            sys.stdout.write(HELP_TEXT)
            return 0

    try:
        with open(trace, encoding="ascii", errors="replace") as handle:
            stats = simulate(
                handle,
                set_bits,
                lines_per_set,
                block_bits,
                sys.stdout if verbose else None,
            )
    except OSError as exc:
        sys.stderr.write(f"{prog}: cannot open trace file {trace!r}: {exc}\n")
        return 1
    except ValueError as exc:
        sys.stderr.write(f"{prog}: {exc}\n")
        return 1

    print_summary(stats.hits, stats.misses, stats.evictions)
    return 0
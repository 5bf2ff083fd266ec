# labkit

labkit has tools for two kinds of systems coursework.

- **Cache lab.** labkit includes:
  - a cache simulator that replays memory traces, with a configurable number of sets and lines per set and LRU eviction;
  - a set of matrix-transpose functions;
  - a tracer that records the memory accesses those functions make;
  - a driver that scores every registered transpose function against a small direct-mapped cache.
- **Architecture lab.** labkit includes:
  - building blocks for a pipelined processor simulator: pipeline registers that can load, stall or take a bubble, stage control, a log, command-line option parsing and cycles-per-instruction counters;
  - a reference version of the `ncopy` routine.

labkit needs Python 3.10 or newer. It uses only the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Command-line tools

### Cache simulator

```
labkit-csim [-hv] -s <num> -E <num> -b <num> -t <file>
```

- `-s`: number of set index bits
- `-E`: number of lines in each set
- `-b`: number of block offset bits
- `-t`: the trace file
- `-v`: echo each trace line together with the result of each access (`hit`, `miss`, `eviction`)
- `-h`: print the help message

Each trace line holds an operation, a hexadecimal address and a size, for example ` L 10,1`. The operations behave as follows:

- `L` (load) and `S` (store) access the cache once.
- `M` (modify) accesses it twice. The second access is always a hit.
- `I` (instruction fetch) is ignored.

At the end the tool prints `hits:<n> misses:<n> evictions:<n>`. It also writes the three counts to `.csim_results` in the current directory.

```
labkit-csim -s 4 -E 1 -b 4 -t traces/yi.trace
labkit-csim -v -s 8 -E 2 -b 4 -t traces/yi.trace
```

### Trace generator

```
labkit-tracegen -M <cols> -N <rows> [-F <index>]
```

The tool runs the registered transpose functions on random matrices. A is `N` x `M`, and each function writes its transpose into B. By default it runs every function; `-F` runs only the function at that index.

For each function it writes the memory accesses to standard output, one per line, in the trace format above. It then checks the result against the baseline transpose. If a function fails the check, the tool prints where it went wrong and exits with that function's index plus one.

Addresses come from a fixed row-major layout of A and B with 4-byte elements.

### Transpose scoring driver

```
labkit-test-trans -M <rows> -N <cols>
```

The driver checks every registered transpose function. It then replays each function's memory trace through the cache simulator with `s=5`, `E=1`, `b=5`, which is a 1 KB direct-mapped cache with 32-byte blocks.

For each correct function it reports hits, misses and evictions. At the end it prints a summary for the function described as `"Transpose submission"`. The last line has the form `TEST_TRANS_RESULTS=<correct>:<misses>`.

Both dimensions are required, and neither may be greater than 256. Where the platform supports alarms, the run stops after 120 seconds.

### ncopy

```
labkit-ncopy
```

The tool copies the array `1..8` and prints `count=8`, the number of positive values.

## Library use

Simulate a cache directly:

```python
from labkit.csim import simulate

with open("traces/yi.trace") as trace:
    stats = simulate(trace, set_bits=4, lines_per_set=1, block_bits=4)
print(stats.hits, stats.misses, stats.evictions)
```

`labkit.csim.Cache` models a single cache. `Cache.access(address, time)` returns the events one access caused. `parse_trace_line` parses a single trace line.

Register and check transpose functions:

```python
from labkit.summary import TransRegistry, init_matrix
from labkit.trans import register_functions, is_transpose

registry = TransRegistry()
register_functions(registry)
a, b = init_matrix(32, 32)
registry[0].func(32, 32, a, b)
assert is_transpose(32, 32, a, b)
```

`labkit.tracegen.generate_trace(func, m, n)` returns a `MemoryTrace` together with the resulting matrices. `labkit.driver.eval_perf(m, n, s, e, b)` scores a registry and returns a `Results` record.

Processor building blocks:

- `labkit.pipeline`:
  - `PipelineRegisters` holds a set of `PipeRegister` objects that are clocked together. Each register has a pending `PipeOp`: `LOAD`, `STALL`, `BUBBLE` or `ERROR`.
  - `wstring` formats a word in hex, octal or binary with leading zeros, and `wprint` writes the same string to a file.
- `labkit.control`:
  - `pipe_cntl` turns a stage's stall and bubble signals into a `PipeOp`.
  - `StageControl` sets the operation of each stage's register.
  - `parse_sim_mode` accepts `wedged`, `stall` or `forward`.
- `labkit.perf`:
  - `PerfCounter` counts cycles and retired instructions and reports CPI.
  - `SimLog` writes trace messages to an optional dump file.
  - `parse_sim_args` and `usage_text` handle the simulator options `-h`, `-t`, `-g`, `-l` and `-v`.

## What labkit does not do

labkit does not contain a complete processor simulator. There is no instruction set, no stage logic, no loader for object files and no simulator command. The pipeline, control and perf modules are parts from which such a simulator can be built. `SimOptions.gui_mode` is parsed but nothing uses it, because labkit has no graphical interface.

The tracer does not watch a running program. It records the element reads and writes that a transpose function makes through the matrix objects it receives.
import io

import pytest

from labkit.csim import (
    Cache,
    SimulationStats,
    TraceRecord,
    main,
    parse_trace_line,
    simulate,
)

YI_TRACE = [
    " L 10,1\n",
    " M 20,1\n",
    " L 22,1\n",
    " S 18,1\n",
    " L 110,1\n",
    " L 210,1\n",
    " M 12,1\n",
]


def test_parse_load_line():
    record = parse_trace_line(" L 7ff0005c8,8\n")
    assert record.op == "L"
    assert record.address == 0x7FF0005C8 & 0xFFFFFFFF
    assert record.size == 8
    assert record.accesses == 1


@pytest.mark.parametrize(
    "line, accesses",
    [("I 0400d7d4,8\n", 0), (" S 18,1\n", 1), (" M 20,1\n", 2), ("\n", 0)],
)
def test_parse_access_counts(line, accesses):
    assert parse_trace_line(line).accesses == accesses


def test_parse_lowercase_and_uppercase_hex_agree():
    assert parse_trace_line(" L abc,4") == parse_trace_line(" L ABC,4")
    assert parse_trace_line(" L abc,4") == TraceRecord("L", 0xABC, 4)


def test_cache_miss_then_hit():
    cache = Cache(4, 1, 4)
    assert cache.access(0x10, 1) == ("miss",)
    assert cache.access(0x1F, 2) == ("hit",)


def test_direct_mapped_conflict_evicts():
    cache = Cache(0, 1, 0)
    assert cache.access(1, 1) == ("miss",)
    assert cache.access(2, 2) == ("miss", "eviction")
    assert cache.access(1, 3) == ("miss", "eviction")


def test_lru_evicts_least_recent():
    cache = Cache(0, 2, 0)
    cache.access(1, 1)
    cache.access(2, 2)
    assert cache.access(1, 3) == ("hit",)
    assert cache.access(3, 4) == ("miss", "eviction")
    assert cache.access(1, 5) == ("hit",)
    assert cache.access(2, 6) == ("miss", "eviction")


def test_cache_rejects_zero_lines():
    with pytest.raises(ValueError):
        Cache(1, 0, 1)


def test_simulate_yi_trace_reference():
    assert simulate(YI_TRACE, 4, 1, 4) == SimulationStats(4, 5, 3)


@pytest.mark.parametrize("s, e, b", [(1, 1, 1), (2, 1, 4), (2, 2, 3), (5, 1, 5)])
def test_simulate_invariants(s, e, b):
    stats = simulate(YI_TRACE, s, e, b)
    total = sum(parse_trace_line(line).accesses for line in YI_TRACE)
    assert stats.hits + stats.misses == total
    assert stats.evictions <= stats.misses


def test_simulate_ignores_instruction_loads():
    with_fetch = ["I 0400d7d4,8\n"] + YI_TRACE
    assert simulate(with_fetch, 4, 1, 4) == simulate(YI_TRACE, 4, 1, 4)


def test_simulate_verbose_output():
    out = io.StringIO()
    simulate([" L 10,1\n", " M 20,1\n"], 4, 1, 4, out)
    assert out.getvalue() == "\n L 10,1\n miss\n M 20,1\n miss hit\n"


def test_main_help(capsys):
    assert main(["-h"]) == 0
    assert capsys.readouterr().out.startswith("Usage: ./csim [-hv]")


def test_main_bad_option(capsys):
    assert main(["-x"]) == 1
    assert "Usage:" in capsys.readouterr().err


def test_main_missing_trace(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["-s", "1", "-E", "1", "-b", "1", "-t", "absent.trace"]) == 1
    assert not (tmp_path / ".csim_results").exists()
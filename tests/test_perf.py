import io

import pytest

from labkit.perf import (
    PerfCounter,
    SimLog,
    SimOptions,
    UsageError,
    parse_sim_args,
    usage_text,
)


def test_cpi_defaults_to_one_without_instructions():
    counter = PerfCounter()
    assert counter.cpi() == 1.0


def test_startup_bubbles_are_not_counted():
    counter = PerfCounter()
    for _ in range(4):
        counter.record(False)
    assert counter.cycles == 0
    assert counter.starting_up is True


def test_stalls_after_startup_count_cycles():
    counter = PerfCounter()
    counter.record(False)
    counter.record(True)
    counter.record(False)
    counter.record(True)
    assert counter.instructions == 2
    assert counter.cycles == 3
    assert counter.cpi() == pytest.approx(counter.cycles / counter.instructions)


def test_only_completions_gives_cpi_one():
    counter = PerfCounter()
    for _ in range(5):
        counter.record(True)
    assert counter.cycles == counter.instructions
    assert counter.cpi() == 1.0


def test_report_format_empty():
    assert PerfCounter().report() == "CPI: 0 cycles/0 instructions = 1.00"


def test_report_uses_counts():
    counter = PerfCounter(cycles=10, instructions=4, starting_up=False)
    assert counter.report() == "CPI: 10 cycles/4 instructions = 2.50"


def test_reset_restores_initial_state():
    counter = PerfCounter()
    counter.record(True)
    counter.record(False)
    counter.reset()
    assert counter == PerfCounter()


def test_log_writes_formatted_text():
    buf = io.StringIO()
    SimLog(buf).log("\tWrote 0x%x to address 0x%x\n", 255, 16)
    assert buf.getvalue() == "\tWrote 0xff to address 0x10\n"


def test_log_without_dumpfile_writes_nowhere():
    log = SimLog()
    log.log("ignored %d\n", 1)
    buf = io.StringIO()
    log.dumpfile = buf
    log.log("kept\n")
    assert buf.getvalue() == "kept\n"


def test_parse_defaults():
    assert parse_sim_args([]) == SimOptions()
    assert SimOptions().instr_limit == 10000
    assert SimOptions().verbosity == 2


def test_parse_all_options():
    opts = parse_sim_args(["-t", "-g", "-l", "500", "-v", "1", "prog.yo"])
    assert opts == SimOptions(
        gui_mode=True,
        object_filename="prog.yo",
        verbosity=1,
        instr_limit=500,
        do_check=True,
    )


def test_parse_file_before_options():
    opts = parse_sim_args(["prog.yo", "-v", "0"])
    assert opts.object_filename == "prog.yo"
    assert opts.verbosity == 0


def test_help_raises_usage_error_with_empty_message():
    with pytest.raises(UsageError) as info:
        parse_sim_args(["-h"])
    assert info.value.message == ""


@pytest.mark.parametrize("level", ["3", "-1"])
def test_invalid_verbosity(level):
    with pytest.raises(UsageError) as info:
        parse_sim_args(["-v", level])
    assert info.value.message.startswith("Invalid verbosity")


def test_invalid_option():
    with pytest.raises(UsageError) as info:
        parse_sim_args(["-x"])
    assert info.value.message == "Invalid option 'x'"


def test_too_many_arguments():
    with pytest.raises(UsageError) as info:
        parse_sim_args(["a.yo", "b.yo"])
    assert info.value.message == "Too many command line arguments: a.yo b.yo"


def test_usage_text_mentions_name_and_defaults():
    text = usage_text("psim")
    lines = text.splitlines()
    assert lines[0] == "Usage: psim [-htg] [-l m] [-v n] file.yo"
    assert "(default 10000)" in text
    assert "(default 2)" in text
    assert text.endswith("   -t     Test result against ISA simulator [TTY mode only]\n")


def test_usage_text_shows_given_values():
    text = usage_text("sim", 42, 0)
    assert "(default 42)" in text
    assert "(default 0)" in text
    assert "(default 10000)" not in text
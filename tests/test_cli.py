import io

import pytest

from chanbench.channels import channel_names
from chanbench.cli import (
    BenchArgs,
    UsageError,
    format_result_line,
    main,
    parse_args,
    select_benches,
    write_table,
)
from chanbench.executors import ExecutorId
from chanbench.results import BenchResult


def test_parse_defaults():
    assert parse_args([]) == BenchArgs([], ExecutorId.ASYNCIO, 1, None)


def test_parse_short_options_and_positionals():
    args = parse_args(["-s", "3", "-o", "out.txt", "-e", "trio", "funnel", "deque"])
    assert args == BenchArgs(["funnel", "deque"], ExecutorId.TRIO, 3, "out.txt")


def test_parse_long_options_with_equals():
    args = parse_args(["--samples=2", "--exec=asyncio", "--output", "res.dat"])
    assert args.samples == 2
    assert args.executor is ExecutorId.ASYNCIO
    assert args.output == "res.dat"


def test_parse_attached_short_value():
    assert parse_args(["-s5"]).samples == 5


def test_double_dash_makes_positionals():
    args = parse_args(["--", "-x", "--list"])
    assert args.bench_substrings == ["-x", "--list"]


def test_help_prints_usage(capsys):
    assert parse_args(["--help", "-s", "0"]) is None
    out = capsys.readouterr().out
    assert "USAGE:" in out
    assert "--samples SAMPLES" in out


def test_list_prints_every_bench(capsys):
    assert parse_args(["-l"]) is None
    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 2 * len(channel_names())
    for name in channel_names():
        assert f"    funnel-{name}" in lines
        assert f"    pinball-{name}" in lines


@pytest.mark.parametrize(
    "argv",
    [
        ["-s", "0"],
        ["--samples", "abc"],
        ["-s"],
        ["--output"],
        ["--bogus"],
        ["-x"],
        ["-e", "tokio"],
        ["--help=yes"],
    ],
)
def test_parse_errors(argv):
    with pytest.raises(UsageError):
        parse_args(argv)


def test_select_all_benches_sorted():
    selected = select_benches([], "asyncio")
    assert list(selected) == ["funnel", "pinball"]
    for items in selected.values():
        assert list(items) == sorted(channel_names())
        assert all(callable(run) for run in items.values())


def test_select_by_substring():
    selected = select_benches(["pinball-deq"], ExecutorId.TRIO)
    assert {group: list(items) for group, items in selected.items()} == {
        "pinball": ["deque"]
    }


def test_select_any_substring_matches():
    selected = select_benches(["funnel-deque", "pinball-memory"], ExecutorId.ASYNCIO)
    assert {group: list(items) for group, items in selected.items()} == {
        "funnel": ["deque"],
        "pinball": ["memory_stream"],
    }


def test_select_nothing():
    assert select_benches(["nomatch"], ExecutorId.ASYNCIO) == {}


def test_select_unknown_executor():
    with pytest.raises(ValueError):
        select_benches([], "nope")


def test_format_single_sample():
    line = format_result_line(BenchResult("capacity", "10", (2_500_000.0,)))
    assert line.startswith(" " * 8 + "capacity=10 ")
    assert line.endswith("2.500 msg/µs")
    assert "[" not in line


def test_format_multiple_samples():
    line = format_result_line(BenchResult("capacity", "10", (1e6, 3e6)))
    assert line.startswith(" " * 8 + "capacity: 10 ")
    assert line.endswith("2.000 msg/µs [±1.000]")


def test_format_columns_align_across_labels():
    short = format_result_line(BenchResult("capacity", "1", (1e6,)))
    long = format_result_line(BenchResult("capacity", "10000", (1e6,)))
    assert len(short) == len(long)
    assert short.index("msg") == long.index("msg")


def test_format_empty_result_raises():
    with pytest.raises(ValueError):
        format_result_line(BenchResult("capacity", "1", ()))


def test_write_table_layout():
    buffer = io.StringIO()
    headers = ["capacity", "deque", "memory_stream"]
    columns = [["1", "10"], ["100", "200"], ["300", "400"]]
    write_table(buffer, "funnel", "asyncio", headers, columns)
    text = buffer.getvalue()
    lines = text.split("\n")
    assert lines[0] == "# 'funnel' benchmark with asyncio runtime"
    assert lines[1].split() == ["#", "capacity", "deque", "memory_stream"]
    assert len(lines[1]) == 1 + 16 * len(headers)
    assert lines[2].split() == ["1", "100", "300"]
    assert lines[3].split() == ["10", "200", "400"]
    assert len(lines[2]) == len(lines[3]) == 16 * len(columns)
    assert text.endswith("\n\n")


def test_main_help_succeeds(capsys):
    assert main(["-h"]) == 0
    assert "OPTIONS:" in capsys.readouterr().out


def test_main_reports_usage_error(capsys):
    assert main(["--samples", "0"]) == 1
    assert "Error" in capsys.readouterr().err


def test_main_no_matching_benches(capsys):
    assert main(["no-such-bench"]) == 0
    assert capsys.readouterr().out.strip() == "No matching benches found"


def test_main_unwritable_output(tmp_path, capsys):
    target = tmp_path / "missing" / "out.txt"
    assert main(["-o", str(target), "funnel"]) == 1
    assert f"Could not open file <{target}>" in capsys.readouterr().err
    assert not target.exists()
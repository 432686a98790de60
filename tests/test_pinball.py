import pytest

from chanbench import pinball
from chanbench.channels import channel_names
from chanbench.executors import ExecutorId


@pytest.mark.parametrize("channel_name", channel_names())
@pytest.mark.parametrize("executor_id", list(ExecutorId))
@pytest.mark.parametrize("visitor_count", [1, 3, 7, 17, 41])
def test_run_pinball_completes(channel_name, executor_id, visitor_count):
    throughput = pinball.run_pinball(
        channel_name, executor_id, visitor_count, 300, 3, 13
    )
    assert throughput > 0.0


def test_run_pinball_accepts_executor_name():
    throughput = pinball.run_pinball("memory_stream", "asyncio", 3, 60, 2, 4)
    assert throughput > 0.0


def test_run_pinball_with_two_nodes():
    throughput = pinball.run_pinball("deque", ExecutorId.TRIO, 5, 100, 2, 2)
    assert throughput > 0.0


def test_run_pinball_path_shorter_than_visitor_count():
    throughput = pinball.run_pinball("deque", ExecutorId.ASYNCIO, 17, 5, 2, 13)
    assert throughput == 0.0


def test_run_pinball_rejects_single_node_graph():
    with pytest.raises(ValueError):
        pinball.run_pinball("deque", ExecutorId.ASYNCIO, 1, 10, 1, 1)


def test_run_pinball_rejects_zero_visitors():
    with pytest.raises(ValueError):
        pinball.run_pinball("deque", ExecutorId.ASYNCIO, 0, 10, 1, 13)


def test_run_pinball_rejects_zero_graphs():
    with pytest.raises(ValueError):
        pinball.run_pinball("deque", ExecutorId.ASYNCIO, 1, 10, 0, 13)


def test_run_pinball_rejects_unknown_channel():
    with pytest.raises(ValueError):
        pinball.run_pinball("no_such_channel", ExecutorId.ASYNCIO, 1, 10, 1, 13)


def test_bench_rejects_zero_samples():
    with pytest.raises(ValueError):
        pinball.bench("deque", ExecutorId.ASYNCIO, 0)


def test_bench_rejects_unknown_executor():
    with pytest.raises(ValueError):
        pinball.bench("deque", "nope", 1)


@pytest.mark.parametrize("executor_id", list(ExecutorId))
def test_bench_yields_one_result_per_visitor_count(monkeypatch, executor_id):
    monkeypatch.setattr(pinball, "TOTAL_PATH_LENGTH", 500)
    monkeypatch.setattr(pinball, "GRAPH_COUNT", 1)
    monkeypatch.setattr(pinball, "NODES_PER_GRAPH", 13)
    results = list(pinball.bench("memory_stream", executor_id, 1))
    assert [r.label for r in results] == ["ball count"] * 7
    assert [r.parameter for r in results] == ["1", "3", "7", "17", "41", "101", "241"]
    assert all(len(r.throughput) == 1 for r in results)
    assert all(r.mean() > 0.0 for r in results)
import pytest

from benchmark_generation import run_single_generation, summarize_metric


def test_summarize_metric_percentiles_interpolate():
    summary = summarize_metric("rooms", "Rooms", [1.0, 2.0, 3.0, 4.0, 5.0])

    assert summary.count == 5
    assert summary.mean == pytest.approx(3.0)
    assert summary.median == pytest.approx(3.0)
    assert (summary.minimum, summary.maximum) == (1.0, 5.0)
    assert summary.percentiles["p10"] == pytest.approx(1.4)
    assert summary.percentiles["p50"] == pytest.approx(3.0)
    assert summary.percentiles["p99"] == pytest.approx(4.96)
    assert summary.success_rate is None


def test_summarize_metric_single_run_has_no_stdev():
    summary = summarize_metric("time", "Time", [0.25])

    assert summary.stdev is None
    assert set(summary.percentiles.values()) == {0.25}
    assert summary.to_dict()["stdev"] is None


def test_summarize_metric_success_rate():
    summary = summarize_metric("balance", "Balance", [0.2, 0.5, 0.6, 0.9], success_threshold=0.5)

    assert summary.success_rate == pytest.approx(0.75)
    assert summary.to_dict()["success_threshold"] == 0.5


def test_summarize_metric_rejects_empty_values():
    with pytest.raises(ValueError):
        summarize_metric("empty", "Empty", [])


def test_run_single_generation_collects_graph_and_phase_stats():
    run = run_single_generation(1, None)

    assert run.is_valid
    assert run.total_doors == 2 * run.total_corridors
    assert run.cycle_count == len(run.cycle_lengths)
    assert run.max_distance >= 1
    assert "connect" in run.phase_metrics
    assert sum(run.room_type_counts.values()) == run.total_rooms

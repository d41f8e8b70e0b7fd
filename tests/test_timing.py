"""Tests for timing helpers and result data structures."""

import itertools

import pytest
from Microbench import BenchmarkMetrics, BenchmarkParams, TimingSeries, format_duration, speedup, time_callable


def fake_timer(step=0.5):
    """Clock that advances by ``step`` seconds on every call."""
    counter = itertools.count()
    return lambda: next(counter) * step


class TestTimeCallable:
    """Tests for time_callable."""

    def test_records_one_time_per_repeat(self):
        series, result = time_callable(lambda x: x * 2, 21, repeats=4, warmup=0)

        assert len(series.run_times) == 4
        assert all(t >= 0 for t in series.run_times)
        assert result == 42

    def test_warmup_calls_not_timed(self):
        calls = []
        series, _ = time_callable(calls.append, 1, repeats=3, warmup=2)

        assert len(calls) == 5
        assert len(series.run_times) == 3

    def test_custom_timer(self):
        """Each run spans exactly one timer step."""
        series, _ = time_callable(lambda: None, repeats=3, warmup=0, timer=fake_timer(0.5))
        assert series.run_times == [0.5, 0.5, 0.5]

    def test_setup_gives_fresh_arguments(self):
        """setup() runs before every call, outside the timed region."""
        seen = []
        counter = itertools.count()
        time_callable(seen.append, repeats=3, warmup=1, setup=lambda: (next(counter),))
        assert seen == [0, 1, 2, 3]

    @pytest.mark.parametrize("repeats,warmup", [(0, 1), (3, -1)])
    def test_invalid_counts(self, repeats, warmup):
        with pytest.raises(ValueError):
            time_callable(lambda: None, repeats=repeats, warmup=warmup)


class TestSpeedup:
    """Tests for ratios and formatting."""

    def test_speedup(self):
        assert speedup(2.0, 0.5) == 4.0
        assert speedup(1.0, 2.0) == 0.5

    def test_speedup_rejects_zero(self):
        with pytest.raises(ValueError):
            speedup(1.0, 0.0)

    @pytest.mark.parametrize(
        "seconds,expected",
        [(5e-9, "5.00 ns"), (2.5e-5, "25.00 us"), (0.00123, "1.23 ms"), (3.0, "3.00 s")],
    )
    def test_format_duration(self, seconds, expected):
        assert format_duration(seconds) == expected


class TestDataStructures:
    """Tests for params, metrics and timing series."""

    def test_summary(self):
        series = TimingSeries(run_times=[3.0, 1.0, 2.0])
        summary = series.summary()

        assert summary["n_runs"] == 3
        assert summary["min_time"] == 1.0
        assert summary["mean_time"] == 2.0
        assert summary["median_time"] == 2.0
        assert summary["total_time"] == 6.0

    def test_empty_summary(self):
        assert TimingSeries().summary() == {"n_runs": 0}

    def test_clear(self):
        series = TimingSeries(run_times=[1.0])
        series.clear()
        assert series.run_times == []

    def test_params_to_mlflow_drops_none(self):
        params = BenchmarkParams(workload="gamma", backend="numba", size=100)
        flat = params.to_mlflow()

        assert flat["workload"] == "gamma"
        assert "mode" not in flat
        assert flat["environment"] in ("local", "hpc")

    def test_metrics_bools_as_int(self):
        metrics = BenchmarkMetrics(n_runs=2, min_time=0.1, verified=True)
        flat = metrics.to_mlflow()

        assert flat["verified"] == 1
        assert "speedup" not in flat

    def test_timeseries_to_mlflow_batch(self):
        batch = TimingSeries(run_times=[0.1, 0.2]).to_mlflow_batch()

        assert [m.step for m in batch] == [0, 1]
        assert all(m.key == "run_times" for m in batch)

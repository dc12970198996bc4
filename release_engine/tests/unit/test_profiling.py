"""Unit tests for release_engine.profiling."""

from __future__ import annotations

import pytest

from release_engine.profiling import OperationTiming, TimingCollector, profile_operation


@pytest.fixture(autouse=True)
def _fresh_collector():
    TimingCollector.reset()
    yield
    TimingCollector.reset()


class TestTimingCollector:
    def test_singleton(self):
        assert TimingCollector.get_instance() is TimingCollector.get_instance()

    def test_stats_none_when_empty(self):
        assert TimingCollector.get_instance().get_stats("nothing") is None

    def test_stats_aggregate(self):
        collector = TimingCollector()
        for ms in (1.0, 2.0, 3.0):
            collector.record(OperationTiming(operation="op", duration_ms=ms))
        stats = collector.get_stats("op")
        assert stats == {"operation": "op", "count": 3, "mean_ms": 2.0, "min_ms": 1.0, "max_ms": 3.0}

    def test_all_stats_sorted_by_operation(self):
        collector = TimingCollector()
        collector.record(OperationTiming(operation="b.op", duration_ms=1.0))
        collector.record(OperationTiming(operation="a.op", duration_ms=2.0))
        collector.record(OperationTiming(operation="a.op", duration_ms=4.0))
        stats = collector.get_all_stats()
        assert [s["operation"] for s in stats] == ["a.op", "b.op"]
        assert stats[0]["mean_ms"] == 3.0

    def test_all_stats_empty(self):
        assert TimingCollector().get_all_stats() == []

    def test_retains_most_recent(self):
        collector = TimingCollector(max_results=2)
        for ms in (10.0, 1.0, 2.0):
            collector.record(OperationTiming(operation="op", duration_ms=ms))
        stats = collector.get_stats("op")
        assert stats is not None
        assert stats["count"] == 2
        assert stats["max_ms"] == 2.0


class TestProfileOperation:
    def test_records_and_returns(self):
        @profile_operation("test.add")
        def add(a, b):
            return a + b

        assert add(1, 2) == 3
        stats = TimingCollector.get_instance().get_stats("test.add")
        assert stats is not None
        assert stats["count"] == 1

    def test_records_on_exception(self):
        @profile_operation("test.boom")
        def boom():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            boom()
        assert [s["operation"] for s in TimingCollector.get_instance().get_all_stats()] == ["test.boom"]

    def test_preserves_metadata(self):
        @profile_operation("test.named")
        def named():
            """Docstring."""

        assert named.__name__ == "named"
        assert named.__doc__ == "Docstring."

    def test_logs_at_debug(self, caplog):
        @profile_operation("test.logged")
        def noop():
            return None

        with caplog.at_level("DEBUG", logger="release_engine.profiling"):
            noop()
        assert "PROFILE test.logged" in caplog.text

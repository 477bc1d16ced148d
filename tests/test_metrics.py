"""
Tests for polling metrics.
"""

from datetime import UTC, datetime, timedelta

from version_monitor.polling.metrics import PollingCycleMetrics, PollingMetricsCollector


def make_cycle(cycle_id: str, seconds: int, releases: int = 0) -> PollingCycleMetrics:
    start = datetime(2026, 1, 1, tzinfo=UTC)
    return PollingCycleMetrics(
        cycle_id=cycle_id,
        start_time=start,
        end_time=start + timedelta(seconds=seconds),
        projects_processed=2,
        releases_found=releases,
    )


def test_duration_of_unfinished_cycle():
    """Test duration of unfinished cycle."""
    metrics = PollingCycleMetrics(cycle_id="c", start_time=datetime.now(UTC))

    assert metrics.duration_seconds == 0.0


def test_record_failure():
    """Test recording a project failure."""
    metrics = make_cycle("c", 1)

    metrics.record_failure("apple/swift", RuntimeError("boom"))

    assert metrics.projects_failed == 1
    assert metrics.to_dict()["errors"] == ["apple/swift: boom"]


def test_summary_over_history():
    """Test summary over history."""
    collector = PollingMetricsCollector()
    collector.record_cycle(make_cycle("a", 2, releases=1))
    collector.record_cycle(make_cycle("b", 4, releases=3))

    summary = collector.get_summary()

    assert summary["cycles"] == 2
    assert summary["total_projects_processed"] == 4
    assert summary["total_releases_found"] == 4
    assert summary["avg_cycle_seconds"] == 3.0
    assert summary["last_cycle"]["cycle_id"] == "b"


def test_history_is_bounded():
    """Test history is bounded."""
    collector = PollingMetricsCollector(max_history=2)
    for cycle_id in ("a", "b", "c"):
        collector.record_cycle(make_cycle(cycle_id, 1))

    assert [c.cycle_id for c in collector.cycles] == ["b", "c"]
    assert collector.last_cycle.cycle_id == "c"

"""
Metrics collection for the polling system.

This module keeps per-cycle counters and a bounded history of completed
cycles for health reporting.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import structlog

logger = structlog.get_logger(__name__)


@dataclass
class PollingCycleMetrics:
    """Metrics for a single polling cycle."""

    cycle_id: str
    start_time: datetime
    end_time: datetime | None = None
    projects_processed: int = 0
    projects_failed: int = 0
    releases_found: int = 0
    notifications_failed: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Get cycle duration in seconds."""
        if self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0

    def record_failure(self, project: str, error: Exception) -> None:
        self.projects_failed += 1
        self.errors.append(f"{project}: {error}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "cycle_id": self.cycle_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_seconds": self.duration_seconds,
            "projects_processed": self.projects_processed,
            "projects_failed": self.projects_failed,
            "releases_found": self.releases_found,
            "notifications_failed": self.notifications_failed,
            "errors": list(self.errors),
        }


class PollingMetricsCollector:
    """Keeps the most recent completed cycles."""

    def __init__(self, max_history: int = 100):
        self.max_history = max_history
        self.cycles: deque[PollingCycleMetrics] = deque(maxlen=max_history)

    def record_cycle(self, metrics: PollingCycleMetrics) -> None:
        """Record metrics from a completed cycle."""
        self.cycles.append(metrics)
        logger.debug(
            "Recorded polling cycle",
            cycle_id=metrics.cycle_id,
            duration_seconds=metrics.duration_seconds,
        )

    @property
    def last_cycle(self) -> PollingCycleMetrics | None:
        return self.cycles[-1] if self.cycles else None

    def get_summary(self) -> dict[str, Any]:
        """Get totals and averages over the recorded history."""
        if not self.cycles:
            return {"cycles": 0}

        total_duration = sum(c.duration_seconds for c in self.cycles)
        last = self.cycles[-1]

        return {
            "cycles": len(self.cycles),
            "total_projects_processed": sum(c.projects_processed for c in self.cycles),
            "total_projects_failed": sum(c.projects_failed for c in self.cycles),
            "total_releases_found": sum(c.releases_found for c in self.cycles),
            "avg_cycle_seconds": total_duration / len(self.cycles),
            "last_cycle": last.to_dict(),
        }

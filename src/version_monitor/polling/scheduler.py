"""
Polling scheduler for Version Monitor.

This module runs periodic release checks across every tracked project and
hands new releases to the notifier.
"""

import asyncio
import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any

import structlog

from ..config import Settings
from ..exceptions import ConfigurationError
from ..models import HostType, Project, Release
from .metrics import PollingCycleMetrics, PollingMetricsCollector

if TYPE_CHECKING:
    from ..hosts.registry import HostRegistry
    from ..notifications import Notifier
    from ..storage.manager import ProjectStore

logger = structlog.get_logger(__name__)


class PollingScheduler:
    """
    Orchestrates release checks across all tracked projects.

    Projects are checked concurrently up to the configured limit, and never
    more than once at a time each. A failure while checking one project is
    logged and does not affect the others.
    """

    def __init__(
        self,
        registry: "HostRegistry",
        store: "ProjectStore",
        notifier: "Notifier",
        settings: Settings,
    ):
        """
        Initialize the polling scheduler.

        Args:
            registry: Frozen host registry
            store: Source of tracked projects
            notifier: Receiver of newly found releases
            settings: Application settings
        """
        self.registry = registry
        self.store = store
        self.notifier = notifier
        self.settings = settings
        self.config = settings.polling_config

        self.metrics = PollingMetricsCollector()

        # Polling state
        self.is_running_flag = False
        self.polling_task: asyncio.Task[None] | None = None
        self._project_locks: dict[tuple[HostType, str], asyncio.Lock] = {}

    def is_running(self) -> bool:
        """Check if polling is currently active."""
        return self.is_running_flag

    async def start_polling(self) -> None:
        """
        Start the polling loop and run until stopped.

        Raises:
            ConfigurationError: If the host registry has not been frozen
        """
        if self.is_running_flag:
            logger.warning("Polling already running")
            return

        if not self.registry.frozen:
            raise ConfigurationError("Host registry must be frozen before polling")

        self.is_running_flag = True
        logger.info(
            "Starting polling scheduler",
            interval_seconds=self.config.interval_seconds,
            concurrent_projects=self.config.concurrent_projects,
            hosts=self.registry.host_identifiers,
        )

        self.polling_task = asyncio.current_task()
        try:
            await self._polling_loop()
        except asyncio.CancelledError:
            logger.info("Polling cancelled")
        finally:
            self.is_running_flag = False
            self.polling_task = None

    async def stop_polling(self) -> None:
        """Stop the polling loop."""
        if not self.is_running_flag:
            return

        logger.info("Stopping polling scheduler")
        self.is_running_flag = False

        if self.polling_task and not self.polling_task.done():
            self.polling_task.cancel()

    async def _polling_loop(self) -> None:
        """Main polling loop."""
        while self.is_running_flag:
            try:
                metrics = await self.run_cycle()
                delay = max(
                    0.0, self.config.interval_seconds - metrics.duration_seconds
                )
                logger.info("Next polling cycle scheduled", in_seconds=delay)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("Error in polling cycle", error=str(e))
                delay = self.config.error_backoff_seconds

            if self.is_running_flag:
                await asyncio.sleep(delay)

    async def run_cycle(self) -> PollingCycleMetrics:
        """
        Check every tracked project once.

        Returns:
            Metrics of the completed cycle
        """
        metrics = PollingCycleMetrics(
            cycle_id=uuid.uuid4().hex[:8], start_time=datetime.now()
        )
        logger.info(
            "Polling cycle started",
            cycle_id=metrics.cycle_id,
            timestamp=metrics.start_time.isoformat(),
        )

        projects = await self.store.list_tracked_projects()
        if not projects:
            logger.warning("No projects tracked")

        semaphore = asyncio.Semaphore(self.config.concurrent_projects)

        async def process_single_project(project: Project) -> None:
            async with semaphore:
                await self._process_project(project, metrics)

        tasks = [
            asyncio.create_task(process_single_project(project))
            for project in projects
        ]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

        tracked = {project.key for project in projects}
        self._project_locks = {
            key: lock
            for key, lock in self._project_locks.items()
            if key in tracked or lock.locked()
        }

        metrics.end_time = datetime.now()
        self.metrics.record_cycle(metrics)

        logger.info(
            "Polling cycle completed",
            cycle_id=metrics.cycle_id,
            duration_seconds=metrics.duration_seconds,
            projects_processed=metrics.projects_processed,
            projects_failed=metrics.projects_failed,
            releases_found=metrics.releases_found,
        )
        return metrics

    async def _process_project(
        self, project: Project, metrics: PollingCycleMetrics
    ) -> list[Release]:
        """Check a single project and notify about its new releases."""
        lock = self._project_locks.setdefault(project.key, asyncio.Lock())

        async with lock:
            try:
                service = self.registry.resolve(project)
                new_releases = await service.check(project)
            except Exception as e:
                logger.error(
                    "Failed to check project",
                    host=project.host_type.value,
                    project=project.identifier,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                metrics.record_failure(project.identifier, e)
                return []

            metrics.projects_processed += 1
            metrics.releases_found += len(new_releases)

            if new_releases:
                logger.info(
                    "Found new releases",
                    host=project.host_type.value,
                    project=project.identifier,
                    versions=[r.version for r in new_releases],
                )

            for release in new_releases:
                await self._notify(project, release, metrics)

            return new_releases

    async def _notify(
        self, project: Project, release: Release, metrics: PollingCycleMetrics
    ) -> None:
        try:
            await self.notifier.notify(project, release)
        except Exception as e:
            metrics.notifications_failed += 1
            logger.error(
                "Failed to send release notification",
                project=project.identifier,
                version=release.version,
                error=str(e),
            )

    def get_metrics_summary(self) -> dict[str, Any]:
        """Get summary of recent polling cycles for monitoring."""
        return self.metrics.get_summary()

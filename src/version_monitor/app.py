"""
Application entry point for Version Monitor.

Wires settings, logging, storage, notifier, host registry and the polling
scheduler together, and runs the scheduler until interrupted.
"""

import asyncio
import logging
import signal
import sys
from typing import Any

import structlog

from .config import Settings, get_settings
from .exceptions import InvalidIdentifierError, VersionMonitorError
from .hosts.registry import HostRegistry, build_registry
from .models import Project
from .notifications import Notifier, create_notifier
from .polling.scheduler import PollingScheduler
from .storage.manager import ProjectStore, StoreFactory

logger = structlog.get_logger(__name__)


def setup_logging(settings: Settings) -> None:
    """Configure structured logging."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level), format="%(message)s"
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            (
                structlog.processors.JSONRenderer()
                if settings.log_format == "json"
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class VersionMonitorApp:
    """Main application class."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings
        self.store: ProjectStore | None = None
        self.notifier: Notifier | None = None
        self.registry: HostRegistry | None = None
        self.scheduler: PollingScheduler | None = None
        self._polling_task: asyncio.Task[None] | None = None

    async def initialize(self) -> None:
        """
        Initialize all application components.

        Raises:
            ConfigurationError: On missing tokens or an invalid host setup
            HostAPIError: If a configured project could not be read
        """
        if self.settings is None:
            self.settings = get_settings()

        setup_logging(self.settings)
        logger.info(
            "Initializing Version Monitor",
            hosts=self.settings.enabled_hosts,
            storage_backend=self.settings.storage_backend,
        )

        self.store = StoreFactory.create_store(self.settings.storage_backend)
        self.notifier = create_notifier(self.settings)
        self.registry = build_registry(self.settings, self.store)
        self.scheduler = PollingScheduler(
            registry=self.registry,
            store=self.store,
            notifier=self.notifier,
            settings=self.settings,
        )

        for host, identifier in self.settings.get_tracked_projects():
            try:
                await self.track_project(host, identifier)
            except VersionMonitorError as e:
                logger.error(
                    "Could not track configured project",
                    host=host,
                    project=identifier,
                    error=str(e),
                )
                raise

        logger.info("Version Monitor initialization complete")

    async def track_project(self, host: str, identifier: str) -> Project | None:
        """
        Start tracking a project, taking its current releases as known.

        Args:
            host: Registered host identifier, e.g. ``github``
            identifier: Host specific project identifier

        Returns:
            The tracked project, or None if it does not exist on the host

        Raises:
            NoMatchingHostError: If the host is not registered
            InvalidIdentifierError: If the identifier is malformed
            HostAPIError: If the host could not be read
        """
        if self.registry is None or self.store is None:
            raise RuntimeError("Application not initialized")

        service = self.registry.get(host)
        if not service.valid_identifier(identifier):
            raise InvalidIdentifierError(
                f"Illegal {host} identifier: {identifier!r}",
                identifier=identifier,
                host=host,
            )

        existing = await self.store.get_project(service.host_type, identifier)
        if existing is not None:
            logger.debug("Project already tracked", host=host, project=identifier)
            return existing

        project = await service.get_project(identifier, raise_on_error=True)
        if project is None:
            logger.warning(
                "Project not found, not tracking", host=host, project=identifier
            )
            return None

        await self.store.add_project(project)
        logger.info(
            "Project tracked",
            host=host,
            project=identifier,
            known_releases=len(project.releases),
        )
        return project

    async def start(self) -> None:
        """Run polling until shutdown is requested."""
        if self.scheduler is None:
            raise RuntimeError("Application not initialized")

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(
                    sig, lambda s=sig: asyncio.create_task(self._handle_signal(s))
                )
            except NotImplementedError:
                logger.debug("Signal handlers not supported on this platform")

        self._polling_task = asyncio.create_task(self.scheduler.start_polling())
        await self._polling_task

    async def _handle_signal(self, sig: signal.Signals) -> None:
        logger.info("Received signal, initiating shutdown", signal=sig.name)
        await self.stop()

    async def stop(self) -> None:
        """Stop polling and release client connections."""
        logger.info("Stopping Version Monitor")

        if self.scheduler:
            await self.scheduler.stop_polling()

        if self.registry:
            await self.registry.close()

        if self.notifier:
            try:
                await self.notifier.close()
            except Exception as e:
                logger.warning("Error closing notifier", error=str(e))

        logger.info("Version Monitor stopped")

    async def health_check(self) -> dict[str, Any]:
        """
        Perform health check of all components.

        Returns:
            Health check results
        """
        health_data: dict[str, Any] = {"status": "healthy", "components": {}}

        if self.store:
            healthy = await self.store.health_check()
            health_data["components"]["store"] = "healthy" if healthy else "unhealthy"
            if not healthy:
                health_data["status"] = "unhealthy"
        else:
            health_data["components"]["store"] = "not_initialized"

        health_data["components"]["hosts"] = (
            self.registry.host_identifiers if self.registry else []
        )

        if self.scheduler:
            health_data["components"]["scheduler"] = (
                "running" if self.scheduler.is_running() else "stopped"
            )
            health_data["polling"] = self.scheduler.get_metrics_summary()
        else:
            health_data["components"]["scheduler"] = "not_initialized"

        return health_data


async def run() -> None:
    """Initialize and run the application."""
    app = VersionMonitorApp()

    try:
        await app.initialize()
        await app.start()
    finally:
        await app.stop()


def main() -> None:
    """Main entry point."""
    try:
        asyncio.run(run())
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
    except VersionMonitorError as e:
        logger.error("Application failed to start", error=str(e), code=e.code)
        sys.exit(1)


if __name__ == "__main__":
    main()

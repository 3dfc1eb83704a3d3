"""Install orchestration: the fail-fast run and wiring for the real adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..cache import LocalFilesystemPluginCache
from ..config import Settings
from ..context import ContextResolver
from ..fetchers import HttpTransport, RetryingDownloader
from ..installer import PluginInstaller
from ..observers import LoggingReporter
from ..runtime import ManifestLanguageRuntime
from ._orchestrator import (
    InstallOptions,
    InstallOrchestrator,
    InstallOutcome,
    InstallReport,
    Status,
)

if TYPE_CHECKING:
    from ..observers import ProgressObserver, Reporter
    from ..runtime import LanguageRuntime


def make_orchestrator(
    settings: Settings | None = None,
    runtime: LanguageRuntime | None = None,
    reporter: Reporter | None = None,
    progress: ProgressObserver | None = None,
) -> InstallOrchestrator:
    """Build an InstallOrchestrator with the filesystem cache and HTTP transport.

    settings: defaults to Settings() (environment and .env)
    runtime: defaults to ManifestLanguageRuntime
    reporter: defaults to a logging-backed reporter
    """
    settings = settings or Settings()
    reporter = reporter or LoggingReporter()
    cache = LocalFilesystemPluginCache(settings.plugin_dir)
    downloader = RetryingDownloader(
        HttpTransport(timeout=settings.request_timeout),
        base_url=settings.download_base_url,
        attempts=settings.download_attempts,
        retry_delay=settings.retry_delay,
        max_retry_delay=settings.max_retry_delay,
    )
    return InstallOrchestrator(
        runtime or ManifestLanguageRuntime(timeout=settings.dependency_install_timeout),
        cache,
        downloader,
        PluginInstaller(cache, reporter),
        reporter=reporter,
        progress=progress,
    )


def make_resolver(settings: Settings | None = None) -> ContextResolver:
    settings = settings or Settings()
    return ContextResolver(
        project_markers=settings.project_markers,
        policy_pack_markers=settings.policy_pack_markers,
    )


__all__ = [
    "InstallOptions",
    "InstallOrchestrator",
    "InstallOutcome",
    "InstallReport",
    "Status",
    "make_orchestrator",
    "make_resolver",
]

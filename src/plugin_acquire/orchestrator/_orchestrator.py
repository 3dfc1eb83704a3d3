"""InstallOrchestrator: fail-fast install of a program's dependencies and plugins."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from ..context import ContextResolver, WorkingContext
from ..errors import (
    ContextResolutionError,
    DependencyInstallError,
    PluginLookupError,
)
from ..matcher import is_satisfied
from ..observers import LoggingReporter, NoProgress, ReportingRetryObserver
from ..runtime import program_from_policy_pack, program_from_project

if TYPE_CHECKING:
    from pathlib import Path

    from ..cache import PluginCache
    from ..fetchers import RetryingDownloader
    from ..installer import PluginInstaller
    from ..models.plugin import InstalledPlugin, PluginRequirement
    from ..observers import ProgressObserver, Reporter, RetryObserver
    from ..runtime import LanguageRuntime, ProgramInfo

logger = logging.getLogger(__name__)

Status = Literal["skipped", "installed", "failed"]


@dataclass(frozen=True)
class InstallOptions:
    """The four install toggles. All are independent; every combination is valid."""

    force: bool = False
    skip_plugins: bool = False
    skip_dependencies: bool = False
    use_version_tools: bool = False


@dataclass
class InstallOutcome:
    requirement: PluginRequirement
    status: Status
    error: Exception | None = None
    installed: InstalledPlugin | None = None


@dataclass
class InstallReport:
    """What a run did, in processing order. Requirements after a failure have no outcome."""

    outcomes: list[InstallOutcome] = field(default_factory=list)
    dependencies_installed: bool = False
    downloads: int = 0

    def status_of(self, requirement: PluginRequirement) -> Status | None:
        for outcome in self.outcomes:
            if outcome.requirement == requirement:
                return outcome.status
        return None

    @property
    def installed(self) -> list[PluginRequirement]:
        return [o.requirement for o in self.outcomes if o.status == "installed"]

    @property
    def skipped(self) -> list[PluginRequirement]:
        return [o.requirement for o in self.outcomes if o.status == "skipped"]

    @property
    def failed(self) -> list[PluginRequirement]:
        return [o.requirement for o in self.outcomes if o.status == "failed"]


class InstallOrchestrator:
    """Installs a program's dependencies, then each required plugin in order.

    The first failure aborts the run; later requirements are not attempted.
    ``report`` holds the outcomes of the most recent run, including a failed one.
    """

    def __init__(
        self,
        runtime: LanguageRuntime,
        cache: PluginCache,
        downloader: RetryingDownloader,
        installer: PluginInstaller,
        *,
        reporter: Reporter | None = None,
        progress: ProgressObserver | None = None,
        retry: RetryObserver | None = None,
    ) -> None:
        self._runtime = runtime
        self._cache = cache
        self._downloader = downloader
        self._installer = installer
        self._reporter = reporter or LoggingReporter()
        self._progress = progress or NoProgress()
        self._retry = retry or ReportingRetryObserver(self._reporter)
        self.report = InstallReport()

    def run(self, program: ProgramInfo, options: InstallOptions | None = None) -> InstallReport:
        """Install dependencies and plugins for a project.

        Raises:
            DependencyInstallError: The runtime could not install the program's dependencies.
            PluginLookupError: The required plugins could not be determined.
            DownloadError: A plugin could not be downloaded after all retries.
            InstallError: A downloaded plugin could not be installed into the cache.
        """
        options = options or InstallOptions()
        self.report = report = InstallReport()

        if not options.skip_dependencies:
            self._install_dependencies(program, options.use_version_tools)
            report.dependencies_installed = True

        if options.skip_plugins:
            return report

        for requirement in self._required_plugins(program):
            if is_satisfied(requirement, self._cache, force=options.force):
                report.outcomes.append(InstallOutcome(requirement, "skipped"))
                continue
            self._reporter.info(f"{requirement.label} installing")
            try:
                report.downloads += 1
                artifact = self._downloader.fetch(requirement, self._progress, self._retry)
                installed = self._installer.install(requirement, artifact, force=options.force)
            except Exception as e:
                report.outcomes.append(InstallOutcome(requirement, "failed", error=e))
                raise
            report.outcomes.append(InstallOutcome(requirement, "installed", installed=installed))
        return report

    def run_policy_pack(self, program: ProgramInfo, options: InstallOptions | None = None) -> InstallReport:
        """Install a policy pack's own dependencies. Policy packs have no plugins to install.

        Dependencies are installed even when ``skip_dependencies`` is set.
        """
        options = options or InstallOptions()
        self.report = report = InstallReport()
        self._install_dependencies(program, options.use_version_tools)
        report.dependencies_installed = True
        return report

    def install_for_directory(
        self,
        cwd: Path,
        options: InstallOptions | None = None,
        resolver: ContextResolver | None = None,
    ) -> InstallReport:
        """Resolve ``cwd`` to a project or policy pack and install for it.

        Raises:
            ContextResolutionError: Marker lookup failed, or neither marker exists.
            LoadError: The project or policy pack file is invalid.
        """
        target = (resolver or ContextResolver()).locate_install_target(cwd)
        if target.context is WorkingContext.POLICY_PACK and target.path is not None:
            logger.debug("installing policy pack dependencies for %s", target.path)
            return self.run_policy_pack(program_from_policy_pack(target.path), options)
        if target.context is WorkingContext.PROJECT and target.path is not None:
            return self.run(program_from_project(target.path), options)
        raise ContextResolutionError(f"no project or policy pack found in {cwd} or its parents")

    def _install_dependencies(self, program: ProgramInfo, use_version_tools: bool) -> None:
        try:
            self._runtime.install_dependencies(program, use_version_tools)
        except Exception as e:
            self._reporter.warning(f"installing dependencies for {program.root} failed")
            raise DependencyInstallError(f"installing dependencies: {e}") from e

    def _required_plugins(self, program: ProgramInfo) -> list[PluginRequirement]:
        try:
            return list(self._runtime.get_required_plugins(program))
        except Exception as e:
            raise PluginLookupError(f"computing required plugins: {e}") from e

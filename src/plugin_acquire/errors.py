from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from .models.plugin import PluginRequirement


class ErrorKind(str, Enum):
    CONTEXT_RESOLUTION = "context_resolution"
    DEPENDENCY_INSTALL = "dependency_install"
    PLUGIN_LOOKUP = "plugin_lookup"
    DOWNLOAD = "download"
    INSTALL = "install"


class LoadError(Exception):
    """Raised when a project or policy pack file cannot be read or parsed.

    Attributes:
        path: The file that could not be loaded, if applicable.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


class FetchError(Exception):
    """Raised when a single download attempt fails (network, HTTP error, timeout).

    Attributes:
        url: The URL that failed, if applicable.
        retryable: False when retrying cannot help (e.g. HTTP 404).
    """

    def __init__(self, message: str, url: str | None = None, retryable: bool = True) -> None:
        self.url = url
        self.retryable = retryable
        super().__init__(message)


class CommandError(Exception):
    """Raised when an external tool (pip, npm, go) exits unsuccessfully or cannot be started.

    Attributes:
        command: The argv that was run.
        returncode: Exit status, or None if the tool could not be started.
    """

    def __init__(self, message: str, command: list[str], returncode: int | None = None) -> None:
        self.command = command
        self.returncode = returncode
        super().__init__(message)


class AcquisitionError(Exception):
    """Base class for errors that abort an install run.

    Attributes:
        kind: Which stage of the run failed.
        requirement: The plugin being processed, if the failure is plugin specific.

    The underlying cause is chained as ``__cause__``.
    """

    kind: ErrorKind

    def __init__(self, message: str, requirement: PluginRequirement | None = None) -> None:
        self.requirement = requirement
        super().__init__(message)


class ContextResolutionError(AcquisitionError):
    """Raised when looking up a project or policy pack marker fails for a reason other than absence."""

    kind = ErrorKind.CONTEXT_RESOLUTION


class DependencyInstallError(AcquisitionError):
    """Raised when the language runtime fails to install the program's own dependencies."""

    kind = ErrorKind.DEPENDENCY_INSTALL


class PluginLookupError(AcquisitionError):
    """Raised when the list of required plugins cannot be obtained."""

    kind = ErrorKind.PLUGIN_LOOKUP


class DownloadError(AcquisitionError):
    """Raised when a plugin download still fails after all retry attempts."""

    kind = ErrorKind.DOWNLOAD

    def __init__(
        self,
        requirement: PluginRequirement,
        url: str,
        attempts: int,
        cause: BaseException,
    ) -> None:
        self.url = url
        self.attempts = attempts
        super().__init__(f"{requirement.identity} downloading from {url}: {cause}", requirement)


class InstallError(AcquisitionError):
    """Raised when extracting a downloaded plugin into the cache fails."""

    kind = ErrorKind.INSTALL

    def __init__(self, requirement: PluginRequirement, cause: BaseException) -> None:
        super().__init__(f"installing {requirement.identity}: {cause}", requirement)
from .archive import TarPayload, extract_tar
from .cache import InMemoryPluginCache, LocalFilesystemPluginCache, PluginCache
from .config import Settings
from .context import (
    ContextResolver,
    InstallTarget,
    WorkingContext,
    find_upwards,
    resolve_install_target,
    should_use_policy_pack_deps,
)
from .errors import (
    AcquisitionError,
    CommandError,
    ContextResolutionError,
    DependencyInstallError,
    DownloadError,
    ErrorKind,
    FetchError,
    InstallError,
    LoadError,
    PluginLookupError,
)
from .fetchers import HttpTransport, RetryingDownloader
from .installer import PluginInstaller
from .loaders import load_policy_pack, load_project
from .matcher import is_satisfied
from .models import (
    InstalledPlugin,
    PluginKind,
    PluginRequirement,
    PolicyPackFile,
    ProjectFile,
)
from .orchestrator import (
    InstallOptions,
    InstallOrchestrator,
    InstallOutcome,
    InstallReport,
    make_orchestrator,
    make_resolver,
)
from .runtime import LanguageRuntime, ManifestLanguageRuntime, ProgramInfo

__all__ = [
    "AcquisitionError",
    "CommandError",
    "ContextResolutionError",
    "ContextResolver",
    "DependencyInstallError",
    "DownloadError",
    "ErrorKind",
    "FetchError",
    "HttpTransport",
    "InMemoryPluginCache",
    "InstallError",
    "InstallOptions",
    "InstallOrchestrator",
    "InstallOutcome",
    "InstallReport",
    "InstallTarget",
    "InstalledPlugin",
    "LanguageRuntime",
    "LoadError",
    "LocalFilesystemPluginCache",
    "ManifestLanguageRuntime",
    "PluginCache",
    "PluginInstaller",
    "PluginKind",
    "PluginLookupError",
    "PluginRequirement",
    "PolicyPackFile",
    "ProgramInfo",
    "ProjectFile",
    "RetryingDownloader",
    "Settings",
    "TarPayload",
    "WorkingContext",
    "extract_tar",
    "find_upwards",
    "is_satisfied",
    "load_policy_pack",
    "load_project",
    "make_orchestrator",
    "make_resolver",
    "resolve_install_target",
    "should_use_policy_pack_deps",
]

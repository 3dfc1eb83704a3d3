from .plugin import InstalledPlugin, PluginKind, PluginRequirement, cache_dir_name, parse_version
from .project import PolicyPackFile, ProjectFile, RuntimeInfo

__all__ = [
    "InstalledPlugin",
    "PluginKind",
    "PluginRequirement",
    "PolicyPackFile",
    "ProjectFile",
    "RuntimeInfo",
    "cache_dir_name",
    "parse_version",
]

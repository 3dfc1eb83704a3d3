"""Local plugin cache: protocol, filesystem adapter, in-memory adapter."""

from __future__ import annotations

from ._in_memory import InMemoryPluginCache
from ._local import LocalFilesystemPluginCache, parse_entry_name
from ._protocols import InstallablePayload, PluginCache

__all__ = [
    "InMemoryPluginCache",
    "InstallablePayload",
    "LocalFilesystemPluginCache",
    "PluginCache",
    "parse_entry_name",
]

"""Protocols (ports) for the plugin cache."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    import semver

    from ..models.plugin import InstalledPlugin, PluginKind


class InstallablePayload(Protocol):
    """Something that can write a plugin's files into a directory (e.g. a TarPayload)."""

    def extract_to(self, dest: Path) -> None: ...


class PluginCache(Protocol):
    """The local store of installed plugins, keyed by (kind, name, version)."""

    def has_exact(self, kind: PluginKind, name: str, version: semver.Version) -> bool: ...
    def has_at_least(
        self, kind: PluginKind, name: str, version: semver.Version | None
    ) -> bool: ...
    def install(
        self,
        kind: PluginKind,
        name: str,
        version: semver.Version | None,
        payload: InstallablePayload,
        overwrite: bool = False,
    ) -> InstalledPlugin: ...
    def list_installed(self) -> list[InstalledPlugin]: ...

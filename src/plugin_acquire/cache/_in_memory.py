"""In-memory plugin cache for testing (no disk I/O unless a payload writes some)."""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from ..models.plugin import InstalledPlugin, PluginKind, cache_dir_name, parse_version

if TYPE_CHECKING:
    import semver

    from ._protocols import InstallablePayload


class InMemoryPluginCache:
    def __init__(
        self,
        entries: list[tuple[PluginKind | str, str, str | None]] | None = None,
    ) -> None:
        self._entries: dict[tuple[PluginKind, str, semver.Version | None], InstalledPlugin] = {}
        self._tmpdirs: list[tempfile.TemporaryDirectory] = []
        self.install_calls: list[tuple[PluginKind, str, semver.Version | None, bool]] = []
        for kind, name, version in entries or []:
            self._add(PluginKind(kind), name, parse_version(version))

    def _add(self, kind: PluginKind, name: str, version: semver.Version | None) -> InstalledPlugin:
        path = Path(f"/in-memory/plugins/{cache_dir_name(kind, name, version)}")
        plugin = InstalledPlugin(kind=kind, name=name, version=version, path=path)
        self._entries[(kind, name, version)] = plugin
        return plugin

    def list_installed(self) -> list[InstalledPlugin]:
        return list(self._entries.values())

    def has_exact(self, kind: PluginKind, name: str, version: semver.Version) -> bool:
        return (kind, name, version) in self._entries

    def has_at_least(self, kind: PluginKind, name: str, version: semver.Version | None) -> bool:
        for k, n, v in self._entries:
            if k != kind or n != name:
                continue
            if version is None or (v is not None and v >= version):
                return True
        return False

    def install(
        self,
        kind: PluginKind,
        name: str,
        version: semver.Version | None,
        payload: InstallablePayload,
        overwrite: bool = False,
    ) -> InstalledPlugin:
        self.install_calls.append((kind, name, version, overwrite))
        existing = self._entries.get((kind, name, version))
        if existing is not None and not overwrite:
            return existing
        tmpdir = tempfile.TemporaryDirectory()
        self._tmpdirs.append(tmpdir)
        payload.extract_to(Path(tmpdir.name))
        return self._add(kind, name, version)

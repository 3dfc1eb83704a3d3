"""Plugin cache on the local filesystem: one directory per installed plugin."""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from ..models.plugin import InstalledPlugin, PluginKind, cache_dir_name, parse_version

if TYPE_CHECKING:
    import semver

    from ._protocols import InstallablePayload

logger = logging.getLogger(__name__)

# "<kind>-<name>" or "<kind>-<name>-v<semver>"
_ENTRY_NAME = re.compile(
    r"^(?P<kind>resource|language|analyzer|tool)-(?P<name>.+?)(?:-v(?P<version>\d+\.\d+\.\d+\S*))?$"
)


def parse_entry_name(dir_name: str) -> tuple[PluginKind, str, semver.Version | None] | None:
    """Split a cache directory name into (kind, name, version). Returns None for foreign entries."""
    match = _ENTRY_NAME.match(dir_name)
    if match is None:
        return None
    try:
        version = parse_version(match.group("version"))
    except ValueError:
        return None
    return PluginKind(match.group("kind")), match.group("name"), version


class LocalFilesystemPluginCache:
    """Reads/writes the plugin directory (e.g. ~/.plugin-acquire/plugins).

    Installs extract into a hidden staging directory next to the final entry and
    are renamed into place only once extraction has finished.
    """

    def __init__(self, plugins_dir: Path) -> None:
        self._dir = Path(plugins_dir)

    @property
    def root(self) -> Path:
        return self._dir

    def get_plugin_path(self, kind: PluginKind, name: str, version: semver.Version | None) -> Path:
        return self._dir / cache_dir_name(kind, name, version)

    def list_installed(self) -> list[InstalledPlugin]:
        if not self._dir.is_dir():
            return []
        result: list[InstalledPlugin] = []
        for entry in sorted(self._dir.iterdir()):
            if entry.name.startswith(".") or not entry.is_dir():
                continue
            parsed = parse_entry_name(entry.name)
            if parsed is None:
                logger.debug("ignoring unrecognized plugin cache entry %s", entry)
                continue
            kind, name, version = parsed
            result.append(InstalledPlugin(kind=kind, name=name, version=version, path=entry))
        return result

    def has_exact(self, kind: PluginKind, name: str, version: semver.Version) -> bool:
        return self.get_plugin_path(kind, name, version).is_dir()

    def has_at_least(self, kind: PluginKind, name: str, version: semver.Version | None) -> bool:
        for plugin in self.list_installed():
            if plugin.kind != kind or plugin.name != name:
                continue
            if version is None:
                return True
            if plugin.version is not None and plugin.version >= version:
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
        dest = self.get_plugin_path(kind, name, version)
        installed = InstalledPlugin(kind=kind, name=name, version=version, path=dest)
        if dest.exists() and not overwrite:
            logger.debug("%s already installed, keeping existing files", dest.name)
            return installed

        self._dir.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(prefix=f".{dest.name}.", suffix=".partial", dir=self._dir))
        try:
            payload.extract_to(staging)
            if dest.exists():
                shutil.rmtree(dest)
            staging.replace(dest)
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise
        logger.debug("installed %s into %s", dest.name, self._dir)
        return installed

from __future__ import annotations

import logging
import tarfile
from typing import TYPE_CHECKING

from .archive import extract_tar
from .errors import InstallError
from .observers import LoggingReporter

if TYPE_CHECKING:
    from pathlib import Path

    from .cache import PluginCache
    from .models.plugin import InstalledPlugin, PluginRequirement
    from .observers import Reporter

logger = logging.getLogger(__name__)


class PluginInstaller:
    """Installs a downloaded plugin archive into the plugin cache.

    The installer does not check whether the plugin is already satisfied; the
    caller has decided to install. The downloaded artifact is always removed
    afterwards, whether installation succeeded or not.
    """

    def __init__(self, cache: PluginCache, reporter: Reporter | None = None) -> None:
        self._cache = cache
        self._reporter = reporter or LoggingReporter()

    def install(self, requirement: PluginRequirement, artifact: Path, force: bool = False) -> InstalledPlugin:
        """Extract ``artifact`` into the cache entry for ``requirement``.

        Raises:
            InstallError: If the archive cannot be read or placed into the cache.
        """
        try:
            logger.debug("%s installing tarball ...", requirement.label)
            with artifact.open("rb") as stream:
                return self._cache.install(
                    requirement.kind,
                    requirement.name,
                    requirement.version,
                    extract_tar(stream),
                    overwrite=force,
                )
        except (OSError, EOFError, tarfile.TarError) as e:
            raise InstallError(requirement, e) from e
        finally:
            self._remove_artifact(artifact)

    def _remove_artifact(self, artifact: Path) -> None:
        try:
            artifact.unlink(missing_ok=True)
        except OSError as e:
            self._reporter.warning(f"Error removing temporary file {artifact}: {e}")

"""Test helpers: plugin tarballs and fake collaborators."""

from __future__ import annotations

import io
import tarfile
from pathlib import Path


def make_tarball(path: Path, files: dict[str, bytes]) -> Path:
    """Write a .tar.gz at ``path`` containing ``files`` (archive name -> contents)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tarfile.open(path, "w:gz") as tar:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return path


class RecordingReporter:
    def __init__(self) -> None:
        self.infos: list[str] = []
        self.warnings: list[str] = []

    def info(self, message: str) -> None:
        self.infos.append(message)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

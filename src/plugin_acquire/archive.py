"""Plugin archives: gzipped tarballs read as a stream."""

from __future__ import annotations

import tarfile
from dataclasses import dataclass
from typing import IO, TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


@dataclass
class TarPayload:
    """An installable plugin payload backed by a .tar.gz stream.

    The stream is consumed once, by ``extract_to``.
    """

    stream: IO[bytes]

    def extract_to(self, dest: Path) -> None:
        # "r|gz" reads sequentially, so the payload never needs a seekable file.
        with tarfile.open(fileobj=self.stream, mode="r|gz") as tar:
            tar.extractall(dest, filter="data")


def extract_tar(stream: IO[bytes]) -> TarPayload:
    return TarPayload(stream)

from __future__ import annotations

from pathlib import Path

import pytest

from .helpers import RecordingReporter, make_tarball


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def plugin_tarball(tmp_path: Path) -> Path:
    return make_tarball(
        tmp_path / "downloads" / "plugin.tar.gz",
        {"pulumi-resource-aws": b"#!/bin/sh\n", "PulumiPlugin.yaml": b"runtime: go\n"},
    )

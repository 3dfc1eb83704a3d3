"""Built-in language runtime driven by the project file.

Required plugins are the ``plugins:`` declared in Pulumi.yaml. Dependencies are
installed by running the runtime's ecosystem tool in the program directory.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import CommandError

if TYPE_CHECKING:
    from ..models.plugin import PluginRequirement
    from ._program import ProgramInfo

logger = logging.getLogger(__name__)

# runtime -> file that must exist in the program directory for an install to be needed
_DEPENDENCY_FILES = {
    "python": "requirements.txt",
    "nodejs": "package.json",
    "go": "go.mod",
}


class ManifestLanguageRuntime:
    def __init__(self, timeout: float | None = 600) -> None:
        self._timeout = timeout

    def get_required_plugins(self, program: ProgramInfo) -> list[PluginRequirement]:
        return list(program.plugins)

    def install_dependencies(self, program: ProgramInfo, use_version_tools: bool = False) -> None:
        dependency_file = _DEPENDENCY_FILES.get(program.runtime)
        if dependency_file is None:
            logger.info("no dependency installer for runtime %r; skipping", program.runtime)
            return
        if not (program.program_dir / dependency_file).exists():
            logger.info("%s not found in %s; nothing to install", dependency_file, program.program_dir)
            return
        cmd = install_command(program, use_version_tools)
        logger.info("installing dependencies: %s", " ".join(cmd))
        _run(cmd, program.program_dir, self._timeout)


def install_command(program: ProgramInfo, use_version_tools: bool = False) -> list[str]:
    if program.runtime == "nodejs":
        return ["npm", "install"]
    if program.runtime == "go":
        return ["go", "mod", "download"]
    python = _python_executable(program)
    if use_version_tools and shutil.which("uv"):
        return ["uv", "pip", "install", "--python", python, "-r", "requirements.txt"]
    return [python, "-m", "pip", "install", "-r", "requirements.txt"]


def _python_executable(program: ProgramInfo) -> str:
    virtualenv = program.options.get("virtualenv")
    if virtualenv:
        venv = Path(virtualenv)
        if not venv.is_absolute():
            venv = program.root / venv
        bin_dir = "Scripts" if os.name == "nt" else "bin"
        candidate = venv / bin_dir / ("python.exe" if os.name == "nt" else "python")
        if candidate.exists():
            return str(candidate)
        logger.warning("virtualenv %s has no python executable; using %s", venv, sys.executable)
    return sys.executable


def _run(cmd: list[str], cwd: Path, timeout: float | None) -> None:
    try:
        result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise CommandError(f"{cmd[0]} timed out after {timeout}s", cmd) from e
    except FileNotFoundError as e:
        raise CommandError(f"{cmd[0]} is not installed or not in PATH", cmd) from e
    if result.returncode != 0:
        raise CommandError(
            f"{' '.join(cmd)} failed with exit code {result.returncode}: {result.stderr.strip()}",
            cmd,
            result.returncode,
        )

"""Language runtimes: the protocol the engine consumes and the built-in implementation."""

from __future__ import annotations

from ._manifest import ManifestLanguageRuntime, install_command
from ._program import ProgramInfo, program_from_policy_pack, program_from_project
from ._protocols import LanguageRuntime

__all__ = [
    "LanguageRuntime",
    "ManifestLanguageRuntime",
    "ProgramInfo",
    "install_command",
    "program_from_policy_pack",
    "program_from_project",
]

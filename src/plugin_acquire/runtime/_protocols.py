"""Protocols (ports) for language runtimes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..models.plugin import PluginRequirement
    from ._program import ProgramInfo


class LanguageRuntime(Protocol):
    """The language host for a program. Each method is called at most once per install run."""

    def install_dependencies(self, program: ProgramInfo, use_version_tools: bool = False) -> None: ...
    def get_required_plugins(self, program: ProgramInfo) -> list[PluginRequirement]: ...

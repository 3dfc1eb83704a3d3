from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..loaders.project import load_policy_pack, load_project
from ..models.plugin import PluginRequirement  # noqa: TC001


@dataclass(frozen=True)
class ProgramInfo:
    """The program (project or policy pack) whose dependencies are being installed.

    Attributes:
        root: Directory containing the project or policy pack file.
        program_dir: Directory holding the program's sources (``main`` if it names a directory).
        entry_point: The program entry point relative to ``program_dir``.
        runtime: Language runtime name, e.g. ``python`` or ``nodejs``.
        options: Runtime options from the project file.
        plugins: Plugins declared in the project file.
    """

    root: Path
    program_dir: Path
    entry_point: str
    runtime: str
    options: dict[str, Any] = field(default_factory=dict)
    plugins: tuple[PluginRequirement, ...] = ()


def program_from_project(project_path: Path) -> ProgramInfo:
    """Build ProgramInfo from a Pulumi.yaml path."""
    project = load_project(project_path)
    program_dir, entry_point = _split_main(project_path.parent, project.main)
    return ProgramInfo(
        root=project_path.parent,
        program_dir=program_dir,
        entry_point=entry_point,
        runtime=project.runtime.name,
        options=dict(project.runtime.options),
        plugins=tuple(project.plugins),
    )


def program_from_policy_pack(policy_pack_path: Path) -> ProgramInfo:
    """Build ProgramInfo from a PulumiPolicy.yaml path. Policy packs declare no plugins."""
    pack = load_policy_pack(policy_pack_path)
    program_dir, entry_point = _split_main(policy_pack_path.parent, pack.main)
    return ProgramInfo(
        root=policy_pack_path.parent,
        program_dir=program_dir,
        entry_point=entry_point,
        runtime=pack.runtime.name,
        options=dict(pack.runtime.options),
    )


def _split_main(root: Path, main: str | None) -> tuple[Path, str]:
    if not main:
        return root, "."
    target = root / main
    if target.is_dir():
        return target, "."
    return root, main

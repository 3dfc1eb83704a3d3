"""Decide whether the working directory is a project or a policy pack.

A policy pack may live inside a project, and a project inside a policy pack's
tree. The nearest marker file of each kind is located at or above the working
directory and their parent directories are compared.
"""

from __future__ import annotations

import stat
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import ContextResolutionError

PROJECT_MARKERS = ("Pulumi.yaml", "Pulumi.yml")
POLICY_PACK_MARKERS = ("PulumiPolicy.yaml", "PulumiPolicy.yml")

# Returns the nearest marker at or above the given directory, or None when there is none.
MarkerLookup = Callable[[Path], Path | None]


class WorkingContext(str, Enum):
    PROJECT = "project"
    POLICY_PACK = "policy_pack"
    NONE = "none"


@dataclass(frozen=True)
class InstallTarget:
    context: WorkingContext
    path: Path | None = None  # the marker file the context was derived from


def is_regular_file(path: Path) -> bool:
    """Like Path.is_file, but errors other than absence (e.g. EACCES) propagate."""
    try:
        st = path.stat()
    except (FileNotFoundError, NotADirectoryError):
        return False
    return stat.S_ISREG(st.st_mode)


def find_upwards(
    start: Path,
    names: Iterable[str],
    is_file: Callable[[Path], bool] = is_regular_file,
) -> Path | None:
    """Return the first ``names`` entry found in ``start`` or one of its parents."""
    names = tuple(names)
    for directory in (start, *start.parents):
        for name in names:
            candidate = directory / name
            if is_file(candidate):
                return candidate
    return None


def policy_pack_takes_precedence(policy_pack_path: Path, project_path: Path) -> bool:
    """True if the policy pack's directory contains the project's directory as a substring.

    This is a plain string test on the parent directories, not a path-segment
    check: a policy pack in ``/a/project2`` counts as inside a project in
    ``/a/proj``.
    """
    return str(project_path.parent) in str(policy_pack_path.parent)


class ContextResolver:
    """Resolves the install target for a working directory.

    Marker lookups are injectable so the decision can be tested without a filesystem.
    """

    def __init__(
        self,
        find_project: MarkerLookup | None = None,
        find_policy_pack: MarkerLookup | None = None,
        *,
        project_markers: Iterable[str] = PROJECT_MARKERS,
        policy_pack_markers: Iterable[str] = POLICY_PACK_MARKERS,
        is_file: Callable[[Path], bool] = is_regular_file,
    ) -> None:
        project_markers = tuple(project_markers)
        policy_pack_markers = tuple(policy_pack_markers)
        self._find_project = find_project or (lambda cwd: find_upwards(cwd, project_markers, is_file))
        self._find_policy_pack = find_policy_pack or (
            lambda cwd: find_upwards(cwd, policy_pack_markers, is_file)
        )

    def should_use_policy_pack_deps(self, cwd: Path) -> bool:
        """Whether to install the policy pack's dependencies rather than the project's.

        Raises:
            ContextResolutionError: If a marker lookup fails for a reason other than absence.
        """
        policy_pack_path = _lookup(self._find_policy_pack, cwd, "policy pack")
        if policy_pack_path is None:
            return False
        project_path = _lookup(self._find_project, cwd, "project")
        if project_path is None:
            return True
        return policy_pack_takes_precedence(policy_pack_path, project_path)

    def resolve_install_target(self, cwd: Path) -> WorkingContext:
        return self.locate_install_target(cwd).context

    def locate_install_target(self, cwd: Path) -> InstallTarget:
        """Find the marker that decides what to install for ``cwd``.

        Raises:
            ContextResolutionError: If a marker lookup fails for a reason other than absence.
        """
        policy_pack_path = _lookup(self._find_policy_pack, cwd, "policy pack")
        project_path = _lookup(self._find_project, cwd, "project")

        if policy_pack_path is not None:
            if project_path is None:
                return InstallTarget(WorkingContext.POLICY_PACK, policy_pack_path)
            if policy_pack_takes_precedence(policy_pack_path, project_path):
                return InstallTarget(WorkingContext.POLICY_PACK, policy_pack_path)
        if project_path is not None:
            return InstallTarget(WorkingContext.PROJECT, project_path)
        return InstallTarget(WorkingContext.NONE)


def _lookup(find: MarkerLookup, cwd: Path, what: str) -> Path | None:
    try:
        return find(cwd)
    except OSError as e:
        raise ContextResolutionError(f"detecting {what} path: {e}") from e


def should_use_policy_pack_deps(cwd: Path, resolver: ContextResolver | None = None) -> bool:
    return (resolver or ContextResolver()).should_use_policy_pack_deps(cwd)


def resolve_install_target(cwd: Path, resolver: ContextResolver | None = None) -> WorkingContext:
    return (resolver or ContextResolver()).resolve_install_target(cwd)

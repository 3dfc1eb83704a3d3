from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from ..errors import LoadError
from ..models.project import PolicyPackFile, ProjectFile

if TYPE_CHECKING:
    from pathlib import Path

_T = TypeVar("_T", bound=BaseModel)


def load_project(path: Path) -> ProjectFile:
    """Load and validate a project file (Pulumi.yaml)."""
    return _load_yaml_model(path, ProjectFile)


def load_policy_pack(path: Path) -> PolicyPackFile:
    """Load and validate a policy pack file (PulumiPolicy.yaml)."""
    return _load_yaml_model(path, PolicyPackFile)


# --- internal helpers ---


def _load_yaml_model(path: Path, model_class: type[_T]) -> _T:
    data = _read_yaml(path)
    if not isinstance(data, dict):
        raise LoadError(f"Expected a mapping at the top of {path}", path=path)
    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        raise LoadError(f"Invalid {path.name} at {path}: {e}", path=path) from e


def _read_yaml(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise LoadError(f"File not found: {path}", path=path) from e
    except OSError as e:
        raise LoadError(f"Could not read {path}: {e}", path=path) from e
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise LoadError(f"Invalid YAML in {path}: {e}", path=path) from e

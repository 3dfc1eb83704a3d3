from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .plugin import PluginRequirement  # noqa: TC001


class RuntimeInfo(BaseModel):
    """The ``runtime`` block of a project file: a bare name or a name with options."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)
    name: str
    options: dict[str, Any] = {}


class ProjectFile(BaseModel):
    """Contents of Pulumi.yaml."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)
    name: str
    runtime: RuntimeInfo
    main: str | None = None
    description: str | None = None
    plugins: list[PluginRequirement] = Field(default_factory=list)

    @field_validator("runtime", mode="before")
    @classmethod
    def _parse_runtime_string(cls, v: object) -> object:
        if isinstance(v, str):
            return {"name": v}
        return v


class PolicyPackFile(BaseModel):
    """Contents of PulumiPolicy.yaml."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)
    runtime: RuntimeInfo
    name: str | None = None
    version: str | None = None
    description: str | None = None
    main: str | None = None

    @field_validator("runtime", mode="before")
    @classmethod
    def _parse_runtime_string(cls, v: object) -> object:
        if isinstance(v, str):
            return {"name": v}
        return v

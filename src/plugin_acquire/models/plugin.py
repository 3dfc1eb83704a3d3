from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path  # noqa: TC003

import semver
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class PluginKind(str, Enum):
    RESOURCE = "resource"
    LANGUAGE = "language"
    ANALYZER = "analyzer"
    TOOL = "tool"


def parse_version(value: object) -> semver.Version | None:
    """Parse a semantic version, tolerating a leading ``v``. ``None`` and ``""`` mean unpinned."""
    if value is None or isinstance(value, semver.Version):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        return semver.Version.parse(text[1:] if text[:1] in ("v", "V") else text)
    raise TypeError(f"Unsupported version value: {value!r}")


class PluginRequirement(BaseModel):
    """A plugin the program needs, as reported by the language runtime.

    Identity for matching is (kind, name). ``version`` is advisory unless present.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)
    kind: PluginKind
    name: str
    version: semver.Version | None = None
    download_url: str | None = Field(
        None, validation_alias=AliasChoices("download_url", "downloadURL", "server")
    )

    @field_validator("version", mode="before")
    @classmethod
    def _parse_version(cls, v: object) -> object:
        try:
            return parse_version(v)
        except (TypeError, ValueError) as e:
            raise ValueError(f"invalid plugin version {v!r}: {e}") from e

    @property
    def version_label(self) -> str:
        return str(self.version) if self.version is not None else "unspecified"

    @property
    def label(self) -> str:
        # Matches "<kind> plugin <name>-<version>" used in every progress and error message.
        if self.version is None:
            return f"{self.kind.value} plugin {self.name}"
        return f"{self.kind.value} plugin {self.name}-{self.version}"

    @property
    def identity(self) -> str:
        # Error messages always name the version, "unspecified" when unpinned.
        return f"{self.kind.value} plugin {self.name}-{self.version_label}"

    @property
    def key(self) -> tuple[PluginKind, str]:
        return (self.kind, self.name)


@dataclass(frozen=True)
class InstalledPlugin:
    """A plugin entry present in the local plugin cache."""

    kind: PluginKind
    name: str
    version: semver.Version | None
    path: Path

    @property
    def dir_name(self) -> str:
        return cache_dir_name(self.kind, self.name, self.version)


def cache_dir_name(kind: PluginKind, name: str, version: semver.Version | None) -> str:
    if version is None:
        return f"{kind.value}-{name}"
    return f"{kind.value}-{name}-v{version}"

"""Settings, overridable via PLUGIN_ACQUIRE_* environment variables or a .env file.

Examples::

    export PLUGIN_ACQUIRE_PLUGIN_DIR=/opt/plugins
    export PLUGIN_ACQUIRE_DOWNLOAD_ATTEMPTS=3
    export PLUGIN_ACQUIRE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .context import POLICY_PACK_MARKERS, PROJECT_MARKERS
from .fetchers import DEFAULT_BASE_URL


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PLUGIN_ACQUIRE_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Plugin cache
    plugin_dir: Path = Field(default_factory=lambda: Path.home() / ".plugin-acquire" / "plugins")

    # Downloads
    download_base_url: str = DEFAULT_BASE_URL
    download_attempts: int = Field(5, ge=1)
    retry_delay: float = Field(1.0, ge=0)  # seconds before the first retry, doubled each time
    max_retry_delay: float = Field(30.0, ge=0)
    request_timeout: float = Field(60.0, gt=0)

    # Dependency installation
    dependency_install_timeout: float = Field(600.0, gt=0)

    # Marker files
    project_markers: tuple[str, ...] = PROJECT_MARKERS
    policy_pack_markers: tuple[str, ...] = POLICY_PACK_MARKERS

    log_level: str = "WARNING"

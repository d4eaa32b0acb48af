"""Mini README: Centralised configuration for sitebooks.

Structure:
    * SitebooksSettings - Pydantic settings model read from the environment.
    * get_settings - cached accessor for the process-wide settings.

Usage:
    Variables use the ``SITEBOOKS_`` prefix (``SITEBOOKS_INTERFACE_PORT=9000``)
    and may also live in a local ``.env`` file. Validation runs once per
    process thanks to the cache.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class SitebooksSettings(BaseSettings):
    """Runtime configuration for the finance workspace and its interfaces."""

    environment: str = Field(
        "development",
        description="Environment label controlling debug toggles such as auto-reload.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface for the JSON service to bind to.",
    )
    interface_port: int = Field(
        8000,
        description="Port the JSON service exposes.",
        ge=1,
        le=65535,
    )
    export_directory: Path = Field(
        Path("exports"),
        description="Directory where CSV report exports are written.",
    )
    path_separator: str = Field(
        " / ",
        description="Separator placed between ancestor names in tree paths.",
        min_length=1,
    )
    seed_demo_data: bool = Field(
        True,
        description="Populate new workspaces with the demo cost centers, products and records.",
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level applied by the CLI.",
    )

    class Config:
        env_prefix = "SITEBOOKS_"
        env_file = ".env"
        case_sensitive = False

    @validator("export_directory", pre=True)
    def _expand_path(cls, value: Optional[str | Path]) -> Path:
        """Expand user directories; the exporter creates the folder on demand."""

        return Path(value).expanduser().resolve()


@lru_cache()
def get_settings() -> SitebooksSettings:
    """Return cached settings, ensuring consistent configuration across modules."""

    return SitebooksSettings()

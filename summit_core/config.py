"""Application configuration."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"

MASTER_PRODUCTS_LIST: List[str] = [
    "Analytics",
    "Audience Manager",
    "Commerce",
    "Customer Journey Analytics",
    "Experience Manager Assets",
    "Experience Manager Sites",
    "Firefly",
    "GenStudio for Performance Marketing",
    "Journey Optimizer",
    "Journey Optimizer B2B Edition",
    "Marketo Engage",
    "Mix Modeler",
    "Real-Time CDP",
    "Target",
    "Workfront",
]

EXCLUDED_TRACKS: List[str] = [
    "Keynote and Sneaks",
    "Keynote",
    "Sneaks",
    "Strategy Keynote",
    "Community Theater",
    "CP Theater",
    "Sponsors",
    "Summit - other",
    "Summit-other",
    "Industry Session",
    "ACS",
    "Skill Exchange",
    "ADLS",
]


class Settings(BaseSettings):
    """Dashboard settings loaded from environment variables (SUMMIT_*)."""

    data_dir: Path = DEFAULT_DATA_DIR
    sessions_glob: str = "*Session Details*.csv"
    grid_glob: str = "*Grid*.csv"
    roster_glob: str = "*TA*.csv"
    overrides_path: Optional[Path] = None
    master_products: List[str] = Field(default_factory=lambda: list(MASTER_PRODUCTS_LIST))
    excluded_tracks: List[str] = Field(default_factory=lambda: list(EXCLUDED_TRACKS))
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="SUMMIT_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def resolved_overrides_path(self) -> Path:
        return self.overrides_path or (self.data_dir / "wip_overrides.json")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

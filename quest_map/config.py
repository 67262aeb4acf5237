"""Configuration management."""

from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Quest map settings, read from ``QUEST_MAP_*`` environment variables or ``.env``."""

    # Layout
    node_spacing: int = Field(default=75, ge=1, description="Pixels between rendered nodes")
    header_height: int = Field(default=0, ge=0, description="Pixels reserved above the grid for portraits")

    # Generation
    seed: Optional[str] = Field(default=None, description="Seed for reproducible maps")
    detour_enabled: bool = Field(default=True, description="Search a second path between two main path points")
    detour_min_gap: int = Field(default=15, ge=1, description="Minimum index gap between detour endpoints")
    encounter_base_chance: float = Field(default=0.1, ge=0, le=1, description="Encounter chance right after an encounter")
    encounter_step_chance: float = Field(default=0.1, ge=0, le=1, description="Extra encounter chance per step since the last one")

    # Reveal
    ms_per_step: int = Field(default=1000, gt=0, description="Duration of one reveal step in ms")
    node_fade_ms: int = Field(default=250, gt=0, description="Fade-in time for nodes at the end of a step")
    delay_between_maps_ms: int = Field(default=5000, ge=0, description="Pause before the next map is revealed")

    # Assets
    portrait_dir: Optional[str] = Field(default=None, description="Directory of encounter portraits")

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(default="json", description="Log format (json or console)")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="QUEST_MAP_",
        extra="ignore",
    )


settings = Settings()

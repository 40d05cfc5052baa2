"""Configuration management."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VoronoySettings(BaseSettings):
    """Engine settings, overridable through PYVORONOY_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="PYVORONOY_")

    # Change detection
    threshold: float = Field(
        default=0.0,
        ge=0.0,
        description="Default movement threshold (sum of squared displacements)",
    )

    # Bounding quad
    bounds_scale: float = Field(
        default=1.1, gt=1.0, lt=2.0, description="Bounding rectangle scale factor"
    )
    symmetric_bounds: bool = Field(
        default=False, description="Center the bounding rectangle on the points"
    )

    # Degenerate input
    skip_collinear: bool = Field(
        default=True, description="Return empty results for collinear input"
    )


@lru_cache
def get_settings() -> VoronoySettings:
    return VoronoySettings()

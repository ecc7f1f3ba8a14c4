"""
Configuration management for the cine exposure solver.

Uses pydantic-settings for environment-based configuration with validation.
All settings can be overridden via environment variables with CINE_ prefix.
"""

from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cine_exposure.core.types import NDSnapPolicy

load_dotenv()


class SolverSettings(BaseSettings):
    """Settings for the exposure-equivalence solver.

    Setting min_nd_stops to 0 accepts clear glass as an ND answer.
    """

    model_config = SettingsConfigDict(env_prefix="CINE_SOLVER_")

    # ND solving
    min_nd_stops: float = Field(
        default=1.0,
        ge=0.0,
        le=4.0,
        description="Smallest ND attenuation (in stops) the solver will suggest",
    )
    nd_snap_policy: NDSnapPolicy = Field(default=NDSnapPolicy.CLOSEST)

    # Discrete search (shutter angle, frame rate)
    discrete_tolerance_stops: float = Field(default=0.01, gt=0.0, le=0.5)
    shutter_angle_candidates: tuple[float, ...] = Field(
        default=(45.0, 90.0, 180.0, 270.0, 360.0)
    )
    frame_rate_candidates: tuple[float, ...] = Field(
        default=(24.0, 25.0, 30.0, 48.0, 50.0, 60.0)
    )

    # Compensation advice
    compensation_threshold_stops: float = Field(default=1 / 3, ge=0.0, le=2.0)
    compensation_epsilon: float = Field(default=1e-6, ge=0.0, le=0.01)

    @field_validator("shutter_angle_candidates", "frame_rate_candidates")
    @classmethod
    def validate_candidates(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        """Candidates must be positive and strictly ascending."""
        if not v:
            raise ValueError("At least one candidate is required")
        if any(c <= 0 for c in v):
            raise ValueError("Candidates must be positive")
        if any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError("Candidates must be strictly ascending")
        return v

    @field_validator("shutter_angle_candidates")
    @classmethod
    def validate_angles(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        """Shutter angles cannot exceed a full rotation."""
        if any(c > 360 for c in v):
            raise ValueError("Shutter angle candidates must be <= 360")
        return v


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings."""

    model_config = SettingsConfigDict(
        env_prefix="CINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application info
    app_name: str = Field(default="Cine Exposure Matcher")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Subsettings
    solver: SolverSettings = Field(default_factory=SolverSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


# Global settings instance - lazy loaded
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def configure(settings: Optional[Settings] = None, **kwargs) -> Settings:
    """
    Configure the global settings.

    Args:
        settings: Optional Settings instance to use directly
        **kwargs: Settings overrides

    Returns:
        The configured Settings instance
    """
    global _settings
    if settings is not None:
        _settings = settings
    elif kwargs:
        _settings = Settings(**kwargs)
    else:
        _settings = Settings()
    return _settings

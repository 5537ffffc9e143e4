"""Configuration settings for roughsketch."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RoughOptions(BaseModel):
    """Sketchiness parameters attached to every shape."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    fill_style: str = Field(
        default="solid",
        description="solid, hachure, cross-hatch, zigzag, dots, ...",
    )
    fill_weight: float = Field(default=4.0, description="Line thickness of pattern fills")
    roughness: float = Field(default=1.5, description="Stroke perturbation strength")
    bowing: float = Field(default=1.0, description="Curvature of perturbed strokes")
    angle: float = Field(default=60.0, description="Hachure angle in degrees")
    angle_noise: float = Field(
        default=0.0,
        ge=0.0,
        description="Fraction of the 90 degree range the hachure angle may drift",
    )
    gap: float = Field(default=6.0, description="Spacing between hachure lines")
    gap_noise: float = Field(
        default=0.0,
        ge=0.0,
        description="Fraction of the gap the hachure spacing may drift",
    )
    alpha_over: float = Field(
        default=1.0,
        ge=1,
        allow_inf_nan=False,
        description="Overdraw passes; fill opacity is divided across them",
    )

    def merged(self, *updates: Optional[Mapping[str, Any]]) -> RoughOptions:
        """Return a validated copy with each mapping applied in order."""
        data = self.model_dump()
        for update in updates:
            if update:
                data.update(update)
        return RoughOptions.model_validate(data)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class RenderSettings(BaseModel):
    """Main application settings."""

    width: int = Field(default=800, gt=0, description="Surface width in pixels")
    height: int = Field(default=600, gt=0, description="Surface height in pixels")
    background: tuple[int, int, int] = Field(
        default=(255, 255, 255),
        description="Background colour as an RGB triple",
    )
    anti_aliasing: bool = Field(default=True, description="Supersample raster coverage")
    font_family: Optional[str] = Field(
        default=None,
        description="Font family overriding the one carried by text shapes",
    )
    seed: Optional[int] = Field(
        default=None,
        description="Seed for the random source (None = fresh entropy)",
    )
    rough: RoughOptions = Field(default_factory=RoughOptions)
    rough_overrides: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Partial RoughOptions keyed by shape kind",
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("background")
    @classmethod
    def _clamp_background(cls, value: tuple[int, int, int]) -> tuple[int, int, int]:
        return tuple(max(0, min(255, int(channel))) for channel in value)

    def rough_for(self, kind: str, shape_options: Optional[Mapping[str, Any]] = None) -> RoughOptions:
        """Resolve rough options: defaults < per-kind override < shape's own."""
        return self.rough.merged(self.rough_overrides.get(kind), shape_options)


def get_default_settings() -> RenderSettings:
    """Get default application settings."""
    return RenderSettings()

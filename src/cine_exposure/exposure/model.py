"""
Exposure model: one scalar exposure value per camera configuration.
"""

from dataclasses import dataclass

from cine_exposure.core.models import ExposureConfig
from cine_exposure.exposure.stops import (
    aperture_darkness_stops,
    iso_stops,
    nd_stops,
    shutter_stops,
)


@dataclass(frozen=True)
class ExposureBreakdown:
    """Signed stop contributions of each setting (positive = brighter)."""

    iso: float
    shutter: float
    aperture: float
    nd: float

    @property
    def total(self) -> float:
        return self.iso + self.shutter + self.aperture + self.nd

    def to_dict(self) -> dict:
        return {
            "iso": round(self.iso, 3),
            "shutter": round(self.shutter, 3),
            "aperture": round(self.aperture, 3),
            "nd": round(self.nd, 3),
            "total": round(self.total, 3),
        }


def exposure(config: ExposureConfig) -> float:
    """Total exposure in stops relative to ISO 800, 1/50 s, T2.8, no ND."""
    return (
        iso_stops(config.iso)
        + shutter_stops(config.frame_rate, config.shutter_angle)
        - aperture_darkness_stops(config.aperture)
        - nd_stops(config.nd_density)
    )


def exposure_breakdown(config: ExposureConfig) -> ExposureBreakdown:
    """Per-setting contributions to ``exposure(config)``."""
    return ExposureBreakdown(
        iso=iso_stops(config.iso),
        shutter=shutter_stops(config.frame_rate, config.shutter_angle),
        aperture=-aperture_darkness_stops(config.aperture),
        nd=-nd_stops(config.nd_density),
    )


def are_equivalent(a: ExposureConfig, b: ExposureConfig, tolerance: float = 1e-9) -> bool:
    """Whether two configurations give the same exposure."""
    return abs(exposure(a) - exposure(b)) <= tolerance

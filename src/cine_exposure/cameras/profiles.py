"""
Camera profile models.

A profile describes what a camera body can physically select: its ISO
ladder and its ND filter arrangement. All models use Pydantic for
validation and are immutable.
"""

import math
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from cine_exposure.core.types import NDKind

# Rounding applied to generated densities to remove float accumulation noise
DENSITY_DECIMALS = 6


def format_density(density: float) -> str:
    """Format an ND density the way camera menus show it."""
    if abs(density) < 1e-9:
        return "Clear"
    return f"{density:.2f}"


class FixedNDSpec(BaseModel):
    """Discrete ND filter wheel."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    kind: Literal["fixed"] = NDKind.FIXED.value
    values: tuple[float, ...] = Field(..., description="Selectable densities, ascending")

    @field_validator("values")
    @classmethod
    def validate_values(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        """Densities must be ascending, unique, non-negative and include clear."""
        if not v:
            raise ValueError("ND values must not be empty")
        if any(d < 0 for d in v):
            raise ValueError("ND densities must be non-negative")
        if any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError("ND densities must be strictly ascending")
        if v[0] != 0:
            raise ValueError("ND values must include 0 (clear)")
        return v

    def options(self) -> list[float]:
        return list(self.values)

    def label(self, density: float) -> str:
        return format_density(density)

    @property
    def max_density(self) -> float:
        return self.values[-1]


class HybridNDSpec(BaseModel):
    """Variable internal ND with physical filters stacked beyond its range.

    Below ``internal_start`` the camera offers clear and whole multiples of
    ``external_step``. Between ``internal_start`` and ``internal_end`` the
    density is variable in ``internal_step`` increments. Past
    ``internal_end`` the internal ND saturates and ``external_step`` filters
    are stacked on top, at most ``max_external_filters`` of them when set.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    kind: Literal["hybrid"] = NDKind.HYBRID.value
    internal_start: float = Field(..., ge=0.0)
    internal_end: float = Field(..., gt=0.0)
    internal_step: float = Field(..., gt=0.0)
    external_step: float = Field(default=0.3, gt=0.0)
    max_external_filters: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def validate_range(self) -> "HybridNDSpec":
        """Internal range must be ordered and a whole number of steps long."""
        if self.internal_start >= self.internal_end:
            raise ValueError("internal_start must be below internal_end")
        steps = (self.internal_end - self.internal_start) / self.internal_step
        if abs(steps - round(steps)) > 1e-6:
            raise ValueError("Internal range must be a whole number of internal steps")
        return self

    def lower_values(self) -> list[float]:
        """Densities selectable below the variable range, starting at clear."""
        values = [0.0]
        k = 1
        while k * self.external_step < self.internal_start - 1e-9:
            values.append(round(k * self.external_step, DENSITY_DECIMALS))
            k += 1
        return values

    def internal_values(self) -> list[float]:
        count = round((self.internal_end - self.internal_start) / self.internal_step)
        return [
            round(self.internal_start + i * self.internal_step, DENSITY_DECIMALS)
            for i in range(count + 1)
        ]

    def external_values(self, filters: Optional[int] = None) -> list[float]:
        """Stacked densities past the internal range.

        Args:
            filters: Number of filters to list. Defaults to
                ``max_external_filters``, or one filter when unlimited.
        """
        if filters is None:
            filters = self.max_external_filters if self.max_external_filters is not None else 1
        return [
            round(self.internal_end + n * self.external_step, DENSITY_DECIMALS)
            for n in range(1, filters + 1)
        ]

    def options(self) -> list[float]:
        return self.lower_values() + self.internal_values() + self.external_values()

    def split(self, density: float) -> tuple[float, float]:
        """Split a density into (internal, external) parts."""
        if density <= self.internal_end + 1e-9:
            return density, 0.0
        return self.internal_end, round(density - self.internal_end, DENSITY_DECIMALS)

    def label(self, density: float) -> str:
        internal, external = self.split(density)
        if external <= 0:
            return format_density(internal)
        return f"{internal:.2f} internal + {external:.2f} external ({density:.2f})"

    @property
    def max_density(self) -> float:
        if self.max_external_filters is None:
            return math.inf
        return self.internal_end + self.max_external_filters * self.external_step


NDSpec = Annotated[Union[FixedNDSpec, HybridNDSpec], Field(discriminator="kind")]


class CameraProfile(BaseModel):
    """Selectable exposure settings of one camera model."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    iso_ladder: tuple[int, ...] = Field(..., description="Selectable ISOs, ascending")
    native_isos: frozenset[int] = Field(default_factory=frozenset)
    default_iso: Optional[int] = Field(default=None)
    nd_spec: NDSpec

    @field_validator("iso_ladder")
    @classmethod
    def validate_iso_ladder(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        """ISO ladder must be non-empty, positive and strictly increasing."""
        if not v:
            raise ValueError("ISO ladder must not be empty")
        if v[0] <= 0:
            raise ValueError("ISO values must be positive")
        if any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError("ISO ladder must be strictly increasing")
        return v

    @model_validator(mode="after")
    def validate_markers(self) -> "CameraProfile":
        """Native and default ISOs must be ladder values."""
        ladder = set(self.iso_ladder)
        stray = self.native_isos - ladder
        if stray:
            raise ValueError(f"Native ISOs not in ladder: {sorted(stray)}")
        if self.default_iso is not None and self.default_iso not in ladder:
            raise ValueError(f"Default ISO {self.default_iso} not in ladder")
        return self

    @property
    def initial_iso(self) -> int:
        """ISO a UI should preselect: the default, else the lowest ladder value."""
        return self.default_iso if self.default_iso is not None else self.iso_ladder[0]

    def is_native(self, iso: int) -> bool:
        return iso in self.native_isos

    def iso_options(self) -> list[tuple[int, str]]:
        """ISO choices as (value, label) pairs, marking native ISOs."""
        return [
            (iso, f"{iso} (native)" if iso in self.native_isos else str(iso))
            for iso in self.iso_ladder
        ]

    def nd_options(self) -> list[tuple[float, str]]:
        """ND choices as (density, label) pairs."""
        return [(d, self.nd_spec.label(d)) for d in self.nd_spec.options()]

"""
Core data models for exposure matching.

All models use Pydantic for validation and are frozen: a calculation
builds fresh models from an input snapshot and never mutates them.
"""

from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from cine_exposure.cameras.profiles import CameraProfile
from cine_exposure.core.exceptions import InvalidInputError
from cine_exposure.core.types import NDSnapPolicy, SecondaryField, UnknownField

# ExposureConfig attribute holding each solvable setting
CONFIG_FIELDS: dict[UnknownField, str] = {
    UnknownField.ISO: "iso",
    UnknownField.ND: "nd_density",
    UnknownField.APERTURE: "aperture",
    UnknownField.SHUTTER_ANGLE: "shutter_angle",
    UnknownField.FRAME_RATE: "frame_rate",
}

# Names used in user-facing messages
FIELD_DISPLAY_NAMES: dict[str, str] = {
    "iso": "ISO",
    "nd": "ND",
    "aperture": "T-Stop",
    "shutter_angle": "shutter angle",
    "frame_rate": "frame rate",
}


class ExposureConfig(BaseModel):
    """One camera's complete exposure-relevant state."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    frame_rate: float = Field(..., gt=0.0, description="Frames per second")
    shutter_angle: float = Field(..., gt=0.0, le=360.0, description="Degrees")
    iso: int = Field(..., gt=0)
    aperture: float = Field(..., gt=0.0, description="T-stop")
    nd_density: float = Field(default=0.0, ge=0.0, description="Optical density")


class TargetKnowns(BaseModel):
    """Target camera settings with the unknown one left empty."""

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    frame_rate: Optional[float] = Field(default=None, gt=0.0)
    shutter_angle: Optional[float] = Field(default=None, gt=0.0, le=360.0)
    iso: Optional[int] = Field(default=None, gt=0)
    aperture: Optional[float] = Field(default=None, gt=0.0)
    nd_density: Optional[float] = Field(default=None, ge=0.0)

    def missing(self, ignore: Optional[UnknownField] = None) -> list[str]:
        """Names of empty fields, excluding the one being solved."""
        skip = CONFIG_FIELDS.get(ignore) if ignore else None
        return [
            name
            for name in CONFIG_FIELDS.values()
            if name != skip and getattr(self, name) is None
        ]

    def with_value(self, unknown: UnknownField, value: float) -> ExposureConfig:
        """Complete the target with a value for the unknown setting."""
        data = self.model_dump()
        data[CONFIG_FIELDS[unknown]] = round(value) if unknown == UnknownField.ISO else value
        return ExposureConfig(**data)


class SolveRequest(BaseModel):
    """Everything needed for one equivalence calculation."""

    model_config = ConfigDict(frozen=True)

    reference: ExposureConfig
    target: TargetKnowns
    unknown: UnknownField
    target_profile: CameraProfile
    nd_policy: Optional[NDSnapPolicy] = Field(
        default=None, description="Overrides the configured ND snap policy"
    )

    @field_validator("target_profile", mode="before")
    @classmethod
    def resolve_profile(cls, v: Any) -> Any:
        """Accept a registry camera id in place of a profile."""
        if isinstance(v, str):
            from cine_exposure.cameras.registry import get_camera_profile

            return get_camera_profile(v)
        return v

    @model_validator(mode="after")
    def validate_knowns(self) -> "SolveRequest":
        """Every target setting except the unknown one must be given."""
        missing = self.target.missing(ignore=self.unknown)
        if missing:
            raise ValueError(
                f"Target {', '.join(missing)} required when solving for {self.unknown.value}"
            )
        return self

    @classmethod
    def create(cls, **data: Any) -> "SolveRequest":
        """Build a request, reporting validation problems as InvalidInputError."""
        try:
            return cls(**data)
        except ValidationError as e:
            errors = e.errors()
            first = errors[0] if errors else {}
            location = ".".join(str(part) for part in first.get("loc", ()))
            raise InvalidInputError(
                f"Invalid input{f' for {location}' if location else ''}: "
                f"{first.get('msg', 'validation failed')}",
                field=location or None,
                hint="Check that every setting is a positive number",
                details={"errors": len(errors)},
            ) from e


class SecondarySuggestion(BaseModel):
    """Extra adjustment absorbing the primary snap residual."""

    model_config = ConfigDict(frozen=True)

    field: SecondaryField
    exact_value: float
    snapped_value: float
    label: str
    residual_stops: float = Field(description="Snap residual of the suggestion itself")


class SolveResult(BaseModel):
    """Result of an equivalence calculation.

    ``residual_stops`` is in the solved setting's own stop unit
    (snapped minus exact). ``exposure_error_stops`` is the brightness
    of the snapped target relative to the reference; positive is brighter.
    """

    model_config = ConfigDict(frozen=True)

    unknown: UnknownField
    exact_value: float
    snapped_value: float
    label: str
    residual_stops: float
    exposure_error_stops: float
    reference_exposure: float
    camera_id: str
    secondary_suggestion: Optional[SecondarySuggestion] = None
    notes: tuple[str, ...] = ()

    @property
    def field_name(self) -> str:
        return FIELD_DISPLAY_NAMES[self.unknown.value]

    def format_message(self) -> str:
        """Format the result as a single user-facing line."""
        message = f"Set B {self.field_name} to {self.label}"
        if self.secondary_suggestion is not None:
            s = self.secondary_suggestion
            message += (
                f" (off by {self.exposure_error_stops:+.2f} stops;"
                f" also set {FIELD_DISPLAY_NAMES[s.field.value]} to {s.label})"
            )
        return message

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data: dict[str, Union[str, float, dict, list, None]] = {
            "unknown": self.unknown.value,
            "camera": self.camera_id,
            "exact_value": round(self.exact_value, 4),
            "snapped_value": round(self.snapped_value, 4),
            "label": self.label,
            "residual_stops": round(self.residual_stops, 3),
            "exposure_error_stops": round(self.exposure_error_stops, 3),
            "reference_exposure": round(self.reference_exposure, 3),
            "secondary_suggestion": None,
            "notes": list(self.notes),
        }
        if self.secondary_suggestion is not None:
            s = self.secondary_suggestion
            data["secondary_suggestion"] = {
                "field": s.field.value,
                "exact_value": round(s.exact_value, 4),
                "snapped_value": round(s.snapped_value, 4),
                "label": s.label,
                "residual_stops": round(s.residual_stops, 3),
            }
        return data

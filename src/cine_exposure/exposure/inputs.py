"""
Helpers for turning raw form values into validated settings.

UI layers hand over strings from select boxes and free-text fields; these
helpers parse them and raise InvalidInputError instead of letting NaN,
infinity or non-positive values reach the solver.
"""

import math
from typing import Optional, Union

from cine_exposure.core.exceptions import InvalidInputError
from cine_exposure.core.models import ExposureConfig

CUSTOM_SELECTION = "custom"

RawValue = Union[str, float, int, None]


def parse_positive(value: RawValue, field: str, allow_zero: bool = False) -> float:
    """Parse a positive finite number.

    Args:
        value: Raw value from a form control
        field: Setting name used in error messages
        allow_zero: Accept 0 (ND densities)

    Raises:
        InvalidInputError: If the value is empty, unparsable, not finite
            or out of range
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInputError(f"{field} is required", field=field, hint="Enter a value")

    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidInputError(
            f"{field} must be a number, got {value!r}", field=field, hint="Enter a number"
        ) from None

    if not math.isfinite(number) or number < 0 or (number == 0 and not allow_zero):
        bound = "non-negative" if allow_zero else "positive"
        raise InvalidInputError(
            f"{field} must be a {bound} number, got {value!r}",
            field=field,
            hint=f"Enter a {bound} value",
        )
    return number


def resolve_t_stop(selection: RawValue, custom_text: Optional[str] = None) -> float:
    """Resolve a T-stop from a select box with a "custom" entry.

    A leading "T" is accepted ("T2.8").
    """
    raw = custom_text if selection == CUSTOM_SELECTION else selection
    if isinstance(raw, str) and raw.strip()[:1] in ("T", "t"):
        raw = raw.strip()[1:]
    return parse_positive(raw, "aperture")


def parse_iso(value: RawValue) -> int:
    """Parse an ISO, which must be a whole number."""
    number = parse_positive(value, "iso")
    if number != int(number):
        raise InvalidInputError(
            f"iso must be a whole number, got {value!r}", field="iso", hint="Pick an ISO from the list"
        )
    return int(number)


def build_config(
    frame_rate: RawValue,
    shutter_angle: RawValue,
    iso: RawValue,
    aperture: RawValue,
    nd_density: RawValue = 0.0,
    custom_aperture: Optional[str] = None,
) -> ExposureConfig:
    """Build an ExposureConfig from raw form values."""
    angle = parse_positive(shutter_angle, "shutter_angle")
    if angle > 360:
        raise InvalidInputError(
            f"shutter_angle must be at most 360, got {shutter_angle!r}",
            field="shutter_angle",
            hint="Enter an angle between 0 and 360",
        )
    return ExposureConfig(
        frame_rate=parse_positive(frame_rate, "frame_rate"),
        shutter_angle=angle,
        iso=parse_iso(iso),
        aperture=resolve_t_stop(aperture, custom_aperture),
        nd_density=parse_positive(nd_density, "nd_density", allow_zero=True),
    )

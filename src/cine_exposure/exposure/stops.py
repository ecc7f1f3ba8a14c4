"""
Stop arithmetic for exposure matching.

Every exposure parameter is converted into photographic stops (base-2
logarithm of light quantity) so exposures combine by addition.

References:
- ISO 800 = 0 stops
- 25 fps at 180 degrees (1/50 s) = 0 stops
- T2.8 = 0 stops; each full stop is a factor of sqrt(2) in T-number
- 0.3 density = 1 stop of attenuation
"""

import math

from cine_exposure.core.exceptions import InvalidInputError, OutOfRangeError

ISO_REF = 800
REF_SHUTTER = 1 / 50
REF_T = 2.8
DENSITY_PER_STOP = 0.3


def _as_float(value: float, field: str) -> float:
    try:
        return float(value)
    except OverflowError:
        raise InvalidInputError(
            f"{field} is too large", field=field, hint="Enter a realistic value"
        ) from None


def _require_positive(value: float, field: str) -> float:
    number = _as_float(value, field)
    if not math.isfinite(number) or number <= 0:
        raise InvalidInputError(
            f"{field} must be a positive number, got {value!r}",
            field=field,
            hint="Enter a positive value",
        )
    return number


def _require_finite(value: float, field: str) -> float:
    number = _as_float(value, field)
    if not math.isfinite(number):
        raise InvalidInputError(f"{field} must be finite, got {value!r}", field=field)
    return number


def _require_representable(value: float, field: str, stops: float) -> float:
    """Reject results that overflowed to infinity or underflowed to zero."""
    if not math.isfinite(value) or value <= 0:
        raise OutOfRangeError(
            f"{field} for {stops:+.1f} stops is beyond any usable setting",
            field=field,
            hint="Check the other settings",
            details={"stops": round(stops, 3)},
        )
    return value


def _exp2(stops: float, field: str) -> float:
    try:
        factor = 2.0**stops
    except OverflowError:
        factor = math.inf
    return _require_representable(factor, field, stops)


def iso_stops(iso: float) -> float:
    """Stops of sensitivity relative to ISO 800 (positive = brighter)."""
    return math.log2(_require_positive(iso, "iso")) - math.log2(ISO_REF)


def iso_from_stops(stops: float) -> float:
    """ISO that sits ``stops`` away from ISO 800."""
    stops = _require_finite(stops, "iso_stops")
    return _require_representable(ISO_REF * _exp2(stops, "iso"), "iso", stops)


def shutter_seconds(fps: float, angle: float) -> float:
    """Exposure time per frame for a rotary shutter.

    Args:
        fps: Frame rate in frames per second
        angle: Shutter angle in degrees

    Returns:
        Exposure time in seconds
    """
    _require_positive(fps, "frame_rate")
    _require_positive(angle, "shutter_angle")
    return (angle / 360) * (1 / fps)


def shutter_stops(fps: float, angle: float) -> float:
    """Stops of exposure time relative to 1/50 s (positive = brighter)."""
    fps = _require_positive(fps, "frame_rate")
    angle = _require_positive(angle, "shutter_angle")
    # Sum of logs stays finite where the exposure time would underflow
    return math.log2(angle) - math.log2(360) - math.log2(fps) - math.log2(REF_SHUTTER)


def shutter_angle_from_stops(fps: float, stops: float) -> float:
    """Shutter angle giving ``stops`` of exposure time at ``fps``."""
    fps = _require_positive(fps, "frame_rate")
    stops = _require_finite(stops, "shutter_stops")
    seconds = REF_SHUTTER * _exp2(stops, "shutter_angle")
    return _require_representable(seconds * fps * 360, "shutter_angle", stops)


def frame_rate_from_stops(angle: float, stops: float) -> float:
    """Frame rate giving ``stops`` of exposure time at ``angle``."""
    angle = _require_positive(angle, "shutter_angle")
    stops = _require_finite(stops, "shutter_stops")
    seconds = REF_SHUTTER * _exp2(stops, "frame_rate")
    return _require_representable((angle / 360) / seconds, "frame_rate", stops)


def aperture_darkness_stops(t_stop: float) -> float:
    """Stops of light lost relative to T2.8 (positive = darker).

    Light gathered falls with the square of the T-number, hence the
    factor of two.
    """
    return 2 * (math.log2(_require_positive(t_stop, "aperture")) - math.log2(REF_T))


def aperture_from_darkness_stops(stops: float) -> float:
    """T-stop that is ``stops`` darker than T2.8."""
    stops = _require_finite(stops, "aperture_stops")
    return REF_T * _exp2(stops / 2, "aperture")


def nd_stops(density: float) -> float:
    """Stops of attenuation for an optical density (positive = darker)."""
    _require_finite(density, "nd_density")
    if density < 0:
        raise InvalidInputError(
            f"nd_density must not be negative, got {density!r}", field="nd_density"
        )
    return density / DENSITY_PER_STOP


def density_from_stops(stops: float) -> float:
    """Optical density giving ``stops`` of attenuation."""
    return _require_finite(stops, "nd_stops") * DENSITY_PER_STOP

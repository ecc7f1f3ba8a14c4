"""
Snapping of exact solved values onto physically selectable settings.

- ISO: nearest value on the camera's ISO ladder
- Aperture: nearest third of a stop, labelled against full-stop T marks
- ND: fixed filter wheels or hybrid variable/stacked ND, with a closest
  or ceiling policy and a floor at the smallest usable filter

Residuals are always reported as snapped minus exact, in the setting's
own stop unit.
"""

import math
from dataclasses import dataclass
from typing import Sequence, Union

import numpy as np

from cine_exposure.cameras.profiles import DENSITY_DECIMALS, FixedNDSpec, HybridNDSpec
from cine_exposure.core.exceptions import OutOfRangeError
from cine_exposure.core.types import NDSnapPolicy
from cine_exposure.exposure.stops import (
    aperture_darkness_stops,
    aperture_from_darkness_stops,
    iso_stops,
    nd_stops,
)

# Engraved full-stop T marks, one stop (factor sqrt(2)) apart
T_STOP_MARKS = ("1.0", "1.4", "2.0", "2.8", "4.0", "5.6", "8.0", "11", "16", "22")
REF_MARK_INDEX = T_STOP_MARKS.index("2.8")

# Thirds a value may sit past an end mark and still be labelled
MAX_MARK_OFFSET_THIRDS = 2

_EPS = 1e-9


@dataclass(frozen=True)
class SnapResult:
    """Exact value mapped onto a selectable one."""

    exact_value: float
    snapped_value: float
    label: str
    residual_stops: float


def _nearest_index(values: Sequence[float], target: float) -> int:
    # argmin returns the first minimum, so ties go to the lower value
    return int(np.argmin(np.abs(np.asarray(values, dtype=float) - target)))


def snap_iso(exact_iso: float, ladder: Sequence[int]) -> SnapResult:
    """Snap an ISO onto the nearest ladder value by absolute difference."""
    snapped = ladder[_nearest_index(ladder, exact_iso)]
    return SnapResult(
        exact_value=exact_iso,
        snapped_value=float(snapped),
        label=str(snapped),
        residual_stops=iso_stops(snapped) - iso_stops(exact_iso),
    )


def aperture_label(thirds: int) -> str:
    """Label a T-stop given in thirds of a stop darker than T2.8.

    Raises:
        OutOfRangeError: If the value lies more than 2/3 stop past T1.0 or T22.
    """
    full = (thirds + 1) // 3
    index = min(max(REF_MARK_INDEX + full, 0), len(T_STOP_MARKS) - 1)
    offset = thirds - 3 * (index - REF_MARK_INDEX)
    if abs(offset) > MAX_MARK_OFFSET_THIRDS:
        raise OutOfRangeError(
            f"T-stop is outside the T{T_STOP_MARKS[0]}-T{T_STOP_MARKS[-1]} range",
            field="aperture",
            hint="Adjust ISO or ND instead",
            details={"thirds_from_t2.8": thirds},
        )
    label = f"T{T_STOP_MARKS[index]}"
    if offset:
        label += f" {'+' if offset > 0 else '-'}{abs(offset)}/3"
    return label


def snap_aperture(exact_t: float) -> SnapResult:
    """Snap a T-stop to the nearest third of a stop."""
    stops = aperture_darkness_stops(exact_t)
    thirds = math.floor(stops * 3 + 0.5)
    snapped_stops = thirds / 3
    return SnapResult(
        exact_value=exact_t,
        snapped_value=aperture_from_darkness_stops(snapped_stops),
        label=aperture_label(thirds),
        residual_stops=snapped_stops - stops,
    )


def _pick(values: Sequence[float], target: float, policy: NDSnapPolicy) -> float:
    """Choose from ascending values; ceiling falls back to the largest."""
    if policy == NDSnapPolicy.CEILING:
        for v in values:
            if v >= target - _EPS:
                return v
        return values[-1]
    return values[_nearest_index(values, target)]


def _quantize(steps: float, policy: NDSnapPolicy) -> int:
    if policy == NDSnapPolicy.CEILING:
        return math.ceil(steps - _EPS)
    return math.floor(steps + 0.5)


def _snap_fixed(density: float, spec: FixedNDSpec, policy: NDSnapPolicy) -> float:
    return _pick(spec.values, density, policy)


def _snap_hybrid(density: float, spec: HybridNDSpec, policy: NDSnapPolicy) -> float:
    if density <= spec.internal_start:
        return _pick(spec.lower_values() + [spec.internal_start], density, policy)

    if density <= spec.internal_end + _EPS:
        n = _quantize((density - spec.internal_start) / spec.internal_step, policy)
        snapped = spec.internal_start + n * spec.internal_step
        return round(min(snapped, spec.internal_end), DENSITY_DECIMALS)

    # Internal ND saturated; stack external filters on top
    n = _quantize((density - spec.internal_end) / spec.external_step, policy)
    if spec.max_external_filters is not None:
        n = min(n, spec.max_external_filters)
    return round(spec.internal_end + n * spec.external_step, DENSITY_DECIMALS)


def _snap_density(
    density: float,
    spec: Union[FixedNDSpec, HybridNDSpec],
    policy: NDSnapPolicy,
) -> float:
    if isinstance(spec, HybridNDSpec):
        return _snap_hybrid(density, spec, policy)
    return _snap_fixed(density, spec, policy)


def snap_nd(
    exact_density: float,
    spec: Union[FixedNDSpec, HybridNDSpec],
    policy: NDSnapPolicy = NDSnapPolicy.CLOSEST,
    min_density: float = 0.0,
) -> SnapResult:
    """Snap an ND density onto a camera's ND specification.

    Args:
        exact_density: Required optical density
        spec: Camera ND specification
        policy: Closest by distance, or smallest sufficient filter
        min_density: Floor; results below it are raised to the smallest
            selectable density at or above it

    Returns:
        SnapResult with the label as shown by the camera
    """
    snapped = _snap_density(exact_density, spec, policy)
    if snapped < min_density - _EPS:
        snapped = _snap_density(min_density, spec, NDSnapPolicy.CEILING)

    return SnapResult(
        exact_value=exact_density,
        snapped_value=snapped,
        label=spec.label(snapped),
        residual_stops=nd_stops(snapped) - nd_stops(exact_density),
    )

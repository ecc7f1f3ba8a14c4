"""
Exposure matching between cinema cameras.

Converts ISO, shutter, aperture and ND into stops, solves one unknown
target setting for equivalent exposure, and snaps the result onto what
the target camera can actually select.
"""

from cine_exposure.exposure.compensation import CompensationAdvisor
from cine_exposure.exposure.inputs import (
    build_config,
    parse_iso,
    parse_positive,
    resolve_t_stop,
)
from cine_exposure.exposure.model import (
    ExposureBreakdown,
    are_equivalent,
    exposure,
    exposure_breakdown,
)
from cine_exposure.exposure.snapping import (
    T_STOP_MARKS,
    SnapResult,
    aperture_label,
    snap_aperture,
    snap_iso,
    snap_nd,
)
from cine_exposure.exposure.solver import ExposureSolver, solve
from cine_exposure.exposure.stops import (
    DENSITY_PER_STOP,
    ISO_REF,
    REF_SHUTTER,
    REF_T,
    aperture_darkness_stops,
    aperture_from_darkness_stops,
    density_from_stops,
    frame_rate_from_stops,
    iso_from_stops,
    iso_stops,
    nd_stops,
    shutter_angle_from_stops,
    shutter_seconds,
    shutter_stops,
)

__all__ = [
    # Stop arithmetic
    "DENSITY_PER_STOP",
    "ISO_REF",
    "REF_SHUTTER",
    "REF_T",
    "aperture_darkness_stops",
    "aperture_from_darkness_stops",
    "density_from_stops",
    "frame_rate_from_stops",
    "iso_from_stops",
    "iso_stops",
    "nd_stops",
    "shutter_angle_from_stops",
    "shutter_seconds",
    "shutter_stops",
    # Exposure model
    "ExposureBreakdown",
    "are_equivalent",
    "exposure",
    "exposure_breakdown",
    # Snapping
    "T_STOP_MARKS",
    "SnapResult",
    "aperture_label",
    "snap_aperture",
    "snap_iso",
    "snap_nd",
    # Solving
    "CompensationAdvisor",
    "ExposureSolver",
    "solve",
    # Form inputs
    "build_config",
    "parse_iso",
    "parse_positive",
    "resolve_t_stop",
]

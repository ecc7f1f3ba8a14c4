"""
Domain-specific types and enumerations for exposure matching.
"""

from enum import Enum


class UnknownField(str, Enum):
    """The one target camera setting the solver calculates."""

    ISO = "iso"
    ND = "nd"
    APERTURE = "aperture"
    SHUTTER_ANGLE = "shutter_angle"
    FRAME_RATE = "frame_rate"


class NDSnapPolicy(str, Enum):
    """How an exact ND density is mapped onto a selectable filter."""

    CLOSEST = "closest"  # Most accurate, may under-attenuate slightly
    CEILING = "ceiling"  # Smallest filter that is at least the requirement


class NDKind(str, Enum):
    """Shape of a camera's ND specification."""

    FIXED = "fixed"  # Discrete filter wheel
    HYBRID = "hybrid"  # Variable internal ND plus stacked external filters


class SolveErrorKind(str, Enum):
    """Expected failure outcomes of a solve."""

    OUT_OF_RANGE = "out_of_range"
    INSUFFICIENT_ATTENUATION = "insufficient_attenuation"
    INVALID_INPUT = "invalid_input"


class SecondaryField(str, Enum):
    """Settings the compensation advisor may adjust."""

    ISO = "iso"
    ND = "nd"

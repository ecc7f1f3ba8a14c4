"""
Core types and exceptions for exposure matching.

Models live in ``cine_exposure.core.models``; they depend on camera
profiles and are not imported here.
"""

from cine_exposure.core.exceptions import (
    CineExposureError,
    InsufficientAttenuationError,
    InvalidInputError,
    OutOfRangeError,
    SolveError,
    UnknownCameraError,
)
from cine_exposure.core.types import (
    NDKind,
    NDSnapPolicy,
    SecondaryField,
    SolveErrorKind,
    UnknownField,
)

__all__ = [
    # Exceptions
    "CineExposureError",
    "InsufficientAttenuationError",
    "InvalidInputError",
    "OutOfRangeError",
    "SolveError",
    "UnknownCameraError",
    # Types
    "NDKind",
    "NDSnapPolicy",
    "SecondaryField",
    "SolveErrorKind",
    "UnknownField",
]

"""
Cine Exposure - equivalent exposure settings across cinema cameras.

Given a reference camera configuration (frame rate, shutter angle, ISO,
T-stop, ND), solve the one unknown setting on a second camera that
reproduces the same exposure:

- Stop arithmetic for ISO, shutter, aperture and ND
- Closed-form solving for ISO, T-stop and ND
- Standard-value search for shutter angle and frame rate
- Snapping onto each camera's ISO ladder and ND filters
- Secondary ISO/ND suggestions when snapping leaves a visible error
"""

__version__ = "1.0.0"

# Configuration
from cine_exposure.config import Settings, SolverSettings, configure, get_settings

# Core types
from cine_exposure.core.exceptions import (
    CineExposureError,
    InsufficientAttenuationError,
    InvalidInputError,
    OutOfRangeError,
    SolveError,
    UnknownCameraError,
)
from cine_exposure.core.models import (
    ExposureConfig,
    SecondarySuggestion,
    SolveRequest,
    SolveResult,
    TargetKnowns,
)
from cine_exposure.core.types import NDSnapPolicy, SolveErrorKind, UnknownField

# Cameras
from cine_exposure.cameras import (
    CAMERA_PROFILES,
    CameraProfile,
    FixedNDSpec,
    HybridNDSpec,
    get_camera_profile,
    list_camera_profiles,
)

# Exposure
from cine_exposure.exposure import (
    CompensationAdvisor,
    ExposureSolver,
    exposure,
    solve,
)

__all__ = [
    "__version__",
    # Configuration
    "Settings",
    "SolverSettings",
    "configure",
    "get_settings",
    # Core
    "CineExposureError",
    "InsufficientAttenuationError",
    "InvalidInputError",
    "OutOfRangeError",
    "SolveError",
    "UnknownCameraError",
    "ExposureConfig",
    "SecondarySuggestion",
    "SolveRequest",
    "SolveResult",
    "TargetKnowns",
    "NDSnapPolicy",
    "SolveErrorKind",
    "UnknownField",
    # Cameras
    "CAMERA_PROFILES",
    "CameraProfile",
    "FixedNDSpec",
    "HybridNDSpec",
    "get_camera_profile",
    "list_camera_profiles",
    # Exposure
    "CompensationAdvisor",
    "ExposureSolver",
    "exposure",
    "solve",
]

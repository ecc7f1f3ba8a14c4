"""
Camera profiles: ISO ladders and ND filter arrangements per camera body.
"""

from cine_exposure.cameras.profiles import (
    CameraProfile,
    FixedNDSpec,
    HybridNDSpec,
    NDSpec,
    format_density,
)
from cine_exposure.cameras.registry import (
    CAMERA_PROFILES,
    REGISTRY_VERSION,
    get_camera_profile,
    list_camera_profiles,
)

__all__ = [
    # Profiles
    "CameraProfile",
    "FixedNDSpec",
    "HybridNDSpec",
    "NDSpec",
    "format_density",
    # Registry
    "CAMERA_PROFILES",
    "REGISTRY_VERSION",
    "get_camera_profile",
    "list_camera_profiles",
]

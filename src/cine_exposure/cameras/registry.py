"""
Camera profile registry.

Static catalogue of supported camera bodies. Adding a camera is a data
change to this table; there is no runtime registration path.
"""

from types import MappingProxyType

from cine_exposure.cameras.profiles import CameraProfile, FixedNDSpec, HybridNDSpec
from cine_exposure.core.exceptions import UnknownCameraError

REGISTRY_VERSION = "2024.1"

# Full-stop filter wheel shared by ARRI and Sony bodies
_FULL_STOP_ND = FixedNDSpec(values=(0.0, 0.3, 0.6, 0.9, 1.2, 1.5, 1.8, 2.1, 2.4))

_VENICE_ETERNA_ISOS = (
    125, 160, 200, 250, 320, 400, 500,
    640, 800, 1000, 1250, 1600, 2000,
    2500, 3200, 4000, 5000, 6400, 8000, 10000,
)

_PROFILES = (
    CameraProfile(
        id="arri",
        name="ARRI ALEXA",
        iso_ladder=(160, 200, 250, 320, 400, 500, 640, 800, 1000, 1280, 1600, 2000, 2560, 3200),
        native_isos=frozenset({800}),
        default_iso=800,
        nd_spec=_FULL_STOP_ND,
    ),
    CameraProfile(
        id="venice",
        name="Sony VENICE",
        iso_ladder=_VENICE_ETERNA_ISOS,
        native_isos=frozenset({500, 2500}),  # Dual base ISO
        default_iso=500,
        nd_spec=_FULL_STOP_ND,
    ),
    CameraProfile(
        id="eterna",
        name="Fujifilm GFX ETERNA",
        iso_ladder=_VENICE_ETERNA_ISOS,
        native_isos=frozenset({800, 3200}),
        default_iso=800,
        # Clear and 0.3, variable 0.6-2.1, then one 0.3 filter on top (2.4)
        nd_spec=HybridNDSpec(
            internal_start=0.6,
            internal_end=2.1,
            internal_step=0.05,
            external_step=0.3,
            max_external_filters=1,
        ),
    ),
)

CAMERA_PROFILES: MappingProxyType = MappingProxyType({p.id: p for p in _PROFILES})


def get_camera_profile(camera_id: str) -> CameraProfile:
    """Look up a camera profile by id.

    Raises:
        UnknownCameraError: If the id is not registered.
    """
    try:
        return CAMERA_PROFILES[camera_id]
    except KeyError:
        raise UnknownCameraError(camera_id, available=list(CAMERA_PROFILES)) from None


def list_camera_profiles() -> list[tuple[str, str]]:
    """Get registered cameras as (id, display name) pairs, in table order."""
    return [(p.id, p.name) for p in CAMERA_PROFILES.values()]

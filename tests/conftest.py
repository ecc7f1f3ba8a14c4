"""
Shared fixtures for cine exposure tests.
"""

import pytest

import cine_exposure.config as config_module
from cine_exposure.cameras import get_camera_profile
from cine_exposure.config import SolverSettings
from cine_exposure.core.models import (
    CONFIG_FIELDS,
    ExposureConfig,
    SolveRequest,
    TargetKnowns,
)
from cine_exposure.exposure import ExposureSolver


@pytest.fixture(autouse=True)
def restore_global_settings():
    """Keep tests that call configure() from leaking settings."""
    saved = config_module._settings
    yield
    config_module._settings = saved


@pytest.fixture
def reference_config():
    """25 fps, 180 degrees, ISO 800, T2.8, no ND: exactly 0 stops."""
    return ExposureConfig(
        frame_rate=25,
        shutter_angle=180,
        iso=800,
        aperture=2.8,
        nd_density=0.0,
    )


@pytest.fixture
def solver_settings():
    """Default solver settings."""
    return SolverSettings()


@pytest.fixture
def solver(solver_settings):
    """Solver with default settings."""
    return ExposureSolver(solver_settings)


@pytest.fixture
def arri_profile():
    return get_camera_profile("arri")


@pytest.fixture
def venice_profile():
    return get_camera_profile("venice")


@pytest.fixture
def eterna_profile():
    return get_camera_profile("eterna")


@pytest.fixture
def make_request(reference_config):
    """Build a request whose target defaults to the reference settings."""

    def _make(unknown, camera="arri", reference=None, nd_policy=None, **target):
        values = {
            "frame_rate": 25,
            "shutter_angle": 180,
            "iso": 800,
            "aperture": 2.8,
            "nd_density": 0.0,
        }
        values.update(target)
        values.pop(CONFIG_FIELDS[unknown])
        return SolveRequest(
            reference=reference or reference_config,
            target=TargetKnowns(**values),
            unknown=unknown,
            target_profile=camera,
            nd_policy=nd_policy,
        )

    return _make

"""
Exposure-equivalence solver.

Given a reference configuration and all but one setting of a target
camera, find the target setting that reproduces the reference exposure.

ISO, aperture and ND are solved by closed-form inversion in stop space and
then snapped onto the target camera's selectable values. Shutter angle and
frame rate are restricted to standard values, so they are found by
searching candidate lists in ascending order; the first candidate within
tolerance wins.
"""

import logging
from typing import Callable, Optional, Sequence, Union

from cine_exposure.config import SolverSettings, get_settings
from cine_exposure.core.exceptions import (
    InsufficientAttenuationError,
    OutOfRangeError,
    SolveError,
)
from cine_exposure.core.logging import LogContext, get_logger, log_operation
from cine_exposure.core.models import SolveRequest, SolveResult
from cine_exposure.core.types import UnknownField
from cine_exposure.exposure.compensation import CompensationAdvisor
from cine_exposure.exposure.model import exposure
from cine_exposure.exposure.snapping import SnapResult, snap_aperture, snap_iso, snap_nd
from cine_exposure.exposure.stops import (
    aperture_darkness_stops,
    aperture_from_darkness_stops,
    density_from_stops,
    frame_rate_from_stops,
    iso_from_stops,
    iso_stops,
    nd_stops,
    shutter_angle_from_stops,
    shutter_stops,
)

logger = get_logger(__name__)

# Slack for float noise when comparing against the ND floor
_FLOOR_EPS = 1e-9


class ExposureSolver:
    """Solve one unknown target setting for exposure equivalence."""

    def __init__(
        self,
        settings: Optional[SolverSettings] = None,
        advisor: Optional[CompensationAdvisor] = None,
    ):
        """Initialize solver.

        Args:
            settings: Solver settings. If None, uses global settings.
            advisor: Compensation advisor. If None, one sharing the settings.
        """
        self.settings = settings or get_settings().solver
        self.advisor = advisor or CompensationAdvisor(self.settings)
        self._handlers: dict[UnknownField, Callable[[SolveRequest, float], SolveResult]] = {
            UnknownField.ISO: self._solve_iso,
            UnknownField.APERTURE: self._solve_aperture,
            UnknownField.ND: self._solve_nd,
            UnknownField.SHUTTER_ANGLE: self._solve_shutter_angle,
            UnknownField.FRAME_RATE: self._solve_frame_rate,
        }

    def solve(self, request: SolveRequest) -> SolveResult:
        """Solve the request's unknown setting.

        Args:
            request: Reference config, target knowns, unknown field and
                target camera profile

        Returns:
            SolveResult, with a secondary suggestion when the snap
            residual exceeds the compensation threshold

        Raises:
            OutOfRangeError: No selectable value within tolerance
            InsufficientAttenuationError: ND requirement below the usable floor
            InvalidInputError: A setting is non-positive or not finite
        """
        with LogContext(unknown=request.unknown.value, camera=request.target_profile.id):
            with log_operation(logger, f"solve {request.unknown.value}", level=logging.DEBUG):
                reference_exposure = exposure(request.reference)
                result = self._handlers[request.unknown](request, reference_exposure)
                return self.advisor.advise(result, request)

    def try_solve(self, request: SolveRequest) -> Union[SolveResult, SolveError]:
        """Solve without raising; expected failures are returned."""
        try:
            return self.solve(request)
        except SolveError as e:
            logger.info(f"Solve for {request.unknown.value} failed: {e.message}")
            return e

    # ------------------------------------------------------------------
    # Continuous inversion
    # ------------------------------------------------------------------

    def _solve_iso(self, request: SolveRequest, reference_exposure: float) -> SolveResult:
        t = request.target
        needed = (
            reference_exposure
            - shutter_stops(t.frame_rate, t.shutter_angle)
            + aperture_darkness_stops(t.aperture)
            + nd_stops(t.nd_density)
        )
        profile = request.target_profile
        snap = snap_iso(iso_from_stops(needed), profile.iso_ladder)

        notes = []
        if snap.exact_value > profile.iso_ladder[-1] or snap.exact_value < profile.iso_ladder[0]:
            notes.append(
                f"ISO {snap.exact_value:.0f} is outside the {profile.name} range "
                f"({profile.iso_ladder[0]}-{profile.iso_ladder[-1]})"
            )
        if profile.is_native(int(snap.snapped_value)):
            notes.append(f"ISO {snap.label} is a native ISO on the {profile.name}")

        return self._build_result(
            request, reference_exposure, snap, snap.residual_stops, notes
        )

    def _solve_aperture(self, request: SolveRequest, reference_exposure: float) -> SolveResult:
        t = request.target
        darkness = (
            iso_stops(t.iso)
            + shutter_stops(t.frame_rate, t.shutter_angle)
            - nd_stops(t.nd_density)
            - reference_exposure
        )
        snap = snap_aperture(aperture_from_darkness_stops(darkness))
        # Darker aperture than exact means a dimmer target
        return self._build_result(request, reference_exposure, snap, -snap.residual_stops)

    def _solve_nd(self, request: SolveRequest, reference_exposure: float) -> SolveResult:
        t = request.target
        needed = (
            iso_stops(t.iso)
            + shutter_stops(t.frame_rate, t.shutter_angle)
            - aperture_darkness_stops(t.aperture)
            - reference_exposure
        )
        min_stops = self.settings.min_nd_stops
        if needed < 0 or needed < min_stops - _FLOOR_EPS:
            raise self._insufficient_attenuation(needed, min_stops)

        profile = request.target_profile
        policy = request.nd_policy or self.settings.nd_snap_policy
        snap = snap_nd(
            density_from_stops(needed),
            profile.nd_spec,
            policy=policy,
            min_density=density_from_stops(min_stops),
        )

        notes = []
        if snap.exact_value > profile.nd_spec.max_density:
            notes.append(
                f"ND {snap.exact_value:.2f} exceeds the {profile.name} maximum; "
                f"using {snap.label}"
            )
        return self._build_result(
            request, reference_exposure, snap, -snap.residual_stops, notes
        )

    @staticmethod
    def _insufficient_attenuation(needed: float, min_stops: float) -> InsufficientAttenuationError:
        details = {"needed_stops": round(needed, 3), "min_stops": min_stops}
        if needed < 0:
            return InsufficientAttenuationError(
                "Target is already darker than the reference; ND cannot add light",
                details=details,
            )
        plural = "" if min_stops == 1 else "s"
        return InsufficientAttenuationError(
            f"ND must be at least {min_stops:g} stop{plural} "
            f"({density_from_stops(min_stops):.1f} ND)",
            details=details,
        )

    # ------------------------------------------------------------------
    # Discrete search
    # ------------------------------------------------------------------

    def _required_shutter_stops(self, request: SolveRequest, reference_exposure: float) -> float:
        t = request.target
        return (
            reference_exposure
            - iso_stops(t.iso)
            + aperture_darkness_stops(t.aperture)
            + nd_stops(t.nd_density)
        )

    def _search(
        self,
        candidates: Sequence[float],
        stops_for: Callable[[float], float],
        required: float,
    ) -> Optional[tuple[float, float]]:
        """First candidate within tolerance, as (candidate, residual)."""
        tolerance = self.settings.discrete_tolerance_stops
        for candidate in candidates:
            residual = stops_for(candidate) - required
            if abs(residual) <= tolerance:
                return candidate, residual
        return None

    def _solve_shutter_angle(self, request: SolveRequest, reference_exposure: float) -> SolveResult:
        fps = request.target.frame_rate
        required = self._required_shutter_stops(request, reference_exposure)
        exact = shutter_angle_from_stops(fps, required)

        match = self._search(
            self.settings.shutter_angle_candidates,
            lambda angle: shutter_stops(fps, angle),
            required,
        )
        if match is None:
            raise OutOfRangeError(
                f"No standard shutter angle matches at {fps:g} fps (needs {exact:.1f}°)",
                field="shutter_angle",
                hint="Use ISO, ND or T-stop instead",
                details={"exact_angle": round(exact, 2)},
            )

        angle, residual = match
        snap = SnapResult(exact, angle, f"{angle:g}°", residual)
        return self._build_result(request, reference_exposure, snap, residual)

    def _solve_frame_rate(self, request: SolveRequest, reference_exposure: float) -> SolveResult:
        angle = request.target.shutter_angle
        required = self._required_shutter_stops(request, reference_exposure)
        exact = frame_rate_from_stops(angle, required)

        match = self._search(
            self.settings.frame_rate_candidates,
            lambda fps: shutter_stops(fps, angle),
            required,
        )
        if match is None:
            raise OutOfRangeError(
                f"No standard frame rate matches at {angle:g}° (needs {exact:.2f} fps)",
                field="frame_rate",
                hint="Use ISO, ND or T-stop instead",
                details={"exact_frame_rate": round(exact, 3)},
            )

        fps, residual = match
        snap = SnapResult(exact, fps, f"{fps:g} fps", residual)
        return self._build_result(request, reference_exposure, snap, residual)

    # ------------------------------------------------------------------

    @staticmethod
    def _build_result(
        request: SolveRequest,
        reference_exposure: float,
        snap: SnapResult,
        exposure_error: float,
        notes: Optional[list[str]] = None,
    ) -> SolveResult:
        return SolveResult(
            unknown=request.unknown,
            exact_value=snap.exact_value,
            snapped_value=snap.snapped_value,
            label=snap.label,
            residual_stops=snap.residual_stops,
            exposure_error_stops=exposure_error,
            reference_exposure=reference_exposure,
            camera_id=request.target_profile.id,
            notes=tuple(notes or ()),
        )


def solve(request: SolveRequest, settings: Optional[SolverSettings] = None) -> SolveResult:
    """Solve a request with a fresh solver."""
    return ExposureSolver(settings).solve(request)

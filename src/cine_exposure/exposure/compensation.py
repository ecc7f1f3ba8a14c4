"""
Compensation advice for snap residuals.

When the snapped primary setting leaves the target more than a third of
a stop away from the reference, suggest a second adjustment: ND when ISO
was solved, ISO for everything else.
"""

from typing import Optional

from cine_exposure.config import SolverSettings, get_settings
from cine_exposure.core.exceptions import OutOfRangeError
from cine_exposure.core.logging import get_logger
from cine_exposure.core.models import (
    FIELD_DISPLAY_NAMES,
    SecondarySuggestion,
    SolveRequest,
    SolveResult,
)
from cine_exposure.core.types import SecondaryField, UnknownField
from cine_exposure.exposure.snapping import SnapResult, snap_iso, snap_nd
from cine_exposure.exposure.stops import density_from_stops, iso_from_stops, iso_stops

logger = get_logger(__name__)

# Suggestions this close to the current setting are no change
_SAME_SETTING_EPS = 1e-9


class CompensationAdvisor:
    """Suggest a secondary ISO or ND change absorbing the snap residual.

    The advisor never alters the primary values of a result; it returns a
    copy with ``secondary_suggestion`` and a note attached.
    """

    def __init__(self, settings: Optional[SolverSettings] = None):
        """Initialize advisor.

        Args:
            settings: Solver settings. If None, uses global settings.
        """
        self.settings = settings or get_settings().solver

    @property
    def threshold(self) -> float:
        return self.settings.compensation_threshold_stops + self.settings.compensation_epsilon

    def needs_compensation(self, result: SolveResult) -> bool:
        return abs(result.exposure_error_stops) > self.threshold

    def advise(self, result: SolveResult, request: SolveRequest) -> SolveResult:
        """Attach a secondary suggestion to ``result`` when warranted.

        Args:
            result: Primary solve result
            request: Request the result was solved from

        Returns:
            The same result when within tolerance, otherwise a copy
            carrying the suggestion
        """
        if not self.needs_compensation(result):
            return result

        error = result.exposure_error_stops
        if result.unknown == UnknownField.ISO:
            field = SecondaryField.ND
            snap = self._nd_compensation(error, request)
            current = request.target.nd_density
        else:
            field = SecondaryField.ISO
            snap = self._iso_compensation(error, request)
            current = request.target.iso

        field_name = FIELD_DISPLAY_NAMES[field.value]
        if snap is None or abs(snap.snapped_value - current) < _SAME_SETTING_EPS:
            logger.debug(f"No {field_name} compensation available for {error:+.3f} stops")
            note = f"{result.field_name} is {error:+.2f} stops off; no {field_name} adjustment available"
            return result.model_copy(update={"notes": result.notes + (note,)})

        suggestion = SecondarySuggestion(
            field=field,
            exact_value=snap.exact_value,
            snapped_value=snap.snapped_value,
            label=snap.label,
            residual_stops=snap.residual_stops,
        )
        note = f"{result.field_name} is {error:+.2f} stops off; set {field_name} to {snap.label} to compensate"
        logger.debug(note)
        return result.model_copy(
            update={"secondary_suggestion": suggestion, "notes": result.notes + (note,)}
        )

    def _iso_compensation(self, error: float, request: SolveRequest) -> Optional[SnapResult]:
        # Too bright (positive error) means lowering ISO by the same stops
        try:
            exact = iso_from_stops(iso_stops(request.target.iso) - error)
        except OutOfRangeError:
            return None
        return snap_iso(exact, request.target_profile.iso_ladder)

    def _nd_compensation(self, error: float, request: SolveRequest) -> Optional[SnapResult]:
        exact = request.target.nd_density + density_from_stops(error)
        if exact < 0:
            return None
        return snap_nd(
            exact,
            request.target_profile.nd_spec,
            policy=request.nd_policy or self.settings.nd_snap_policy,
        )

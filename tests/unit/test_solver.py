"""
Tests for the exposure-equivalence solver.

Covers the closed-form ISO, aperture and ND solves, the discrete shutter
angle and frame rate searches, and the expected failure outcomes.
"""

import math
import random

import pytest

from cine_exposure.config import SolverSettings
from cine_exposure.core.exceptions import (
    InsufficientAttenuationError,
    InvalidInputError,
    OutOfRangeError,
    SolveError,
)
from cine_exposure.core.models import ExposureConfig, SolveRequest, SolveResult, TargetKnowns
from cine_exposure.core.types import NDSnapPolicy, SolveErrorKind, UnknownField
from cine_exposure.exposure.model import exposure
from cine_exposure.exposure.solver import ExposureSolver, solve
from cine_exposure.exposure.stops import (
    aperture_darkness_stops,
    iso_stops,
    nd_stops,
    shutter_stops,
)


class TestScenarios:
    """Worked examples from a 25 fps, 180 degree, ISO 800, T2.8 reference."""

    def test_iso_for_one_stop_darker_aperture(self, solver, make_request):
        """T4.0 is about one stop darker than T2.8, needing double ISO."""
        result = solver.solve(make_request(UnknownField.ISO, aperture=4.0))

        assert isinstance(result, SolveResult)
        assert result.reference_exposure == pytest.approx(0.0, abs=1e-12)
        assert result.exact_value == pytest.approx(1600, rel=0.03)
        assert result.snapped_value == 1600
        assert result.label == "1600"
        assert result.secondary_suggestion is None

    def test_nd_with_no_spare_light(self, solver, make_request):
        """Identical settings leave no room for even one stop of ND."""
        with pytest.raises(InsufficientAttenuationError) as exc_info:
            solver.solve(make_request(UnknownField.ND))

        assert exc_info.value.kind == SolveErrorKind.INSUFFICIENT_ATTENUATION
        assert exc_info.value.details["needed_stops"] == pytest.approx(0.0)

    def test_aperture_for_two_stops_more_iso(self, solver, make_request):
        """ISO 3200 is two stops brighter, so close down to T5.6."""
        result = solver.solve(make_request(UnknownField.APERTURE, iso=3200))

        assert result.exact_value == pytest.approx(5.6)
        assert result.snapped_value == pytest.approx(5.6)
        assert result.label == "T5.6"


class TestISOSolve:
    """Tests for solving ISO."""

    def test_monotonicity(self, solver, make_request, reference_config):
        """Doubling the reference ISO doubles the solved target ISO."""
        brighter = reference_config.model_copy(update={"iso": 1600})

        base = solver.solve(make_request(UnknownField.ISO, aperture=4.0))
        doubled = solver.solve(make_request(UnknownField.ISO, aperture=4.0, reference=brighter))

        assert doubled.exact_value == pytest.approx(2 * base.exact_value, rel=1e-12)

    def test_nd_on_target_raises_iso(self, solver, make_request):
        result = solver.solve(make_request(UnknownField.ISO, nd_density=0.6))

        assert result.exact_value == pytest.approx(3200)
        assert result.label == "3200"

    def test_native_iso_note(self, solver, make_request):
        result = solver.solve(make_request(UnknownField.ISO))

        assert result.snapped_value == 800
        assert any("native" in note for note in result.notes)

    def test_beyond_ladder_note(self, solver, make_request):
        result = solver.solve(make_request(UnknownField.ISO, aperture=8.0, nd_density=0.9))

        assert result.snapped_value == 3200
        assert any("outside" in note for note in result.notes)

    def test_uses_target_camera_ladder(self, solver, make_request):
        """The same exact ISO snaps differently per camera."""
        arri = solver.solve(make_request(UnknownField.ISO, camera="arri", aperture=5.0))
        venice = solver.solve(make_request(UnknownField.ISO, camera="venice", aperture=5.0))

        assert arri.exact_value == pytest.approx(venice.exact_value)
        assert arri.snapped_value == 2560
        assert venice.snapped_value == 2500


class TestApertureSolve:
    """Tests for solving T-stop."""

    def test_third_stop_result(self, solver, make_request):
        result = solver.solve(make_request(UnknownField.APERTURE, iso=1000))

        assert result.label == "T2.8 +1/3"
        assert abs(result.residual_stops) < 0.02

    def test_exposure_error_sign(self, solver, make_request):
        """A snapped aperture darker than exact leaves the target dimmer."""
        result = solver.solve(make_request(UnknownField.APERTURE, iso=1600))

        assert result.residual_stops == pytest.approx(-result.exposure_error_stops)

    def test_out_of_ladder(self, solver, make_request):
        with pytest.raises(OutOfRangeError):
            solver.solve(make_request(UnknownField.APERTURE, iso=800, nd_density=2.4, shutter_angle=45))


class TestNDSolve:
    """Tests for solving ND."""

    def test_two_stops(self, solver, make_request):
        result = solver.solve(make_request(UnknownField.ND, iso=3200))

        assert result.exact_value == pytest.approx(0.6)
        assert result.snapped_value == 0.6
        assert result.label == "0.60"

    @pytest.mark.parametrize("iso", [800, 1000, 1250, 1500])
    def test_floor_enforced(self, solver, make_request, iso):
        """Needs between 0 and 1 stop always fail; no sub-filter density."""
        with pytest.raises(InsufficientAttenuationError) as exc_info:
            solver.solve(make_request(UnknownField.ND, iso=iso))

        assert "1 stop" in exc_info.value.message
        assert "ISO or T-stop" in exc_info.value.hint

    def test_target_darker_than_reference(self, solver, make_request):
        with pytest.raises(InsufficientAttenuationError) as exc_info:
            solver.solve(make_request(UnknownField.ND, iso=400))

        assert "darker" in exc_info.value.message

    def test_exactly_one_stop(self, solver, make_request):
        result = solver.solve(make_request(UnknownField.ND, iso=1600))
        assert result.snapped_value == 0.3

    def test_zero_floor_allows_clear(self, make_request):
        solver = ExposureSolver(SolverSettings(min_nd_stops=0.0))
        result = solver.solve(make_request(UnknownField.ND))

        assert result.label == "Clear"
        assert result.snapped_value == 0.0

    def test_zero_floor_still_rejects_negative(self, make_request):
        solver = ExposureSolver(SolverSettings(min_nd_stops=0.0))
        with pytest.raises(InsufficientAttenuationError):
            solver.solve(make_request(UnknownField.ND, iso=640))

    def test_policy_from_settings(self, make_request):
        solver = ExposureSolver(SolverSettings(nd_snap_policy=NDSnapPolicy.CEILING))
        result = solver.solve(make_request(UnknownField.ND, iso=1838))

        assert result.snapped_value == 0.6

    def test_request_policy_overrides_settings(self, solver, make_request):
        closest = solver.solve(make_request(UnknownField.ND, iso=1838))
        ceiling = solver.solve(
            make_request(UnknownField.ND, iso=1838, nd_policy=NDSnapPolicy.CEILING)
        )

        assert closest.exact_value == pytest.approx(0.36, abs=1e-3)
        assert closest.snapped_value == 0.3
        assert ceiling.snapped_value == 0.6
        assert ceiling.residual_stops > 0

    def test_hybrid_variable_nd(self, solver, make_request):
        """The ETERNA variable ND lands closer than a full-stop wheel."""
        eterna = solver.solve(make_request(UnknownField.ND, camera="eterna", iso=4000))
        arri = solver.solve(make_request(UnknownField.ND, camera="arri", iso=4000))

        assert eterna.label == "0.70"
        assert arri.label == "0.60"
        assert abs(eterna.residual_stops) < abs(arri.residual_stops)

    def test_hybrid_external_filter(self, solver, make_request):
        result = solver.solve(
            make_request(
                UnknownField.ND,
                camera="eterna",
                iso=22286,
                aperture=1.4,
                shutter_angle=360,
            )
        )

        assert result.exact_value == pytest.approx(2.34, abs=1e-3)
        assert result.snapped_value == pytest.approx(2.4)
        assert "external" in result.label

    def test_beyond_max_note(self, solver, make_request):
        # 4 + 4 + 1 = 9 stops, past the 8-stop wheel
        result = solver.solve(make_request(UnknownField.ND, iso=12800, aperture=0.7, shutter_angle=360))

        assert result.exact_value == pytest.approx(2.7)
        assert result.snapped_value == 2.4
        assert any("maximum" in note for note in result.notes)


class TestShutterAngleSolve:
    """Tests for the shutter angle search."""

    def test_finds_standard_angle(self, solver, make_request):
        result = solver.solve(make_request(UnknownField.SHUTTER_ANGLE, iso=1600))

        assert result.snapped_value == 90
        assert result.exact_value == pytest.approx(90)
        assert result.label == "90°"

    def test_no_standard_angle(self, solver, make_request):
        with pytest.raises(OutOfRangeError) as exc_info:
            solver.solve(make_request(UnknownField.SHUTTER_ANGLE, iso=1200))

        error = exc_info.value
        assert error.field == "shutter_angle"
        assert error.details["exact_angle"] == pytest.approx(120.0)

    def test_custom_candidates(self, make_request):
        solver = ExposureSolver(SolverSettings(shutter_angle_candidates=(120.0, 180.0)))
        result = solver.solve(make_request(UnknownField.SHUTTER_ANGLE, iso=1200))

        assert result.snapped_value == 120

    def test_residual_within_tolerance(self, solver, make_request):
        result = solver.solve(make_request(UnknownField.SHUTTER_ANGLE, iso=1596))

        assert result.snapped_value == 90
        assert abs(result.residual_stops) <= solver.settings.discrete_tolerance_stops


class TestFrameRateSolve:
    """Tests for the frame rate search."""

    def test_finds_standard_rate(self, solver, make_request):
        result = solver.solve(make_request(UnknownField.FRAME_RATE, iso=1600))

        assert result.snapped_value == 50
        assert result.label == "50 fps"

    def test_finds_24(self, solver, make_request):
        result = solver.solve(make_request(UnknownField.FRAME_RATE, iso=768))
        assert result.snapped_value == 24

    def test_no_standard_rate(self, solver, make_request):
        with pytest.raises(OutOfRangeError) as exc_info:
            solver.solve(make_request(UnknownField.FRAME_RATE, iso=1200))

        assert exc_info.value.details["exact_frame_rate"] == pytest.approx(37.5)
        assert "ISO" in exc_info.value.hint

    def test_first_candidate_wins(self, make_request):
        """Candidates are tried in ascending order."""
        settings = SolverSettings(
            frame_rate_candidates=(24.0, 25.0, 30.0),
            discrete_tolerance_stops=0.5,
        )
        result = ExposureSolver(settings).solve(make_request(UnknownField.FRAME_RATE))

        assert result.snapped_value == 24


class TestRoundTrip:
    """Solving a config against itself returns its own settings."""

    @pytest.fixture
    def reference(self):
        return ExposureConfig(
            frame_rate=25,
            shutter_angle=180,
            iso=800,
            aperture=2.8,
            nd_density=0.6,
        )

    @pytest.mark.parametrize("unknown", list(UnknownField))
    def test_identity(self, solver, make_request, reference, unknown):
        request = make_request(unknown, reference=reference, nd_density=0.6)
        result = solver.solve(request)

        expected = {
            UnknownField.ISO: 800,
            UnknownField.ND: 0.6,
            UnknownField.APERTURE: 2.8,
            UnknownField.SHUTTER_ANGLE: 180,
            UnknownField.FRAME_RATE: 25,
        }[unknown]
        assert result.exact_value == pytest.approx(expected, rel=1e-9)
        assert result.snapped_value == pytest.approx(expected)
        assert result.secondary_suggestion is None

    def test_completed_target_is_equivalent(self, solver, make_request, reference):
        request = make_request(UnknownField.ISO, reference=reference, aperture=11.2)
        result = solver.solve(request)
        completed = request.target.with_value(UnknownField.ISO, result.exact_value)

        assert completed.iso == 3200
        assert exposure(completed) == pytest.approx(exposure(reference))


class TestInversionProperty:
    """Exact solutions reproduce the reference exposure."""

    FRAME_RATES = (23.976, 24, 25, 29.97, 30, 48, 50, 60, 120)
    ND_VALUES = (0.0, 0.3, 0.6, 0.9, 1.2, 1.5)

    def _random_config(self, rng):
        return {
            "frame_rate": rng.choice(self.FRAME_RATES),
            "shutter_angle": rng.uniform(10.0, 360.0),
            "iso": rng.randint(100, 12800),
            "aperture": rng.uniform(1.3, 16.0),
            "nd_density": rng.choice(self.ND_VALUES),
        }

    def test_exact_values_invert(self, make_request):
        rng = random.Random(1234)
        solver = ExposureSolver(SolverSettings(min_nd_stops=0.0))
        checked = 0

        for _ in range(200):
            reference = ExposureConfig(**self._random_config(rng))
            target = self._random_config(rng)
            expected = exposure(reference)

            for unknown in (UnknownField.ISO, UnknownField.APERTURE, UnknownField.ND):
                request = make_request(unknown, reference=reference, camera="eterna", **target)
                try:
                    result = solver.solve(request)
                except SolveError:
                    continue

                values = dict(target)
                key = {
                    UnknownField.ISO: "iso",
                    UnknownField.APERTURE: "aperture",
                    UnknownField.ND: "nd_density",
                }[unknown]
                values[key] = result.exact_value
                recomputed = (
                    iso_stops(values["iso"])
                    + shutter_stops(values["frame_rate"], values["shutter_angle"])
                    - aperture_darkness_stops(values["aperture"])
                    - nd_stops(values["nd_density"])
                )
                assert recomputed == pytest.approx(expected, abs=1e-9)
                checked += 1

        assert checked > 200


class TestErrorHandling:
    """Tests for failure reporting."""

    def test_try_solve_returns_error(self, solver, make_request):
        outcome = solver.try_solve(make_request(UnknownField.ND))

        assert isinstance(outcome, InsufficientAttenuationError)
        assert outcome.to_dict()["kind"] == "insufficient_attenuation"
        assert "ISO or T-stop" in outcome.user_message()

    def test_try_solve_returns_result(self, solver, make_request):
        outcome = solver.try_solve(make_request(UnknownField.ISO))
        assert isinstance(outcome, SolveResult)

    def test_try_solve_logs_failure(self, solver, make_request, caplog):
        with caplog.at_level("INFO", logger="cine_exposure"):
            solver.try_solve(make_request(UnknownField.FRAME_RATE, iso=1200))

        assert any("frame_rate failed" in r.getMessage() for r in caplog.records)

    def test_invalid_reference(self, reference_config):
        with pytest.raises(InvalidInputError) as exc_info:
            SolveRequest.create(
                reference={**reference_config.model_dump(), "iso": 0},
                target=TargetKnowns(frame_rate=25, shutter_angle=180, aperture=2.8, nd_density=0),
                unknown=UnknownField.ISO,
                target_profile="arri",
            )
        assert exc_info.value.field == "reference.iso"

    def test_missing_target_field(self, reference_config):
        with pytest.raises(InvalidInputError) as exc_info:
            SolveRequest.create(
                reference=reference_config,
                target=TargetKnowns(frame_rate=25, shutter_angle=180, nd_density=0),
                unknown=UnknownField.ISO,
                target_profile="arri",
            )
        assert "aperture" in exc_info.value.message

    def test_infinite_input_rejected(self, reference_config):
        with pytest.raises(InvalidInputError):
            SolveRequest.create(
                reference=reference_config,
                target={"frame_rate": 25, "shutter_angle": 180, "aperture": math.inf, "nd_density": 0},
                unknown=UnknownField.ISO,
                target_profile="arri",
            )

    @pytest.mark.parametrize(
        "unknown,target",
        [
            (UnknownField.ISO, {"aperture": 1e300}),
            (UnknownField.APERTURE, {"iso": 10**300}),
            (UnknownField.SHUTTER_ANGLE, {"aperture": 1e300}),
            (UnknownField.FRAME_RATE, {"aperture": 1e-300}),
        ],
    )
    def test_extreme_settings_return_error(self, solver, make_request, unknown, target):
        """Finite settings thousands of stops away fail without overflowing."""
        outcome = solver.try_solve(make_request(unknown, **target))

        assert isinstance(outcome, OutOfRangeError)
        assert outcome.field == unknown.value

    def test_module_level_solve(self, make_request):
        result = solve(make_request(UnknownField.ISO, aperture=4.0))
        assert result.snapped_value == 1600

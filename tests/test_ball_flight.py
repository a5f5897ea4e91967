"""
Tests for the ball flight predictor.
"""

import pytest

from swing_scoring.analysis.ball_flight import (
    REQUIRED_INPUTS,
    confidence_for,
    count_inputs,
    predict_ball_flight,
    predict_from_summary,
)
from swing_scoring.analysis.biomechanics import summarize_biomechanics
from swing_scoring.records.models import BallFlightInputs, ConfidenceLevel, MotorProfile


FULL_INPUTS = BallFlightInputs(
    bat_ke=150.0,
    pelvis_velocity=600.0,
    torso_velocity=780.0,
    transfer_efficiency=75.0,
    x_factor=45.0,
    brain_score=60.0,
    body_score=65.0,
    motor_profile=MotorProfile.SPINNER,
)


class TestAllNullInputs:
    """Test degradation to population defaults."""

    def setup_method(self):
        self.prediction = predict_ball_flight(BallFlightInputs())

    def test_prediction_is_fully_populated(self):
        """Test that no input at all still yields a full prediction."""
        assert self.prediction.exit_velocity == 84.0
        assert self.prediction.launch_angle == 17.9
        assert self.prediction.kinetic_potential == 52
        assert self.prediction.is_prediction is True

    def test_confidence_is_low(self):
        assert self.prediction.confidence is ConfidenceLevel.LOW
        assert self.prediction.inputs_present == 0

    def test_none_is_treated_as_all_missing(self):
        assert predict_ball_flight(None) == self.prediction


class TestConfidence:
    """Test ordinal confidence from input coverage."""

    def test_all_inputs_present_is_high(self):
        prediction = predict_ball_flight(FULL_INPUTS)
        assert prediction.inputs_present == REQUIRED_INPUTS
        assert prediction.confidence is ConfidenceLevel.HIGH

    def test_unknown_profile_is_not_counted(self):
        """Test that an UNKNOWN profile counts as a missing input."""
        inputs = BallFlightInputs(
            bat_ke=150.0,
            pelvis_velocity=600.0,
            torso_velocity=780.0,
            transfer_efficiency=75.0,
            x_factor=45.0,
            brain_score=60.0,
            body_score=65.0,
        )
        assert count_inputs(inputs) == 7
        assert predict_ball_flight(inputs).confidence is ConfidenceLevel.MEDIUM

    @pytest.mark.parametrize("present,expected", [
        (8, ConfidenceLevel.HIGH),
        (7, ConfidenceLevel.MEDIUM),
        (5, ConfidenceLevel.MEDIUM),
        (4, ConfidenceLevel.LOW),
        (0, ConfidenceLevel.LOW),
    ])
    def test_majority_thresholds(self, present, expected):
        """Test that exactly half the inputs is not a majority."""
        assert confidence_for(present) is expected


class TestExitVelocity:
    """Test the exit velocity surrogate."""

    def test_linear_combination(self):
        """Test 40 + 0.25 * bat_ke + 0.20 * transfer_efficiency."""
        prediction = predict_ball_flight(BallFlightInputs(bat_ke=150.0, transfer_efficiency=75.0))
        assert prediction.exit_velocity == 92.5

    def test_clipped_to_realistic_range(self):
        high = predict_ball_flight(BallFlightInputs(bat_ke=400.0, transfer_efficiency=100.0))
        low = predict_ball_flight(BallFlightInputs(bat_ke=-100.0, transfer_efficiency=0.0))
        assert high.exit_velocity == 115.0
        assert low.exit_velocity == 40.0


class TestLaunchAngle:
    """Test the launch angle surrogate."""

    def test_profile_base_angles(self):
        """Test base angles with neutral separation and velocity ratio."""
        neutral = dict(x_factor=40.7, pelvis_velocity=500.0, torso_velocity=630.0)
        expected = {
            MotorProfile.SPINNER: 17.0,
            MotorProfile.WHIPPER: 15.0,
            MotorProfile.SLINGSHOTTER: 21.0,
            MotorProfile.TITAN: 24.0,
            MotorProfile.UNKNOWN: 18.0,
        }
        for profile, angle in expected.items():
            inputs = BallFlightInputs(motor_profile=profile, **neutral)
            assert predict_ball_flight(inputs).launch_angle == angle

    def test_adjustments_are_bounded(self):
        """Test the x-factor and velocity-ratio adjustment caps."""
        inputs = BallFlightInputs(
            motor_profile=MotorProfile.TITAN,
            x_factor=90.0,
            pelvis_velocity=500.0,
            torso_velocity=630.0,
        )
        assert predict_ball_flight(inputs).launch_angle == 28.0

        inputs = BallFlightInputs(
            motor_profile=MotorProfile.TITAN,
            x_factor=90.0,
            pelvis_velocity=400.0,
            torso_velocity=1000.0,
        )
        assert predict_ball_flight(inputs).launch_angle == 33.0

    def test_always_within_physical_range(self):
        for x_factor in (-50.0, 0.0, 40.7, 120.0):
            for torso in (100.0, 800.0, 3000.0):
                inputs = BallFlightInputs(x_factor=x_factor, torso_velocity=torso)
                angle = predict_ball_flight(inputs).launch_angle
                assert -10.0 <= angle <= 40.0

    def test_zero_pelvis_velocity_skips_ratio(self):
        inputs = BallFlightInputs(x_factor=40.7, pelvis_velocity=0.0, torso_velocity=800.0)
        assert predict_ball_flight(inputs).launch_angle == 18.0


class TestKineticPotential:
    """Test the kinetic potential score."""

    def test_weighted_combination(self):
        prediction = predict_ball_flight(FULL_INPUTS)
        # 0.30*60 + 0.30*65 + 0.25*(110/180*100) + 0.15*75
        assert prediction.kinetic_potential == 64

    def test_bounded(self):
        top = BallFlightInputs(bat_ke=500.0, transfer_efficiency=200.0, brain_score=100.0, body_score=100.0)
        bottom = BallFlightInputs(bat_ke=0.0, transfer_efficiency=0.0, brain_score=0.0, body_score=0.0)
        assert predict_ball_flight(top).kinetic_potential == 100
        assert predict_ball_flight(bottom).kinetic_potential == 0


class TestPredictFromSummary:
    """Test prediction from a biomechanics summary."""

    def test_uses_session_averages_and_scores(self, complete_samples):
        summary = summarize_biomechanics(complete_samples)
        prediction = predict_from_summary(summary)

        # bat_ke 145, transfer_efficiency 75
        assert prediction.exit_velocity == pytest.approx(91.25, abs=0.051)
        assert prediction.confidence is ConfidenceLevel.HIGH

    def test_to_dict_labels_prediction(self):
        data = predict_ball_flight(BallFlightInputs()).to_dict()
        assert data["is_prediction"] is True
        assert data["confidence"] == "low"

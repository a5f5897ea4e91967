"""Shared fixtures for the swing scoring test suite."""

import pytest

from swing_scoring.records.models import (
    BiomechanicalSample,
    MotorProfile,
    ProcessingStatus,
    SwingMetrics,
)
from swing_scoring.settings import EngineConfig


SCENARIO_CSV = (
    "Swing,Velo,LA,Dist,Res,Type\n"
    "1,,,,Miss,\n"
    "2,92,18,250,1B,LD\n"
    "3,80,40,,Foul,\n"
)


@pytest.fixture
def scenario_csv():
    """Miss, a 92 mph line-drive single at 18 degrees, then a foul."""
    return SCENARIO_CSV


@pytest.fixture
def engine_config():
    return EngineConfig()


@pytest.fixture
def complete_samples():
    """Three completed uploads with partial sensor coverage."""
    return [
        BiomechanicalSample(
            upload_id="u1",
            pelvis_velocity=600.0,
            torso_velocity=760.0,
            x_factor=42.0,
            bat_ke=130.0,
            transfer_efficiency=70.0,
            consistency_grade=None,
            motor_profile=None,
        ),
        BiomechanicalSample(
            upload_id="u2",
            pelvis_velocity=None,
            torso_velocity=800.0,
            bat_ke=None,
            transfer_efficiency=80.0,
            consistency_grade="B",
            motor_profile="Slingshotter",
            weakest_link="lead leg",
        ),
        BiomechanicalSample(
            upload_id="u3",
            pelvis_velocity=700.0,
            torso_velocity=None,
            x_factor=38.0,
            bat_ke=160.0,
            transfer_efficiency=None,
            consistency_grade="A",
            motor_profile="Titan",
            leak_detected="early arms",
        ),
    ]


@pytest.fixture
def pending_sample():
    return BiomechanicalSample(
        upload_id="p1",
        processing_status=ProcessingStatus.PROCESSING,
        pelvis_velocity=9999.0,
        bat_ke=9999.0,
    )


@pytest.fixture
def clean_swing():
    """Metric bundle that triggers no recommendation rule."""
    return SwingMetrics(
        bat_speed_mph=70.0,
        attack_angle_deg=10.0,
        hand_speed_mph=30.0,
        time_to_contact_ms=150.0,
        tempo_score=80.0,
        efficiency_rating=8.0,
    )


@pytest.fixture
def struggling_swing():
    """Metric bundle that triggers every recommendation rule."""
    return SwingMetrics(
        bat_speed_mph=55.0,
        attack_angle_deg=2.0,
        hand_speed_mph=20.0,
        time_to_contact_ms=210.0,
        tempo_score=40.0,
        efficiency_rating=4.0,
        motor_profile_prediction=MotorProfile.UNKNOWN,
    )

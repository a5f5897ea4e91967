"""
Ball flight prediction from body mechanics.

Many sessions have body-sensor data but no ball-tracking hardware. The
predictor estimates exit velocity, launch angle and a kinetic potential
score from the body-derived inputs alone, substituting population averages
for anything missing. Every output is flagged as a prediction.
"""

import logging
from typing import Dict, Optional

import numpy as np

from swing_scoring.analysis.biomechanics import rescale
from swing_scoring.records.models import (
    BallFlightInputs,
    BallFlightPrediction,
    BiomechanicsSummary,
    ConfidenceLevel,
    MotorProfile,
)
from swing_scoring.settings import DEFAULT_CONFIG, BallFlightConfig, EngineConfig

logger = logging.getLogger(__name__)

NUMERIC_INPUTS = (
    "bat_ke",
    "pelvis_velocity",
    "torso_velocity",
    "transfer_efficiency",
    "x_factor",
    "brain_score",
    "body_score",
)
# Numeric inputs plus a known motor profile
REQUIRED_INPUTS = len(NUMERIC_INPUTS) + 1


def count_inputs(inputs: BallFlightInputs) -> int:
    """Number of required inputs that were actually measured."""
    present = sum(1 for name in NUMERIC_INPUTS if getattr(inputs, name) is not None)
    if inputs.motor_profile is not MotorProfile.UNKNOWN:
        present += 1
    return present


def confidence_for(present: int, required: int = REQUIRED_INPUTS) -> ConfidenceLevel:
    """All inputs present is HIGH, a strict majority MEDIUM, anything less LOW."""
    if present >= required:
        return ConfidenceLevel.HIGH
    if present * 2 > required:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def _resolve(inputs: BallFlightInputs, defaults) -> Dict[str, float]:
    resolved = {}
    for name in NUMERIC_INPUTS:
        value = getattr(inputs, name)
        resolved[name] = float(defaults[name]) if value is None else float(value)
    return resolved


def _exit_velocity(values: Dict[str, float], cfg: BallFlightConfig) -> float:
    ev = (
        cfg.ev_intercept
        + cfg.ev_per_joule * values["bat_ke"]
        + cfg.ev_per_efficiency_point * values["transfer_efficiency"]
    )
    return round(float(np.clip(ev, cfg.ev_min, cfg.ev_max)), 1)


def _launch_angle(values: Dict[str, float], profile: MotorProfile, cfg: BallFlightConfig) -> float:
    base = cfg.launch_base.get(profile, cfg.launch_base[MotorProfile.UNKNOWN])

    x_adjust = np.clip(
        (values["x_factor"] - cfg.x_factor_reference) * cfg.x_factor_per_degree,
        -cfg.x_factor_max_adjust,
        cfg.x_factor_max_adjust,
    )

    pelvis = values["pelvis_velocity"]
    if pelvis > 0:
        ratio = values["torso_velocity"] / pelvis
        ratio_adjust = np.clip(
            (ratio - cfg.torso_pelvis_reference) * cfg.torso_pelvis_gain,
            -cfg.torso_pelvis_max_adjust,
            cfg.torso_pelvis_max_adjust,
        )
    else:
        ratio_adjust = 0.0

    angle = base + x_adjust + ratio_adjust
    return round(float(np.clip(angle, cfg.la_min, cfg.la_max)), 1)


def _kinetic_potential(values: Dict[str, float], cfg: BallFlightConfig) -> int:
    components = {
        "brain_score": float(np.clip(values["brain_score"], 0.0, 100.0)),
        "body_score": float(np.clip(values["body_score"], 0.0, 100.0)),
        "bat_ke": rescale(values["bat_ke"], cfg.kp_bat_ke_floor, cfg.kp_bat_ke_ceiling),
        "transfer_efficiency": float(np.clip(values["transfer_efficiency"], 0.0, 100.0)),
    }
    weights = cfg.kinetic_weights()
    total = sum(weights[name] * value for name, value in components.items())
    return int(np.clip(round(total), 0, 100))


def predict_ball_flight(
    inputs: Optional[BallFlightInputs] = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> BallFlightPrediction:
    """
    Predict ball flight from body-derived inputs.

    Always returns a populated prediction; missing inputs fall back to
    population averages and lower the confidence instead of failing.

    Args:
        inputs: Body-derived inputs; None is treated as all-missing.
        config: Engine constants.

    Returns:
        BallFlightPrediction flagged as a prediction.
    """
    inputs = inputs or BallFlightInputs()
    cfg = config.ball_flight
    values = _resolve(inputs, cfg.population_defaults)
    present = count_inputs(inputs)

    prediction = BallFlightPrediction(
        exit_velocity=_exit_velocity(values, cfg),
        launch_angle=_launch_angle(values, inputs.motor_profile, cfg),
        kinetic_potential=_kinetic_potential(values, cfg),
        confidence=confidence_for(present),
        inputs_present=present,
    )

    logger.debug(
        f"Ball flight prediction: {prediction.exit_velocity} mph at "
        f"{prediction.launch_angle} deg, confidence {prediction.confidence.name} "
        f"({present}/{REQUIRED_INPUTS} inputs)"
    )
    return prediction


def inputs_from_summary(summary: BiomechanicsSummary) -> BallFlightInputs:
    """Build predictor inputs from a biomechanics summary."""
    averages = summary.field_averages
    return BallFlightInputs(
        bat_ke=averages.get("bat_ke"),
        pelvis_velocity=averages.get("pelvis_velocity"),
        torso_velocity=averages.get("torso_velocity"),
        transfer_efficiency=averages.get("transfer_efficiency"),
        x_factor=averages.get("x_factor"),
        brain_score=summary.scores.brain,
        body_score=summary.scores.body,
        motor_profile=summary.motor_profile,
    )


def predict_from_summary(
    summary: BiomechanicsSummary,
    config: EngineConfig = DEFAULT_CONFIG,
) -> BallFlightPrediction:
    """Predict ball flight for a session from its biomechanics summary."""
    return predict_ball_flight(inputs_from_summary(summary), config)

"""Motor profile classification and ceiling projection for a single swing."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np

from swing_scoring.grading.grades import grade
from swing_scoring.grading.recommendations import generate_recommendations
from swing_scoring.records.models import CeilingProjection, MotorProfile, SwingMetrics
from swing_scoring.settings import DEFAULT_CONFIG, CeilingConfig, EngineConfig, ProfileRules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwingAnalysis:
    """Motor profile, ceiling projection and coaching cues for one swing."""
    motor_profile: MotorProfile
    projection: CeilingProjection
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "motor_profile": self.motor_profile.value,
            "projection": self.projection.to_dict(),
            "recommendations": list(self.recommendations),
        }


def classify_motor_profile(
    metrics: SwingMetrics,
    rules: ProfileRules = DEFAULT_CONFIG.profile_rules,
) -> MotorProfile:
    """
    Assign a motor profile archetype to a swing.

    A sensor-side prediction other than UNKNOWN is kept as is. Otherwise
    the rules are checked in order and the first match wins; UNKNOWN is
    the fallback when none match.

    Args:
        metrics: Metric bundle of the swing.
        rules: Classification thresholds.

    Returns:
        MotorProfile archetype.
    """
    predicted = metrics.motor_profile_prediction
    if predicted is not None and predicted is not MotorProfile.UNKNOWN:
        return predicted

    if (metrics.tempo_score > rules.whipper_min_tempo
            and metrics.time_to_contact_ms < rules.whipper_max_contact_ms):
        return MotorProfile.WHIPPER
    if (metrics.bat_speed_mph > rules.slingshotter_min_bat_speed
            and metrics.efficiency_rating > rules.slingshotter_min_efficiency):
        return MotorProfile.SLINGSHOTTER
    if metrics.tempo_score > rules.spinner_min_tempo:
        return MotorProfile.SPINNER
    if metrics.bat_speed_mph > rules.titan_min_bat_speed:
        return MotorProfile.TITAN
    return MotorProfile.UNKNOWN


def _unit(value: float) -> float:
    return float(np.clip(value, 0.0, 1.0))


def current_score(metrics: SwingMetrics, cfg: CeilingConfig = DEFAULT_CONFIG.ceiling) -> int:
    """
    Current development score on a 0-99 scale.

    Each term is normalized and clamped to [0, 1] before weighting; faster
    time to contact scores higher.
    """
    contact_span = cfg.contact_time_slow_ms - cfg.contact_time_fast_ms
    terms = {
        "bat_speed": _unit(metrics.bat_speed_mph / cfg.bat_speed_max),
        "tempo": _unit(metrics.tempo_score / cfg.tempo_max),
        "efficiency": _unit(metrics.efficiency_rating / cfg.efficiency_max),
        "contact_time": _unit((cfg.contact_time_slow_ms - metrics.time_to_contact_ms) / contact_span),
    }
    weights = cfg.weights()
    total = 100.0 * sum(weights[name] * value for name, value in terms.items())
    return min(cfg.score_cap, int(round(total)))


def project_ceiling(
    metrics: SwingMetrics,
    profile: MotorProfile,
    cfg: CeilingConfig = DEFAULT_CONFIG.ceiling,
) -> CeilingProjection:
    """
    Current score, archetype-bounded ceiling and letter grade of a swing.

    The ceiling adds the archetype bonus and an efficiency bonus to the
    current score, then applies the cap to the sum.

    Args:
        metrics: Metric bundle of the swing.
        profile: Motor profile of the swing.
        cfg: Ceiling weights and bonuses.

    Returns:
        CeilingProjection with current <= ceiling <= cap.
    """
    current = current_score(metrics, cfg)
    bonus = cfg.archetype_bonus.get(profile, cfg.archetype_bonus[MotorProfile.UNKNOWN])
    efficiency = max(0.0, metrics.efficiency_rating)
    efficiency_bonus = int(round(cfg.efficiency_bonus_per_point * efficiency))
    ceiling = min(cfg.score_cap, current + bonus + efficiency_bonus)

    return CeilingProjection(
        current=current,
        ceiling=ceiling,
        grade=grade(current),
        motor_profile=profile,
    )


def analyze_swing(metrics: SwingMetrics, config: EngineConfig = DEFAULT_CONFIG) -> SwingAnalysis:
    """
    Classify a swing, project its ceiling and build coaching cues.

    Args:
        metrics: Metric bundle of the swing.
        config: Engine constants.

    Returns:
        SwingAnalysis for the swing.
    """
    profile = classify_motor_profile(metrics, config.profile_rules)
    projection = project_ceiling(metrics, profile, config.ceiling)
    recommendations = generate_recommendations(metrics, config.recommendations)

    logger.info(
        f"Swing analysis: {profile.value}, current {projection.current}, "
        f"ceiling {projection.ceiling} ({projection.grade.value})"
    )
    return SwingAnalysis(
        motor_profile=profile,
        projection=projection,
        recommendations=recommendations,
    )

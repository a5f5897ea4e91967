"""Coaching recommendations from single-swing threshold rules."""

import logging
from typing import Callable, List, NamedTuple

from swing_scoring.records.models import SwingMetrics
from swing_scoring.settings import DEFAULT_CONFIG, RecommendationThresholds

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Great swing mechanics! Continue current training regimen"


class Rule(NamedTuple):
    name: str
    triggered: Callable[[SwingMetrics, RecommendationThresholds], bool]
    message: str


# Evaluated in this order; the order is part of the output
RULES = (
    Rule(
        "tempo",
        lambda m, t: m.tempo_score < t.min_tempo_score,
        "Focus on timing drills to improve swing tempo",
    ),
    Rule(
        "attack_angle",
        lambda m, t: m.attack_angle_deg < t.min_attack_angle_deg,
        "Work on launch angle to optimize ball flight",
    ),
    Rule(
        "efficiency",
        lambda m, t: m.efficiency_rating < t.min_efficiency_rating,
        "Practice connection drills for better energy transfer",
    ),
    Rule(
        "time_to_contact",
        lambda m, t: m.time_to_contact_ms > t.max_time_to_contact_ms,
        "Quicken trigger mechanics to reduce time to contact",
    ),
    Rule(
        "hand_speed",
        lambda m, t: m.hand_speed_mph < t.min_hand_speed_mph,
        "Strengthen forearms for improved hand speed",
    ),
)


def generate_recommendations(
    metrics: SwingMetrics,
    thresholds: RecommendationThresholds = DEFAULT_CONFIG.recommendations,
) -> List[str]:
    """
    Ordered coaching cues for one swing.

    Args:
        metrics: Metric bundle of the swing.
        thresholds: Rule trigger points.

    Returns:
        Between one and max_recommendations messages, in rule order. When
        no rule triggers the list holds only FALLBACK_MESSAGE.
    """
    messages: List[str] = []
    for rule in RULES:
        if rule.triggered(metrics, thresholds) and rule.message not in messages:
            logger.debug(f"Recommendation rule triggered: {rule.name}")
            messages.append(rule.message)

    if not messages:
        return [FALLBACK_MESSAGE]
    return messages[:thresholds.max_recommendations]

"""Grade ladder lookups and coaching recommendations."""

from swing_scoring.grading.grades import (
    CONFIDENCE_LABELS,
    NO_DATA,
    color_tier,
    confidence_label,
    format_score,
    grade,
    grade_band,
    grade_label,
)
from swing_scoring.grading.recommendations import (
    FALLBACK_MESSAGE,
    RULES,
    generate_recommendations,
)

__all__ = [
    "CONFIDENCE_LABELS",
    "FALLBACK_MESSAGE",
    "NO_DATA",
    "RULES",
    "color_tier",
    "confidence_label",
    "format_score",
    "generate_recommendations",
    "grade",
    "grade_band",
    "grade_label",
]

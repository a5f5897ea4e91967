"""Letter grades, color tiers and confidence labels from the shared grade ladder."""

import math
from numbers import Real
from typing import Optional

from swing_scoring.records.models import ColorTier, ConfidenceLevel, Letter
from swing_scoring.settings import GRADE_LADDER, SCORE_MAX, SCORE_MIN, GradeBand

CONFIDENCE_LABELS = {
    ConfidenceLevel.HIGH: "High ✓",
    ConfidenceLevel.MEDIUM: "Medium ~",
    ConfidenceLevel.LOW: "Low ?",
}

NO_DATA = "no data"


def grade_band(score: float) -> GradeBand:
    """
    Ladder band for a score.

    Lower bounds are inclusive, so 70 grades as "A" and 69.9 as "B+".

    Args:
        score: Finite number in [0, 100].

    Returns:
        The matching GradeBand.

    Raises:
        ValueError: If the score is not a finite number in [0, 100].
    """
    if isinstance(score, bool) or not isinstance(score, Real):
        raise ValueError(f"Score must be a number, got {score!r}")
    if math.isnan(score) or not SCORE_MIN <= score <= SCORE_MAX:
        raise ValueError(f"Score must be between {SCORE_MIN:g} and {SCORE_MAX:g}, got {score}")

    for band in GRADE_LADDER:
        if score >= band.min_score:
            return band
    # The last band starts at SCORE_MIN, so every in-range score matched above
    raise ValueError(f"No grade band for score {score}")


def grade(score: float) -> Letter:
    """Letter grade of a 0-100 score."""
    return grade_band(score).letter


def grade_label(score: float) -> str:
    """Descriptive label ("Elite", "Strong", ...) of a 0-100 score."""
    return grade_band(score).label


def color_tier(score: float) -> ColorTier:
    """Display color tier of a 0-100 score."""
    return grade_band(score).tier


def confidence_label(level: ConfidenceLevel) -> str:
    """
    Display string of a prediction confidence level.

    Raises:
        ValueError: If level is not a ConfidenceLevel (or its integer value).
    """
    try:
        level = ConfidenceLevel(level)
    except ValueError:
        raise ValueError(f"Unknown confidence level: {level!r}")
    return CONFIDENCE_LABELS[level]


def format_score(score: Optional[float]) -> str:
    """Render an optional score as "72 (A, Strong)", or "no data" for None."""
    if score is None:
        return NO_DATA
    band = grade_band(score)
    return f"{round(score)} ({band.letter.value}, {band.label})"

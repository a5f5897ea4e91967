"""Aggregation, prediction and classification stages of the engine."""

from swing_scoring.analysis.ball_flight import (
    inputs_from_summary,
    predict_ball_flight,
    predict_from_summary,
)
from swing_scoring.analysis.biomechanics import (
    field_average,
    first_non_null,
    session_status,
    summarize_biomechanics,
)
from swing_scoring.analysis.motor_profile import (
    SwingAnalysis,
    analyze_swing,
    classify_motor_profile,
    current_score,
    project_ceiling,
)
from swing_scoring.analysis.session_stats import (
    ball_score,
    ball_score_breakdown,
    compute_session_stats,
    swing_points,
)

__all__ = [
    "SwingAnalysis",
    "analyze_swing",
    "ball_score",
    "ball_score_breakdown",
    "classify_motor_profile",
    "compute_session_stats",
    "current_score",
    "field_average",
    "first_non_null",
    "inputs_from_summary",
    "predict_ball_flight",
    "predict_from_summary",
    "project_ceiling",
    "session_status",
    "summarize_biomechanics",
    "swing_points",
]

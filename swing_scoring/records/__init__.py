"""Data types for swing records, session statistics and predictions."""

from swing_scoring.records.models import (
    Absent,
    BallFlightInputs,
    BallFlightPrediction,
    BiomechanicalSample,
    BiomechanicsSummary,
    CategoryScores,
    CeilingProjection,
    ColorTier,
    ConfidenceLevel,
    HitType,
    Letter,
    MotorProfile,
    Present,
    ProcessingStatus,
    Section,
    SessionStats,
    SwingMetrics,
    SwingOutcome,
    SwingRecord,
)

__all__ = [
    "Absent",
    "BallFlightInputs",
    "BallFlightPrediction",
    "BiomechanicalSample",
    "BiomechanicsSummary",
    "CategoryScores",
    "CeilingProjection",
    "ColorTier",
    "ConfidenceLevel",
    "HitType",
    "Letter",
    "MotorProfile",
    "Present",
    "ProcessingStatus",
    "Section",
    "SessionStats",
    "SwingMetrics",
    "SwingOutcome",
    "SwingRecord",
]

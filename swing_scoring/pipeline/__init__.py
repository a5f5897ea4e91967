"""Pipeline orchestration for the swing scoring engine."""

from swing_scoring.pipeline.orchestrator import (
    Category,
    CategoryGrade,
    FourBReport,
    SessionImport,
    SwingScoringPipeline,
)

__all__ = [
    "Category",
    "CategoryGrade",
    "FourBReport",
    "SessionImport",
    "SwingScoringPipeline",
]

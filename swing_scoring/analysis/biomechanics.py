"""Brain/Body/Bat category scores from biomechanical upload samples."""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from swing_scoring.exceptions import EmptyInputError
from swing_scoring.records.models import (
    BiomechanicalSample,
    BiomechanicsSummary,
    CategoryScores,
    MotorProfile,
    ProcessingStatus,
)
from swing_scoring.settings import DEFAULT_CONFIG, CategoryDriver, EngineConfig

logger = logging.getLogger(__name__)


def field_average(samples: Sequence[BiomechanicalSample], field_name: str) -> Optional[float]:
    """
    Mean of a numeric field over the samples that have it.

    Samples where the field is None are skipped, never counted as zero.

    Returns:
        The mean, or None when no sample carries the field.
    """
    values = [getattr(s, field_name) for s in samples]
    present = [v for v in values if v is not None]
    if not present:
        return None
    return float(np.mean(present))


def first_non_null(samples: Sequence[BiomechanicalSample], field_name: str) -> Optional[str]:
    """Value of the first sample, in upload order, that has the field set."""
    for sample in samples:
        value = getattr(sample, field_name)
        if value is not None and str(value).strip():
            return value
    return None


def rescale(value: float, floor: float, ceiling: float) -> float:
    """Linear map of floor..ceiling onto 0..100, clipped."""
    return float(np.clip((value - floor) / (ceiling - floor) * 100.0, 0.0, 100.0))


def category_score(average: Optional[float], driver: CategoryDriver) -> Optional[int]:
    if average is None:
        return None
    return int(round(rescale(average, driver.floor, driver.ceiling)))


def session_status(samples: Sequence[BiomechanicalSample]) -> ProcessingStatus:
    """
    Overall processing state of a batch of uploads.

    Any complete sample makes the batch complete; otherwise a failure
    wins over in-flight uploads. An empty batch is pending.
    """
    statuses = {s.processing_status for s in samples}
    if ProcessingStatus.COMPLETE in statuses:
        return ProcessingStatus.COMPLETE
    if ProcessingStatus.FAILED in statuses:
        return ProcessingStatus.FAILED
    if statuses & {ProcessingStatus.PENDING, ProcessingStatus.PROCESSING}:
        return ProcessingStatus.PROCESSING
    return ProcessingStatus.PENDING


def summarize_biomechanics(
    samples: Sequence[BiomechanicalSample],
    config: EngineConfig = DEFAULT_CONFIG,
) -> BiomechanicsSummary:
    """
    Reduce a batch of uploads to category scores and signals.

    Only complete samples are used; pending, processing and failed uploads
    are excluded entirely. Categorical signals take the first non-null
    value in upload order.

    Args:
        samples: Uploads in upload order.
        config: Engine constants.

    Returns:
        BiomechanicsSummary for the batch.

    Raises:
        EmptyInputError: If no sample is complete.
    """
    complete: List[BiomechanicalSample] = [s for s in samples if s.is_complete]
    excluded = len(samples) - len(complete)

    if not complete:
        raise EmptyInputError("no completed biomechanical uploads")
    if excluded:
        logger.info(f"Excluding {excluded} upload(s) that are not complete")

    averages: Dict[str, Optional[float]] = {
        name: field_average(complete, name)
        for name in BiomechanicalSample.NUMERIC_FIELDS
    }

    scores = {
        category: category_score(averages[driver.field_name], driver)
        for category, driver in config.biomechanics.drivers().items()
    }
    for category, score in scores.items():
        if score is None:
            logger.debug(f"No data for {category} category")

    summary = BiomechanicsSummary(
        scores=CategoryScores(**scores),
        field_averages=averages,
        consistency_grade=first_non_null(complete, "consistency_grade"),
        motor_profile=MotorProfile.parse(first_non_null(complete, "motor_profile")),
        leak_detected=first_non_null(complete, "leak_detected"),
        priority_drill=first_non_null(complete, "priority_drill"),
        weakest_link=first_non_null(complete, "weakest_link"),
        samples_used=len(complete),
        samples_excluded=excluded,
    )

    logger.info(
        f"Biomechanics summary from {len(complete)} upload(s): "
        f"brain={scores['brain']}, body={scores['body']}, bat={scores['bat']}"
    )
    return summary

"""Session statistics and Ball Score for batted-ball swing records."""

import logging
from collections import Counter
from dataclasses import replace
from typing import Dict, List, Optional, Sequence

import numpy as np

from swing_scoring.exceptions import EmptyInputError
from swing_scoring.records.models import HitType, SessionStats, SwingRecord
from swing_scoring.settings import (
    DEFAULT_CONFIG,
    BallScoreWeights,
    EngineConfig,
    PointsTable,
    SessionThresholds,
)

logger = logging.getLogger(__name__)


def _in_window(value: Optional[float], window) -> bool:
    return value is not None and window[0] <= value <= window[1]


def _mean(values: List[float], precision: int) -> Optional[float]:
    if not values:
        return None
    return round(float(np.mean(values)), precision)


def _percent(count: int, total: int, precision: int) -> float:
    return round(count / total * 100, precision)


def swing_points(record: SwingRecord, table: PointsTable = DEFAULT_CONFIG.points) -> int:
    """
    Quality Hit Game points for one swing.

    Misses and fouls score flat values. Balls in play earn an exit
    velocity tier, a launch angle adjustment and a result bonus; a line
    drive without a hit result earns the smaller line drive bonus.

    Args:
        record: Swing to score.
        table: Point weights to apply.

    Returns:
        Points for the swing (may be negative).
    """
    if record.is_miss:
        return table.miss
    if record.is_foul:
        return table.foul

    points = table.velo_floor
    ev = record.exit_velocity
    if ev is not None:
        for floor, tier_points in table.velo_tiers:
            if ev >= floor:
                points = tier_points
                break

    la = record.launch_angle
    if _in_window(la, table.optimal_la):
        points += table.optimal_la_points
    elif _in_window(la, table.acceptable_la):
        points += table.acceptable_la_points
    elif la is not None and la < 0:
        points += table.negative_la_points

    result = record.result.upper()
    for code, bonus in table.result_bonus:
        if code in result:
            points += bonus
            break
    else:
        if record.hit_type is HitType.LINE_DRIVE:
            points += table.line_drive_bonus

    return points


def ball_score_breakdown(
    stats: SessionStats,
    weights: BallScoreWeights = DEFAULT_CONFIG.ball_score,
) -> Dict[str, float]:
    """
    Weighted contribution of each Ball Score component.

    Components come from the rounded values shown in the report, so the
    sum of the returned contributions (rounded) is the session ball_score.

    Args:
        stats: Session statistics.
        weights: Component weights.

    Returns:
        Dictionary of component name -> weighted contribution (0-100 scale).
    """
    avg_ev = stats.avg_exit_velocity
    if avg_ev is None:
        ev_component = 0.0
    else:
        span = weights.ev_ceiling - weights.ev_floor
        ev_component = (avg_ev - weights.ev_floor) / span * 100

    components = {
        "contact_rate": stats.contact_rate,
        "quality_hit_pct": stats.quality_hit_pct,
        "barrel_pct": stats.barrel_pct,
        "exit_velocity": ev_component,
    }
    shares = weights.weights()
    return {
        name: float(np.clip(value, 0.0, 100.0)) * shares[name]
        for name, value in components.items()
    }


def ball_score(stats: SessionStats, weights: BallScoreWeights = DEFAULT_CONFIG.ball_score) -> int:
    """Composite 0-100 Ball Score of a session."""
    total = sum(ball_score_breakdown(stats, weights).values())
    return int(np.clip(round(total), 0, 100))


def compute_session_stats(
    records: Sequence[SwingRecord],
    config: EngineConfig = DEFAULT_CONFIG,
) -> SessionStats:
    """
    Reduce a sequence of swing records to session statistics.

    Records are sorted by swing number before any accumulation, so the
    result does not depend on the order files were merged in.

    Args:
        records: Swings from one import.
        config: Engine constants.

    Returns:
        SessionStats for the batch.

    Raises:
        EmptyInputError: If there are no swings.
    """
    if not records:
        raise EmptyInputError("no valid swing data: check column headers")

    thresholds: SessionThresholds = config.session
    precision = thresholds.display_precision
    window = (thresholds.optimal_la_min, thresholds.optimal_la_max)

    swings = sorted(records, key=lambda r: r.swing_number)
    total = len(swings)
    misses = sum(1 for r in swings if r.is_miss)
    fouls = sum(1 for r in swings if r.is_foul)
    in_play = [r for r in swings if r.in_play]

    velos = [r.exit_velocity for r in in_play if r.exit_velocity is not None]
    angles = [r.launch_angle for r in in_play if r.launch_angle is not None]
    distances = [r.distance for r in in_play if r.distance is not None and r.distance > 0]
    v90, v95, v100 = thresholds.velo_buckets

    quality = [
        r for r in in_play
        if r.exit_velocity is not None
        and r.exit_velocity >= thresholds.quality_min_ev
        and _in_window(r.launch_angle, window)
    ]
    # Barrels are filtered from the quality set so they can never outnumber it
    barrels = [r for r in quality if r.exit_velocity >= thresholds.barrel_min_ev]

    total_points = sum(swing_points(r, config.points) for r in swings)

    results = Counter(r.result or r.outcome.value for r in swings)
    hit_types = Counter(r.hit_type.value for r in in_play)

    stats = SessionStats(
        total_swings=total,
        misses=misses,
        fouls=fouls,
        balls_in_play=len(in_play),
        contact_rate=_percent(len(in_play), total, precision),
        avg_exit_velocity=_mean(velos, precision),
        max_exit_velocity=max(velos) if velos else None,
        min_exit_velocity=min(velos) if velos else None,
        velo_90_plus=sum(1 for v in velos if v >= v90),
        velo_95_plus=sum(1 for v in velos if v >= v95),
        velo_100_plus=sum(1 for v in velos if v >= v100),
        avg_launch_angle=_mean(angles, precision),
        optimal_la_count=sum(1 for a in angles if _in_window(a, window)),
        ground_ball_count=sum(1 for a in angles if a < thresholds.ground_ball_max_la),
        fly_ball_count=sum(1 for a in angles if a > thresholds.fly_ball_min_la),
        max_distance=round(max(distances)) if distances else None,
        avg_distance=_mean(distances, 0),
        quality_hits=len(quality),
        barrel_hits=len(barrels),
        quality_hit_pct=_percent(len(quality), total, precision),
        barrel_pct=_percent(len(barrels), total, precision),
        total_points=total_points,
        points_per_swing=round(total_points / total, precision),
        ball_score=0,
        results_breakdown=dict(results),
        hit_types_breakdown=dict(hit_types),
        points_table_version=config.points.version,
    )
    score = ball_score(stats, config.ball_score)
    stats = replace(stats, ball_score=score)

    logger.info(
        f"Session stats: {total} swings, contact {stats.contact_rate}%, "
        f"ball score {score}"
    )
    return stats

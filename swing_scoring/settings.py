"""
Scoring constants for the swing engine.

Every threshold, weight table and grade ladder lives here so the same score
always yields the same grade in every report. Tables are frozen; overrides
from config/config.yaml produce new instances through load_config().
"""

import logging
import math
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from swing_scoring.records.models import ColorTier, HitType, Letter, MotorProfile

logger = logging.getLogger(__name__)


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


# Batted-ball type bands for rows without a vendor subcode.
# Each entry is (upper bound exclusive, type); angles past the last bound are pop-ups.
HIT_TYPE_BANDS: Tuple[Tuple[float, HitType], ...] = (
    (10.0, HitType.GROUND_BALL),
    (25.0, HitType.LINE_DRIVE),
    (50.0, HitType.FLY_BALL),
)


# ==================== Grade ladder ====================


@dataclass(frozen=True)
class GradeBand:
    """One rung of the grade ladder; a score belongs to the first band it reaches."""
    min_score: float
    letter: Letter
    label: str
    tier: ColorTier


# Lower bounds are inclusive: 70 is "Strong", 69.9 is "Above Average".
GRADE_LADDER: Tuple[GradeBand, ...] = (
    GradeBand(80, Letter.A_PLUS, "Elite", ColorTier.GREEN),
    GradeBand(70, Letter.A, "Strong", ColorTier.GREEN),
    GradeBand(60, Letter.B_PLUS, "Above Average", ColorTier.TEAL),
    GradeBand(50, Letter.B, "Average", ColorTier.YELLOW),
    GradeBand(40, Letter.C_PLUS, "Below Average", ColorTier.ORANGE),
    GradeBand(0, Letter.C, "Developing", ColorTier.RED),
)

SCORE_MIN = 0.0
SCORE_MAX = 100.0


# ==================== Session statistics ====================


@dataclass(frozen=True)
class SessionThresholds:
    """
    Batted-ball thresholds for the session aggregator.

    Attributes:
        optimal_la_min: Lower bound of the optimal launch window (inclusive).
        optimal_la_max: Upper bound of the optimal launch window (inclusive).
        ground_ball_max_la: Launch angles below this are ground balls.
        fly_ball_min_la: Launch angles above this are fly balls.
        velo_buckets: Inclusive exit-velocity bucket floors in mph.
        quality_min_ev: Minimum exit velocity of a quality hit.
        barrel_min_ev: Minimum exit velocity of a barrel (a quality hit subset).
        display_precision: Decimal places for rates and averages.
    """
    optimal_la_min: float = 10.0
    optimal_la_max: float = 25.0
    ground_ball_max_la: float = 10.0
    fly_ball_min_la: float = 25.0
    velo_buckets: Tuple[float, float, float] = (90.0, 95.0, 100.0)
    quality_min_ev: float = 85.0
    barrel_min_ev: float = 95.0
    display_precision: int = 1


@dataclass(frozen=True)
class PointsTable:
    """
    Quality Hit Game point weights, versioned.

    velo_tiers and result_bonus are checked in order; the first match wins.
    """
    version: str = "qhg-v1"
    miss: int = -5
    foul: int = 0
    velo_tiers: Tuple[Tuple[float, int], ...] = (
        (100.0, 20),
        (95.0, 15),
        (90.0, 10),
        (85.0, 5),
    )
    velo_floor: int = 2
    optimal_la: Tuple[float, float] = (10.0, 25.0)
    optimal_la_points: int = 10
    acceptable_la: Tuple[float, float] = (8.0, 30.0)
    acceptable_la_points: int = 5
    negative_la_points: int = -5
    result_bonus: Tuple[Tuple[str, int], ...] = (
        ("HR", 25),
        ("3B", 20),
        ("2B", 15),
        ("1B", 10),
    )
    line_drive_bonus: int = 5


@dataclass(frozen=True)
class BallScoreWeights:
    """
    Weighted shares of the composite Ball Score.

    Each component is clipped to 0-100 before weighting; the weights sum to 1.
    Average exit velocity is rescaled linearly from ev_floor (0) to
    ev_ceiling (100).
    """
    contact_rate: float = 0.30
    quality_hit_pct: float = 0.25
    barrel_pct: float = 0.20
    exit_velocity: float = 0.25
    ev_floor: float = 60.0
    ev_ceiling: float = 105.0

    def weights(self) -> Dict[str, float]:
        return {
            "contact_rate": self.contact_rate,
            "quality_hit_pct": self.quality_hit_pct,
            "barrel_pct": self.barrel_pct,
            "exit_velocity": self.exit_velocity,
        }


# ==================== Biomechanics ====================


@dataclass(frozen=True)
class CategoryDriver:
    """Sample field driving a 4B category and its 0/100 anchor values."""
    field_name: str
    floor: float
    ceiling: float


@dataclass(frozen=True)
class BiomechanicsConfig:
    brain: CategoryDriver = CategoryDriver("transfer_efficiency", 0.0, 100.0)
    body: CategoryDriver = CategoryDriver("pelvis_velocity", 300.0, 800.0)
    bat: CategoryDriver = CategoryDriver("bat_ke", 40.0, 220.0)

    def drivers(self) -> Dict[str, CategoryDriver]:
        return {"brain": self.brain, "body": self.body, "bat": self.bat}


# ==================== Ball flight ====================


@dataclass(frozen=True)
class BallFlightConfig:
    """
    Coefficients of the ball flight regression surrogate.

    population_defaults substitute for missing inputs so partial data does
    not collapse a prediction toward zero. Velocities are MLB averages.
    """
    population_defaults: Mapping[str, float] = field(default_factory=lambda: _frozen({
        "bat_ke": 120.0,               # joules
        "transfer_efficiency": 70.0,   # percent
        "pelvis_velocity": 639.8,      # deg/s
        "torso_velocity": 803.9,       # deg/s
        "x_factor": 40.7,              # degrees
        "brain_score": 50.0,
        "body_score": 50.0,
    }))

    ev_intercept: float = 40.0
    ev_per_joule: float = 0.25
    ev_per_efficiency_point: float = 0.20
    ev_min: float = 40.0
    ev_max: float = 115.0

    launch_base: Mapping[MotorProfile, float] = field(default_factory=lambda: _frozen({
        MotorProfile.SPINNER: 17.0,
        MotorProfile.WHIPPER: 15.0,
        MotorProfile.SLINGSHOTTER: 21.0,
        MotorProfile.TITAN: 24.0,
        MotorProfile.UNKNOWN: 18.0,
    }))
    x_factor_reference: float = 40.7
    x_factor_per_degree: float = 0.1
    x_factor_max_adjust: float = 4.0
    torso_pelvis_reference: float = 1.26
    torso_pelvis_gain: float = 20.0
    torso_pelvis_max_adjust: float = 5.0
    la_min: float = -10.0
    la_max: float = 40.0

    kp_brain: float = 0.30
    kp_body: float = 0.30
    kp_bat_ke: float = 0.25
    kp_transfer_efficiency: float = 0.15
    kp_bat_ke_floor: float = 40.0
    kp_bat_ke_ceiling: float = 220.0

    def kinetic_weights(self) -> Dict[str, float]:
        return {
            "brain_score": self.kp_brain,
            "body_score": self.kp_body,
            "bat_ke": self.kp_bat_ke,
            "transfer_efficiency": self.kp_transfer_efficiency,
        }


# ==================== Ceiling projection ====================


@dataclass(frozen=True)
class CeilingConfig:
    """
    Weights of the current development score and archetype ceiling bonuses.

    Attributes:
        bat_speed_weight: Share of bat speed (normalized by bat_speed_max).
        tempo_weight: Share of tempo score (normalized by tempo_max).
        efficiency_weight: Share of efficiency rating (normalized by efficiency_max).
        contact_time_weight: Share of the inverse time-to-contact term, which is
            1 at contact_time_fast_ms and 0 at contact_time_slow_ms.
        archetype_bonus: Ceiling bonus per motor profile.
        efficiency_bonus_per_point: Ceiling bonus per efficiency rating point.
        score_cap: Hard cap applied after summing.
    """
    bat_speed_weight: float = 0.30
    tempo_weight: float = 0.25
    efficiency_weight: float = 0.25
    contact_time_weight: float = 0.20
    bat_speed_max: float = 100.0
    tempo_max: float = 100.0
    efficiency_max: float = 10.0
    contact_time_fast_ms: float = 100.0
    contact_time_slow_ms: float = 250.0
    archetype_bonus: Mapping[MotorProfile, int] = field(default_factory=lambda: _frozen({
        MotorProfile.TITAN: 15,
        MotorProfile.SLINGSHOTTER: 12,
        MotorProfile.WHIPPER: 10,
        MotorProfile.SPINNER: 8,
        MotorProfile.UNKNOWN: 5,
    }))
    efficiency_bonus_per_point: float = 2.0
    score_cap: int = 99

    def weights(self) -> Dict[str, float]:
        return {
            "bat_speed": self.bat_speed_weight,
            "tempo": self.tempo_weight,
            "efficiency": self.efficiency_weight,
            "contact_time": self.contact_time_weight,
        }


@dataclass(frozen=True)
class ProfileRules:
    """Thresholds of the ordered motor-profile classification rules."""
    whipper_min_tempo: float = 75.0
    whipper_max_contact_ms: float = 150.0
    slingshotter_min_bat_speed: float = 75.0
    slingshotter_min_efficiency: float = 7.0
    spinner_min_tempo: float = 60.0
    titan_min_bat_speed: float = 80.0


@dataclass(frozen=True)
class RecommendationThresholds:
    """Trigger points of the coaching recommendation rules."""
    min_tempo_score: float = 60.0
    min_attack_angle_deg: float = 5.0
    min_efficiency_rating: float = 6.0
    max_time_to_contact_ms: float = 180.0
    min_hand_speed_mph: float = 25.0
    max_recommendations: int = 3


# ==================== Engine configuration ====================


@dataclass(frozen=True)
class EngineConfig:
    """All constant tables used by the engine, bundled for injection."""
    session: SessionThresholds = field(default_factory=SessionThresholds)
    points: PointsTable = field(default_factory=PointsTable)
    ball_score: BallScoreWeights = field(default_factory=BallScoreWeights)
    biomechanics: BiomechanicsConfig = field(default_factory=BiomechanicsConfig)
    ball_flight: BallFlightConfig = field(default_factory=BallFlightConfig)
    ceiling: CeilingConfig = field(default_factory=CeilingConfig)
    profile_rules: ProfileRules = field(default_factory=ProfileRules)
    recommendations: RecommendationThresholds = field(default_factory=RecommendationThresholds)


DEFAULT_CONFIG = EngineConfig()


def _coerce(current: Any, value: Any) -> Any:
    """Convert a YAML value to the shape of the field it replaces."""
    if isinstance(current, CategoryDriver):
        return CategoryDriver(
            field_name=value.get("field_name", current.field_name),
            floor=float(value.get("floor", current.floor)),
            ceiling=float(value.get("ceiling", current.ceiling)),
        )
    if isinstance(current, Mapping):
        merged = dict(current)
        for key, item in value.items():
            if current and isinstance(next(iter(current)), MotorProfile):
                key = MotorProfile.parse(key)
            merged[key] = item
        return _frozen(merged)
    if isinstance(current, tuple):
        return tuple(tuple(v) if isinstance(v, list) else v for v in value)
    if isinstance(current, bool):
        return bool(value)
    if isinstance(current, int):
        return int(value)
    if isinstance(current, float):
        return float(value)
    return value


def _apply_overrides(table: Any, overrides: Dict[str, Any], section: str) -> Any:
    known = {f.name: getattr(table, f.name) for f in fields(table)}
    changes = {}
    for key, value in overrides.items():
        if key not in known:
            logger.warning(f"Ignoring unknown config key: {section}.{key}")
            continue
        changes[key] = _coerce(known[key], value)
    return replace(table, **changes) if changes else table


def config_from_dict(data: Optional[Dict[str, Any]], validate: bool = True) -> EngineConfig:
    """
    Build an EngineConfig from a nested dictionary of overrides.

    Args:
        data: Mapping of section name (e.g. "session", "ball_score") to
            field overrides. Missing sections keep their defaults.
        validate: Reject overrides that fail validate_weights().

    Returns:
        EngineConfig with the overrides applied.

    Raises:
        ValueError: If validate is set and the overrides are invalid.
    """
    config = DEFAULT_CONFIG
    if not data:
        return config

    sections = {}
    for f in fields(config):
        overrides = data.get(f.name)
        if overrides:
            sections[f.name] = _apply_overrides(getattr(config, f.name), overrides, f.name)

    for key in data:
        if key not in sections and key not in {f.name for f in fields(config)}:
            logger.warning(f"Ignoring unknown config section: {key}")

    config = replace(config, **sections)
    if validate:
        errors = validate_weights(config)
        if errors:
            raise ValueError("Invalid engine configuration: " + "; ".join(errors))
    return config


def load_config(
    config_path: Union[str, Path, None] = "config/config.yaml",
    validate: bool = True,
) -> EngineConfig:
    """
    Load engine constants from a YAML file.

    The engine section of the file is read (the "engine" key when present,
    otherwise the whole document). A missing file yields the defaults.

    Args:
        config_path: Path to the YAML configuration file.
        validate: Reject overrides that fail validate_weights().

    Returns:
        EngineConfig instance.

    Raises:
        ValueError: If validate is set and the overrides are invalid.
    """
    if config_path is None:
        return DEFAULT_CONFIG

    config_file = Path(config_path)
    if not config_file.exists():
        logger.debug(f"No config file at {config_file}, using defaults")
        return DEFAULT_CONFIG

    with open(config_file, encoding="utf-8") as f:
        document = yaml.safe_load(f) or {}

    engine_section = document.get("engine", document)
    config = config_from_dict(engine_section, validate=validate)
    logger.info(f"Loaded engine configuration from {config_file}")
    return config


def validate_weights(config: EngineConfig = DEFAULT_CONFIG) -> List[str]:
    """
    Check weight tables and the bounds that keep scores consistent.

    Every weight table must sum to 1.0 with no negative entries, barrels must
    be stricter than quality hits, ceiling bonuses must not be negative, the
    score cap must stay on the 0-100 scale and at least one recommendation
    must be returned.

    Args:
        config: Configuration to check.

    Returns:
        List of problems found; empty when the configuration is valid.
    """
    tables = {
        "ball_score": config.ball_score.weights(),
        "ball_flight.kinetic_potential": config.ball_flight.kinetic_weights(),
        "ceiling": config.ceiling.weights(),
    }

    errors = []
    for name, weights in tables.items():
        total = sum(weights.values())
        if not math.isclose(total, 1.0, abs_tol=0.01):
            errors.append(f"{name} weights sum to {total:.3f}, should be 1.00")
        if any(v < 0 for v in weights.values()):
            errors.append(f"Negative {name} weights found")

    if config.session.barrel_min_ev < config.session.quality_min_ev:
        errors.append("barrel_min_ev is below quality_min_ev")

    ceiling = config.ceiling
    if any(bonus < 0 for bonus in ceiling.archetype_bonus.values()):
        errors.append("Negative ceiling.archetype_bonus found")
    if ceiling.efficiency_bonus_per_point < 0:
        errors.append("ceiling.efficiency_bonus_per_point is negative")
    if not 0 <= ceiling.score_cap <= SCORE_MAX:
        errors.append(f"ceiling.score_cap must be between 0 and {SCORE_MAX:g}")

    if config.recommendations.max_recommendations < 1:
        errors.append("recommendations.max_recommendations must be at least 1")

    return errors

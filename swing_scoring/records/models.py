"""Data types shared by every stage of the swing scoring engine."""

import enum
import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional, Tuple, Union


def _finite(name: str, value: Any) -> float:
    """Convert a metric to float, rejecting NaN and infinities."""
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"{name} must be a finite number, got {value!r}")
    return number


def _serialize(value: Any) -> Any:
    """Convert engine values into plain JSON-friendly structures."""
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, dict):
        return {str(_serialize(k)): _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


class _RecordMixin:
    """Shared dictionary conversion for the dataclasses below."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format for the report/display layer."""
        return {f.name: _serialize(getattr(self, f.name)) for f in fields(self)}


# ==================== Enumerations ====================


class SwingOutcome(enum.Enum):
    """Top-level result of a swing."""
    MISS = "miss"
    FOUL = "foul"
    IN_PLAY = "in_play"


class HitType(enum.Enum):
    """Batted-ball type subcode."""
    GROUND_BALL = "GB"
    LINE_DRIVE = "LD"
    FLY_BALL = "FB"
    POP_UP = "PU"
    UNKNOWN = "UNK"

    @classmethod
    def parse(cls, text: Optional[str]) -> Optional["HitType"]:
        """Map a vendor hit-type cell onto a subcode, or None if unrecognized."""
        if not text:
            return None
        code = text.strip().upper()
        for member in cls:
            if member.value == code:
                return member
        return None


class MotorProfile(enum.Enum):
    """Dominant movement-pattern archetype of a hitter."""
    SPINNER = "SPINNER"
    WHIPPER = "WHIPPER"
    SLINGSHOTTER = "SLINGSHOTTER"
    TITAN = "TITAN"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, text: Optional[Union[str, "MotorProfile"]]) -> "MotorProfile":
        """
        Parse a free-text profile label.

        Matching is case-insensitive and tolerates decorated labels such as
        "Slingshotter (high confidence)". Anything unrecognized is UNKNOWN.
        """
        if isinstance(text, MotorProfile):
            return text
        if not text:
            return cls.UNKNOWN
        lowered = str(text).strip().lower()
        for member in cls:
            if member is not cls.UNKNOWN and member.value.lower() in lowered:
                return member
        return cls.UNKNOWN


class ProcessingStatus(enum.Enum):
    """Processing state of a biomechanical upload."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"


class ConfidenceLevel(enum.IntEnum):
    """Ordinal confidence of a ball-flight prediction."""
    LOW = 0
    MEDIUM = 1
    HIGH = 2


class Letter(enum.Enum):
    """Letter grades of the shared grade ladder."""
    A_PLUS = "A+"
    A = "A"
    B_PLUS = "B+"
    B = "B"
    C_PLUS = "C+"
    C = "C"


class ColorTier(enum.Enum):
    """Display color tiers; values are the hex colors used by every report."""
    GREEN = "#4ecdc4"
    TEAL = "#7fd8be"
    YELLOW = "#ffa500"
    ORANGE = "#ff8c42"
    RED = "#ff6b6b"


# ==================== Batted-ball data ====================


@dataclass(frozen=True)
class SwingRecord(_RecordMixin):
    """
    A single swing from a vendor batted-ball export.

    Attributes:
        swing_number: 1-based swing number (vendor column or parse order).
        outcome: Miss, foul or ball in play.
        result: Raw vendor result subcode (e.g. "1B", "HR", "Out").
        hit_type: Batted-ball type subcode.
        exit_velocity: Exit velocity in mph, None without contact.
        launch_angle: Launch angle in degrees, None without contact.
        distance: Distance in feet, None without contact.
        source: Name of the file the swing came from.
    """
    swing_number: int
    outcome: SwingOutcome
    result: str = ""
    hit_type: HitType = HitType.UNKNOWN
    exit_velocity: Optional[float] = None
    launch_angle: Optional[float] = None
    distance: Optional[float] = None
    source: Optional[str] = None

    @property
    def result_code(self) -> Tuple[SwingOutcome, str, HitType]:
        """Categorical result: outcome plus the vendor and hit-type subcodes."""
        return (self.outcome, self.result, self.hit_type)

    @property
    def is_miss(self) -> bool:
        return self.outcome is SwingOutcome.MISS

    @property
    def is_foul(self) -> bool:
        return self.outcome is SwingOutcome.FOUL

    @property
    def in_play(self) -> bool:
        return self.outcome is SwingOutcome.IN_PLAY


@dataclass(frozen=True)
class SessionStats(_RecordMixin):
    """
    Session-level statistics for one batch of swing records.

    Rates are percentages on a 0-100 scale with total swings as the
    denominator. Computed once per import and never mutated.
    """
    total_swings: int
    misses: int
    fouls: int
    balls_in_play: int
    contact_rate: float

    avg_exit_velocity: Optional[float]
    max_exit_velocity: Optional[float]
    min_exit_velocity: Optional[float]
    velo_90_plus: int
    velo_95_plus: int
    velo_100_plus: int

    avg_launch_angle: Optional[float]
    optimal_la_count: int
    ground_ball_count: int
    fly_ball_count: int

    max_distance: Optional[float]
    avg_distance: Optional[float]

    quality_hits: int
    barrel_hits: int
    quality_hit_pct: float
    barrel_pct: float

    total_points: int
    points_per_swing: float
    ball_score: int

    results_breakdown: Dict[str, int] = field(default_factory=dict)
    hit_types_breakdown: Dict[str, int] = field(default_factory=dict)
    points_table_version: str = ""


# ==================== Biomechanical data ====================


@dataclass(frozen=True)
class BiomechanicalSample(_RecordMixin):
    """
    Body-derived measurements from one video/sensor upload.

    Any field may be None when the sensor or video did not cover it.
    """
    upload_id: str
    processing_status: ProcessingStatus = ProcessingStatus.COMPLETE
    pelvis_velocity: Optional[float] = None
    torso_velocity: Optional[float] = None
    x_factor: Optional[float] = None
    bat_ke: Optional[float] = None
    transfer_efficiency: Optional[float] = None
    ground_flow_score: Optional[float] = None
    core_flow_score: Optional[float] = None
    upper_flow_score: Optional[float] = None
    consistency_grade: Optional[str] = None
    motor_profile: Optional[str] = None
    leak_detected: Optional[str] = None
    priority_drill: Optional[str] = None
    weakest_link: Optional[str] = None

    NUMERIC_FIELDS = (
        "pelvis_velocity",
        "torso_velocity",
        "x_factor",
        "bat_ke",
        "transfer_efficiency",
        "ground_flow_score",
        "core_flow_score",
        "upper_flow_score",
    )
    CATEGORICAL_FIELDS = (
        "consistency_grade",
        "motor_profile",
        "leak_detected",
        "priority_drill",
        "weakest_link",
    )

    def __post_init__(self):
        for name in self.NUMERIC_FIELDS:
            value = getattr(self, name)
            if value is not None:
                _finite(name, value)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BiomechanicalSample":
        """
        Build a sample from an upload row, tolerating missing keys.

        Args:
            data: Mapping with upload fields; unknown keys are ignored.

        Returns:
            BiomechanicalSample instance.
        """
        status = data.get("processing_status") or ProcessingStatus.COMPLETE
        if not isinstance(status, ProcessingStatus):
            status = ProcessingStatus(str(status).strip().lower())
        kwargs: Dict[str, Any] = {
            "upload_id": str(data.get("upload_id", data.get("id", ""))),
            "processing_status": status,
        }
        for name in cls.NUMERIC_FIELDS:
            value = data.get(name)
            kwargs[name] = None if value is None else _finite(name, value)
        for name in cls.CATEGORICAL_FIELDS:
            value = data.get(name)
            kwargs[name] = None if value is None else str(value)
        return cls(**kwargs)

    @property
    def is_complete(self) -> bool:
        return self.processing_status is ProcessingStatus.COMPLETE


@dataclass(frozen=True)
class CategoryScores(_RecordMixin):
    """Body-derived 4B category scores; None means "no data", never zero."""
    brain: Optional[int] = None
    body: Optional[int] = None
    bat: Optional[int] = None


@dataclass(frozen=True)
class BiomechanicsSummary(_RecordMixin):
    """
    Session-level reduction of completed biomechanical samples.

    Attributes:
        scores: Brain/Body/Bat category scores.
        field_averages: Null-skipping mean of each numeric sample field.
        consistency_grade: First non-null value by upload order.
        motor_profile: First non-null profile by upload order, parsed.
        leak_detected: First non-null value by upload order.
        priority_drill: First non-null value by upload order.
        weakest_link: First non-null value by upload order.
        samples_used: Number of completed samples aggregated.
        samples_excluded: Number of pending/processing/failed samples dropped.
    """
    scores: CategoryScores
    field_averages: Dict[str, Optional[float]]
    consistency_grade: Optional[str] = None
    motor_profile: MotorProfile = MotorProfile.UNKNOWN
    leak_detected: Optional[str] = None
    priority_drill: Optional[str] = None
    weakest_link: Optional[str] = None
    samples_used: int = 0
    samples_excluded: int = 0


# ==================== Predictions ====================


@dataclass(frozen=True)
class BallFlightInputs(_RecordMixin):
    """Body-derived inputs for the ball flight predictor; every field optional."""
    bat_ke: Optional[float] = None
    pelvis_velocity: Optional[float] = None
    torso_velocity: Optional[float] = None
    transfer_efficiency: Optional[float] = None
    x_factor: Optional[float] = None
    brain_score: Optional[float] = None
    body_score: Optional[float] = None
    motor_profile: MotorProfile = MotorProfile.UNKNOWN


@dataclass(frozen=True)
class BallFlightPrediction(_RecordMixin):
    """
    Predicted ball-flight outcome derived from body mechanics alone.

    Always labeled as a prediction; never stored as ground truth.
    """
    exit_velocity: float
    launch_angle: float
    kinetic_potential: int
    confidence: ConfidenceLevel
    inputs_present: int
    is_prediction: bool = True

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["confidence"] = self.confidence.name.lower()
        return data


@dataclass(frozen=True)
class SwingMetrics(_RecordMixin):
    """
    Metric bundle for a single captured swing.

    Attributes:
        bat_speed_mph: Peak barrel speed.
        attack_angle_deg: Attack angle at contact.
        hand_speed_mph: Peak hand speed.
        time_to_contact_ms: Trigger-to-impact time.
        tempo_score: Tempo score on a 0-100 scale.
        efficiency_rating: Efficiency rating on a 0-10 scale.
        peak_acceleration_g: Peak sensor acceleration.
        motor_profile_prediction: Sensor-side profile guess, if any.
    """
    bat_speed_mph: float
    attack_angle_deg: float
    hand_speed_mph: float
    time_to_contact_ms: float
    tempo_score: float
    efficiency_rating: float
    peak_acceleration_g: Optional[float] = None
    motor_profile_prediction: Optional[MotorProfile] = None

    METRIC_FIELDS = (
        "bat_speed_mph",
        "attack_angle_deg",
        "hand_speed_mph",
        "time_to_contact_ms",
        "tempo_score",
        "efficiency_rating",
        "peak_acceleration_g",
    )

    def __post_init__(self):
        for name in self.METRIC_FIELDS:
            value = getattr(self, name)
            if value is not None:
                _finite(name, value)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SwingMetrics":
        """Build a metric bundle from a captured-swing row."""
        peak = data.get("peak_acceleration_g")
        prediction = data.get("motor_profile_prediction")
        return cls(
            bat_speed_mph=float(data["bat_speed_mph"]),
            attack_angle_deg=float(data["attack_angle_deg"]),
            hand_speed_mph=float(data["hand_speed_mph"]),
            time_to_contact_ms=float(data["time_to_contact_ms"]),
            tempo_score=float(data["tempo_score"]),
            efficiency_rating=float(data["efficiency_rating"]),
            peak_acceleration_g=None if peak is None else float(peak),
            motor_profile_prediction=None if prediction is None else MotorProfile.parse(prediction),
        )


@dataclass(frozen=True)
class CeilingProjection(_RecordMixin):
    """Current development score, archetype-bounded ceiling and letter grade."""
    current: int
    ceiling: int
    grade: Letter
    motor_profile: MotorProfile


# ==================== Report sections ====================


@dataclass(frozen=True)
class Present(_RecordMixin):
    """A report section that has data."""
    data: Any

    @property
    def present(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {"present": True, "data": _serialize(self.data)}


@dataclass(frozen=True)
class Absent(_RecordMixin):
    """A report section with nothing to show."""
    reason: str = "no data"

    @property
    def present(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {"present": False, "reason": self.reason}


Section = Union[Present, Absent]

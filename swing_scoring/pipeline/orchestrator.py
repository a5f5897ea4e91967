"""Pipeline orchestrator for end-to-end 4B scoring."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from swing_scoring.analysis.ball_flight import predict_from_summary
from swing_scoring.analysis.biomechanics import session_status, summarize_biomechanics
from swing_scoring.analysis.motor_profile import SwingAnalysis, analyze_swing
from swing_scoring.analysis.session_stats import ball_score_breakdown, compute_session_stats
from swing_scoring.exceptions import EmptyInputError, PartialParseWarning
from swing_scoring.grading.grades import confidence_label, grade_band
from swing_scoring.ingestion.csv_parser import ParseResult, Source, SwingCSVParser
from swing_scoring.records.models import (
    Absent,
    BallFlightPrediction,
    BiomechanicalSample,
    BiomechanicsSummary,
    Present,
    ProcessingStatus,
    Section,
    SessionStats,
    SwingMetrics,
    SwingRecord,
)
from swing_scoring.settings import DEFAULT_CONFIG, EngineConfig, load_config
from swing_scoring.utils.logging_config import LoggerMixin, get_logger

logger = get_logger(__name__)


class Category(Enum):
    """The four coaching categories of a 4B report."""
    BRAIN = "brain"
    BODY = "body"
    BAT = "bat"
    BALL = "ball"


@dataclass(frozen=True)
class CategoryGrade:
    """
    A graded 4B category score.

    Attributes:
        score: 0-100 score.
        letter: Letter grade from the shared ladder.
        label: Grade label ("Elite", "Strong", ...).
        tier: Display color tier.
        predicted: True when the score comes from the ball flight predictor.
    """
    score: int
    letter: str
    label: str
    tier: str
    predicted: bool = False

    @classmethod
    def from_score(cls, score: int, predicted: bool = False) -> "CategoryGrade":
        band = grade_band(score)
        return cls(
            score=score,
            letter=band.letter.value,
            label=band.label,
            tier=band.tier.name.lower(),
            predicted=predicted,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "letter": self.letter,
            "label": self.label,
            "tier": self.tier,
            "predicted": self.predicted,
        }


@dataclass(frozen=True)
class SessionImport:
    """
    Result of importing one or more vendor exports.

    Attributes:
        records: Merged swings sorted by swing number.
        stats: Session statistics of the merged swings.
        files: Per-file parse results.
        failed_files: Error message for each file that yielded no swings.
        warnings: Partial-parse warnings from the successful files.
    """
    records: List[SwingRecord]
    stats: SessionStats
    files: List[ParseResult] = field(default_factory=list)
    failed_files: Dict[str, str] = field(default_factory=dict)
    warnings: List[PartialParseWarning] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stats": self.stats.to_dict(),
            "files": [
                {"source": f.source, "swings": len(f.records), "skipped_rows": f.skipped_rows}
                for f in self.files
            ],
            "failed_files": dict(self.failed_files),
            "warnings": [str(w) for w in self.warnings],
        }


@dataclass(frozen=True)
class FourBReport:
    """
    Brain/Body/Bat/Ball report handed to the presentation layer.

    Each category is Present(CategoryGrade) or Absent(reason); a missing
    category is never shown as a zero score.
    """
    brain: Section
    body: Section
    bat: Section
    ball: Section
    session_stats: Optional[SessionStats] = None
    biomechanics: Optional[BiomechanicsSummary] = None
    prediction: Optional[BallFlightPrediction] = None
    upload_status: Optional[ProcessingStatus] = None

    def section(self, category: Category) -> Section:
        return getattr(self, category.value)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {c.value: self.section(c).to_dict() for c in Category}
        data["session_stats"] = self.session_stats.to_dict() if self.session_stats else None
        data["biomechanics"] = self.biomechanics.to_dict() if self.biomechanics else None
        if self.prediction:
            data["prediction"] = self.prediction.to_dict()
            data["prediction"]["confidence_label"] = confidence_label(self.prediction.confidence)
        else:
            data["prediction"] = None
        data["upload_status"] = self.upload_status.value if self.upload_status else None
        return data


def _graded(score: Optional[int], predicted: bool = False) -> Section:
    if score is None:
        return Absent()
    return Present(CategoryGrade.from_score(score, predicted=predicted))


class SwingScoringPipeline(LoggerMixin):
    """
    End-to-end scoring pipeline.

    Ties the parser, aggregators, predictor and classifier together with a
    single set of engine constants. The pipeline holds no session state;
    every call recomputes from its inputs.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        max_workers: Optional[int] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Engine constants. Uses defaults if not provided.
            max_workers: Threads for multi-file imports (1 disables threading).
        """
        self.config = config or DEFAULT_CONFIG
        self.max_workers = max_workers
        self._parser: Optional[SwingCSVParser] = None

    @classmethod
    def from_config_file(cls, config_path: Union[str, Path]) -> "SwingScoringPipeline":
        """Create a pipeline from a YAML configuration file."""
        return cls(load_config(config_path))

    @property
    def parser(self) -> SwingCSVParser:
        """Get or create the CSV parser."""
        if self._parser is None:
            self._parser = SwingCSVParser(max_workers=self.max_workers)
        return self._parser

    def import_sessions(self, sources: Iterable[Source]) -> SessionImport:
        """
        Parse vendor exports and compute session statistics.

        Args:
            sources: File paths or (name, csv_text) pairs.

        Returns:
            SessionImport with the merged swings and their statistics.

        Raises:
            EmptyInputError: If no file yields a valid swing.
        """
        result = self.parser.parse_files(sources)
        stats = compute_session_stats(result.records, self.config)

        self.logger.info(
            f"Imported session: {stats.total_swings} swings, "
            f"{len(result.failed_files)} failed file(s), "
            f"{result.skipped_rows} skipped row(s)"
        )
        return SessionImport(
            records=list(result.records),
            stats=stats,
            files=list(result.files),
            failed_files=dict(result.failed_files),
            warnings=result.warnings,
        )

    def summarize_biomechanics(
        self,
        samples: Sequence[Union[BiomechanicalSample, Dict[str, Any]]],
    ) -> BiomechanicsSummary:
        """Aggregate uploads (samples or raw dictionaries) into category scores."""
        return summarize_biomechanics(self._as_samples(samples), self.config)

    def predict_ball_flight(self, summary: BiomechanicsSummary) -> BallFlightPrediction:
        """Predict ball flight for a session without ball-tracking data."""
        return predict_from_summary(summary, self.config)

    def analyze_swing(self, metrics: Union[SwingMetrics, Dict[str, Any]]) -> SwingAnalysis:
        """Classify one swing and project its ceiling."""
        if isinstance(metrics, dict):
            metrics = SwingMetrics.from_dict(metrics)
        return analyze_swing(metrics, self.config)

    def ball_score_breakdown(self, stats: SessionStats) -> Dict[str, float]:
        """Per-component contributions to a session Ball Score."""
        return ball_score_breakdown(stats, self.config.ball_score)

    def build_report(
        self,
        session_stats: Optional[SessionStats] = None,
        samples: Optional[Sequence[Union[BiomechanicalSample, Dict[str, Any]]]] = None,
    ) -> FourBReport:
        """
        Assemble a 4B report from whatever data the session has.

        The Ball category uses the measured Ball Score when session stats
        exist, otherwise the predicted kinetic potential when biomechanics
        exist, otherwise it is absent.

        Args:
            session_stats: Statistics from a vendor export, if any.
            samples: Biomechanical uploads, if any.

        Returns:
            FourBReport with every category present or absent.
        """
        summary: Optional[BiomechanicsSummary] = None
        prediction: Optional[BallFlightPrediction] = None
        status: Optional[ProcessingStatus] = None
        absent_reason = "no data"

        if samples:
            sample_list = self._as_samples(samples)
            status = session_status(sample_list)
            try:
                summary = summarize_biomechanics(sample_list, self.config)
            except EmptyInputError as e:
                self.logger.warning(f"Biomechanics unavailable for report: {e}")
                absent_reason = str(e)

        if summary is not None:
            brain = _graded(summary.scores.brain)
            body = _graded(summary.scores.body)
            bat = _graded(summary.scores.bat)
        else:
            brain = body = bat = Absent(absent_reason)

        if session_stats is not None:
            ball = _graded(session_stats.ball_score)
        elif summary is not None:
            prediction = predict_from_summary(summary, self.config)
            ball = _graded(prediction.kinetic_potential, predicted=True)
        else:
            ball = Absent(absent_reason)

        present = [c.value for c, s in zip(Category, (brain, body, bat, ball)) if s.present]
        self.logger.info(f"Built 4B report with categories: {present or 'none'}")

        return FourBReport(
            brain=brain,
            body=body,
            bat=bat,
            ball=ball,
            session_stats=session_stats,
            biomechanics=summary,
            prediction=prediction,
            upload_status=status,
        )

    @staticmethod
    def _as_samples(
        samples: Sequence[Union[BiomechanicalSample, Dict[str, Any]]],
    ) -> List[BiomechanicalSample]:
        return [
            s if isinstance(s, BiomechanicalSample) else BiomechanicalSample.from_dict(s)
            for s in samples
        ]

    def cleanup(self) -> None:
        """Release the cached parser."""
        self._parser = None
        logger.debug("Pipeline resources cleaned up")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.cleanup()
        return False

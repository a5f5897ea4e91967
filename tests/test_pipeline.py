"""
Tests for the end-to-end scoring pipeline and 4B report assembly.
"""

import json

import pytest

from swing_scoring.analysis.session_stats import compute_session_stats
from swing_scoring.exceptions import EmptyInputError
from swing_scoring.ingestion.csv_parser import parse_csv
from swing_scoring.pipeline import Category, CategoryGrade, FourBReport, SwingScoringPipeline
from swing_scoring.records.models import Absent, BiomechanicalSample, ProcessingStatus
from swing_scoring.settings import DEFAULT_CONFIG


class TestImportSessions:
    """Test multi-file imports through the pipeline."""

    def setup_method(self):
        self.pipeline = SwingScoringPipeline(max_workers=1)

    def test_import_with_failed_file(self, scenario_csv):
        """Test that one bad export does not sink the batch."""
        result = self.pipeline.import_sessions([
            ("session.csv", scenario_csv),
            ("notes.csv", "nothing useful\n"),
        ])

        assert result.stats.total_swings == 3
        assert result.stats.contact_rate == 33.3
        assert list(result.failed_files) == ["notes.csv"]
        assert [f.source for f in result.files] == ["session.csv"]

    def test_all_files_failing_raises(self):
        with pytest.raises(EmptyInputError):
            self.pipeline.import_sessions([("a.csv", ""), ("b.csv", "x,y\n")])

    def test_to_dict_is_json_serializable(self, scenario_csv):
        data = self.pipeline.import_sessions([("session.csv", scenario_csv)]).to_dict()
        decoded = json.loads(json.dumps(data))
        assert decoded["stats"]["ball_score"] == 36
        assert decoded["files"] == [{"source": "session.csv", "swings": 3, "skipped_rows": 0}]

    def test_breakdown_uses_pipeline_weights(self, scenario_csv):
        result = self.pipeline.import_sessions([("session.csv", scenario_csv)])
        breakdown = self.pipeline.ball_score_breakdown(result.stats)
        assert round(sum(breakdown.values())) == result.stats.ball_score

    def test_context_manager_releases_parser(self, scenario_csv):
        with SwingScoringPipeline() as pipeline:
            pipeline.import_sessions([("session.csv", scenario_csv)])
            assert pipeline._parser is not None
        assert pipeline._parser is None


class TestBuildReport:
    """Test 4B report assembly from partial data."""

    def setup_method(self):
        self.pipeline = SwingScoringPipeline()

    def test_session_stats_only(self, scenario_csv):
        """Test a ball-tracking session without biomechanics."""
        stats = compute_session_stats(parse_csv(scenario_csv).records)
        report = self.pipeline.build_report(session_stats=stats)

        assert report.ball.present
        assert report.ball.data == CategoryGrade(36, "C", "Developing", "red", predicted=False)
        for category in (Category.BRAIN, Category.BODY, Category.BAT):
            assert report.section(category) == Absent()
        assert report.prediction is None

    def test_biomechanics_only_predicts_ball(self, complete_samples):
        """Test that the Ball category falls back to the predictor."""
        report = self.pipeline.build_report(samples=complete_samples)

        assert report.brain.data.score == 75
        assert report.body.data.score == 70
        assert report.bat.data.score == 58
        assert report.ball.data.predicted is True
        assert report.ball.data.score == report.prediction.kinetic_potential
        assert report.upload_status is ProcessingStatus.COMPLETE

    def test_measured_ball_score_wins_over_prediction(self, scenario_csv, complete_samples):
        stats = compute_session_stats(parse_csv(scenario_csv).records)
        report = self.pipeline.build_report(session_stats=stats, samples=complete_samples)

        assert report.ball.data.score == 36
        assert report.ball.data.predicted is False
        assert report.brain.present

    def test_no_data_at_all(self):
        """Test that every category reads as absent, never zero."""
        report = self.pipeline.build_report()

        assert isinstance(report, FourBReport)
        assert all(not report.section(c).present for c in Category)
        assert report.upload_status is None

    def test_uploads_still_processing(self, pending_sample):
        report = self.pipeline.build_report(samples=[pending_sample])

        assert report.brain == Absent("no completed biomechanical uploads")
        assert report.ball == Absent("no completed biomechanical uploads")
        assert report.upload_status is ProcessingStatus.PROCESSING
        assert report.biomechanics is None

    def test_raw_upload_dictionaries(self):
        uploads = [
            {"id": 1, "pelvis_velocity": 550, "bat_ke": 100, "transfer_efficiency": 60},
            {"id": 2, "processing_status": "failed"},
        ]
        report = self.pipeline.build_report(samples=uploads)

        assert report.body.data.score == 50
        assert report.biomechanics.samples_used == 1

    def test_report_to_dict(self, scenario_csv, complete_samples):
        report = self.pipeline.build_report(samples=complete_samples)
        data = json.loads(json.dumps(report.to_dict()))

        assert data["brain"] == {
            "present": True,
            "data": {"score": 75, "letter": "A", "label": "Strong", "tier": "green", "predicted": False},
        }
        assert data["prediction"]["confidence_label"] in {"High ✓", "Medium ~", "Low ?"}
        assert data["session_stats"] is None
        assert data["upload_status"] == "complete"


class TestSingleSwing:
    """Test single-swing analysis through the pipeline."""

    def test_accepts_raw_dictionary(self):
        pipeline = SwingScoringPipeline()
        analysis = pipeline.analyze_swing({
            "bat_speed_mph": 70,
            "attack_angle_deg": 10,
            "hand_speed_mph": 30,
            "time_to_contact_ms": 150,
            "tempo_score": 80,
            "efficiency_rating": 8,
        })
        assert analysis.projection.current == 74

    def test_config_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("engine:\n  ceiling:\n    score_cap: 90\n", encoding="utf-8")

        pipeline = SwingScoringPipeline.from_config_file(config_file)
        assert pipeline.config.ceiling.score_cap == 90
        assert pipeline.config.session == DEFAULT_CONFIG.session

    def test_predict_from_uploads(self, complete_samples):
        pipeline = SwingScoringPipeline()
        summary = pipeline.summarize_biomechanics(complete_samples + [BiomechanicalSample(upload_id="x")])
        prediction = pipeline.predict_ball_flight(summary)
        assert prediction.is_prediction

"""
Tests for engine configuration loading and validation.
"""

import logging
from dataclasses import FrozenInstanceError

import pytest

from swing_scoring.records.models import MotorProfile
from swing_scoring.settings import (
    DEFAULT_CONFIG,
    BallScoreWeights,
    EngineConfig,
    SessionThresholds,
    config_from_dict,
    load_config,
    validate_weights,
)


class TestDefaults:
    """Test the built-in constant tables."""

    def test_default_weights_are_valid(self):
        assert validate_weights() == []

    def test_tables_are_frozen(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_CONFIG.session.quality_min_ev = 80.0

    def test_mappings_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_CONFIG.ceiling.archetype_bonus[MotorProfile.TITAN] = 50

    def test_equal_configs_compare_equal(self):
        assert EngineConfig() == DEFAULT_CONFIG


class TestValidation:
    """Test weight table validation."""

    def test_weights_not_summing_to_one(self):
        config = EngineConfig(ball_score=BallScoreWeights(contact_rate=0.5))
        errors = validate_weights(config)
        assert len(errors) == 1
        assert errors[0].startswith("ball_score weights sum to 1.200")

    def test_negative_weight(self):
        config = EngineConfig(ball_score=BallScoreWeights(contact_rate=-0.1, quality_hit_pct=0.65))
        assert "Negative ball_score weights found" in validate_weights(config)

    def test_barrel_floor_below_quality_floor(self):
        config = EngineConfig(session=SessionThresholds(barrel_min_ev=80.0))
        assert validate_weights(config) == ["barrel_min_ev is below quality_min_ev"]


class TestLoading:
    """Test YAML overrides."""

    def test_missing_file_uses_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") is DEFAULT_CONFIG

    def test_none_uses_defaults(self):
        assert load_config(None) is DEFAULT_CONFIG

    def test_engine_section_overrides(self, tmp_path):
        """Test that YAML lists become tuples and mappings merge."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            "logging:\n"
            "  level: DEBUG\n"
            "engine:\n"
            "  session:\n"
            "    quality_min_ev: 88\n"
            "    velo_buckets: [88, 93, 98]\n"
            "  points:\n"
            "    velo_tiers:\n"
            "      - [100, 25]\n"
            "      - [90, 10]\n"
            "  ceiling:\n"
            "    archetype_bonus:\n"
            "      titan: 20\n",
            encoding="utf-8",
        )
        config = load_config(config_file)

        assert config.session.quality_min_ev == 88.0
        assert isinstance(config.session.quality_min_ev, float)
        assert config.session.velo_buckets == (88, 93, 98)
        assert config.points.velo_tiers == ((100, 25), (90, 10))
        assert config.ceiling.archetype_bonus[MotorProfile.TITAN] == 20
        assert config.ceiling.archetype_bonus[MotorProfile.SPINNER] == 8
        # untouched sections keep their defaults
        assert config.ball_score == DEFAULT_CONFIG.ball_score

    def test_document_without_engine_key(self, tmp_path):
        config_file = tmp_path / "engine.yaml"
        config_file.write_text("recommendations:\n  max_recommendations: 2\n", encoding="utf-8")
        assert load_config(config_file).recommendations.max_recommendations == 2

    def test_empty_file_uses_defaults(self, tmp_path):
        config_file = tmp_path / "empty.yaml"
        config_file.write_text("", encoding="utf-8")
        assert load_config(config_file) == DEFAULT_CONFIG

    def test_biomechanics_driver_override(self):
        config = config_from_dict({"biomechanics": {"body": {"ceiling": 900}}})
        assert config.biomechanics.body.field_name == "pelvis_velocity"
        assert config.biomechanics.body.floor == 300.0
        assert config.biomechanics.body.ceiling == 900.0

    def test_unknown_keys_are_logged_and_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="swing_scoring.settings"):
            config = config_from_dict({
                "session": {"quality_min_ev": 86, "bogus": 1},
                "extras": {"a": 1},
            })

        assert config.session.quality_min_ev == 86.0
        assert "Ignoring unknown config key: session.bogus" in caplog.text
        assert "Ignoring unknown config section: extras" in caplog.text


class TestOverrideValidation:
    """Test that overrides breaking score invariants are rejected on load."""

    def test_zero_recommendations_rejected(self):
        with pytest.raises(ValueError, match="max_recommendations must be at least 1"):
            config_from_dict({"recommendations": {"max_recommendations": 0}})

    def test_negative_archetype_bonus_rejected(self):
        """Test that a bonus that would pull the ceiling below current fails."""
        with pytest.raises(ValueError, match="Negative ceiling.archetype_bonus"):
            config_from_dict({"ceiling": {"archetype_bonus": {"UNKNOWN": -30}}})

    def test_negative_efficiency_bonus_rejected(self):
        with pytest.raises(ValueError, match="efficiency_bonus_per_point"):
            config_from_dict({"ceiling": {"efficiency_bonus_per_point": -1}})

    def test_score_cap_above_scale_rejected(self):
        with pytest.raises(ValueError, match="score_cap"):
            config_from_dict({"ceiling": {"score_cap": 120}})

    def test_bad_weights_rejected_from_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("engine:\n  ball_score:\n    contact_rate: 0.9\n", encoding="utf-8")
        with pytest.raises(ValueError, match="ball_score weights sum to"):
            load_config(config_file)

    def test_validation_can_be_deferred(self):
        """Test that check tooling can load a bad config to list every problem."""
        config = config_from_dict(
            {
                "recommendations": {"max_recommendations": 0},
                "ceiling": {"archetype_bonus": {"UNKNOWN": -30}},
            },
            validate=False,
        )
        errors = validate_weights(config)
        assert "recommendations.max_recommendations must be at least 1" in errors
        assert "Negative ceiling.archetype_bonus found" in errors

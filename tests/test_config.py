"""
Tests for market_intel/config.py.

What we test
------------
Defaults:
  - Weight sets sum to 1.0 and cover each role's factors.
  - ideal_percentage is 100 / 9 for the default taxonomy.

Validation:
  - Weight sets that miss a factor or do not sum to 1.0 are rejected.
  - Count tiers must descend and end at 0.
  - Health weights must sum to 1.0; position thresholds must descend.
  - Format floor must be positive.
  - Log level is upper-cased and checked.

load_config():
  - The shipped default.toml loads and matches the model defaults.
  - A sibling local.toml is deep-merged over the base file.
  - MARKET_INTEL_* environment variables override file values.
  - A missing file raises FileNotFoundError.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from market_intel.config import (
    AppConfig,
    CountTier,
    DiversificationConfig,
    FormatTierConfig,
    HealthConfig,
    LoggingConfig,
    ScoringConfig,
    _deep_merge,
    check_weight_sets,
    load_config,
)
from market_intel.taxonomy.industry_taxonomy import ROLE_FACTORS, CandidateRole

PROJECT_ROOT = Path(__file__).resolve().parent.parent

_MINIMAL_TOML = """
[scoring]
top_n = 4

[logging]
level = "WARNING"
"""


class TestDefaults:
    def test_weight_sets(self):
        weights = ScoringConfig().weights
        for role in CandidateRole:
            assert set(weights[role.value]) == set(ROLE_FACTORS[role])
            assert sum(weights[role.value].values()) == pytest.approx(1.0)

    def test_ideal_percentage(self):
        assert DiversificationConfig().ideal_percentage == pytest.approx(100 / 9)


class TestValidation:
    def test_weights_must_sum_to_one(self):
        weights = ScoringConfig().weights
        bad = {**weights, "buyer": {**weights["buyer"], "genre": 0.40}}
        with pytest.raises(ValidationError):
            ScoringConfig(weights=bad)

    def test_weights_must_cover_factors(self):
        with pytest.raises(ValueError, match="cover exactly"):
            check_weight_sets({"buyer": {"genre": 1.0}, "producer": {}})

    def test_missing_role(self):
        with pytest.raises(ValueError, match="Missing weight set"):
            check_weight_sets({"buyer": dict(ScoringConfig().weights["buyer"])})

    def test_count_tiers_must_descend(self):
        with pytest.raises(ValidationError):
            ScoringConfig(activity_tiers=[CountTier(min_count=0, score=60),
                                          CountTier(min_count=3, score=95)])

    def test_count_tiers_must_end_at_zero(self):
        with pytest.raises(ValidationError):
            ScoringConfig(track_record_tiers=[CountTier(min_count=2, score=75)])

    def test_health_weights(self):
        with pytest.raises(ValidationError):
            HealthConfig(quality_weight=0.5)

    def test_health_thresholds(self):
        with pytest.raises(ValidationError):
            HealthConfig(competitive_threshold=90.0)

    def test_format_floor_positive(self):
        with pytest.raises(ValidationError):
            FormatTierConfig(floor=0)

    def test_log_level(self):
        assert LoggingConfig(level="debug").level == "DEBUG"
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")

    def test_frozen(self):
        cfg = AppConfig()
        with pytest.raises(ValidationError):
            cfg.debug = True


class TestLoadConfig:
    def test_shipped_defaults(self):
        cfg = load_config(PROJECT_ROOT / "config" / "default.toml")
        assert cfg.scoring == ScoringConfig()
        assert cfg.diversification == DiversificationConfig()
        assert cfg.health == HealthConfig()
        assert cfg.recommendations.max_recommendations == 5
        assert [w.genre for w in cfg.recommendations.seasonal_windows] == ["Horror", "Drama"]

    def test_local_override(self, tmp_path):
        (tmp_path / "base.toml").write_text(_MINIMAL_TOML, encoding="utf-8")
        (tmp_path / "local.toml").write_text("[scoring]\nmin_overall_score = 60\n", encoding="utf-8")
        cfg = load_config(tmp_path / "base.toml")
        assert cfg.scoring.top_n == 4
        assert cfg.scoring.min_overall_score == 60
        assert cfg.logging.level == "WARNING"

    def test_env_override(self, tmp_path, monkeypatch):
        (tmp_path / "base.toml").write_text(_MINIMAL_TOML, encoding="utf-8")
        monkeypatch.setenv("MARKET_INTEL_LOG_LEVEL", "error")
        monkeypatch.setenv("MARKET_INTEL_PORTFOLIO_PATH", "/tmp/p.json")
        monkeypatch.setenv("MARKET_INTEL_DEBUG", "true")
        cfg = load_config(tmp_path / "base.toml")
        assert cfg.logging.level == "ERROR"
        assert cfg.portfolio.store_path == "/tmp/p.json"
        assert cfg.debug is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_invalid_values(self, tmp_path):
        (tmp_path / "bad.toml").write_text("[scoring]\ntop_n = -1\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(tmp_path / "bad.toml")


def test_deep_merge():
    base = {"a": {"x": 1, "y": 2}, "b": 1}
    merged = _deep_merge(base, {"a": {"y": 3}, "c": 4})
    assert merged == {"a": {"x": 1, "y": 3}, "b": 1, "c": 4}
    assert base["a"]["y"] == 2

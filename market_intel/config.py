"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``     : committed static defaults
  2. ``config/local.toml``       : optional local overrides (gitignored)
  3. ``.env``                    : local overrides (gitignored)
  4. Environment variables       : ``MARKET_INTEL_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The scoring, diversification, health and recommendation sections hold every
business rule the engine applies (weights, tiers, thresholds, budget tables).
Engines receive these sections as constructor arguments; nothing reads a
global. Static invariants (weight sets summing to 1.0, ordered tier tables)
are validated here, once, when the config is built.
"""

from __future__ import annotations

import math
import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from market_intel.taxonomy.genre_taxonomy import CANONICAL_GENRES
from market_intel.taxonomy.industry_taxonomy import ROLE_FACTORS, CandidateRole

_WEIGHT_TOLERANCE = 1e-9


# ── Shared table rows ─────────────────────────────────────────────────────────


class BudgetTier(BaseModel):
    """One row of an ordered budget-fit table.

    The first row whose ``label`` is a substring of the candidate's budget
    range and whose ``min_quality`` is met by the concept wins.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    min_quality: float = 0.0
    score: int


class CountTier(BaseModel):
    """``min_count`` or more observations map to ``score``."""

    model_config = ConfigDict(frozen=True)

    min_count: int
    score: int


def _check_tier_scores(scores: list[int], name: str) -> None:
    for s in scores:
        if not 0 <= s <= 100:
            raise ValueError(f"{name}: score {s} outside [0, 100].")


def _check_count_tiers(tiers: list[CountTier], name: str) -> list[CountTier]:
    if not tiers:
        raise ValueError(f"{name} must not be empty.")
    counts = [t.min_count for t in tiers]
    if counts != sorted(counts, reverse=True) or len(set(counts)) != len(counts):
        raise ValueError(f"{name} must be ordered by strictly descending min_count.")
    if counts[-1] != 0:
        raise ValueError(f"{name} must end with a min_count = 0 row.")
    _check_tier_scores([t.score for t in tiers], name)
    return tiers


def check_weight_sets(weights_by_role: dict[str, dict[str, float]]) -> None:
    """Raise ValueError unless every role has a complete weight set summing to 1.0."""
    for role in CandidateRole:
        weights = weights_by_role.get(role.value)
        if weights is None:
            raise ValueError(f"Missing weight set for role '{role.value}'.")
        expected = set(ROLE_FACTORS[role])
        if set(weights) != expected:
            raise ValueError(
                f"Weight set for '{role.value}' must cover exactly "
                f"{sorted(expected)}, got {sorted(weights)}."
            )
        if any(w < 0 for w in weights.values()):
            raise ValueError(f"Weight set for '{role.value}' has a negative weight.")
        total = math.fsum(weights.values())
        if not math.isclose(total, 1.0, abs_tol=_WEIGHT_TOLERANCE):
            raise ValueError(
                f"Weight set for '{role.value}' must sum to 1.0, got {total}."
            )


# ── Sub-config models ─────────────────────────────────────────────────────────


class CatalogConfig(BaseModel):
    """Location of the static industry catalog."""

    model_config = ConfigDict(frozen=True)

    catalog_dir: str = "config/catalog"


class PortfolioConfig(BaseModel):
    """Portfolio store settings."""

    model_config = ConfigDict(frozen=True)

    store_path: str = "data/portfolio.json"


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class GenreTierConfig(BaseModel):
    """Genre affinity tiers (buyer and producer)."""

    model_config = ConfigDict(frozen=True)

    primary: int = 95
    secondary: int = 70
    adjacent_primary: int = 60
    adjacent_secondary: int = 45
    floor: int = 30
    producer_signature: int = 98
    producer_specialty: int = 90

    @model_validator(mode="after")
    def validate_ranges(self) -> "GenreTierConfig":
        _check_tier_scores(list(self.model_dump().values()), "genre tiers")
        return self


class FormatTierConfig(BaseModel):
    """Format fit tiers. Unmatched formats get ``floor``, never zero."""

    model_config = ConfigDict(frozen=True)

    exact: int = 95
    category: int = 90
    floor: int = 60
    categories: list[str] = ["film", "series"]

    @model_validator(mode="after")
    def validate_ranges(self) -> "FormatTierConfig":
        _check_tier_scores([self.exact, self.category, self.floor], "format tiers")
        if self.floor <= 0:
            raise ValueError("format floor must be positive.")
        return self


class TimingConfig(BaseModel):
    """Market timing: base score plus bonuses from the genre market table."""

    model_config = ConfigDict(frozen=True)

    base: int = 60
    growing_bonus: int = 15
    growth_rate_threshold: float = 10.0
    growth_bonus: int = 10
    bullish_bonus: int = 10
    streaming_demand_threshold: float = 80.0
    streaming_bonus: int = 5
    cap: int = 100
    unavailable_score: int = 60

    @model_validator(mode="after")
    def validate_ranges(self) -> "TimingConfig":
        _check_tier_scores([self.base, self.cap, self.unavailable_score], "timing")
        return self


class ScoringConfig(BaseModel):
    """Factor tiers, budget tables and per-role composite weights."""

    model_config = ConfigDict(frozen=True)

    weights: dict[str, dict[str, float]] = {
        "buyer": {
            "genre": 0.30, "format": 0.15, "budget": 0.20,
            "timing": 0.20, "activity": 0.15,
        },
        "producer": {
            "genre_expertise": 0.35, "track_record": 0.25, "budget_alignment": 0.15,
            "accessibility": 0.10, "momentum": 0.15,
        },
    }
    min_overall_score: int = 50
    top_n: int = 8

    genre: GenreTierConfig = GenreTierConfig()
    format: FormatTierConfig = FormatTierConfig()
    timing: TimingConfig = TimingConfig()

    buyer_budget: list[BudgetTier] = [
        BudgetTier(label="200M", min_quality=85, score=95),
        BudgetTier(label="100M", min_quality=75, score=90),
        BudgetTier(label="50M", min_quality=65, score=85),
        BudgetTier(label="20M", min_quality=55, score=80),
        BudgetTier(label="5M", min_quality=0, score=75),
        BudgetTier(label="3M", min_quality=0, score=75),
    ]
    producer_budget: list[BudgetTier] = [
        BudgetTier(label="200M", min_quality=85, score=95),
        BudgetTier(label="100M", min_quality=75, score=90),
        BudgetTier(label="50M", min_quality=65, score=85),
        BudgetTier(label="3M", min_quality=0, score=80),
        BudgetTier(label="15M", min_quality=0, score=80),
    ]
    budget_floor: int = 70

    activity_tiers: list[CountTier] = [
        CountTier(min_count=3, score=95),
        CountTier(min_count=2, score=85),
        CountTier(min_count=1, score=75),
        CountTier(min_count=0, score=60),
    ]
    track_record_tiers: list[CountTier] = [
        CountTier(min_count=4, score=95),
        CountTier(min_count=3, score=85),
        CountTier(min_count=2, score=75),
        CountTier(min_count=0, score=65),
    ]
    accessibility_open: int = 95
    accessibility_closed: int = 60

    @field_validator("weights")
    @classmethod
    def validate_weights(cls, v: dict[str, dict[str, float]]) -> dict[str, dict[str, float]]:
        check_weight_sets(v)
        return v

    @field_validator("min_overall_score")
    @classmethod
    def validate_min_score(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError(f"min_overall_score must be in [0, 100], got {v}.")
        return v

    @field_validator("top_n")
    @classmethod
    def validate_top_n(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"top_n must be non-negative, got {v}.")
        return v

    @field_validator("buyer_budget", "producer_budget")
    @classmethod
    def validate_budget_table(cls, v: list[BudgetTier]) -> list[BudgetTier]:
        _check_tier_scores([t.score for t in v], "budget table")
        for t in v:
            if not t.label:
                raise ValueError("budget table rows need a non-empty label.")
            if t.min_quality < 0:
                raise ValueError(f"min_quality must be non-negative, got {t.min_quality}.")
        return v

    @field_validator("activity_tiers")
    @classmethod
    def validate_activity_tiers(cls, v: list[CountTier]) -> list[CountTier]:
        return _check_count_tiers(v, "activity_tiers")

    @field_validator("track_record_tiers")
    @classmethod
    def validate_track_record_tiers(cls, v: list[CountTier]) -> list[CountTier]:
        return _check_count_tiers(v, "track_record_tiers")

    @model_validator(mode="after")
    def validate_scalar_scores(self) -> "ScoringConfig":
        _check_tier_scores(
            [self.budget_floor, self.accessibility_open, self.accessibility_closed],
            "scoring",
        )
        return self


class DiversificationConfig(BaseModel):
    """Genre taxonomy and status thresholds for diversification analysis.

    ``ideal share = 100 / len(canonical_genres)`` is re-derived from the list,
    so changing the taxonomy size needs no code change.
    """

    model_config = ConfigDict(frozen=True)

    canonical_genres: list[str] = list(CANONICAL_GENRES)
    over_index_multiplier: float = 2.0
    under_index_multiplier: float = 0.5
    under_index_min_demand: float = 0.75
    default_market_demand: float = 0.5

    @field_validator("canonical_genres")
    @classmethod
    def validate_genres(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("canonical_genres must not be empty.")
        if len(set(v)) != len(v):
            raise ValueError("canonical_genres must not contain duplicates.")
        return v

    @model_validator(mode="after")
    def validate_multipliers(self) -> "DiversificationConfig":
        if self.under_index_multiplier >= self.over_index_multiplier:
            raise ValueError("under_index_multiplier must be below over_index_multiplier.")
        for name in ("under_index_min_demand", "default_market_demand"):
            val = getattr(self, name)
            if not 0.0 <= val <= 1.0:
                raise ValueError(f"{name} must be in [0, 1], got {val}.")
        return self

    @property
    def ideal_percentage(self) -> float:
        return 100.0 / len(self.canonical_genres)


class HealthConfig(BaseModel):
    """Portfolio health blend and market-position thresholds."""

    model_config = ConfigDict(frozen=True)

    quality_weight: float = 0.4
    diversification_weight: float = 0.3
    size_weight: float = 0.3
    size_target: int = 10
    premium_threshold: float = 85.0
    competitive_threshold: float = 75.0
    developing_threshold: float = 65.0

    @model_validator(mode="after")
    def validate_blend(self) -> "HealthConfig":
        total = math.fsum(
            [self.quality_weight, self.diversification_weight, self.size_weight]
        )
        if not math.isclose(total, 1.0, abs_tol=_WEIGHT_TOLERANCE):
            raise ValueError(f"Health weights must sum to 1.0, got {total}.")
        if self.size_target < 1:
            raise ValueError(f"size_target must be >= 1, got {self.size_target}.")
        if not (
            self.premium_threshold > self.competitive_threshold > self.developing_threshold
        ):
            raise ValueError("Market position thresholds must be strictly descending.")
        return self


class SeasonalWindow(BaseModel):
    """A calendar window in which concepts of one genre should be pushed."""

    model_config = ConfigDict(frozen=True)

    genre: str
    months: list[int]
    min_score: float = 75.0
    title: str
    action_item: str

    @field_validator("months")
    @classmethod
    def validate_months(cls, v: list[int]) -> list[int]:
        if not v or any(not 1 <= m <= 12 for m in v):
            raise ValueError(f"months must be non-empty values in 1..12, got {v}.")
        return v


class RecommendationConfig(BaseModel):
    """Thresholds for the portfolio recommendation rules."""

    model_config = ConfigDict(frozen=True)

    max_recommendations: int = 5
    low_score_threshold: float = 70.0
    submit_threshold: float = 80.0
    premium_threshold: float = 90.0
    health_threshold: float = 60.0
    backlog_threshold: int = 5
    stale_days: int = 30
    min_portfolio_size: int = 5
    seasonal_windows: list[SeasonalWindow] = [
        SeasonalWindow(
            genre="Horror",
            months=[7, 8, 9],
            min_score=75.0,
            title="Halloween Season Opportunity",
            action_item="Prioritize horror submissions for October release consideration",
        ),
        SeasonalWindow(
            genre="Drama",
            months=[8, 9, 10, 11],
            min_score=80.0,
            title="Awards Season Window",
            action_item="Target prestige buyers while awards-season slates are being set",
        ),
    ]

    @field_validator("max_recommendations")
    @classmethod
    def validate_max(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"max_recommendations must be >= 1, got {v}.")
        return v


class AppConfig(BaseModel):
    """Complete application configuration: the single source of truth.

    CLI commands build engines from the sections of one ``AppConfig``
    constructed by ``load_config()``.
    """

    model_config = ConfigDict(frozen=True)

    catalog: CatalogConfig = CatalogConfig()
    portfolio: PortfolioConfig = PortfolioConfig()
    logging: LoggingConfig = LoggingConfig()
    scoring: ScoringConfig = ScoringConfig()
    diversification: DiversificationConfig = DiversificationConfig()
    health: HealthConfig = HealthConfig()
    recommendations: RecommendationConfig = RecommendationConfig()
    debug: bool = False


# ── Loader ────────────────────────────────────────────────────────────────────

_DEFAULT_CONFIG = Path("config") / "default.toml"

# Environment variable → (section, key). ``None`` section means top level.
_ENV_OVERRIDES: dict[str, tuple[Optional[str], str]] = {
    "MARKET_INTEL_CATALOG_DIR":    ("catalog", "catalog_dir"),
    "MARKET_INTEL_PORTFOLIO_PATH": ("portfolio", "store_path"),
    "MARKET_INTEL_LOG_LEVEL":      ("logging", "level"),
    "MARKET_INTEL_DEBUG":          (None, "debug"),
}


def _find_project_root() -> Path:
    """Nearest ancestor of this package holding ``pyproject.toml``."""
    here = Path(__file__).resolve().parent
    for candidate in (here, *here.parents):
        if (candidate / "pyproject.toml").exists():
            return candidate
    return here.parent


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Build the ``AppConfig`` for this run.

    ``config_path`` defaults to ``<project_root>/config/default.toml``. A
    ``local.toml`` beside it is deep-merged on top, then ``MARKET_INTEL_*``
    variables (from the process or the project's ``.env``) win.

    Raises:
        FileNotFoundError: ``config_path`` does not exist.
        pydantic.ValidationError: a merged value fails validation.
    """
    root = _find_project_root()
    load_dotenv(dotenv_path=root / ".env", override=False)

    path = Path(config_path) if config_path is not None else root / _DEFAULT_CONFIG
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\n"
            "Create config/default.toml or pass --config."
        )

    raw = _read_toml(path)
    local = path.with_name("local.toml")
    if local.exists():
        raw = _deep_merge(raw, _read_toml(local))

    return AppConfig.model_validate(_apply_env_overrides(raw))


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = dict(base)
    for key, val in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(val, dict):
            merged[key] = _deep_merge(current, val)
        else:
            merged[key] = val
    return merged


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    for var, (section, key) in _ENV_OVERRIDES.items():
        value: Any = os.environ.get(var)
        if not value:
            continue
        if key == "debug":
            value = value.lower() in ("1", "true", "yes")
        target = raw if section is None else raw.setdefault(section, {})
        target[key] = value
    return raw


def resolve_path(path_str: str) -> Path:
    """Resolve a config path relative to the project root unless absolute."""
    path = Path(path_str)
    if path.is_absolute():
        return path
    return _find_project_root() / path

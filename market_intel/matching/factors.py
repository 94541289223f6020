"""
Factor scoring: converts a (concept, candidate) pair into five integer
sub-scores in [0, 100].

Buyer factors
-------------
genre (0–100):
    Concept genre in the candidate's primary genres → primary tier (95);
    in secondary genres → secondary tier (70). Otherwise the catalog
    adjacency table is consulted: a related genre among the primaries →
    60, among the secondaries → 45. Nothing related → floor (30).

format (0–100):
    Requested format is a case-insensitive substring of a preferred
    format → 95. Both mention the same format category ("film" or
    "series") → 90. Otherwise 60. Never zero.

budget (0–100):
    Ordered table of ``(label, min_quality, score)`` rows. The first row
    whose label occurs in the candidate's budget range and whose minimum
    quality the concept meets wins. No row matches → floor (70).

timing (0–100):
    base 60, +15 growing, +10 growth rate > 10%, +10 bullish outlook,
    +5 streaming demand > 80, capped at 100. Genre absent from the market
    table → 60 (data unavailable, not an error).

activity (0–100):
    Intelligence-feed records whose candidate name contains the first
    token of the candidate's name or company. 0 → 60, 1 → 75, 2 → 85, 3+ → 95.

Producer factors
----------------
genre_expertise : first-listed primary genre 98, any other listed genre 90,
                  then the buyer adjacency tiers (60 / 45 / 30).
track_record    : notable credits count. 4+ → 95, 3 → 85, 2 → 75, else 65.
budget_alignment: producer budget table, floor 70.
accessibility   : 95 when accepting unsolicited material, else 60.
momentum        : activity tiers over the intelligence feed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Optional

from market_intel.catalog.loader import IndustryCatalog
from market_intel.config import (
    BudgetTier,
    CountTier,
    FormatTierConfig,
    GenreTierConfig,
    ScoringConfig,
    TimingConfig,
)
from market_intel.models.candidate import ActivityRecord, Candidate, GenreMarketData
from market_intel.models.concept import Concept
from market_intel.taxonomy.industry_taxonomy import ROLE_FACTORS, CandidateRole, MarketOutlook

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FactorScores:
    """Per-factor integer scores for one (concept, candidate) pair.

    Attributes:
        role:   Which weight set applies.
        scores: Factor name → score (0–100), in ``ROLE_FACTORS`` order.
                Stored as a read-only view.
    """

    role:   CandidateRole
    scores: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "scores", MappingProxyType(dict(self.scores)))

    def __getitem__(self, factor: str) -> int:
        return self.scores[factor]

    def weighted_sum(self, weights: dict[str, float]) -> float:
        """Σ weight·factor over this role's factors."""
        return sum(weights[name] * score for name, score in self.scores.items())


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _clamp_score(value: float) -> int:
    return int(_clamp(value, 0, 100))


# ── Individual factors (pure) ─────────────────────────────────────────────────


def _folded(genres: Sequence[str]) -> list[str]:
    return [g.casefold() for g in genres]


def genre_affinity_score(
    genre: str,
    primary: Sequence[str],
    secondary: Sequence[str],
    related: Sequence[str],
    tiers: GenreTierConfig,
) -> int:
    """Buyer genre tier: primary, secondary, adjacent-primary, adjacent-secondary, floor.

    Labels compare case-insensitively.
    """
    target = genre.casefold()
    primary, secondary, related = _folded(primary), _folded(secondary), _folded(related)
    if target in primary:
        return tiers.primary
    if target in secondary:
        return tiers.secondary
    if any(g in related for g in primary):
        return tiers.adjacent_primary
    if any(g in related for g in secondary):
        return tiers.adjacent_secondary
    return tiers.floor


def genre_expertise_score(
    genre: str,
    primary: Sequence[str],
    secondary: Sequence[str],
    related: Sequence[str],
    tiers: GenreTierConfig,
) -> int:
    """Producer genre tier; the first-listed specialty outranks the rest."""
    target = genre.casefold()
    primary, secondary, related = _folded(primary), _folded(secondary), _folded(related)
    if primary and primary[0] == target:
        return tiers.producer_signature
    if target in primary or target in secondary:
        return tiers.producer_specialty
    if any(g in related for g in primary):
        return tiers.adjacent_primary
    if any(g in related for g in secondary):
        return tiers.adjacent_secondary
    return tiers.floor


def format_fit_score(
    requested: str,
    preferred: Sequence[str],
    tiers: FormatTierConfig,
) -> int:
    req = requested.lower()
    prefs = [p.lower() for p in preferred]
    if any(req in p for p in prefs):
        return tiers.exact
    for category in tiers.categories:
        cat = category.lower()
        if cat in req and any(cat in p for p in prefs):
            return tiers.category
    return tiers.floor


def budget_fit_score(
    quality: float,
    budget_range: str,
    table: Sequence[BudgetTier],
    floor: int,
) -> int:
    """First matching budget row wins; ``floor`` when none match."""
    for row in table:
        if row.label in budget_range and quality >= row.min_quality:
            return row.score
    return floor


def market_timing_score(
    market: Optional[GenreMarketData],
    cfg: TimingConfig,
) -> int:
    if market is None:
        return cfg.unavailable_score
    score = cfg.base
    if market.is_growing:
        score += cfg.growing_bonus
    if market.growth_rate > cfg.growth_rate_threshold:
        score += cfg.growth_bonus
    if market.market_outlook == MarketOutlook.BULLISH:
        score += cfg.bullish_bonus
    if market.streaming_demand > cfg.streaming_demand_threshold:
        score += cfg.streaming_bonus
    return min(score, cfg.cap)


def count_tier_score(count: int, tiers: Sequence[CountTier]) -> int:
    """Tiers are ordered by descending ``min_count`` and end at 0."""
    for tier in tiers:
        if count >= tier.min_count:
            return tier.score
    return tiers[-1].score


def _first_token(label: str) -> str:
    tokens = label.lower().split()
    return tokens[0].strip(",.") if tokens else ""


def matching_activity(
    candidate_name: str,
    activity: Sequence[ActivityRecord],
    company: str = "",
) -> list[ActivityRecord]:
    """Feed records attributed to a candidate.

    A record matches when it contains the first token of the candidate's name
    or of its company (case-insensitive). The feed is keyed by company, so a
    producer named after a person ("Jason Blum") is found through the company
    ("Blumhouse Productions").
    """
    keys = [k for k in (_first_token(candidate_name), _first_token(company)) if k]
    if not keys:
        return []
    return [a for a in activity if any(k in a.candidate_name.lower() for k in keys)]


# ── Scorer ────────────────────────────────────────────────────────────────────


class FactorScorer:
    """Scores a concept against one candidate using injected tables.

    Args:
        config:  Scoring tiers, tables and floors.
        catalog: Genre adjacency and market tables. Defaults to an empty
                 catalog (no adjacency, every genre's market data unavailable).
    """

    def __init__(
        self,
        config: ScoringConfig,
        catalog: Optional[IndustryCatalog] = None,
    ) -> None:
        self.config = config
        self.catalog = catalog if catalog is not None else IndustryCatalog.empty()

    def score(
        self,
        concept: Concept,
        candidate: Candidate,
        activity: Sequence[ActivityRecord] = (),
    ) -> FactorScores:
        if candidate.role == CandidateRole.PRODUCER:
            scores = self._producer_scores(concept, candidate, activity)
        else:
            scores = self._buyer_scores(concept, candidate, activity)
        ordered = {
            name: _clamp_score(scores[name]) for name in ROLE_FACTORS[candidate.role]
        }
        return FactorScores(role=candidate.role, scores=ordered)

    def _buyer_scores(
        self,
        concept: Concept,
        candidate: Candidate,
        activity: Sequence[ActivityRecord],
    ) -> dict[str, int]:
        cfg = self.config
        market = self.catalog.market_data(concept.genre)
        if market is None:
            logger.debug(
                "No market data for genre '%s'; timing falls back to %d",
                concept.genre, cfg.timing.unavailable_score,
            )
        return {
            "genre": genre_affinity_score(
                concept.genre,
                candidate.primary_genres,
                candidate.secondary_genres,
                self.catalog.related_genres(concept.genre),
                cfg.genre,
            ),
            "format": format_fit_score(concept.format, candidate.preferred_formats, cfg.format),
            "budget": budget_fit_score(
                concept.quality_score, candidate.budget_range, cfg.buyer_budget, cfg.budget_floor
            ),
            "timing": market_timing_score(market, cfg.timing),
            "activity": count_tier_score(
                len(matching_activity(candidate.name, activity, candidate.company)),
                cfg.activity_tiers,
            ),
        }

    def _producer_scores(
        self,
        concept: Concept,
        candidate: Candidate,
        activity: Sequence[ActivityRecord],
    ) -> dict[str, int]:
        cfg = self.config
        return {
            "genre_expertise": genre_expertise_score(
                concept.genre,
                candidate.primary_genres,
                candidate.secondary_genres,
                self.catalog.related_genres(concept.genre),
                cfg.genre,
            ),
            "track_record": count_tier_score(
                len(candidate.recent_acquisitions), cfg.track_record_tiers
            ),
            "budget_alignment": budget_fit_score(
                concept.quality_score, candidate.budget_range, cfg.producer_budget, cfg.budget_floor
            ),
            "accessibility": (
                cfg.accessibility_open if candidate.accepts_unsolicited
                else cfg.accessibility_closed
            ),
            "momentum": count_tier_score(
                len(matching_activity(candidate.name, activity, candidate.company)),
                cfg.activity_tiers,
            ),
        }

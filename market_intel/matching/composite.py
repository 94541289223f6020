"""
Composite scoring and ranking of candidates for one concept.

    overall = round_half_up(Σ weight·factor), clamped to [0, 100]

Weight sets come from ``ScoringConfig.weights`` keyed by role and are
re-checked when the scorer is constructed; a corrupt set raises
``ConfigurationError`` there, never inside ``rank()``.

Ranking
-------
1. Candidates whose role differs from the requested role are skipped.
2. Matches with ``overall < min_overall_score`` are dropped (hard filter).
3. Sort by ``(-overall, candidate_name)``; ties break on ascending name.
4. Truncate to ``top_n``.

Annotations (match factors, warnings, opportunities, match reason, market
position) are derived from the factor scores after the fact. They never
feed back into ``overall_score``.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence
from typing import Optional

from market_intel.catalog.loader import IndustryCatalog
from market_intel.config import ScoringConfig, check_weight_sets
from market_intel.errors import ConfigurationError, InvalidInputError
from market_intel.matching.factors import FactorScorer, FactorScores
from market_intel.models.candidate import ActivityRecord, Candidate
from market_intel.models.concept import Concept
from market_intel.models.match import MatchResult
from market_intel.taxonomy.industry_taxonomy import CandidateRole

logger = logging.getLogger(__name__)

# Annotation thresholds (descriptive only)
_STRONG_FACTOR = 80
_ACTIVE_FACTOR = 70
_FAVORABLE_TIMING = 75
_WEAK_GENRE_LOW = 50
_WEAK_GENRE_HIGH = 60
_HIGH_CONTENT_SPEND = 10_000
_TRENDING_GROWTH_RATE = 10.0
_PRODUCER_TOP_GENRE = 85
_PRODUCER_HOT_MOMENTUM = 85

# (content spend floor in $M, label): first match wins
_MARKET_POSITIONS: tuple[tuple[float, str], ...] = (
    (15_000, "Market Leader"),
    (8_000, "Major Player"),
    (3_000, "Active Buyer"),
)
_GROWING_PLATFORM_SUBSCRIBERS = 50
_MAX_COMPETITORS = 3


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 away from zero for positive values.

    Python's ``round`` uses banker's rounding (``round(90.5) == 90``); scores
    need the conventional rule. The 6-decimal pre-round absorbs float noise
    from the weighted sum (e.g. 90.49999999999999).
    """
    return math.floor(round(value, 6) + 0.5)


class CompositeScorer:
    """Weights factor scores, filters, sorts and truncates candidate matches.

    Args:
        config:  Scoring configuration (weights, filter, top-N, factor tables).
        catalog: Industry catalog for adjacency and market data.

    Raises:
        ConfigurationError: Weight sets do not cover each role's factors
            exactly or do not sum to 1.0.
    """

    def __init__(
        self,
        config: ScoringConfig,
        catalog: Optional[IndustryCatalog] = None,
    ) -> None:
        try:
            check_weight_sets(config.weights)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc
        self.config = config
        self.catalog = catalog if catalog is not None else IndustryCatalog.empty()
        self.factor_scorer = FactorScorer(config, self.catalog)

    # ── Public API ────────────────────────────────────────────────────────────

    def rank(
        self,
        concept: Optional[Concept],
        candidates: Optional[Iterable[Candidate]],
        activity: Sequence[ActivityRecord] = (),
        role: CandidateRole | str = CandidateRole.BUYER,
    ) -> list[MatchResult]:
        """Return the ranked top-N matches of ``concept`` against ``candidates``.

        Args:
            concept:    Concept to match. ``None`` raises ``InvalidInputError``.
            candidates: Candidate pool; ``None`` or empty yields ``[]``.
            activity:   Intelligence-feed records (may be empty).
            role:       Which candidates to rank and which weights to use.
                        Plain strings (``"producer"``) are accepted.

        Returns:
            MatchResults with ``overall_score >= min_overall_score``, sorted by
            ``(-overall_score, candidate_name)``, at most ``top_n`` long.
        """
        if concept is None:
            raise InvalidInputError("rank() requires a concept.")
        try:
            role = CandidateRole(role)
        except ValueError:
            raise InvalidInputError(f"Unknown candidate role '{role}'.") from None
        if candidates is None:
            return []

        activity = tuple(activity or ())
        pool = tuple(candidates)
        results: list[MatchResult] = []
        skipped = 0
        for candidate in pool:
            if candidate.role != role:
                continue
            match = self.score_candidate(concept, candidate, activity, pool)
            if match.overall_score < self.config.min_overall_score:
                skipped += 1
                continue
            results.append(match)

        results.sort(key=lambda m: (-m.overall_score, m.candidate_name))
        ranked = results[: self.config.top_n]
        logger.debug(
            "Ranked %s '%s': %d kept, %d below %d, returning %d",
            role.value, concept.title, len(results), skipped,
            self.config.min_overall_score, len(ranked),
        )
        return ranked

    def score_candidate(
        self,
        concept: Concept,
        candidate: Candidate,
        activity: Sequence[ActivityRecord] = (),
        pool: Sequence[Candidate] = (),
    ) -> MatchResult:
        """Score one candidate without filtering.

        ``pool`` is the candidate list competitor buyers are drawn from.
        """
        factors = self.factor_scorer.score(concept, candidate, activity)
        overall = self.overall_score(factors)
        if candidate.role == CandidateRole.PRODUCER:
            match_factors, warnings, opportunities = self._producer_annotations(
                concept, candidate, factors
            )
            reason = self._producer_reason(concept, candidate, factors["genre_expertise"])
            position = None
            competitors: tuple[str, ...] = ()
        else:
            match_factors, warnings, opportunities = self._buyer_annotations(
                concept, candidate, factors
            )
            reason = self._buyer_reason(concept, candidate, factors["genre"])
            position = market_position(candidate)
            competitors = competitor_buyers(concept, candidate, pool)

        return MatchResult(
            candidate_name=candidate.name,
            candidate_category=candidate.category,
            role=candidate.role,
            overall_score=overall,
            factor_scores=dict(factors.scores),
            match_factors=tuple(match_factors),
            warnings=tuple(warnings),
            opportunities=tuple(opportunities),
            match_reason=reason,
            market_position=position,
            competitor_buyers=competitors,
        )

    def overall_score(self, factors: FactorScores) -> int:
        weights = self.config.weights[factors.role.value]
        return max(0, min(100, round_half_up(factors.weighted_sum(weights))))

    # ── Annotations ───────────────────────────────────────────────────────────

    def _buyer_annotations(
        self,
        concept: Concept,
        candidate: Candidate,
        factors: FactorScores,
    ) -> tuple[list[str], list[str], list[str]]:
        genre = concept.genre

        match_factors: list[str] = []
        if factors["genre"] >= _STRONG_FACTOR:
            match_factors.append("Strong genre alignment")
        if factors["format"] >= _STRONG_FACTOR:
            match_factors.append("Format preference match")
        if factors["activity"] >= _ACTIVE_FACTOR:
            match_factors.append("Recently active in your space")
        if factors["timing"] >= _FAVORABLE_TIMING:
            match_factors.append("Favorable market timing")
        if candidate.accepts_unsolicited:
            match_factors.append("Accepts unsolicited submissions")
        if candidate.content_spend > _HIGH_CONTENT_SPEND:
            match_factors.append("High content spend")

        warnings: list[str] = []
        if not candidate.accepts_unsolicited:
            warnings.append("Requires agent representation")
        if _WEAK_GENRE_LOW <= factors["genre"] < _WEAK_GENRE_HIGH:
            warnings.append("Genre is secondary priority")
        if factors["timing"] < self.config.timing.base:
            warnings.append("Market timing not optimal")

        opportunities: list[str] = []
        market = self.catalog.market_data(genre)
        if market is not None and market.is_growing and market.growth_rate > _TRENDING_GROWTH_RATE:
            opportunities.append(f"{genre} is trending hot right now")
        if any(genre.lower() in title.lower() for title in candidate.recent_acquisitions):
            opportunities.append("Recently acquired similar content")
        if candidate.upcoming_slate:
            opportunities.append("Active development slate indicates buying mode")

        return match_factors, warnings, opportunities

    def _producer_annotations(
        self,
        concept: Concept,
        candidate: Candidate,
        factors: FactorScores,
    ) -> tuple[list[str], list[str], list[str]]:
        genre = concept.genre

        match_factors: list[str] = []
        if factors["genre_expertise"] >= _PRODUCER_TOP_GENRE:
            match_factors.append(f"Top-tier {genre} expertise")
        if factors["track_record"] >= _STRONG_FACTOR:
            match_factors.append("Proven box office track record")
        if candidate.accepts_unsolicited:
            match_factors.append("Open to new submissions")
        if factors["momentum"] >= _PRODUCER_HOT_MOMENTUM:
            match_factors.append("Strong recent industry momentum")

        warnings: list[str] = []
        if not candidate.accepts_unsolicited:
            warnings.append("Requires agent referral")
        if factors["genre_expertise"] < _WEAK_GENRE_HIGH:
            warnings.append("Genre outside core expertise")

        opportunities: list[str] = []
        if candidate.primary_genres and candidate.primary_genres[0] == genre:
            opportunities.append("Your genre is their #1 specialty")
        if genre.lower() in candidate.looking_for.lower():
            opportunities.append(f"Actively seeking {genre} content")

        return match_factors, warnings, opportunities

    def _buyer_reason(self, concept: Concept, candidate: Candidate, genre_score: int) -> str:
        genre = concept.genre
        if genre_score >= self.config.genre.primary:
            mandate = candidate.looking_for.split(".")[0].strip()
            if mandate:
                return (
                    f"{candidate.name} is actively acquiring {genre} content and your "
                    f'concept aligns with their current mandate: "{mandate}."'
                )
            return f"{candidate.name} is actively acquiring {genre} content."
        if genre_score >= self.config.genre.secondary:
            return (
                f"{candidate.name} includes {genre} in their secondary interests, "
                "with recent acquisitions showing openness to the genre."
            )
        return (
            f"{candidate.name}'s diverse slate suggests potential interest, "
            f"though {genre} isn't their primary focus."
        )

    def _producer_reason(self, concept: Concept, candidate: Candidate, genre_score: int) -> str:
        genre = concept.genre
        if genre_score >= self.config.genre.producer_specialty:
            company = f" at {candidate.company}" if candidate.company else ""
            return (
                f"{candidate.name}{company} is one of the top {genre} producers "
                "in the industry with multiple hits in the genre."
            )
        if genre_score >= self.config.genre.secondary and candidate.looking_for:
            return (
                f"{candidate.name} has demonstrated {genre} expertise and is "
                f'actively seeking: "{candidate.looking_for}"'
            )
        return (
            f"{candidate.name}'s versatile track record suggests potential fit, "
            "especially with the right concept angle."
        )


def market_position(candidate: Candidate) -> str:
    """Buyer size label from annual content spend and subscriber base."""
    for floor, label in _MARKET_POSITIONS:
        if candidate.content_spend > floor:
            return label
    if candidate.subscribers > _GROWING_PLATFORM_SUBSCRIBERS:
        return "Growing Platform"
    return "Selective Buyer"


def competitor_buyers(
    concept: Concept,
    candidate: Candidate,
    pool: Sequence[Candidate],
) -> tuple[str, ...]:
    """First few other buyers in ``pool`` of the same category that list the
    concept's genre among their primary genres."""
    genre = concept.genre.casefold()
    names = [
        other.name
        for other in pool
        if other.name != candidate.name
        and other.category == candidate.category
        and genre in (g.casefold() for g in other.primary_genres)
    ]
    return tuple(names[:_MAX_COMPETITORS])

"""
Portfolio health aggregation.

    health = quality_weight         · average_score
           + diversification_weight · entropy · 100
           + size_weight            · min(N / size_target, 1) · 100

Defaults are 0.4 / 0.3 / 0.3 with a size target of 10, so the result is in
[0, 100] for valid inputs; it is clamped regardless.

Market position from the average score:
    >= 85 Premium, >= 75 Competitive, >= 65 Developing, else Early Stage.

Strongest / weakest genre are the arg-max / arg-min of per-genre average
score. Ties resolve by canonical genre order, then first appearance.
"""

from __future__ import annotations

from collections.abc import Sequence

from market_intel.config import HealthConfig
from market_intel.models.concept import PortfolioConcept
from market_intel.models.portfolio import DiversificationEntry, PortfolioSummary
from market_intel.portfolio.diversification import group_by_genre
from market_intel.taxonomy.genre_taxonomy import CANONICAL_GENRES, genre_sort_key

_POSITION_DETAILS: dict[str, str] = {
    "Premium": "Ready for top-tier buyers",
    "Competitive": "Strong market positioning",
    "Developing": "Good potential, needs refinement",
    "Early Stage": "Focus on concept development",
}


class PortfolioHealthAggregator:
    """Blends quality, diversification and size into a ``PortfolioSummary``.

    The returned summary carries no recommendations; the portfolio engine
    fills them in.
    """

    def __init__(
        self,
        config: HealthConfig,
        canonical_genres: Sequence[str] = CANONICAL_GENRES,
    ) -> None:
        self.config = config
        self.canonical: tuple[str, ...] = tuple(canonical_genres)

    def health_score(self, average_score: float, entropy: float, count: int) -> float:
        cfg = self.config
        size_ratio = min(count / cfg.size_target, 1.0)
        health = (
            cfg.quality_weight * average_score
            + cfg.diversification_weight * entropy * 100.0
            + cfg.size_weight * size_ratio * 100.0
        )
        return max(0.0, min(100.0, health))

    def market_position(self, average_score: float) -> str:
        cfg = self.config
        if average_score >= cfg.premium_threshold:
            return "Premium"
        if average_score >= cfg.competitive_threshold:
            return "Competitive"
        if average_score >= cfg.developing_threshold:
            return "Developing"
        return "Early Stage"

    def aggregate(
        self,
        portfolio: Sequence[PortfolioConcept],
        entries: Sequence[DiversificationEntry],
        entropy: float,
    ) -> PortfolioSummary:
        if not portfolio:
            return PortfolioSummary.empty()

        scores = [c.current_score for c in portfolio]
        average = sum(scores) / len(scores)
        strongest, weakest = self._extreme_genres(portfolio, entries)
        position = self.market_position(average)

        return PortfolioSummary(
            total_concepts=len(portfolio),
            average_score=average,
            highest_score=max(scores),
            lowest_score=min(scores),
            strongest_genre=strongest,
            weakest_genre=weakest,
            portfolio_health=self.health_score(average, entropy, len(portfolio)),
            market_position=position,
            market_position_detail=_POSITION_DETAILS[position],
        )

    def _extreme_genres(
        self,
        portfolio: Sequence[PortfolioConcept],
        entries: Sequence[DiversificationEntry],
    ) -> tuple[str, str]:
        groups = group_by_genre(portfolio)
        first_seen = {genre: i for i, genre in enumerate(groups)}
        if entries:
            averages = {e.genre: e.average_score for e in entries}
        else:
            averages = {
                genre: sum(c.current_score for c in concepts) / len(concepts)
                for genre, concepts in groups.items()
            }

        def order(genre: str) -> tuple[int, int]:
            return genre_sort_key(genre, self.canonical, first_seen)

        strongest = min(averages, key=lambda g: (-averages[g], order(g)))
        weakest = min(averages, key=lambda g: (averages[g], order(g)))
        return strongest, weakest

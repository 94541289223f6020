"""
Strategic recommendations from portfolio state.

Rules are evaluated in a fixed order and independently of each other; any
number may fire:

  1. diversify       high    first canonical genre with zero concepts and
                             demand > 0.75, else first under-indexed genre
  2. improve         high    lowest-scoring concept below 70
  3. submit          high    first ``ready`` concept scoring >= 80, with the
                             genre's market window and best platform
  4. seasonal        medium  configured calendar windows (Horror Jul-Sep,
                             Drama Aug-Nov by default)
  5. health          medium  portfolio health below 60
  6. backlog         low     more than 5 concepts in ``developing``
  7. premium         high    any concept scoring >= 90
  8. stale           low     ``developing`` concepts untouched for 30+ days
  9. size            low     fewer than 5 concepts

The list is sorted stably by priority (high, medium, low) and capped at
``max_recommendations``. No rule firing yields ``[]``.

The current date is an explicit argument so output is reproducible.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Optional

from market_intel.catalog.loader import IndustryCatalog
from market_intel.config import DiversificationConfig, RecommendationConfig
from market_intel.models.concept import PortfolioConcept
from market_intel.models.portfolio import (
    DiversificationEntry,
    PortfolioSummary,
    StrategicRecommendation,
)
from market_intel.taxonomy.genre_taxonomy import (
    PRIORITY_ORDER,
    DiversificationStatus,
    RecommendationCategory,
    RecommendationPriority,
)
from market_intel.taxonomy.industry_taxonomy import ConceptStatus

_DEFAULT_WINDOW = "Year-round"
_DEFAULT_PLATFORM = "Multiple platforms"


class RecommendationGenerator:
    """Applies the recommendation rule set to a portfolio snapshot."""

    def __init__(
        self,
        config: RecommendationConfig,
        diversification: DiversificationConfig,
        catalog: Optional[IndustryCatalog] = None,
    ) -> None:
        self.config = config
        self.diversification = diversification
        self.catalog = catalog if catalog is not None else IndustryCatalog.empty()

    def generate(
        self,
        portfolio: Sequence[PortfolioConcept],
        summary: PortfolioSummary,
        entries: Sequence[DiversificationEntry],
        today: date,
    ) -> list[StrategicRecommendation]:
        if not portfolio:
            return []

        rules = (
            self._diversify(portfolio, entries),
            self._improve(portfolio),
            self._submit(portfolio),
            *self._seasonal(portfolio, today),
            self._strengthen(summary),
            self._backlog(portfolio),
            self._premium(portfolio),
            self._stale(portfolio, today),
            self._build_out(portfolio),
        )
        fired = [r for r in rules if r is not None]
        fired.sort(key=lambda r: PRIORITY_ORDER[r.priority])
        return fired[: self.config.max_recommendations]

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _demand(self, genre: str) -> float:
        data = self.catalog.market_data(genre)
        return data.market_demand if data is not None else self.diversification.default_market_demand

    def qualifying_genres(
        self,
        portfolio: Sequence[PortfolioConcept],
        entries: Sequence[DiversificationEntry],
    ) -> list[str]:
        """Absent high-demand canonical genres, then under-indexed present ones."""
        present = {c.genre for c in portfolio}
        threshold = self.diversification.under_index_min_demand
        absent = [
            g for g in self.diversification.canonical_genres
            if g not in present and self._demand(g) > threshold
        ]
        under = [
            e.genre for e in entries
            if e.status == DiversificationStatus.UNDER_INDEXED and e.genre not in absent
        ]
        return absent + under

    # ── Rules ─────────────────────────────────────────────────────────────────

    def _diversify(
        self,
        portfolio: Sequence[PortfolioConcept],
        entries: Sequence[DiversificationEntry],
    ) -> Optional[StrategicRecommendation]:
        genres = self.qualifying_genres(portfolio, entries)
        if not genres:
            return None
        genre = genres[0]
        return StrategicRecommendation(
            title=f"Diversify into {genre}",
            description=(
                f"{genre} has {self._demand(genre) * 100:.0f}% market demand "
                "but is underrepresented in your portfolio."
            ),
            action_item=f"Develop a new {genre} concept to capture market opportunity",
            priority=RecommendationPriority.HIGH,
            category=RecommendationCategory.DIVERSIFICATION,
        )

    def _improve(self, portfolio: Sequence[PortfolioConcept]) -> Optional[StrategicRecommendation]:
        low = [c for c in portfolio if c.current_score < self.config.low_score_threshold]
        if not low:
            return None
        concept = min(low, key=lambda c: c.current_score)
        return StrategicRecommendation(
            title=f'Improve "{concept.title}"',
            description=(
                f"Current score of {concept.current_score:.1f} is below market "
                "threshold. Focus on concept development."
            ),
            action_item="Re-run analysis and strengthen the concept's weakest elements",
            priority=RecommendationPriority.HIGH,
            category=RecommendationCategory.IMPROVEMENT,
        )

    def _submit(self, portfolio: Sequence[PortfolioConcept]) -> Optional[StrategicRecommendation]:
        ready = [
            c for c in portfolio
            if c.status == ConceptStatus.READY and c.current_score >= self.config.submit_threshold
        ]
        if not ready:
            return None
        concept = ready[0]
        market = self.catalog.market_data(concept.genre)
        window = market.market_window if market is not None else _DEFAULT_WINDOW
        platform = market.best_platform if market is not None else _DEFAULT_PLATFORM
        return StrategicRecommendation(
            title=f'Submit "{concept.title}"',
            description=(
                f"Score of {concept.current_score:.1f} is submission-ready. "
                f"Optimal market window: {window}"
            ),
            action_item=f"Generate pitch materials and target {platform}",
            priority=RecommendationPriority.HIGH,
            category=RecommendationCategory.SUBMISSION,
        )

    def _seasonal(
        self,
        portfolio: Sequence[PortfolioConcept],
        today: date,
    ) -> list[Optional[StrategicRecommendation]]:
        fired: list[Optional[StrategicRecommendation]] = []
        for window in self.config.seasonal_windows:
            if today.month not in window.months:
                continue
            matching = [
                c for c in portfolio
                if c.genre == window.genre and c.current_score >= window.min_score
            ]
            if not matching:
                continue
            fired.append(
                StrategicRecommendation(
                    title=window.title,
                    description=(
                        f"You have {len(matching)} {window.genre.lower()} concept(s) ready. "
                        "Peak submission window approaching."
                    ),
                    action_item=window.action_item,
                    priority=RecommendationPriority.MEDIUM,
                    category=RecommendationCategory.TIMING,
                )
            )
        return fired

    def _strengthen(self, summary: PortfolioSummary) -> Optional[StrategicRecommendation]:
        if summary.portfolio_health >= self.config.health_threshold:
            return None
        return StrategicRecommendation(
            title="Strengthen Portfolio Health",
            description=(
                f"Portfolio health at {summary.portfolio_health:.0f}%. "
                "Focus on quality and diversification."
            ),
            action_item="Aim to improve average score above 75 and add concepts in 3+ genres",
            priority=RecommendationPriority.MEDIUM,
            category=RecommendationCategory.IMPROVEMENT,
        )

    def _backlog(self, portfolio: Sequence[PortfolioConcept]) -> Optional[StrategicRecommendation]:
        developing = [c for c in portfolio if c.status == ConceptStatus.DEVELOPING]
        if len(developing) <= self.config.backlog_threshold:
            return None
        return StrategicRecommendation(
            title="Clear Development Backlog",
            description=(
                f"{len(developing)} concepts in development. "
                "Consider focusing on fewer projects."
            ),
            action_item="Prioritize top 3 concepts for focused development",
            priority=RecommendationPriority.LOW,
            category=RecommendationCategory.IMPROVEMENT,
        )

    def _premium(self, portfolio: Sequence[PortfolioConcept]) -> Optional[StrategicRecommendation]:
        premium = [c for c in portfolio if c.current_score >= self.config.premium_threshold]
        if not premium:
            return None
        return StrategicRecommendation(
            title="Premium Concepts Available",
            description=(
                f"{len(premium)} concept(s) scoring {self.config.premium_threshold:.0f}+. "
                "These are ready for top-tier buyers."
            ),
            action_item="Target A24, Netflix, Apple TV+ for premium submissions",
            priority=RecommendationPriority.HIGH,
            category=RecommendationCategory.SUBMISSION,
        )

    def _stale(
        self,
        portfolio: Sequence[PortfolioConcept],
        today: date,
    ) -> Optional[StrategicRecommendation]:
        stale = [
            c for c in portfolio
            if c.status == ConceptStatus.DEVELOPING
            and (today - c.last_modified.date()).days > self.config.stale_days
        ]
        if not stale:
            return None
        return StrategicRecommendation(
            title="Refresh Stale Concepts",
            description=(
                f"{len(stale)} concept(s) haven't been updated in "
                f"{self.config.stale_days}+ days."
            ),
            action_item=f'Revisit "{stale[0].title}" and run a fresh analysis',
            priority=RecommendationPriority.LOW,
            category=RecommendationCategory.DEVELOPMENT,
        )

    def _build_out(self, portfolio: Sequence[PortfolioConcept]) -> Optional[StrategicRecommendation]:
        if len(portfolio) >= self.config.min_portfolio_size:
            return None
        return StrategicRecommendation(
            title="Build Out Your Portfolio",
            description=(
                f"{len(portfolio)} concept(s) in your portfolio. "
                f"Build to {self.config.min_portfolio_size}+ concepts for better market coverage."
            ),
            action_item="Develop additional concepts across high-demand genres",
            priority=RecommendationPriority.LOW,
            category=RecommendationCategory.DEVELOPMENT,
        )

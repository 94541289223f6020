"""
Portfolio analysis pipeline.

    DiversificationAnalyzer → PortfolioHealthAggregator → RecommendationGenerator

``PortfolioAnalyzer.summarize()`` runs the three stages in that order and
returns a ``PortfolioReport``. The summary's ``recommendations`` field holds
the one-line renderings of the structured recommendations.

An empty portfolio short-circuits to ``PortfolioSummary.empty()`` (the
onboarding message) with no structured recommendations.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from market_intel.catalog.loader import IndustryCatalog
from market_intel.config import AppConfig
from market_intel.models.concept import PortfolioConcept
from market_intel.models.portfolio import (
    DiversificationAnalysis,
    PortfolioSummary,
    StrategicRecommendation,
)
from market_intel.portfolio.diversification import DiversificationAnalyzer
from market_intel.portfolio.health import PortfolioHealthAggregator
from market_intel.portfolio.recommendations import RecommendationGenerator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PortfolioReport:
    """Everything the portfolio pipeline produces for one snapshot."""

    summary:         PortfolioSummary
    diversification: DiversificationAnalysis = field(default_factory=DiversificationAnalysis)
    recommendations: tuple[StrategicRecommendation, ...] = ()


class PortfolioAnalyzer:
    """Runs diversification, health and recommendation stages in order."""

    def __init__(
        self,
        diversification: DiversificationAnalyzer,
        health: PortfolioHealthAggregator,
        recommendations: RecommendationGenerator,
    ) -> None:
        self.diversification = diversification
        self.health = health
        self.recommendations = recommendations

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        catalog: Optional[IndustryCatalog] = None,
    ) -> "PortfolioAnalyzer":
        catalog = catalog if catalog is not None else IndustryCatalog.empty()
        return cls(
            diversification=DiversificationAnalyzer(config.diversification, catalog),
            health=PortfolioHealthAggregator(
                config.health, config.diversification.canonical_genres
            ),
            recommendations=RecommendationGenerator(
                config.recommendations, config.diversification, catalog
            ),
        )

    def summarize(
        self,
        portfolio: Sequence[PortfolioConcept],
        today: date,
    ) -> PortfolioReport:
        """Analyse ``portfolio`` as of ``today``."""
        if not portfolio:
            logger.info("Portfolio is empty; returning onboarding summary")
            return PortfolioReport(summary=PortfolioSummary.empty())

        analysis = self.diversification.analyze(portfolio)
        summary = self.health.aggregate(portfolio, analysis.entries, analysis.entropy_score)
        recs = self.recommendations.generate(portfolio, summary, analysis.entries, today)
        summary = summary.model_copy(
            update={"recommendations": tuple(r.summary_line for r in recs)}
        )
        logger.info(
            "Portfolio summary: %d concepts, health %.1f, %s, %d recommendations",
            summary.total_concepts,
            summary.portfolio_health,
            summary.market_position,
            len(recs),
        )
        return PortfolioReport(
            summary=summary,
            diversification=analysis,
            recommendations=tuple(recs),
        )

"""
Tests for market_intel/portfolio/engine.py.

What we test
------------
PortfolioAnalyzer.summarize():
  - Empty portfolio → onboarding summary, no structured recommendations.
  - Demo portfolio against the shipped catalog: headline numbers, strongest and
    weakest genre, and the three recommendations that fire on 2026-10-18.
  - summary.recommendations mirrors the structured recommendations.
  - Output never holds more than 5 recommendations.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timezone

import pytest

from market_intel.config import AppConfig
from market_intel.demo.sample_portfolio import SeededPortfolioGenerator
from market_intel.models.portfolio import PortfolioSummary
from market_intel.portfolio.engine import PortfolioAnalyzer, PortfolioReport
from market_intel.taxonomy.industry_taxonomy import ConceptStatus

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def demo_report(shipped_catalog) -> PortfolioReport:
    portfolio = SeededPortfolioGenerator(seed=42).generate(NOW)
    analyzer = PortfolioAnalyzer.from_config(AppConfig(), shipped_catalog)
    return analyzer.summarize(portfolio, NOW.date())


class TestEmptyPortfolio:
    def test_onboarding_summary(self):
        report = PortfolioAnalyzer.from_config(AppConfig()).summarize([], date(2026, 10, 18))
        assert report.summary == PortfolioSummary.empty()
        assert report.summary.total_concepts == 0
        assert report.summary.market_position == "No concepts yet"
        assert report.summary.recommendations == ("Add your first concept to get started!",)
        assert report.recommendations == ()
        assert report.diversification.entries == ()


class TestDemoPortfolio:
    def test_headline_numbers(self, demo_report):
        s = demo_report.summary
        assert s.total_concepts == 8
        assert s.average_score == pytest.approx(80.1)
        assert s.highest_score == 91.2
        assert s.lowest_score == 68.5
        assert s.market_position == "Competitive"
        assert s.strongest_genre == "Thriller"
        assert s.weakest_genre == "Comedy"

    def test_health(self, demo_report):
        entropy = math.log2(8) / math.log2(9)
        expected = 0.4 * 80.1 + 0.3 * entropy * 100 + 0.3 * 0.8 * 100
        assert demo_report.diversification.entropy_score == pytest.approx(entropy)
        assert demo_report.summary.portfolio_health == pytest.approx(expected)

    def test_recommendations(self, demo_report):
        assert [r.title for r in demo_report.recommendations] == [
            'Improve "Last Laugh Comedy Club"',
            'Submit "The Last Algorithm"',
            "Premium Concepts Available",
        ]

    def test_summary_lines_mirror_structured(self, demo_report):
        assert demo_report.summary.recommendations == tuple(
            r.summary_line for r in demo_report.recommendations
        )
        assert demo_report.summary.recommendations[0] == (
            'Improve "Last Laugh Comedy Club": Current score of 68.5 is below market '
            "threshold. Focus on concept development."
        )

    def test_capped_at_five(self, shipped_catalog, make_pc):
        portfolio = [
            make_pc(genre="Comedy", score=55.0, status=ConceptStatus.DEVELOPING,
                    modified_days_ago=45),
            make_pc(genre="Horror", score=95.0, status=ConceptStatus.READY),
        ]
        report = PortfolioAnalyzer.from_config(AppConfig(), shipped_catalog).summarize(
            portfolio, date(2026, 8, 20)
        )
        assert len(report.recommendations) == 5
        assert len(report.summary.recommendations) == 5

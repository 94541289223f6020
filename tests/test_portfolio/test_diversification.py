"""
Tests for market_intel/portfolio/diversification.py.

What we test
------------
normalized_entropy():
  - Even spread over all K genres → 1.0.
  - Single genre → 0.0.
  - Two equal genres → log2(2) / log2(9).
  - Empty distribution or K < 2 → 0.0.

DiversificationAnalyzer.analyze():
  - One concept per canonical genre: entropy ≈ 1.0, every genre balanced.
  - Ten concepts in one genre: entropy 0.0, that genre over-indexed.
  - Percentages sum to 100.
  - Under-indexed requires both a small share and high catalog demand.
  - Unknown genres fall back to 0.5 demand.
  - Entries sorted by count desc, then canonical order, then first appearance.
  - Configured canonical list changes K and the ideal share.
  - Empty portfolio → no entries, entropy 0.0.
  - Canonical genres in any letter case count as one genre.
  - Analyzing the same portfolio twice gives equal results.
"""

from __future__ import annotations

import math

import pytest

from market_intel.config import DiversificationConfig
from market_intel.portfolio.diversification import (
    DiversificationAnalyzer,
    group_by_genre,
    normalized_entropy,
)
from market_intel.taxonomy.genre_taxonomy import CANONICAL_GENRES, DiversificationStatus


class TestNormalizedEntropy:
    def test_even_spread(self):
        assert normalized_entropy([1] * 9, 9) == pytest.approx(1.0)

    def test_single_genre(self):
        assert normalized_entropy([10], 9) == 0.0

    def test_two_equal_genres(self):
        assert normalized_entropy([3, 3], 9) == pytest.approx(1.0 / math.log2(9))

    def test_empty(self):
        assert normalized_entropy([], 9) == 0.0

    def test_k_below_two(self):
        assert normalized_entropy([1, 1], 1) == 0.0

    def test_clamped_when_more_genres_than_k(self):
        assert normalized_entropy([1, 1, 1, 1], 2) == 1.0


class TestAnalyze:
    def test_one_per_canonical_genre(self, make_pc):
        portfolio = [make_pc(genre=g) for g in CANONICAL_GENRES]
        analysis = DiversificationAnalyzer(DiversificationConfig()).analyze(portfolio)
        assert analysis.entropy_score == pytest.approx(1.0)
        assert all(e.status == DiversificationStatus.BALANCED for e in analysis.entries)
        assert len(analysis.entries) == 9

    def test_single_genre_concentration(self, make_pc):
        portfolio = [make_pc(genre="Horror") for _ in range(10)]
        analysis = DiversificationAnalyzer(DiversificationConfig()).analyze(portfolio)
        assert analysis.entropy_score == 0.0
        assert len(analysis.entries) == 1
        entry = analysis.entries[0]
        assert entry.status == DiversificationStatus.OVER_INDEXED
        assert entry.percentage == pytest.approx(100.0)
        assert entry.recommendation == "Consider diversifying - heavy concentration in Horror"

    def test_percentages_sum_to_100(self, make_pc):
        genres = ["Drama", "Drama", "Horror", "Comedy", "Mystery", "Drama", "Action"]
        analysis = DiversificationAnalyzer(DiversificationConfig()).analyze(
            [make_pc(genre=g) for g in genres]
        )
        assert sum(e.percentage for e in analysis.entries) == pytest.approx(100.0)
        assert sum(e.count for e in analysis.entries) == len(genres)

    def test_under_indexed_needs_high_demand(self, make_pc, sample_catalog):
        portfolio = [make_pc(genre="Drama") for _ in range(18)] + [make_pc(genre="Horror")]
        with_catalog = DiversificationAnalyzer(DiversificationConfig(), sample_catalog)
        horror = with_catalog.analyze(portfolio).entry_for("Horror")
        assert horror is not None
        assert horror.percentage < 100 / 9 / 2
        assert horror.market_demand == pytest.approx(0.90)
        assert horror.status == DiversificationStatus.UNDER_INDEXED
        assert horror.recommendation == "Opportunity - Horror has high market demand"

        without_catalog = DiversificationAnalyzer(DiversificationConfig())
        horror = without_catalog.analyze(portfolio).entry_for("Horror")
        assert horror.market_demand == 0.5
        assert horror.status == DiversificationStatus.BALANCED

    def test_sort_order(self, make_pc):
        genres = ["Mystery", "Romance", "Action", "Action"]
        analysis = DiversificationAnalyzer(DiversificationConfig()).analyze(
            [make_pc(genre=g) for g in genres]
        )
        assert [e.genre for e in analysis.entries] == ["Action", "Romance", "Mystery"]

    def test_average_score_per_genre(self, make_pc):
        portfolio = [
            make_pc(genre="Drama", score=80.0),
            make_pc(genre="Drama", score=70.0),
            make_pc(genre="Horror", score=60.0),
        ]
        analysis = DiversificationAnalyzer(DiversificationConfig()).analyze(portfolio)
        assert analysis.entry_for("Drama").average_score == pytest.approx(75.0)
        assert analysis.entry_for("Horror").average_score == pytest.approx(60.0)

    def test_configured_taxonomy(self, make_pc):
        cfg = DiversificationConfig(canonical_genres=["Action", "Drama"])
        assert cfg.ideal_percentage == pytest.approx(50.0)
        analysis = DiversificationAnalyzer(cfg).analyze(
            [make_pc(genre="Action"), make_pc(genre="Drama")]
        )
        assert analysis.entropy_score == pytest.approx(1.0)
        assert all(e.status == DiversificationStatus.BALANCED for e in analysis.entries)

    def test_empty_portfolio(self):
        analysis = DiversificationAnalyzer(DiversificationConfig()).analyze([])
        assert analysis.entries == ()
        assert analysis.entropy_score == 0.0

    def test_genre_case_folded_into_one_entry(self, make_pc):
        analysis = DiversificationAnalyzer(DiversificationConfig()).analyze(
            [make_pc(genre="Horror"), make_pc(genre="horror"), make_pc(genre=" HORROR ")]
        )
        assert [(e.genre, e.count) for e in analysis.entries] == [("Horror", 3)]
        assert analysis.entropy_score == 0.0

    def test_entropy_in_unit_interval(self, make_pc):
        genres = ["Horror", "Mystery", "Documentary", "Animation", "Western", "Action"] * 3
        analysis = DiversificationAnalyzer(DiversificationConfig()).analyze(
            [make_pc(genre=g) for g in genres]
        )
        assert 0.0 <= analysis.entropy_score <= 1.0


def test_group_by_genre_keeps_first_appearance(make_pc):
    portfolio = [make_pc(genre=g) for g in ("Horror", "Drama", "Horror")]
    groups = group_by_genre(portfolio)
    assert list(groups) == ["Horror", "Drama"]
    assert len(groups["Horror"]) == 2


def test_analyze_is_idempotent(make_pc, sample_catalog):
    portfolio = [make_pc(genre=g) for g in ("Horror", "Drama", "Drama", "Western")]
    analyzer = DiversificationAnalyzer(DiversificationConfig(), sample_catalog)
    assert analyzer.analyze(portfolio) == analyzer.analyze(portfolio)

"""
Tests for market_intel/reporting/export.py.

What we test
------------
  - flatten_matches(): one row per match, rank column, f_<factor> columns,
    annotations and competitor buyers joined with "; ".
  - write_matches_csv(): header row plus one row per match.
  - write_matches_json(): concept and matches keys.
  - write_portfolio_report_json(): summary, diversification, recommendations.
  - export_to_csv() with no records writes an empty file.
"""

from __future__ import annotations

import csv
import json
from datetime import date, datetime, timezone

from market_intel.config import AppConfig, ScoringConfig
from market_intel.demo.sample_portfolio import SeededPortfolioGenerator
from market_intel.matching.composite import CompositeScorer
from market_intel.portfolio.engine import PortfolioAnalyzer
from market_intel.reporting.export import (
    export_to_csv,
    flatten_matches,
    write_matches_csv,
    write_matches_json,
    write_portfolio_report_json,
)

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


def _matches(concept, catalog):
    return CompositeScorer(ScoringConfig(), catalog).rank(
        concept, catalog.candidates, catalog.activity
    )


class TestFlatten:
    def test_rows(self, horror_concept, shipped_catalog):
        rows = flatten_matches(_matches(horror_concept, shipped_catalog))
        assert len(rows) == 8
        first = rows[0]
        assert first["rank"] == 1
        assert first["candidate_name"] == "Universal Pictures"
        assert first["f_genre"] == 95
        assert {"f_format", "f_budget", "f_timing", "f_activity"} <= set(first)
        assert "; " in first["match_factors"]
        by_name = {r["candidate_name"]: r for r in rows}
        assert by_name["Blumhouse Productions"]["competitor_buyers"] == "Legendary Entertainment"
        assert first["competitor_buyers"] == ""


class TestWriters:
    def test_csv(self, tmp_path, horror_concept, shipped_catalog):
        path = write_matches_csv(_matches(horror_concept, shipped_catalog), tmp_path / "m.csv")
        with path.open(encoding="utf-8", newline="") as f:
            rows = list(csv.DictReader(f))
        assert len(rows) == 8
        assert rows[0]["candidate_name"] == "Universal Pictures"
        assert rows[0]["overall_score"] == "93"

    def test_json(self, tmp_path, horror_concept, shipped_catalog):
        path = write_matches_json(
            horror_concept, _matches(horror_concept, shipped_catalog), tmp_path / "out" / "m.json"
        )
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["concept"]["genre"] == "Horror"
        assert len(payload["matches"]) == 8
        assert payload["matches"][0]["factor_scores"]["timing"] == 100

    def test_portfolio_report(self, tmp_path, shipped_catalog):
        report = PortfolioAnalyzer.from_config(AppConfig(), shipped_catalog).summarize(
            SeededPortfolioGenerator().generate(NOW), date(2026, 10, 18)
        )
        path = write_portfolio_report_json(report, tmp_path / "report.json")
        payload = json.loads(path.read_text(encoding="utf-8"))
        assert payload["summary"]["total_concepts"] == 8
        assert len(payload["diversification"]["entries"]) == 8
        assert payload["recommendations"][0]["priority"] == "high"

    def test_empty_csv(self, tmp_path):
        path = export_to_csv([], tmp_path / "empty.csv")
        assert path.read_text(encoding="utf-8") == ""

"""
File export for ranked matches and portfolio reports.

All functions write to disk and return the written ``Path``. CSV exports are
flat (factor scores become ``f_<factor>`` columns, list annotations are
joined with ``"; "``) so they open directly in a spreadsheet.
"""

from __future__ import annotations

import csv
import json
import logging
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from market_intel.models.concept import Concept
from market_intel.models.match import MatchResult
from market_intel.portfolio.engine import PortfolioReport

logger = logging.getLogger(__name__)


def _columns(records: Sequence[dict]) -> list[str]:
    """Union of record keys in first-seen order."""
    seen: dict[str, None] = {}
    for rec in records:
        seen.update(dict.fromkeys(rec))
    return list(seen)


def export_to_csv(records: Sequence[dict], path: Path) -> Path:
    """Write ``records`` as UTF-8 CSV; an empty sequence writes an empty file.

    Columns are the union of all record keys, so rows from different
    candidate roles can share one file (missing cells stay blank).
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        if records:
            writer = csv.DictWriter(f, fieldnames=_columns(records))
            writer.writeheader()
            writer.writerows(records)
    return path


def export_to_json(data: dict | list, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, default=str)
        f.write("\n")
    return path


def flatten_matches(matches: Sequence[MatchResult]) -> list[dict]:
    """One flat row per match, in rank order."""
    rows: list[dict] = []
    for rank, m in enumerate(matches, start=1):
        row: dict = {
            "rank":               rank,
            "candidate_name":     m.candidate_name,
            "candidate_category": m.candidate_category.value,
            "role":               m.role.value,
            "overall_score":      m.overall_score,
        }
        for factor, score in m.factor_scores.items():
            row[f"f_{factor}"] = score
        row.update(
            {
                "market_position": m.market_position or "",
                "match_factors":   "; ".join(m.match_factors),
                "warnings":        "; ".join(m.warnings),
                "opportunities":   "; ".join(m.opportunities),
                "match_reason":    m.match_reason,
                "competitor_buyers": "; ".join(m.competitor_buyers),
            }
        )
        rows.append(row)
    return rows


def write_matches_json(
    concept: Concept,
    matches: Sequence[MatchResult],
    path: Path,
) -> Path:
    payload = {
        "generated_at": datetime.now(tz=timezone.utc).isoformat(),
        "concept":      concept.model_dump(mode="json"),
        "matches":      [m.model_dump(mode="json") for m in matches],
    }
    export_to_json(payload, path)
    logger.info("Match JSON written: %s (%d matches)", path, len(matches))
    return path


def write_matches_csv(matches: Sequence[MatchResult], path: Path) -> Path:
    export_to_csv(flatten_matches(matches), path)
    logger.info("Match CSV written: %s (%d rows)", path, len(matches))
    return path


def write_portfolio_report_json(report: PortfolioReport, path: Path) -> Path:
    payload = {
        "generated_at":    datetime.now(tz=timezone.utc).isoformat(),
        "summary":         report.summary.model_dump(mode="json"),
        "diversification": report.diversification.model_dump(mode="json"),
        "recommendations": [r.model_dump(mode="json") for r in report.recommendations],
    }
    export_to_json(payload, path)
    logger.info("Portfolio report JSON written: %s", path)
    return path

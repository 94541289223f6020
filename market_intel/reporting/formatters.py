"""
ASCII terminal formatters for CLI commands.

All formatters accept engine output models and return plain multi-line
strings suitable for ``typer.echo()``. No ``rich``, no colour codes.
"""

from __future__ import annotations

from collections.abc import Sequence

from market_intel.models.concept import Concept
from market_intel.models.match import MatchResult
from market_intel.models.portfolio import (
    DiversificationAnalysis,
    PortfolioSummary,
    StrategicRecommendation,
)
from market_intel.taxonomy.industry_taxonomy import (
    CATEGORY_DISPLAY_NAMES,
    ROLE_FACTORS,
    CandidateRole,
)

# Short column headers for factor names
_FACTOR_HEADERS: dict[str, str] = {
    "genre": "Genre",
    "format": "Format",
    "budget": "Budget",
    "timing": "Timing",
    "activity": "Activity",
    "genre_expertise": "Genre",
    "track_record": "Record",
    "budget_alignment": "Budget",
    "accessibility": "Access",
    "momentum": "Moment",
}


# ── Matches ───────────────────────────────────────────────────────────────────


def format_match_table(
    concept: Concept,
    matches: Sequence[MatchResult],
    role: CandidateRole,
) -> str:
    """Ranked matches as a table, followed by per-match annotations::

        Rank  Candidate                 Type              Score  Genre  Format ...
        -------------------------------------------------------------------------
           1  Blumhouse Productions     Production Co        91     95      95 ...
    """
    lines: list[str] = []
    lines.append("")
    lines.append(f"=== {role.value.title()} Matches ===")
    lines.append(f"  Concept: {concept.title}  ({concept.genre}, {concept.format})")
    lines.append(f"  Quality: {concept.quality_score:.1f}")

    if not matches:
        lines.append("")
        lines.append("  (no candidates scored above the match threshold)")
        return "\n".join(lines)

    factors = ROLE_FACTORS[role]
    factor_cols = "  ".join(f"{_FACTOR_HEADERS[f]:>6}" for f in factors)
    header = f"  {'Rank':>4}  {'Candidate':<30}  {'Type':<16}  {'Score':>5}  {factor_cols}"
    lines.append("")
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for rank, m in enumerate(matches, start=1):
        cat = CATEGORY_DISPLAY_NAMES.get(m.candidate_category, m.candidate_category.value)
        scores = "  ".join(f"{m.factor_scores.get(f, 0):>6}" for f in factors)
        lines.append(
            f"  {rank:>4}  {m.candidate_name[:30]:<30}  {cat[:16]:<16}  "
            f"{m.overall_score:>5}  {scores}"
        )

    for rank, m in enumerate(matches, start=1):
        lines.append("")
        position = f"  [{m.market_position}]" if m.market_position else ""
        lines.append(f"  {rank}. {m.candidate_name}{position}")
        if m.match_reason:
            lines.append(f"     {m.match_reason}")
        for label, items in (
            ("+", m.match_factors),
            ("!", m.warnings),
            ("*", m.opportunities),
        ):
            for item in items:
                lines.append(f"     {label} {item}")
        if m.competitor_buyers:
            lines.append(f"     Competes with: {', '.join(m.competitor_buyers)}")

    return "\n".join(lines)


# ── Portfolio ─────────────────────────────────────────────────────────────────


def format_portfolio_summary(summary: PortfolioSummary) -> str:
    lines: list[str] = []
    lines.append("")
    lines.append("=== Portfolio Summary ===")
    if summary.total_concepts == 0:
        lines.append(f"  {summary.market_position}")
        for rec in summary.recommendations:
            lines.append(f"  -> {rec}")
        return "\n".join(lines)

    position = summary.market_position
    if summary.market_position_detail:
        position = f"{position} - {summary.market_position_detail}"
    lines.append(f"  Concepts:        {summary.total_concepts}")
    lines.append(f"  Average score:   {summary.average_score:.1f}")
    lines.append(f"  Score range:     {summary.lowest_score:.1f} - {summary.highest_score:.1f}")
    lines.append(f"  Strongest genre: {summary.strongest_genre}")
    lines.append(f"  Weakest genre:   {summary.weakest_genre}")
    lines.append(f"  Health:          {summary.portfolio_health:.1f} / 100")
    lines.append(f"  Market position: {position}")

    lines.append("")
    lines.append("  Recommendations:")
    if not summary.recommendations:
        lines.append("    (none -- portfolio is in good shape)")
    for i, rec in enumerate(summary.recommendations, start=1):
        lines.append(f"    {i}. {rec}")
    return "\n".join(lines)


def format_diversification(analysis: DiversificationAnalysis) -> str:
    """Genre breakdown with an ASCII share bar per genre."""
    lines: list[str] = []
    lines.append("")
    lines.append("=== Genre Diversification ===")
    lines.append(f"  Entropy score: {analysis.entropy_score:.3f}  (1.0 = evenly spread)")

    if not analysis.entries:
        lines.append("")
        lines.append("  (portfolio is empty)")
        return "\n".join(lines)

    header = (
        f"  {'Genre':<14}  {'Count':>5}  {'Share':>6}  {'Avg':>5}  "
        f"{'Demand':>6}  {'Status':<13}  Bar"
    )
    lines.append("")
    lines.append(header)
    lines.append("  " + "-" * (len(header) + 18))
    for e in analysis.entries:
        bar = "#" * max(1, round(e.percentage / 5))
        lines.append(
            f"  {e.genre[:14]:<14}  {e.count:>5}  {e.percentage:>5.1f}%  "
            f"{e.average_score:>5.1f}  {e.market_demand:>6.2f}  {e.status.value:<13}  {bar}"
        )
    lines.append("")
    for e in analysis.entries:
        lines.append(f"  - {e.recommendation}")
    return "\n".join(lines)


def format_recommendations(recs: Sequence[StrategicRecommendation]) -> str:
    lines: list[str] = []
    lines.append("")
    lines.append("=== Strategic Recommendations ===")
    if not recs:
        lines.append("  (no recommendations)")
        return "\n".join(lines)
    for i, rec in enumerate(recs, start=1):
        lines.append(f"  {i}. [{rec.priority.value.upper():<6}] {rec.title}  ({rec.category.value})")
        lines.append(f"     {rec.description}")
        lines.append(f"     Action: {rec.action_item}")
    return "\n".join(lines)

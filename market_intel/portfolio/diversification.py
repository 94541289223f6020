"""
Genre diversification analysis.

For a portfolio of N concepts spread over the observed genres:

    percentage_g = count_g / N * 100
    H            = -Σ p_g · log2(p_g)            (observed genres only)
    entropy      = H / log2(K)                    clamped to [0, 1]

K is the size of the configured canonical genre list (nine by default), so
a portfolio spread evenly over all canonical genres scores 1.0 and a
single-genre portfolio scores 0.0.

Status per genre, with ``ideal = 100 / K``:
    percentage > over_index_multiplier · ideal                → over-indexed
    percentage < under_index_multiplier · ideal
        and market demand > under_index_min_demand            → under-indexed
    otherwise                                                 → balanced

Market demand comes from the catalog's genre market table; an unknown genre
uses ``default_market_demand`` (0.5).
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from typing import Optional

from market_intel.catalog.loader import IndustryCatalog
from market_intel.config import DiversificationConfig
from market_intel.models.concept import PortfolioConcept
from market_intel.models.portfolio import DiversificationAnalysis, DiversificationEntry
from market_intel.taxonomy.genre_taxonomy import DiversificationStatus, genre_sort_key

logger = logging.getLogger(__name__)


def group_by_genre(
    portfolio: Sequence[PortfolioConcept],
) -> dict[str, list[PortfolioConcept]]:
    """Concepts per genre, keyed in first-appearance order."""
    groups: dict[str, list[PortfolioConcept]] = {}
    for concept in portfolio:
        groups.setdefault(concept.genre, []).append(concept)
    return groups


def normalized_entropy(counts: Sequence[int], k: int) -> float:
    """Shannon entropy of ``counts`` in bits, divided by ``log2(k)``.

    Returns 0.0 for an empty distribution or when ``k < 2``.
    """
    total = sum(counts)
    if total <= 0 or k < 2:
        return 0.0
    h = 0.0
    for count in counts:
        if count <= 0:
            continue
        p = count / total
        h -= p * math.log2(p)
    return max(0.0, min(1.0, h / math.log2(k)))


class DiversificationAnalyzer:
    """Computes per-genre shares, status and the entropy score of a portfolio."""

    def __init__(
        self,
        config: DiversificationConfig,
        catalog: Optional[IndustryCatalog] = None,
    ) -> None:
        self.config = config
        self.catalog = catalog if catalog is not None else IndustryCatalog.empty()
        self.canonical: tuple[str, ...] = tuple(config.canonical_genres)

    def market_demand(self, genre: str) -> float:
        data = self.catalog.market_data(genre)
        if data is None:
            logger.debug(
                "No market demand for genre '%s'; using %.2f",
                genre, self.config.default_market_demand,
            )
            return self.config.default_market_demand
        return data.market_demand

    def classify(self, percentage: float, demand: float) -> DiversificationStatus:
        ideal = self.config.ideal_percentage
        if percentage > ideal * self.config.over_index_multiplier:
            return DiversificationStatus.OVER_INDEXED
        if (
            percentage < ideal * self.config.under_index_multiplier
            and demand > self.config.under_index_min_demand
        ):
            return DiversificationStatus.UNDER_INDEXED
        return DiversificationStatus.BALANCED

    def analyze(self, portfolio: Sequence[PortfolioConcept]) -> DiversificationAnalysis:
        """Return genre entries (count desc, then canonical order) and entropy."""
        if not portfolio:
            return DiversificationAnalysis()

        groups = group_by_genre(portfolio)
        total = len(portfolio)
        first_seen = {genre: i for i, genre in enumerate(groups)}

        entries: list[DiversificationEntry] = []
        for genre, concepts in groups.items():
            percentage = len(concepts) / total * 100.0
            demand = self.market_demand(genre)
            status = self.classify(percentage, demand)
            entries.append(
                DiversificationEntry(
                    genre=genre,
                    count=len(concepts),
                    percentage=percentage,
                    status=status,
                    average_score=sum(c.current_score for c in concepts) / len(concepts),
                    market_demand=demand,
                    recommendation=_entry_recommendation(genre, status),
                )
            )

        entries.sort(
            key=lambda e: (-e.count, genre_sort_key(e.genre, self.canonical, first_seen))
        )
        entropy = normalized_entropy([e.count for e in entries], len(self.canonical))
        return DiversificationAnalysis(entries=tuple(entries), entropy_score=entropy)


def _entry_recommendation(genre: str, status: DiversificationStatus) -> str:
    if status == DiversificationStatus.OVER_INDEXED:
        return f"Consider diversifying - heavy concentration in {genre}"
    if status == DiversificationStatus.UNDER_INDEXED:
        return f"Opportunity - {genre} has high market demand"
    return f"Good balance for {genre} in your portfolio"

"""
Portfolio analysis output models.

``DiversificationAnalysis`` bundles the per-genre entries with the
normalized entropy score. ``PortfolioSummary`` is the headline view;
``StrategicRecommendation`` is the structured form of each recommendation,
while ``PortfolioSummary.recommendations`` holds their one-line renderings.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from market_intel.taxonomy.genre_taxonomy import (
    DiversificationStatus,
    RecommendationCategory,
    RecommendationPriority,
)

EMPTY_PORTFOLIO_POSITION = "No concepts yet"
EMPTY_PORTFOLIO_MESSAGE = "Add your first concept to get started!"
NO_GENRE = "N/A"


class DiversificationEntry(BaseModel):
    """Share of the portfolio held by one genre.

    Attributes:
        genre: Genre label.
        count: Number of concepts in this genre.
        percentage: ``count / total * 100``.
        status: over-indexed, balanced or under-indexed.
        average_score: Mean ``current_score`` of the genre's concepts.
        market_demand: Catalog demand (0-1); 0.5 when the genre is unknown.
        recommendation: One-line guidance for this genre.
    """

    model_config = ConfigDict(frozen=True)

    genre: str
    count: int
    percentage: float
    status: DiversificationStatus
    average_score: float
    market_demand: float
    recommendation: str


class DiversificationAnalysis(BaseModel):
    """Genre entries plus normalized Shannon entropy in [0, 1]."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[DiversificationEntry, ...] = ()
    entropy_score: float = 0.0

    @field_validator("entropy_score")
    @classmethod
    def validate_entropy(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"entropy_score must be in [0, 1], got {v}.")
        return v

    def entry_for(self, genre: str) -> DiversificationEntry | None:
        for entry in self.entries:
            if entry.genre == genre:
                return entry
        return None


class StrategicRecommendation(BaseModel):
    """A prioritised, actionable portfolio recommendation."""

    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    action_item: str
    priority: RecommendationPriority
    category: RecommendationCategory

    @property
    def summary_line(self) -> str:
        return f"{self.title}: {self.description}"


class PortfolioSummary(BaseModel):
    """Aggregate health of a concept portfolio.

    Attributes:
        total_concepts: Number of concepts.
        average_score: Mean current score.
        highest_score: Best current score.
        lowest_score: Worst current score.
        strongest_genre: Genre with the highest average score.
        weakest_genre: Genre with the lowest average score.
        portfolio_health: Blended 0-100 health score.
        market_position: ``Premium``, ``Competitive``, ``Developing``,
            ``Early Stage``, or ``"No concepts yet"`` for an empty portfolio.
        market_position_detail: One-line explanation of the position.
        recommendations: Ordered one-line recommendations.
    """

    model_config = ConfigDict(frozen=True)

    total_concepts: int = 0
    average_score: float = 0.0
    highest_score: float = 0.0
    lowest_score: float = 0.0
    strongest_genre: str = NO_GENRE
    weakest_genre: str = NO_GENRE
    portfolio_health: float = 0.0
    market_position: str = EMPTY_PORTFOLIO_POSITION
    market_position_detail: str = ""
    recommendations: tuple[str, ...] = ()

    @field_validator("portfolio_health")
    @classmethod
    def validate_health(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"portfolio_health must be in [0, 100], got {v}.")
        return v

    @classmethod
    def empty(cls) -> "PortfolioSummary":
        """The terminal summary for a portfolio with no concepts."""
        return cls(recommendations=(EMPTY_PORTFOLIO_MESSAGE,))

"""
Catalog models: candidates, activity records and per-genre market data.

These come from the static industry catalog (``config/catalog/*.json``) and
are read-only to the engine.

Genre collections are ordered tuples rather than sets: a producer's first
listed primary genre is their signature specialty and scores higher.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from market_intel.taxonomy.genre_taxonomy import normalize_genre
from market_intel.taxonomy.industry_taxonomy import (
    CANDIDATE_ROLE,
    ActivityType,
    CandidateCategory,
    CandidateRole,
    MarketOutlook,
)


class Candidate(BaseModel):
    """A buyer (studio, streamer, ...) or producer that could acquire a concept.

    Attributes:
        name: Display name; also the ranking tie-break key.
        category: Catalog classification; determines the scoring role.
        company: Parent company (buyers) or production company (producers).
        primary_genres: Core genres, most important first.
        secondary_genres: Genres the candidate also buys.
        preferred_formats: Formats the candidate acquires, e.g. ``"Feature Film"``.
        budget_range: Tiered budget label, e.g. ``"$20M - $200M"``.
        accepts_unsolicited: Whether material is accepted without an agent.
        recent_acquisitions: Recent titles (notable credits for producers).
        content_spend: Annual content spend in USD millions.
        subscribers: Subscriber count in millions (0 for non-platforms).
        upcoming_slate: Announced upcoming titles.
        looking_for: Free-text mandate.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    category: CandidateCategory
    company: str = ""
    primary_genres: tuple[str, ...] = ()
    secondary_genres: tuple[str, ...] = ()
    preferred_formats: tuple[str, ...] = ()
    budget_range: str = ""
    accepts_unsolicited: bool = False
    recent_acquisitions: tuple[str, ...] = ()
    content_spend: float = 0.0
    subscribers: float = 0.0
    upcoming_slate: tuple[str, ...] = ()
    looking_for: str = ""

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("name must not be empty.")
        return v.strip()

    @field_validator("primary_genres", "secondary_genres")
    @classmethod
    def canonicalize_genres(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(normalize_genre(g) for g in v)

    @property
    def role(self) -> CandidateRole:
        return CANDIDATE_ROLE[self.category]


class ActivityRecord(BaseModel):
    """One item from the industry intelligence feed."""

    model_config = ConfigDict(frozen=True)

    candidate_name: str
    activity_type: ActivityType
    genre: str
    timestamp: datetime
    project_title: str = ""
    description: str = ""

    @field_validator("genre")
    @classmethod
    def canonicalize_genre(cls, v: str) -> str:
        return normalize_genre(v)


class GenreMarketData(BaseModel):
    """Aggregate market indicators for one genre.

    Attributes:
        genre: Genre label (catalog key).
        is_growing: Year-over-year trend flag.
        growth_rate: Year-over-year growth in percent (may be negative).
        market_outlook: ``bullish``, ``stable`` or ``bearish``.
        streaming_demand: Streaming demand index, 0-100.
        market_demand: Buyer demand, 0-1. Drives under-indexing.
        market_window: Best release/submission window, human readable.
        best_platform: Platforms that over-index on the genre.
        hot_trends: Current trend notes.
    """

    model_config = ConfigDict(frozen=True)

    genre: str
    is_growing: bool = False
    growth_rate: float = 0.0
    market_outlook: MarketOutlook = MarketOutlook.STABLE
    streaming_demand: float = 0.0
    market_demand: float = 0.5
    market_window: str = "Year-round"
    best_platform: str = "Multiple platforms"
    hot_trends: tuple[str, ...] = ()

    @field_validator("genre")
    @classmethod
    def canonicalize_genre(cls, v: str) -> str:
        return normalize_genre(v)

    @field_validator("streaming_demand")
    @classmethod
    def validate_streaming_demand(cls, v: float) -> float:
        if not 0.0 <= v <= 100.0:
            raise ValueError(f"streaming_demand must be in [0, 100], got {v}.")
        return v

    @field_validator("market_demand")
    @classmethod
    def validate_market_demand(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"market_demand must be in [0, 1], got {v}.")
        return v

"""
Shared pytest fixtures for the concept market intelligence test suite.

Provides:
  - Fixed clock values (``NOW`` / ``TODAY``) so date-dependent rules are
    reproducible.
  - A small in-memory ``IndustryCatalog`` with hand-checked market data.
  - The shipped catalog under ``config/catalog/``.
  - ``make_pc``: factory fixture for ``PortfolioConcept`` objects.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Optional

import pytest

from market_intel.catalog.loader import IndustryCatalog, load_catalog
from market_intel.config import AppConfig, ScoringConfig
from market_intel.models.candidate import Candidate, GenreMarketData
from market_intel.models.concept import Concept, PortfolioConcept, ScoreProgression
from market_intel.taxonomy.industry_taxonomy import (
    CandidateCategory,
    ConceptStatus,
    MarketOutlook,
)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SHIPPED_CATALOG_DIR = PROJECT_ROOT / "config" / "catalog"

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)
TODAY = date(2026, 10, 18)


# ── Config ────────────────────────────────────────────────────────────────────

@pytest.fixture
def app_config() -> AppConfig:
    return AppConfig()


@pytest.fixture
def scoring_config() -> ScoringConfig:
    return ScoringConfig()


# ── Catalog ───────────────────────────────────────────────────────────────────

@pytest.fixture
def horror_market() -> GenreMarketData:
    """Growing, bullish Horror market: timing factor scores the full 100."""
    return GenreMarketData(
        genre="Horror",
        is_growing=True,
        growth_rate=18.5,
        market_outlook=MarketOutlook.BULLISH,
        streaming_demand=88,
        market_demand=0.90,
        market_window="Halloween season (Sep-Oct)",
        best_platform="Shudder / Peacock",
    )


@pytest.fixture
def sample_catalog(horror_market: GenreMarketData) -> IndustryCatalog:
    """Four-genre catalog with the reference adjacency for those genres."""
    return IndustryCatalog(
        genre_market={
            "Horror": horror_market,
            "Action": GenreMarketData(
                genre="Action", is_growing=True, growth_rate=12.5,
                market_outlook=MarketOutlook.BULLISH, streaming_demand=92,
                market_demand=0.85,
            ),
            "Drama": GenreMarketData(
                genre="Drama", is_growing=True, growth_rate=6.8,
                market_outlook=MarketOutlook.STABLE, streaming_demand=85,
                market_demand=0.65, market_window="Awards season (Oct-Feb)",
                best_platform="HBO Max / Apple TV+",
            ),
            "Comedy": GenreMarketData(
                genre="Comedy", is_growing=False, growth_rate=-4.2,
                market_outlook=MarketOutlook.STABLE, streaming_demand=75,
                market_demand=0.70,
            ),
        },
        genre_adjacency={
            "Horror": ("Thriller", "Sci-Fi", "Mystery"),
            "Action": ("Thriller", "Adventure", "Sci-Fi"),
            "Drama": ("Thriller", "Romance", "Comedy"),
            "Comedy": ("Romance", "Drama", "Animation"),
        },
    )


@pytest.fixture
def shipped_catalog() -> IndustryCatalog:
    return load_catalog(SHIPPED_CATALOG_DIR)


# ── Domain objects ────────────────────────────────────────────────────────────

@pytest.fixture
def horror_concept() -> Concept:
    return Concept(
        concept_id="c-horror",
        title="Night Shift",
        genre="Horror",
        format="Feature Film",
        tone="Dread-soaked",
        target_audience="18-34",
        quality_score=85,
    )


@pytest.fixture
def horror_buyer() -> Candidate:
    """Horror-first buyer that accepts unsolicited feature films."""
    return Candidate(
        name="Fearhouse Pictures",
        category=CandidateCategory.PRODUCTION_COMPANY,
        primary_genres=("Horror",),
        preferred_formats=("Feature Film",),
        budget_range="$20M - $200M",
        accepts_unsolicited=True,
        looking_for="High-concept horror with contained settings. Fresh voices welcome.",
    )


@pytest.fixture
def make_pc() -> Callable[..., PortfolioConcept]:
    """Factory for ``PortfolioConcept`` with a one-entry history."""
    counter = {"n": 0}

    def _make(
        genre: str = "Drama",
        score: float = 75.0,
        status: ConceptStatus = ConceptStatus.SUBMITTED,
        title: Optional[str] = None,
        modified_days_ago: int = 1,
        now: datetime = NOW,
    ) -> PortfolioConcept:
        counter["n"] += 1
        n = counter["n"]
        created = now - timedelta(days=max(modified_days_ago, 60))
        return PortfolioConcept(
            concept_id=f"pc-{n:03d}",
            title=title or f"{genre} Concept {n}",
            genre=genre,
            current_score=score,
            score_history=(
                ScoreProgression(timestamp=created, score=score, version=1),
            ),
            created_at=created,
            last_modified=now - timedelta(days=modified_days_ago),
            status=status,
        )

    return _make

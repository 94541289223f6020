"""
Industry taxonomy: who buys concepts, and where a concept sits in its lifecycle.

``CandidateCategory`` classifies catalog entries. Every category except
``PRODUCER`` is a buyer; ``CANDIDATE_ROLE`` is the canonical mapping and
selects which weight set the composite scorer applies.

``ConceptStatus`` is owned by the submission pipeline. The engine reads it
(recommendation rules look at ``developing`` and ``ready``) and never writes
it. Pipeline order::

    draft -> submitted -> received -> under_review
          -> {requested | meeting | negotiating | passed} -> {optioned | sold}

``developing`` and ``ready`` are the pre-submission portfolio states.

This module has NO imports from any other ``market_intel`` package.
"""

from enum import StrEnum


class CandidateRole(StrEnum):
    """Which weight set applies to a candidate."""

    BUYER = "buyer"
    PRODUCER = "producer"


class CandidateCategory(StrEnum):
    """Catalog classification of a buyer or producer."""

    MAJOR_STREAMER = "major_streamer"
    """Netflix, Amazon, Apple, Disney+, HBO Max."""

    MAJOR_STUDIO = "major_studio"
    """Universal, Warner Bros, Paramount, Sony, Disney."""

    MINI_MAJOR = "mini_major"
    """Lionsgate, STX, MGM."""

    SPECIALTY_DIVISION = "specialty_division"
    """Searchlight, Focus, Neon, A24."""

    NETWORK_STREAMER = "network_streamer"
    """Hulu, Peacock, Paramount+."""

    CABLE_PREMIUM = "cable_premium"
    """HBO, Showtime, FX."""

    INTERNATIONAL_BUYER = "international_buyer"
    """BBC, Canal+, StudioCanal."""

    PRODUCTION_COMPANY = "production_company"
    """Companies that acquire material for their own slate (Blumhouse, Legendary)."""

    PRODUCER = "producer"
    """Individual producers or producing teams."""


CANDIDATE_ROLE: dict[CandidateCategory, CandidateRole] = {
    category: (
        CandidateRole.PRODUCER
        if category is CandidateCategory.PRODUCER
        else CandidateRole.BUYER
    )
    for category in CandidateCategory
}

# Factor names per role, in weight-table order.
ROLE_FACTORS: dict[CandidateRole, tuple[str, ...]] = {
    CandidateRole.BUYER: ("genre", "format", "budget", "timing", "activity"),
    CandidateRole.PRODUCER: (
        "genre_expertise",
        "track_record",
        "budget_alignment",
        "accessibility",
        "momentum",
    ),
}

CATEGORY_DISPLAY_NAMES: dict[CandidateCategory, str] = {
    CandidateCategory.MAJOR_STREAMER: "Major Streamer",
    CandidateCategory.MAJOR_STUDIO: "Major Studio",
    CandidateCategory.MINI_MAJOR: "Mini-Major",
    CandidateCategory.SPECIALTY_DIVISION: "Specialty",
    CandidateCategory.NETWORK_STREAMER: "Network Streamer",
    CandidateCategory.CABLE_PREMIUM: "Premium Cable",
    CandidateCategory.INTERNATIONAL_BUYER: "International",
    CandidateCategory.PRODUCTION_COMPANY: "Production Co",
    CandidateCategory.PRODUCER: "Producer",
}


class ConceptStatus(StrEnum):
    """Lifecycle state of a concept (read-only to the engine)."""

    DEVELOPING = "developing"
    READY = "ready"
    DRAFT = "draft"
    SUBMITTED = "submitted"
    RECEIVED = "received"
    UNDER_REVIEW = "under_review"
    REQUESTED = "requested"
    MEETING = "meeting"
    NEGOTIATING = "negotiating"
    PASSED = "passed"
    OPTIONED = "optioned"
    SOLD = "sold"


class MarketOutlook(StrEnum):
    """Aggregate market outlook for a genre."""

    BULLISH = "bullish"
    STABLE = "stable"
    BEARISH = "bearish"


class ActivityType(StrEnum):
    """Kind of event reported by the industry intelligence feed."""

    ACQUISITION = "acquisition"
    GREENLIGHT = "greenlight"
    DEVELOPMENT = "development"
    SEEKING = "seeking"

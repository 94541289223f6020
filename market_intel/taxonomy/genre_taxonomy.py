"""
Genre taxonomy and portfolio-analysis labels.

``CanonicalGenre`` is the reference enumeration used for two things only:

  - the entropy normaliser ``log2(K)`` and the ideal share ``100 / K`` in
    diversification analysis, and
  - the tie-break order when two genres have equal average scores.

Concepts may carry genres outside this enumeration (Mystery, Documentary,
Animation, ...). They are analysed like any other genre but rank after the
canonical ones in tie-breaks.

``normalize_genre()`` is applied by every model that carries a genre label,
so free-text input such as ``"horror"`` resolves to ``"Horror"`` before any
lookup, match or grouping happens.

The default K is ``len(CanonicalGenre)``; ``DiversificationConfig`` may
override the list, in which case K is re-derived from the configured list.

This module has NO imports from any other ``market_intel`` package.
"""

from enum import StrEnum


class CanonicalGenre(StrEnum):
    """The nine reference genres of the market-demand catalog, in canonical order."""

    ACTION = "Action"
    ADVENTURE = "Adventure"
    COMEDY = "Comedy"
    DRAMA = "Drama"
    HORROR = "Horror"
    THRILLER = "Thriller"
    SCI_FI = "Sci-Fi"
    FANTASY = "Fantasy"
    ROMANCE = "Romance"


CANONICAL_GENRES: tuple[str, ...] = tuple(g.value for g in CanonicalGenre)


class DiversificationStatus(StrEnum):
    """Representation of a genre relative to an even split of the portfolio."""

    OVER_INDEXED = "over-indexed"
    BALANCED = "balanced"
    UNDER_INDEXED = "under-indexed"


class RecommendationPriority(StrEnum):
    """Urgency of a strategic recommendation."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER: dict[str, int] = {
    RecommendationPriority.HIGH: 0,
    RecommendationPriority.MEDIUM: 1,
    RecommendationPriority.LOW: 2,
}


class RecommendationCategory(StrEnum):
    """What kind of action a strategic recommendation asks for."""

    DIVERSIFICATION = "diversification"
    IMPROVEMENT = "improvement"
    TIMING = "timing"
    SUBMISSION = "submission"
    DEVELOPMENT = "development"


def genre_sort_key(
    genre: str,
    canonical: tuple[str, ...],
    first_seen: dict[str, int],
) -> tuple[int, int]:
    """Order genres canonically, then non-canonical genres by first appearance."""
    if genre in canonical:
        return (0, canonical.index(genre))
    return (1, first_seen.get(genre, len(first_seen)))


_CANONICAL_BY_FOLD: dict[str, str] = {g.casefold(): g for g in CANONICAL_GENRES}


def normalize_genre(label: str) -> str:
    """Strip ``label`` and map a case-insensitive canonical hit to its canonical spelling.

    ``"horror"`` → ``"Horror"``, ``" SCI-FI "`` → ``"Sci-Fi"``. Other labels are
    returned stripped but otherwise unchanged.
    """
    stripped = label.strip()
    return _CANONICAL_BY_FOLD.get(stripped.casefold(), stripped)

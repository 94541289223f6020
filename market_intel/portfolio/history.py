"""
Append-only score history.

``PortfolioConcept`` is frozen; re-analysis never edits a concept in place.
``record_rescore()`` returns a new concept whose ``score_history`` is the old
history plus one ``ScoreProgression``:

    version        = revision_count + 1
    previous_score = current_score before the rescore
    improvement    = new_score - previous_score

Portfolios are handled as tuples; ``replace_concept()`` returns a new tuple.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Optional

from market_intel.errors import InvalidInputError
from market_intel.models.concept import PortfolioConcept, ScoreProgression
from market_intel.taxonomy.industry_taxonomy import ConceptStatus


def new_portfolio_concept(
    title: str,
    genre: str,
    score: float,
    at: datetime,
    *,
    logline: str = "",
    format: str = "Feature Film",
    status: ConceptStatus = ConceptStatus.DEVELOPING,
    notes: Optional[str] = None,
    concept_id: Optional[str] = None,
) -> PortfolioConcept:
    """Create a concept with a single version-1 history entry."""
    if concept_id is None:
        concept_id = f"concept_{int(at.timestamp() * 1000)}"
    first = ScoreProgression(
        timestamp=at, score=score, version=1, previous_score=None, improvement=0.0
    )
    return PortfolioConcept(
        concept_id=concept_id,
        title=title,
        logline=logline,
        genre=genre,
        format=format,
        current_score=score,
        score_history=(first,),
        created_at=at,
        last_modified=at,
        status=status,
        revision_count=1,
        notes=notes,
    )


def record_rescore(
    concept: PortfolioConcept,
    new_score: float,
    at: datetime,
) -> PortfolioConcept:
    """Return a copy of ``concept`` with ``new_score`` appended to its history.

    Raises:
        pydantic.ValidationError: ``new_score`` is outside [0, 100] or ``at``
            precedes ``created_at``.
    """
    progression = ScoreProgression(
        timestamp=at,
        score=new_score,
        version=concept.revision_count + 1,
        previous_score=concept.current_score,
        improvement=new_score - concept.current_score,
    )
    data = concept.model_dump()
    data.update(
        current_score=new_score,
        score_history=(*concept.score_history, progression),
        last_modified=at,
        revision_count=concept.revision_count + 1,
    )
    return PortfolioConcept.model_validate(data)


def find_concept(
    portfolio: Sequence[PortfolioConcept],
    concept_id: str,
) -> Optional[PortfolioConcept]:
    for concept in portfolio:
        if concept.concept_id == concept_id:
            return concept
    return None


def replace_concept(
    portfolio: Sequence[PortfolioConcept],
    concept: PortfolioConcept,
) -> tuple[PortfolioConcept, ...]:
    """Swap in ``concept`` by ``concept_id``, keeping portfolio order.

    Raises:
        InvalidInputError: No concept with that id is in the portfolio.
    """
    if find_concept(portfolio, concept.concept_id) is None:
        raise InvalidInputError(f"Concept '{concept.concept_id}' is not in the portfolio.")
    return tuple(concept if c.concept_id == concept.concept_id else c for c in portfolio)


def score_progressions(
    portfolio: Sequence[PortfolioConcept],
) -> list[ScoreProgression]:
    """Every history entry across the portfolio, oldest first."""
    entries = [p for concept in portfolio for p in concept.score_history]
    return sorted(entries, key=lambda p: p.timestamp)

"""
Match output model.

``MatchResult`` is created fresh by every ``CompositeScorer.rank()`` call and
never mutated. ``factor_scores`` is a read-only mapping whose keys depend on
the candidate role:

  buyer    : genre, format, budget, timing, activity
  producer : genre_expertise, track_record, budget_alignment, accessibility, momentum

``match_factors``, ``warnings`` and ``opportunities`` are descriptive
annotations derived from the factor scores; they never feed back into
``overall_score``.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from market_intel.taxonomy.industry_taxonomy import CandidateCategory, CandidateRole


class MatchResult(BaseModel):
    """One ranked (concept, candidate) match.

    Attributes:
        candidate_name: ``Candidate.name`` of the matched candidate.
        candidate_category: Catalog classification.
        role: ``buyer`` or ``producer``; selects the factor keys.
        overall_score: Weighted composite, integer 0-100.
        factor_scores: Per-factor integer scores, 0-100, in weight order.
        match_factors: Positive signals, e.g. ``"Strong genre alignment"``.
        warnings: Risk signals, e.g. ``"Requires agent representation"``.
        opportunities: Timing or mandate signals.
        match_reason: One-sentence explanation keyed to the genre tier.
        market_position: Buyer size label (``None`` for producers).
        competitor_buyers: Up to three other buyers of the same category whose
            primary genres include the concept's genre (empty for producers).
    """

    model_config = ConfigDict(frozen=True)

    candidate_name: str
    candidate_category: CandidateCategory
    role: CandidateRole
    overall_score: int
    factor_scores: Mapping[str, int]
    match_factors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    opportunities: tuple[str, ...] = ()
    match_reason: str = ""
    market_position: Optional[str] = None
    competitor_buyers: tuple[str, ...] = ()

    @field_validator("overall_score")
    @classmethod
    def validate_overall_range(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError(f"overall_score must be in [0, 100], got {v}.")
        return v

    @field_validator("factor_scores")
    @classmethod
    def validate_factor_ranges(cls, v: Mapping[str, int]) -> Mapping[str, int]:
        for name, score in v.items():
            if not 0 <= score <= 100:
                raise ValueError(f"factor '{name}' must be in [0, 100], got {score}.")
        return MappingProxyType(dict(v))

    @field_serializer("factor_scores")
    def serialize_factor_scores(self, v: Mapping[str, int]) -> dict[str, int]:
        return dict(v)

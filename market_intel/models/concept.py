"""
Concept models.

``Concept`` is the input to buyer/producer matching: one analysed pitch with
an upstream quality score. ``PortfolioConcept`` is a concept as it lives in a
writer's portfolio, with its append-only ``score_history``.

All models are frozen. A re-analysis never edits a concept in place; it
builds a new ``PortfolioConcept`` whose history is the old history plus one
``ScoreProgression`` (see ``market_intel.portfolio.history``).
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from market_intel.taxonomy.genre_taxonomy import normalize_genre
from market_intel.taxonomy.industry_taxonomy import ConceptStatus


def _check_score(v: float, field: str) -> float:
    if not 0.0 <= v <= 100.0:
        raise ValueError(f"{field} must be in [0, 100], got {v}.")
    return v


class Concept(BaseModel):
    """A pitched film/TV idea ready to be matched against candidates.

    Attributes:
        concept_id: Stable identifier.
        title: Working title.
        genre: Primary genre label, e.g. ``"Horror"``.
        secondary_genre: Optional blended genre.
        format: Requested format, e.g. ``"Feature Film"`` or ``"Limited Series"``.
        tone: Free-text tone descriptor.
        target_audience: Free-text audience descriptor.
        quality_score: Upstream concept quality score (0-100).
    """

    model_config = ConfigDict(frozen=True)

    concept_id: str
    title: str
    genre: str
    secondary_genre: Optional[str] = None
    format: str
    tone: str = ""
    target_audience: str = ""
    quality_score: float

    @field_validator("genre", "format", "title")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty.")
        return v.strip()

    @field_validator("genre", "secondary_genre")
    @classmethod
    def canonicalize_genre(cls, v: Optional[str]) -> Optional[str]:
        return normalize_genre(v) if v is not None else None

    @field_validator("quality_score")
    @classmethod
    def validate_quality_score(cls, v: float) -> float:
        return _check_score(v, "quality_score")


class ScoreProgression(BaseModel):
    """One entry in a concept's score history.

    Attributes:
        timestamp: When the analysis ran.
        score: Score produced by that analysis.
        version: 1-based revision number.
        previous_score: Score before this analysis, ``None`` for version 1.
        improvement: ``score - previous_score`` (0 for version 1).
    """

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    score: float
    version: int
    previous_score: Optional[float] = None
    improvement: float = 0.0

    @field_validator("score")
    @classmethod
    def validate_score(cls, v: float) -> float:
        return _check_score(v, "score")

    @field_validator("version")
    @classmethod
    def validate_version(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"version must be >= 1, got {v}.")
        return v


class PortfolioConcept(BaseModel):
    """A concept held in a writer's portfolio.

    Attributes:
        concept_id: Stable identifier.
        title: Working title.
        logline: One-sentence pitch.
        genre: Primary genre.
        format: Format label.
        current_score: Latest analysis score (0-100).
        score_history: Append-only, ordered oldest first.
        created_at: When the concept entered the portfolio.
        last_modified: Last analysis or edit.
        status: Lifecycle state owned by the submission pipeline.
        revision_count: Number of analyses recorded.
        notes: Free-form notes.
    """

    model_config = ConfigDict(frozen=True)

    concept_id: str
    title: str
    logline: str = ""
    genre: str
    format: str = "Feature Film"
    current_score: float
    score_history: tuple[ScoreProgression, ...] = ()
    created_at: datetime
    last_modified: datetime
    status: ConceptStatus = ConceptStatus.DEVELOPING
    revision_count: int = 1
    notes: Optional[str] = None

    @field_validator("genre")
    @classmethod
    def canonicalize_genre(cls, v: str) -> str:
        return normalize_genre(v)

    @field_validator("current_score")
    @classmethod
    def validate_current_score(cls, v: float) -> float:
        return _check_score(v, "current_score")

    @model_validator(mode="after")
    def validate_history_order(self) -> "PortfolioConcept":
        versions = [p.version for p in self.score_history]
        if versions != sorted(versions):
            raise ValueError("score_history must be ordered by version.")
        if self.last_modified < self.created_at:
            raise ValueError("last_modified must not precede created_at.")
        return self

"""
Tests for market_intel/models/concept.py.

What we test
------------
Concept:
  - quality_score must be in [0, 100].
  - genre, format and title must not be blank; whitespace is stripped.
  - Models are frozen.

ScoreProgression:
  - version must be >= 1; score in [0, 100].

PortfolioConcept:
  - current_score in [0, 100].
  - score_history must be ordered by version.
  - last_modified must not precede created_at.
  - JSON dump/validate preserves the concept.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from market_intel.models.concept import Concept, PortfolioConcept, ScoreProgression

T0 = datetime(2026, 9, 1, tzinfo=timezone.utc)


def _concept(**overrides) -> Concept:
    fields = dict(
        concept_id="c1", title="Night Shift", genre="Horror",
        format="Feature Film", quality_score=85.0,
    )
    fields.update(overrides)
    return Concept(**fields)


def _progression(version: int, score: float = 70.0) -> ScoreProgression:
    return ScoreProgression(timestamp=T0 + timedelta(days=version), score=score, version=version)


class TestConcept:
    def test_valid(self):
        c = _concept(genre="  Horror ")
        assert c.genre == "Horror"
        assert c.secondary_genre is None

    @pytest.mark.parametrize("score", [-0.1, 100.1])
    def test_quality_out_of_range(self, score):
        with pytest.raises(ValidationError):
            _concept(quality_score=score)

    @pytest.mark.parametrize("score", [0.0, 100.0])
    def test_quality_bounds_inclusive(self, score):
        assert _concept(quality_score=score).quality_score == score

    @pytest.mark.parametrize("field", ["genre", "format", "title"])
    def test_blank_rejected(self, field):
        with pytest.raises(ValidationError):
            _concept(**{field: "   "})

    def test_frozen(self):
        c = _concept()
        with pytest.raises(ValidationError):
            c.quality_score = 10.0


class TestScoreProgression:
    def test_version_zero_rejected(self):
        with pytest.raises(ValidationError):
            _progression(0)

    def test_score_out_of_range(self):
        with pytest.raises(ValidationError):
            _progression(1, score=120.0)


class TestPortfolioConcept:
    def _make(self, **overrides) -> PortfolioConcept:
        fields = dict(
            concept_id="p1", title="Night Shift", genre="Horror", current_score=72.0,
            score_history=(_progression(1), _progression(2, 72.0)),
            created_at=T0, last_modified=T0 + timedelta(days=2), revision_count=2,
        )
        fields.update(overrides)
        return PortfolioConcept(**fields)

    def test_valid(self):
        pc = self._make()
        assert pc.format == "Feature Film"
        assert pc.status == "developing"

    def test_history_out_of_order(self):
        with pytest.raises(ValidationError):
            self._make(score_history=(_progression(2), _progression(1)))

    def test_modified_before_created(self):
        with pytest.raises(ValidationError):
            self._make(last_modified=T0 - timedelta(days=1))

    def test_current_score_range(self):
        with pytest.raises(ValidationError):
            self._make(current_score=101.0)

    def test_json_round_trip(self):
        pc = self._make(notes="Needs a stronger hook")
        assert PortfolioConcept.model_validate(pc.model_dump(mode="json")) == pc

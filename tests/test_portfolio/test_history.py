"""
Tests for market_intel/portfolio/history.py.

What we test
------------
new_portfolio_concept():
  - Single version-1 history entry, no previous score, zero improvement.
  - Generated id derives from the creation timestamp.

record_rescore():
  - Appends version N+1 with previous_score and improvement.
  - Leaves the original concept untouched.
  - Rejects scores outside [0, 100].
  - Successive rescores keep the history ordered.

replace_concept() / find_concept():
  - Replacement keeps portfolio order.
  - Unknown id raises InvalidInputError.

score_progressions():
  - Flattens every history sorted by timestamp.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from market_intel.errors import InvalidInputError
from market_intel.portfolio.history import (
    find_concept,
    new_portfolio_concept,
    record_rescore,
    replace_concept,
    score_progressions,
)
from market_intel.taxonomy.industry_taxonomy import ConceptStatus

T0 = datetime(2026, 9, 1, 9, 0, 0, tzinfo=timezone.utc)


def _concept(title="Night Shift", score=70.0, concept_id=None):
    return new_portfolio_concept(title, "Horror", score, T0, concept_id=concept_id)


class TestNewPortfolioConcept:
    def test_first_version(self):
        c = _concept(concept_id="c1")
        assert c.revision_count == 1
        assert len(c.score_history) == 1
        first = c.score_history[0]
        assert first.version == 1
        assert first.previous_score is None
        assert first.improvement == 0.0
        assert first.score == c.current_score == 70.0
        assert c.created_at == c.last_modified == T0
        assert c.status == ConceptStatus.DEVELOPING

    def test_generated_id(self):
        c = _concept()
        assert c.concept_id == f"concept_{int(T0.timestamp() * 1000)}"

    def test_invalid_score(self):
        with pytest.raises(ValidationError):
            _concept(score=101.0)


class TestRecordRescore:
    def test_appends_progression(self):
        original = _concept(concept_id="c1")
        later = T0 + timedelta(days=3)
        updated = record_rescore(original, 78.0, later)

        assert updated.current_score == 78.0
        assert updated.revision_count == 2
        assert updated.last_modified == later
        assert len(updated.score_history) == 2
        latest = updated.score_history[-1]
        assert latest.version == 2
        assert latest.previous_score == 70.0
        assert latest.improvement == pytest.approx(8.0)
        assert updated.score_history[0] == original.score_history[0]

    def test_original_untouched(self):
        original = _concept(concept_id="c1")
        record_rescore(original, 90.0, T0 + timedelta(days=1))
        assert original.current_score == 70.0
        assert len(original.score_history) == 1
        assert original.revision_count == 1

    def test_negative_improvement(self):
        updated = record_rescore(_concept(concept_id="c1"), 64.5, T0 + timedelta(days=1))
        assert updated.score_history[-1].improvement == pytest.approx(-5.5)

    def test_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            record_rescore(_concept(concept_id="c1"), 100.5, T0 + timedelta(days=1))

    def test_successive_rescores(self):
        c = _concept(concept_id="c1")
        for i, score in enumerate((72.0, 75.0, 81.0), start=1):
            c = record_rescore(c, score, T0 + timedelta(days=i))
        assert [p.version for p in c.score_history] == [1, 2, 3, 4]
        assert [p.score for p in c.score_history] == [70.0, 72.0, 75.0, 81.0]
        assert c.revision_count == 4


class TestReplaceAndFind:
    def test_replace_keeps_order(self):
        a, b, c = (_concept(title=t, concept_id=t) for t in ("a", "b", "c"))
        portfolio = (a, b, c)
        new_b = record_rescore(b, 88.0, T0 + timedelta(days=1))
        result = replace_concept(portfolio, new_b)
        assert [x.concept_id for x in result] == ["a", "b", "c"]
        assert result[1].current_score == 88.0
        assert portfolio[1].current_score == 70.0

    def test_replace_unknown_raises(self):
        with pytest.raises(InvalidInputError):
            replace_concept([_concept(concept_id="a")], _concept(concept_id="zzz"))

    def test_find(self):
        portfolio = [_concept(concept_id="a"), _concept(concept_id="b")]
        assert find_concept(portfolio, "b").concept_id == "b"
        assert find_concept(portfolio, "missing") is None


def test_score_progressions_sorted_by_time():
    a = record_rescore(_concept(concept_id="a"), 75.0, T0 + timedelta(days=5))
    b = record_rescore(_concept(concept_id="b"), 80.0, T0 + timedelta(days=2))
    entries = score_progressions([a, b])
    timestamps = [p.timestamp for p in entries]
    assert timestamps == sorted(timestamps)
    assert len(entries) == 4

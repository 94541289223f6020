"""
Seeded sample portfolio.

Each sample concept gets a synthetic score history of ``revisions`` entries
spaced 15 days apart, ending at its current score:

    start   = current - revisions·5 - U(0, 10)     (re-drawn into [45, 55) if < 45)
    step_i  = U(2, 10) for i >= 1
    score_i = current on the last revision, else previous + step_i

The generator owns its own ``random.Random(seed)``, so the same seed and
``now`` always yield the same portfolio.
"""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import NamedTuple, Protocol

from market_intel.models.concept import PortfolioConcept, ScoreProgression
from market_intel.taxonomy.industry_taxonomy import ConceptStatus

_HISTORY_SPACING_DAYS = 15


class _Sample(NamedTuple):
    concept_id: str
    title: str
    logline: str
    genre: str
    format: str
    score: float
    revisions: int
    created_days_ago: int
    modified_days_ago: int
    status: ConceptStatus
    notes: str


_SAMPLES: tuple[_Sample, ...] = (
    _Sample(
        "concept_001", "The Last Algorithm",
        "A burned-out Silicon Valley engineer discovers her AI creation has developed "
        "consciousness and must choose between corporate loyalty and protecting a new "
        "form of life.",
        "Sci-Fi", "Feature Film", 87.5, 5, 90, 3, ConceptStatus.READY,
        "Strong concept, ready for pitch meetings",
    ),
    _Sample(
        "concept_002", "Midnight in Marrakech",
        "An American travel writer stranded in Morocco during a political uprising finds "
        "unexpected love with a local journalist fighting to expose government corruption.",
        "Romance", "Feature Film", 72.0, 3, 45, 10, ConceptStatus.DEVELOPING,
        "Needs stronger third act",
    ),
    _Sample(
        "concept_003", "Dead Drop",
        "A retired CIA operative is pulled back into the spy game when classified documents "
        "surface that could expose a decades-old operation and her own dark past.",
        "Thriller", "Limited Series", 91.2, 7, 180, 1, ConceptStatus.SUBMITTED,
        "Submitted to Netflix, Apple TV+",
    ),
    _Sample(
        "concept_004", "The Haunting of Bellwood Manor",
        "A family moves into a Victorian mansion only to discover the house feeds on fear, "
        "and their darkest secrets are being used against them.",
        "Horror", "Feature Film", 84.3, 4, 60, 7, ConceptStatus.READY,
        "Target: A24, Blumhouse",
    ),
    _Sample(
        "concept_005", "Last Laugh Comedy Club",
        "A struggling stand-up comedian inherits her late father's failing comedy club and "
        "must save it while confronting the family secrets hidden in his final jokes.",
        "Comedy", "Feature Film", 68.5, 2, 21, 14, ConceptStatus.DEVELOPING,
        "Early draft, needs more comedy beats",
    ),
    _Sample(
        "concept_006", "Kingdom of Ash",
        "A disgraced knight must unite fractured kingdoms against an ancient evil awakening "
        "beneath the mountains, even as her own cursed bloodline threatens to consume her.",
        "Fantasy", "TV Series", 79.8, 4, 120, 20, ConceptStatus.DEVELOPING,
        "World-building complete, refining pilot",
    ),
    _Sample(
        "concept_007", "Zero Hour",
        "When terrorists take over the world's largest particle accelerator, a disgraced "
        "physicist must use her knowledge of the facility to stop them before they create "
        "a black hole that could destroy Europe.",
        "Action", "Feature Film", 82.1, 3, 35, 5, ConceptStatus.READY,
        "High concept, strong visuals",
    ),
    _Sample(
        "concept_008", "The Inheritance",
        "Three estranged siblings return home for their mother's funeral only to discover "
        "she's left them a fortune, but only if they can live together in the family home "
        "for one year.",
        "Drama", "Feature Film", 75.4, 3, 55, 12, ConceptStatus.DEVELOPING,
        "Character work strong, plot needs tightening",
    ),
)


class PortfolioGenerator(Protocol):
    """Anything that can produce a demo portfolio as of ``now``."""

    def generate(self, now: datetime) -> list[PortfolioConcept]: ...


class SeededPortfolioGenerator:
    """Reproducible eight-concept demo portfolio.

    Args:
        seed: Seed for the private random generator.
    """

    def __init__(self, seed: int = 42) -> None:
        self.seed = seed

    def generate(self, now: datetime) -> list[PortfolioConcept]:
        rng = random.Random(self.seed)
        return [self._build(sample, rng, now) for sample in _SAMPLES]

    def _build(
        self,
        sample: _Sample,
        rng: random.Random,
        now: datetime,
    ) -> PortfolioConcept:
        return PortfolioConcept(
            concept_id=sample.concept_id,
            title=sample.title,
            logline=sample.logline,
            genre=sample.genre,
            format=sample.format,
            current_score=sample.score,
            score_history=tuple(_score_history(sample.score, sample.revisions, rng, now)),
            created_at=now - timedelta(days=sample.created_days_ago),
            last_modified=now - timedelta(days=sample.modified_days_ago),
            status=sample.status,
            revision_count=sample.revisions,
            notes=sample.notes,
        )


def _score_history(
    current: float,
    revisions: int,
    rng: random.Random,
    now: datetime,
) -> list[ScoreProgression]:
    history: list[ScoreProgression] = []
    score = current - revisions * 5 - rng.random() * 10
    if score < 45:
        score = 45 + rng.random() * 10

    previous = None
    for i in range(revisions):
        if i == revisions - 1:
            new_score = current
        elif i == 0:
            new_score = score
        else:
            new_score = min(100.0, score + rng.random() * 8 + 2)
        history.append(
            ScoreProgression(
                timestamp=now - timedelta(days=(revisions - i) * _HISTORY_SPACING_DAYS),
                score=round(new_score, 1),
                version=i + 1,
                previous_score=previous,
                improvement=0.0 if previous is None else round(new_score - previous, 1),
            )
        )
        previous = round(new_score, 1)
        score = new_score
    return history

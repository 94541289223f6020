"""
Industry catalog loader: JSON files → validated, immutable ``IndustryCatalog``.

Files (all under ``catalog_dir``)
---------------------------------
  genre_market.json    : object keyed by genre: market indicators, demand,
                          market window and best platform per genre.
  genre_adjacency.json : object keyed by genre: list of related genres.
  buyers.json          : array of buyer ``Candidate`` objects.
  producers.json       : array of producer ``Candidate`` objects
                          (``category`` defaults to ``"producer"``).
  activity.json        : array of ``ActivityRecord`` objects (intelligence feed).

Every file is optional; a missing file yields an empty collection, so an
empty directory is a valid (empty) catalog.

Validation rules
----------------
- Duplicate candidate names (across buyers and producers) are rejected.
- A genre_market key must equal the embedded ``genre`` field when present.
- Genre keys and adjacency entries are stored under ``normalize_genre()``
  spelling, and lookups ignore case.
- Adjacency lists must be lists of strings and must not list the genre itself.
- Producer entries must have category ``producer``; buyer entries must not.

Usage
-----
    from market_intel.catalog.loader import load_catalog

    catalog = load_catalog(Path("config/catalog"))
    catalog.buyers()
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from market_intel.models.candidate import ActivityRecord, Candidate, GenreMarketData
from market_intel.taxonomy.genre_taxonomy import normalize_genre
from market_intel.taxonomy.industry_taxonomy import CandidateCategory, CandidateRole

log = logging.getLogger(__name__)

GENRE_MARKET_FILE = "genre_market.json"
GENRE_ADJACENCY_FILE = "genre_adjacency.json"
BUYERS_FILE = "buyers.json"
PRODUCERS_FILE = "producers.json"
ACTIVITY_FILE = "activity.json"


class IndustryCatalog(BaseModel):
    """Read-only bundle of everything the engine needs from the outside world.

    Attributes:
        candidates: Buyers and producers, in catalog order.
        genre_market: Genre -> market indicators.
        genre_adjacency: Genre -> related genres.
        activity: Industry intelligence feed records.
    """

    model_config = ConfigDict(frozen=True)

    candidates: tuple[Candidate, ...] = ()
    genre_market: dict[str, GenreMarketData] = {}
    genre_adjacency: dict[str, tuple[str, ...]] = {}
    activity: tuple[ActivityRecord, ...] = ()

    @classmethod
    def empty(cls) -> "IndustryCatalog":
        return cls()

    def candidates_for(self, role: CandidateRole) -> list[Candidate]:
        return [c for c in self.candidates if c.role == role]

    def buyers(self) -> list[Candidate]:
        return self.candidates_for(CandidateRole.BUYER)

    def producers(self) -> list[Candidate]:
        return self.candidates_for(CandidateRole.PRODUCER)

    def market_data(self, genre: str) -> Optional[GenreMarketData]:
        """Case-insensitive genre lookup; ``None`` when the genre is unknown."""
        return _lookup_genre(self.genre_market, genre)

    def related_genres(self, genre: str) -> tuple[str, ...]:
        """Case-insensitive adjacency lookup; ``()`` when the genre is unknown."""
        return _lookup_genre(self.genre_adjacency, genre) or ()


def _lookup_genre(table: dict[str, Any], genre: str) -> Any:
    key = normalize_genre(genre)
    if key in table:
        return table[key]
    folded = key.casefold()
    for name, value in table.items():
        if name.casefold() == folded:
            return value
    return None


# ── Validation ────────────────────────────────────────────────────────────────

def _validate_candidates(
    buyers: list[dict[str, Any]],
    producers: list[dict[str, Any]],
) -> None:
    """Raise ValueError for duplicate names or misfiled categories."""
    seen: set[str] = set()
    for source, records in (("buyers", buyers), ("producers", producers)):
        for i, rec in enumerate(records):
            name = (rec.get("name") or "").strip()
            if not name:
                raise ValueError(f"{source}[{i}] is missing 'name'.")
            if name in seen:
                raise ValueError(f"Duplicate candidate name '{name}' in {source}[{i}].")
            seen.add(name)

            category = rec.get("category")
            if source == "producers" and category not in (None, CandidateCategory.PRODUCER.value):
                raise ValueError(
                    f"producers[{i}] '{name}' has category '{category}'; expected 'producer'."
                )
            if source == "buyers" and category == CandidateCategory.PRODUCER.value:
                raise ValueError(f"buyers[{i}] '{name}' is categorised as a producer.")


def _validate_genre_market(records: dict[str, Any]) -> None:
    for key, rec in records.items():
        if not isinstance(rec, dict):
            raise ValueError(f"genre_market['{key}'] must be an object.")
        embedded = rec.get("genre")
        if embedded is not None and normalize_genre(embedded) != normalize_genre(key):
            raise ValueError(
                f"genre_market key '{key}' does not match embedded genre '{embedded}'."
            )


def _validate_adjacency(records: dict[str, Any]) -> None:
    for genre, related in records.items():
        if not isinstance(related, list) or not all(isinstance(g, str) for g in related):
            raise ValueError(f"genre_adjacency['{genre}'] must be a list of strings.")
        if genre.strip().casefold() in (g.strip().casefold() for g in related):
            raise ValueError(f"genre_adjacency['{genre}'] lists the genre itself.")


# ── File helpers ──────────────────────────────────────────────────────────────

def _read_json(path: Path, expected: type) -> Any:
    """Read a JSON file, returning an empty ``expected`` when it does not exist."""
    if not path.exists():
        log.debug("Catalog file %s not found: treating as empty.", path)
        return expected()
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, expected):
        raise ValueError(
            f"{path.name} must contain a JSON {expected.__name__}, "
            f"got {type(data).__name__}."
        )
    return data


# ── Public API ────────────────────────────────────────────────────────────────

def load_catalog(catalog_dir: Path) -> IndustryCatalog:
    """Load and validate the industry catalog from ``catalog_dir``.

    Args:
        catalog_dir: Directory holding the catalog JSON files.

    Returns:
        Frozen ``IndustryCatalog``.

    Raises:
        ValueError: On duplicate names, misfiled categories or malformed tables.
        json.JSONDecodeError: On unparsable JSON.
        pydantic.ValidationError: When a record does not match its model.
    """
    catalog_dir = Path(catalog_dir)

    market_raw = _read_json(catalog_dir / GENRE_MARKET_FILE, dict)
    adjacency_raw = _read_json(catalog_dir / GENRE_ADJACENCY_FILE, dict)
    buyers_raw = _read_json(catalog_dir / BUYERS_FILE, list)
    producers_raw = _read_json(catalog_dir / PRODUCERS_FILE, list)
    activity_raw = _read_json(catalog_dir / ACTIVITY_FILE, list)

    _validate_genre_market(market_raw)
    _validate_adjacency(adjacency_raw)
    _validate_candidates(buyers_raw, producers_raw)

    genre_market = {
        normalize_genre(key): GenreMarketData(**{"genre": key, **rec})
        for key, rec in market_raw.items()
    }
    candidates = [Candidate(**rec) for rec in buyers_raw]
    candidates.extend(
        Candidate(**{"category": CandidateCategory.PRODUCER.value, **rec})
        for rec in producers_raw
    )
    activity = [ActivityRecord(**rec) for rec in activity_raw]

    catalog = IndustryCatalog(
        candidates=tuple(candidates),
        genre_market=genre_market,
        genre_adjacency={
            normalize_genre(g): tuple(normalize_genre(r) for r in rel)
            for g, rel in adjacency_raw.items()
        },
        activity=tuple(activity),
    )
    log.info(
        "Loaded catalog from %s: %d buyers, %d producers, %d genres, %d activity records",
        catalog_dir,
        len(buyers_raw),
        len(producers_raw),
        len(genre_market),
        len(activity),
    )
    return catalog

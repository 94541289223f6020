"""
JSON file store for a writer's portfolio.

File layout::

    {
      "version": 1,
      "saved_at": "2026-10-18T12:00:00+00:00",
      "concepts": [ {PortfolioConcept}, ... ]
    }

Persistence is whole-collection: ``save()`` overwrites the file atomically
(temp file in the same directory, then ``os.replace``). ``load()`` never
raises for a missing, unreadable or malformed file; it logs and returns an
empty portfolio.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from market_intel.models.concept import PortfolioConcept

logger = logging.getLogger(__name__)

STORE_VERSION = 1


class JsonPortfolioStore:
    """Load and save a portfolio as one JSON document."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> list[PortfolioConcept]:
        if not self.path.exists():
            logger.debug("Portfolio file %s not found; starting empty.", self.path)
            return []
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
            records = raw["concepts"] if isinstance(raw, dict) else raw
            if not isinstance(records, list):
                raise ValueError("'concepts' must be a list")
            concepts = [PortfolioConcept.model_validate(rec) for rec in records]
        except (OSError, ValueError, KeyError, TypeError, ValidationError) as exc:
            logger.warning("Could not read portfolio %s: %s", self.path, exc)
            return []
        logger.debug("Loaded %d concepts from %s", len(concepts), self.path)
        return concepts

    def save(self, concepts: Sequence[PortfolioConcept]) -> bool:
        """Overwrite the store with ``concepts``. Returns False on I/O failure."""
        payload = {
            "version": STORE_VERSION,
            "saved_at": datetime.now(tz=timezone.utc).isoformat(),
            "concepts": [c.model_dump(mode="json") for c in concepts],
        }
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(payload, tmp, indent=2)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.error("Could not save portfolio to %s: %s", self.path, exc)
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return False
        logger.info("Saved %d concepts to %s", len(concepts), self.path)
        return True

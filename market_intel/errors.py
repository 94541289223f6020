"""
Error taxonomy for the market intelligence engine.

Only programmer errors cross the public boundary:

  - ``InvalidInputError``  : a required argument is missing at call time
    (e.g. ``rank(None, ...)``).
  - ``ConfigurationError`` : weight tables or scoring tables are corrupt.
    Raised when an engine object is constructed, never per call.

Two other conditions are deliberately NOT exceptions:

  - Data unavailable (genre absent from the market table): a documented
    fallback score is used and the fact is logged at DEBUG.
  - Empty collection (no candidates, empty portfolio): a well-defined
    zero-value result is returned.
"""

from __future__ import annotations


class MarketIntelError(Exception):
    """Base class for all engine errors."""


class InvalidInputError(MarketIntelError, ValueError):
    """A required input is missing or unusable."""


class ConfigurationError(MarketIntelError):
    """Scoring configuration violates a static invariant."""

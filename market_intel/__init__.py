"""Concept market intelligence: buyer/producer matching and portfolio analytics."""

__version__ = "0.1.0"

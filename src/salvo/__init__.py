"""Salvo: autonomous, timed naval-combat matches between pluggable competitors."""

__version__ = "0.1.0"

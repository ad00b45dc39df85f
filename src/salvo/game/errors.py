"""Exception types raised by the game layer."""

from __future__ import annotations


class SalvoError(Exception):
    """Base class for errors raised by salvo itself."""


class ConfigurationError(SalvoError, ValueError):
    """A match option is missing, malformed or unsupported."""


class InvalidOperationError(SalvoError, RuntimeError):
    """The requested command is not allowed in the match's current state."""

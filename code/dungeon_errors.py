"""Exception types raised by the dungeon layout generator."""

from __future__ import annotations


class DungeonGenerationError(Exception):
    """Base class for errors raised while generating a dungeon."""


class ConfigurationError(DungeonGenerationError, ValueError):
    """Raised when a DungeonConfig or StartCriteria holds invalid values."""


class NoStartCandidateError(DungeonGenerationError):
    """Raised when a starting room is requested from an empty room set."""

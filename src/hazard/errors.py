"""Exception hierarchy.

Illegal moves are recoverable: the request is rejected and asked for again.
Configuration errors abort setup. Invariant violations point at a bug and
are never caught by the game itself.
"""

from __future__ import annotations


class HazardError(Exception):
    pass


class IllegalMoveError(HazardError, ValueError):
    pass


class ConfigurationError(HazardError, ValueError):
    pass


class InvariantViolation(HazardError, RuntimeError):
    pass


class UnknownTerritoryError(InvariantViolation, LookupError):
    def __init__(self, index: int):
        super().__init__(f"No territory with index {index}.")
        self.index = index


class MapDefinitionError(InvariantViolation):
    pass

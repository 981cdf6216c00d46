"""Domain errors raised by the state and transfer layers."""

from __future__ import annotations


class UnknownPlayerError(KeyError):
    """Raised when a player id is not on the roster."""


class UnknownTeamError(KeyError):
    """Raised when a team id or index does not exist."""


class UnknownHistoryEntryError(KeyError):
    """Raised when a history entry id is not in the history list."""


class LastCategoryError(ValueError):
    """Raised when deleting the only remaining skill category."""


class ReservePlacementError(ValueError):
    """Raised when a reserve player is moved onto a team."""


class ShareDecodeError(ValueError):
    """Raised when a share fragment cannot be decoded."""

"""Data model for rosters, teams and assignment snapshots."""

from .history import HistoryEntry
from .player import Player, SkillCategory, WireModel
from .team import SkillBreakdown, Team, TeamValidation, ValidationSummary

TeamCompositionRules = dict[str, int]

__all__ = [
    "HistoryEntry",
    "Player",
    "SkillBreakdown",
    "SkillCategory",
    "Team",
    "TeamCompositionRules",
    "TeamValidation",
    "ValidationSummary",
    "WireModel",
]

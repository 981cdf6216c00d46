"""Team containers and derived validation payloads."""

from __future__ import annotations

from typing import Dict, List

from pydantic import Field

from .player import Player, WireModel


class Team(WireModel):
    """Mutable team container.

    ``players`` holds snapshots of the player records taken at assignment
    time, not live references into the roster.
    """

    id: str = Field(..., min_length=1)
    name: str
    players: List[Player] = Field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.players)

    def player_ids(self) -> List[str]:
        return [player.id for player in self.players]

    def has_player(self, player_id: str) -> bool:
        return any(player.id == player_id for player in self.players)


class SkillBreakdown(WireModel):
    actual: int
    required: int
    category_name: str


class TeamValidation(WireModel):
    is_valid: bool = True
    violations: List[str] = Field(default_factory=list)
    skill_distribution: Dict[str, SkillBreakdown] = Field(default_factory=dict)


class ValidationSummary(WireModel):
    team_count: int
    invalid_team_count: int
    total_violations: int
    validations: List[TeamValidation] = Field(default_factory=list)

    @property
    def all_valid(self) -> bool:
        return self.invalid_team_count == 0

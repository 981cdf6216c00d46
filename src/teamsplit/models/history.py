"""Immutable snapshots of completed assignments."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import Field
from pydantic.config import ConfigDict

from .player import Player, SkillCategory, WireModel
from .team import Team


class HistoryEntry(WireModel):
    id: str = Field(..., min_length=1)
    timestamp: datetime
    players: List[Player]
    teams: List[Team]
    event_name: str = ""
    organizer_name: str = ""
    max_teams: Optional[int] = None
    team_size: Optional[int] = None
    reserve_players_enabled: Optional[bool] = None
    skill_balancing_enabled: Optional[bool] = None
    skill_categories: Optional[List[SkillCategory]] = None
    team_composition_rules: Optional[Dict[str, int]] = None

    model_config = ConfigDict(frozen=True)

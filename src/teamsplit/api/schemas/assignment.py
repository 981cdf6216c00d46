from __future__ import annotations

from typing import List, Optional

from pydantic import Field

from teamsplit.models import Player, Team, ValidationSummary, WireModel


class AssignmentRequest(WireModel):
    seed: Optional[int] = None


class AssignmentResponse(WireModel):
    teams: List[Team]
    players: List[Player]
    notices: List[str] = Field(default_factory=list)
    unassigned_player_ids: List[str] = Field(default_factory=list)
    history_entry_id: Optional[str] = None


class ValidationResponse(WireModel):
    summary: ValidationSummary
    rules_warning: Optional[str] = None

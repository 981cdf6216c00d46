"""Empty team construction."""

from __future__ import annotations

from typing import List
from uuid import uuid4

from teamsplit.models import Team


def default_team_name(index: int) -> str:
    return f"Team {index + 1}"


def build_empty_teams(count: int, *, start_index: int = 0) -> List[Team]:
    """Return ``count`` empty teams named from ``start_index`` onwards."""

    return [
        Team(id=uuid4().hex, name=default_team_name(start_index + offset), players=[])
        for offset in range(max(0, count))
    ]

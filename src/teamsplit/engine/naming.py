"""Rename teams after a representative player."""

from __future__ import annotations

from typing import List, Optional, Sequence

from teamsplit.models import Player, Team

from .builder import default_team_name


def apply_naming(
    teams: List[Team],
    naming_category_id: Optional[str],
    all_players: Sequence[Player],
) -> List[Team]:
    """Name each team after its first player from ``naming_category_id``.

    Teams with no such player fall back to ``"Team {n}"``. Without a naming
    category the input list is returned untouched.
    """

    if not naming_category_id:
        return teams

    skill_lookup = {player.id: player.skill_level for player in all_players}
    renamed: List[Team] = []
    for index, team in enumerate(teams):
        captain = next(
            (member for member in team.players if skill_lookup.get(member.id) == naming_category_id),
            None,
        )
        name = f"Team {captain.name}" if captain is not None else default_team_name(index)
        renamed.append(team.model_copy(update={"name": name, "players": list(team.players)}))
    return renamed

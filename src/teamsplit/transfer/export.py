"""Plain-text and CSV exports of finished teams."""

from __future__ import annotations

import csv
from io import StringIO
from typing import Mapping, Sequence

from teamsplit.models import SkillCategory, Team


def team_list_text(teams: Sequence[Team], *, include_players: bool = False) -> str:
    """One team per line, ready for a bracket site's bulk participant import.

    With ``include_players`` each line reads ``"Team Name (Player 1, Player 2)"``.
    """

    if include_players:
        lines = [f"{team.name} ({', '.join(member.name for member in team.players)})" for team in teams]
    else:
        lines = [team.name for team in teams]
    return "\n".join(lines)


def teams_to_csv(
    teams: Sequence[Team],
    *,
    categories: Sequence[SkillCategory] | None = None,
) -> str:
    """One row per placed player: team number, team name, player and skill."""

    category_names: Mapping[str, str] = {category.id: category.name for category in categories or ()}

    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["team_number", "team_name", "player_id", "player_name", "skill", "locked"])

    for index, team in enumerate(teams):
        for member in team.players:
            skill = category_names.get(member.skill_level or "", member.skill_level or "")
            writer.writerow([
                index + 1,
                team.name,
                member.id,
                member.name,
                skill,
                "yes" if member.locked else "",
            ])

    return buffer.getvalue()


__all__ = [
    "team_list_text",
    "teams_to_csv",
]

"""Locked player pinning, reserve exclusion and roster/team bookkeeping."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from teamsplit.models import Player, Team


logger = logging.getLogger(__name__)


def _valid_index(team_id: Optional[int], teams: Sequence[Team]) -> bool:
    return team_id is not None and 0 <= team_id < len(teams)


def reattach_locked(teams: List[Team], locked_players: Iterable[Player]) -> List[Team]:
    """Pin locked players onto their recorded team, ignoring capacity.

    Players whose recorded index no longer exists fall back to team 0.
    Reserve players are never placed.
    """

    for player in locked_players:
        if player.is_reserve:
            continue
        if not teams:
            logger.warning("No teams available for locked player %s", player.name)
            return teams
        if _valid_index(player.team_id, teams):
            teams[player.team_id].players.append(player)
        else:
            teams[0].players.append(player.assigned_to(0))
    return teams


def reattach_locked_with_capacity(
    teams: List[Team],
    locked_players: Iterable[Player],
    team_size: int,
) -> List[Team]:
    """Pin locked players into partially filled teams without exceeding ``team_size``.

    The recorded team is used when it has room, otherwise the first team with
    room. Players that fit nowhere stay unassigned.
    """

    for player in locked_players:
        if player.is_reserve or not teams:
            continue
        if _valid_index(player.team_id, teams) and teams[player.team_id].size < team_size:
            target = player.team_id
        else:
            target = next((idx for idx, team in enumerate(teams) if team.size < team_size), 0)
        if teams[target].size < team_size:
            teams[target].players.append(player.assigned_to(target))
        else:
            logger.info("Locked player %s left unassigned; every team is full", player.name)
    return teams


def team_index_by_player(teams: Sequence[Team]) -> Dict[str, int]:
    lookup: Dict[str, int] = {}
    for index, team in enumerate(teams):
        for member in team.players:
            lookup.setdefault(member.id, index)
    return lookup


def sync_player_assignments(all_players: Sequence[Player], final_teams: Sequence[Team]) -> List[Player]:
    """Return the roster with ``team_id`` matching the final team layout."""

    lookup = team_index_by_player(final_teams)
    synced: List[Player] = []
    for player in all_players:
        if player.is_reserve:
            synced.append(player.assigned_to(None))
            continue
        synced.append(player.assigned_to(lookup.get(player.id)))
    return synced


def split_active(players: Sequence[Player]) -> tuple[List[Player], List[Player]]:
    """Split active players into (unlocked, locked); reserves are dropped."""

    unlocked: List[Player] = []
    locked: List[Player] = []
    for player in players:
        if player.is_reserve:
            continue
        (locked if player.locked else unlocked).append(player)
    return unlocked, locked

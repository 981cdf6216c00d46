"""Strategies that fill teams from skill pools or a flat roster.

Every strategy appends player snapshots to the ``teams`` it is given and
returns that same list. Callers that need the pre-call layout must pass a deep
copy. Skill group mappings are read, never mutated.
"""

from __future__ import annotations

import logging
import random
from typing import Dict, List, Mapping, Optional, Sequence

from teamsplit.models import Player, Team

from .builder import build_empty_teams
from .grouping import SkillGroups, shuffled
from .locks import reattach_locked, split_active


logger = logging.getLogger(__name__)


def _copy_pools(skill_groups: SkillGroups) -> Dict[str, List[Player]]:
    return {key: list(bucket) for key, bucket in skill_groups.items()}


def _min_fill_index(teams: Sequence[Team], capacity: Optional[int] = None) -> int:
    """Index of the smallest team, lowest index on ties.

    With ``capacity`` only teams below it are considered; when every team is
    full the smallest overall team is used.
    """

    candidates = range(len(teams))
    if capacity is not None:
        open_slots = [idx for idx in candidates if teams[idx].size < capacity]
        if open_slots:
            candidates = open_slots
        else:
            logger.warning("All %s teams are at capacity %s; overfilling the smallest team", len(teams), capacity)
    best = None
    for idx in candidates:
        if best is None or teams[idx].size < teams[best].size:
            best = idx
    return 0 if best is None else best


def _place(teams: List[Team], index: int, player: Player) -> None:
    teams[index].players.append(player.assigned_to(index))


def distribute_by_rules(
    teams: List[Team],
    rules: Mapping[str, int],
    skill_groups: SkillGroups,
    team_size: Optional[int] = None,
) -> List[Team]:
    """Fill each team's per-category quota, then min-fill the leftovers.

    Quotas are served in team order, so earlier teams win when a category
    runs short. Leftovers from every pool go to the currently smallest team;
    passing ``team_size`` keeps leftovers out of full teams while any team has
    room.
    """

    if not teams:
        return teams

    pools = _copy_pools(skill_groups)
    for category_id, required in rules.items():
        pool = pools.get(category_id)
        if required <= 0 or pool is None:
            continue
        for index in range(len(teams)):
            for _ in range(required):
                if not pool:
                    break
                _place(teams, index, pool.pop(0))

    leftovers = [player for bucket in pools.values() for player in bucket]
    for player in leftovers:
        _place(teams, _min_fill_index(teams, team_size), player)

    logger.debug("Rule distribution placed %s leftover players across %s teams", len(leftovers), len(teams))
    return teams


def distribute_evenly(teams: List[Team], skill_groups: SkillGroups) -> List[Team]:
    """Round-robin every skill pool across the teams.

    Each pool is dealt independently by its local index. A pool starts at the
    first of the smallest teams so that uneven pools do not pile onto team 0.
    """

    if not teams:
        return teams

    team_count = len(teams)
    for bucket in skill_groups.values():
        if not bucket:
            continue
        offset = _min_fill_index(teams)
        for local_index, player in enumerate(bucket):
            _place(teams, (offset + local_index) % team_count, player)
    return teams


def distribute_by_rules_with_deficits(
    teams: List[Team],
    rules: Mapping[str, int],
    skill_groups: SkillGroups,
    team_size: int,
    *,
    all_players: Optional[Sequence[Player]] = None,
) -> List[Team]:
    """Top up partially filled teams, largest shortfall first.

    For each required category, round ``r`` gives one player to every team
    whose deficit exceeds ``r`` and that is below ``team_size``. Leftover
    players are dealt round-robin to teams with room; those that fit nowhere
    stay unassigned.
    """

    if not teams:
        return teams

    skill_lookup = {player.id: player.skill_level for player in all_players} if all_players is not None else None

    def skill_of(member: Player) -> Optional[str]:
        if skill_lookup is None:
            return member.skill_level
        return skill_lookup.get(member.id)

    pools = _copy_pools(skill_groups)
    for category_id, required in rules.items():
        pool = pools.get(category_id)
        if required <= 0 or not pool:
            continue

        deficits = [
            max(0, required - sum(1 for member in team.players if skill_of(member) == category_id))
            for team in teams
        ]

        round_number = 0
        while pool and round_number < required:
            assigned = False
            for index, team in enumerate(teams):
                if not pool:
                    break
                if deficits[index] > round_number and team.size < team_size:
                    player = pool.pop(0)
                    _place(teams, index, player)
                    assigned = True
                    logger.debug(
                        "Round %s: assigned %s (%s) to %s",
                        round_number,
                        player.name,
                        category_id,
                        team.name,
                    )
            if not assigned:
                break
            round_number += 1

    leftovers = [player for bucket in pools.values() for player in bucket]
    unplaced = 0
    for position, player in enumerate(leftovers):
        with_space = [idx for idx, team in enumerate(teams) if team.size < team_size]
        if not with_space:
            unplaced = len(leftovers) - position
            break
        _place(teams, with_space[position % len(with_space)], player)

    if unplaced:
        logger.info("%s players left unassigned; no team has room below size %s", unplaced, team_size)
    return teams


def fill_open_slots(teams: List[Team], players: Sequence[Player], team_size: int) -> List[Team]:
    """Min-fill ``players`` into teams below ``team_size``; the rest stay unassigned."""

    for player in players:
        open_slots = [idx for idx, team in enumerate(teams) if team.size < team_size]
        if not open_slots:
            break
        _place(teams, min(open_slots, key=lambda idx: (teams[idx].size, idx)), player)
    return teams


def distribute_standard(
    active_players: Sequence[Player],
    team_count: int,
    *,
    rng: Optional[random.Random] = None,
) -> List[Team]:
    """Shuffle unlocked players and min-fill them around the pinned locked players."""

    if team_count <= 0:
        return []

    unlocked, locked = split_active(active_players)
    teams = build_empty_teams(team_count)
    reattach_locked(teams, locked)

    for player in shuffled(unlocked, rng):
        _place(teams, _min_fill_index(teams), player)
    return teams

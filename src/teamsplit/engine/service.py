"""Orchestration of the assignment pipeline.

Resolver -> grouping -> distribution strategy -> locked/reserve handling ->
naming -> roster sync. The functions here own no state: callers pass the
roster and settings in and receive fresh players and teams back.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import random
import time
from typing import List, Optional, Sequence

from teamsplit.config import AssignmentSettings
from teamsplit.models import Player, Team

from .builder import build_empty_teams
from .distribution import (
    distribute_by_rules,
    distribute_by_rules_with_deficits,
    distribute_evenly,
    distribute_standard,
    fill_open_slots,
)
from .grouping import category_counts, group_by_skill, resolve_rng, shuffled
from .locks import (
    reattach_locked,
    reattach_locked_with_capacity,
    split_active,
    sync_player_assignments,
    team_index_by_player,
)
from .naming import apply_naming
from .team_count import resolve_team_count


logger = logging.getLogger("uvicorn.error")
logger.setLevel(logging.INFO)


@dataclass
class AssignmentResult:
    players: List[Player]
    teams: List[Team]
    notices: List[str] = field(default_factory=list)

    @property
    def unassigned_players(self) -> List[Player]:
        return [player for player in self.players if not player.is_reserve and player.team_id is None]


def _active(players: Sequence[Player]) -> List[Player]:
    return [player for player in players if not player.is_reserve]


def randomize_teams(
    players: Sequence[Player],
    settings: AssignmentSettings,
    *,
    rng: Optional[random.Random] = None,
) -> AssignmentResult:
    """Build a fresh team layout for every active player."""

    rng = resolve_rng(rng)
    notices: List[str] = []
    active = _active(players)
    if not active:
        logger.info("No active players to assign; returning empty team list")
        return AssignmentResult(sync_player_assignments(players, []), [], notices)

    start = time.perf_counter()
    rules = settings.active_rules

    if settings.skill_balancing_active:
        groups = group_by_skill(active, settings.skill_categories, rng=rng)
        team_count = resolve_team_count(
            len(active),
            settings.team_size,
            settings.max_teams,
            rules=rules,
            category_counts=category_counts(groups),
            notices=notices,
        )
        teams = build_empty_teams(team_count)
        if rules:
            distribute_by_rules(teams, rules, groups, settings.team_size)
        else:
            distribute_evenly(teams, groups)
        _, locked = split_active(active)
        reattach_locked(teams, locked)
        strategy = "rules" if rules else "even"
    else:
        team_count = resolve_team_count(len(active), settings.team_size, settings.max_teams, notices=notices)
        teams = distribute_standard(active, team_count, rng=rng)
        strategy = "standard"

    teams = apply_naming(teams, settings.naming_category_id, players)
    synced = sync_player_assignments(players, teams)

    logger.info(
        "Randomized %s active players into %s teams (strategy=%s, team_size=%s, max_teams=%s, %.3fs)",
        len(active),
        len(teams),
        strategy,
        settings.team_size,
        settings.max_teams or "unlimited",
        time.perf_counter() - start,
    )
    return AssignmentResult(synced, teams, notices)


def fill_remaining_teams(
    players: Sequence[Player],
    teams: Sequence[Team],
    settings: AssignmentSettings,
    *,
    rng: Optional[random.Random] = None,
) -> AssignmentResult:
    """Place unassigned active players into the existing teams.

    Existing members stay where they are. Empty teams are appended until the
    resolved team count is reached; nobody is pushed past ``team_size``, so
    some players may remain unassigned when the team count is capped.
    """

    rng = resolve_rng(rng)
    notices: List[str] = []
    active_ids = {player.id for player in _active(players)}

    working = [team.model_copy(deep=True) for team in teams]
    for team in working:
        team.players = [member for member in team.players if member.id in active_ids]

    placed = team_index_by_player(working)
    pending = [player for player in _active(players) if player.id not in placed]
    if not pending:
        logger.info("Fill requested but every active player is already on a team")
        return AssignmentResult(sync_player_assignments(players, working), working, notices)

    target = resolve_team_count(len(active_ids), settings.team_size, settings.max_teams, notices=notices)
    if len(working) < target:
        working.extend(build_empty_teams(target - len(working), start_index=len(working)))

    unlocked, locked = split_active(pending)
    reattach_locked_with_capacity(working, locked, settings.team_size)

    if settings.skill_balancing_active:
        groups = group_by_skill(unlocked, settings.skill_categories, rng=rng)
        distribute_by_rules_with_deficits(
            working,
            settings.active_rules,
            groups,
            settings.team_size,
            all_players=players,
        )
    else:
        fill_open_slots(working, shuffled(unlocked, rng), settings.team_size)

    synced = sync_player_assignments(players, working)
    left_over = sum(1 for player in synced if not player.is_reserve and player.team_id is None)
    if left_over:
        logger.warning("%s player(s) could not be placed; every team is full", left_over)
        notices.append(f"{left_over} player(s) could not be placed; every team is full")

    logger.info(
        "Filled %s pending players into %s teams (%s left unassigned)",
        len(pending) - left_over,
        len(working),
        left_over,
    )
    return AssignmentResult(synced, working, notices)

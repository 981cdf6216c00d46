"""Application state and the operations the UI layer performs on it.

``AppState`` is the explicit replacement for a global store: every operation
takes a state and returns an updated copy, leaving the input untouched.
"""

from __future__ import annotations

import random
from typing import Dict, List, Optional, Tuple
from uuid import uuid4

from pydantic import Field

from teamsplit.config import (
    CATEGORY_COLORS,
    DEFAULT_TEAM_SIZE,
    AssignmentSettings,
    max_team_size,
)
from teamsplit.engine import (
    AssignmentResult,
    build_empty_teams,
    fill_remaining_teams,
    push_history,
    randomize_teams,
    restore_history_entry,
    snapshot_history,
    sync_player_assignments,
)
from teamsplit.errors import (
    LastCategoryError,
    ReservePlacementError,
    UnknownHistoryEntryError,
    UnknownPlayerError,
    UnknownTeamError,
)
from teamsplit.models import HistoryEntry, Player, SkillCategory, Team, WireModel


DEFAULT_CATEGORY_NAMES = ("Beginner", "Intermediate", "Expert")


class AppState(WireModel):
    event_name: str = ""
    organizer_name: str = ""
    players: List[Player] = Field(default_factory=list)
    teams: List[Team] = Field(default_factory=list)
    team_size: int = Field(DEFAULT_TEAM_SIZE, ge=1)
    max_teams: int = Field(0, ge=0)
    reserve_players_enabled: bool = False
    skill_balancing_enabled: bool = False
    skill_categories: List[SkillCategory] = Field(default_factory=list)
    team_composition_rules: Dict[str, int] = Field(default_factory=dict)
    team_naming_category_id: Optional[str] = None
    history: List[HistoryEntry] = Field(default_factory=list)

    @property
    def active_players(self) -> List[Player]:
        return [player for player in self.players if not player.is_reserve]

    @property
    def reserve_players(self) -> List[Player]:
        return [player for player in self.players if player.is_reserve]

    @property
    def unassigned_players(self) -> List[Player]:
        return [player for player in self.active_players if player.team_id is None]

    def settings(self) -> AssignmentSettings:
        return AssignmentSettings.from_state(self)

    def find_player(self, player_id: str) -> Player:
        for player in self.players:
            if player.id == player_id:
                return player
        raise UnknownPlayerError(player_id)

    def team_index(self, team_id: str) -> int:
        for index, team in enumerate(self.teams):
            if team.id == team_id:
                return index
        raise UnknownTeamError(team_id)


def _with(state: AppState, **changes) -> AppState:
    return state.model_copy(update=changes)


def _copy_teams(teams: List[Team]) -> List[Team]:
    return [team.model_copy(deep=True) for team in teams]


def _replace_player(state: AppState, updated: Player) -> List[Player]:
    return [updated if player.id == updated.id else player for player in state.players]


def _without_member(teams: List[Team], player_id: str) -> List[Team]:
    copied = _copy_teams(teams)
    for team in copied:
        team.players = [member for member in team.players if member.id != player_id]
    return copied


def player_capacity(state: AppState) -> Optional[int]:
    """Active roster size the team cap allows, or ``None`` when uncapped."""

    if state.max_teams <= 0:
        return None
    return state.max_teams * state.team_size


def set_event_info(state: AppState, event_name: str, organizer_name: str) -> AppState:
    return _with(state, event_name=event_name.strip(), organizer_name=organizer_name.strip())


def add_player(
    state: AppState,
    name: str,
    skill_level: Optional[str] = None,
    *,
    reserve: bool = False,
) -> AppState:
    """Append a player; blank names are ignored.

    With reserves enabled, a player added once the capped roster is full goes
    straight to the reserve list.
    """

    name = name.strip()
    if not name:
        return state
    capacity = player_capacity(state)
    if state.reserve_players_enabled and capacity is not None and len(state.active_players) >= capacity:
        reserve = True
    player = Player(
        id=uuid4().hex,
        name=name,
        skill_level=skill_level if state.skill_balancing_enabled else None,
        is_reserve=reserve and state.reserve_players_enabled,
    )
    return _with(state, players=[*state.players, player])


def parse_player_list(text: str) -> List[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def add_players_bulk(state: AppState, text: str, default_skill_level: Optional[str] = None) -> AppState:
    """Add one player per non-blank line, skipping names already on the roster (case-insensitive)."""

    seen = {player.name.lower() for player in state.players}
    for name in parse_player_list(text):
        if name.lower() in seen:
            continue
        seen.add(name.lower())
        state = add_player(state, name, default_skill_level)
    return state


def remove_player(state: AppState, player_id: str) -> AppState:
    state.find_player(player_id)
    players = [player for player in state.players if player.id != player_id]
    return _with(state, players=players, teams=_without_member(state.teams, player_id))


def set_player_skill(state: AppState, player_id: str, skill_level: Optional[str]) -> AppState:
    player = state.find_player(player_id)
    return _with(state, players=_replace_player(state, player.model_copy(update={"skill_level": skill_level})))


def toggle_player_lock(state: AppState, player_id: str) -> AppState:
    player = state.find_player(player_id)
    return _with(state, players=_replace_player(state, player.model_copy(update={"locked": not player.locked})))


def toggle_player_reserve(state: AppState, player_id: str) -> AppState:
    """Move a player between the active and reserve lists.

    Demoted players leave their team; promoted players start unassigned.
    """

    player = state.find_player(player_id)
    updated = player.model_copy(update={"is_reserve": not player.is_reserve, "team_id": None})
    teams = _without_member(state.teams, player_id) if updated.is_reserve else _copy_teams(state.teams)
    players = _replace_player(state, updated)
    return _with(state, players=sync_player_assignments(players, teams), teams=teams)


def move_player_to_team(state: AppState, player_id: str, team_index: int) -> AppState:
    player = state.find_player(player_id)
    if player.is_reserve:
        raise ReservePlacementError(f"Reserve player {player.name!r} cannot join a team")
    if not 0 <= team_index < len(state.teams):
        raise UnknownTeamError(team_index)
    teams = _without_member(state.teams, player_id)
    teams[team_index].players.append(player.assigned_to(team_index))
    return _with(state, players=sync_player_assignments(state.players, teams), teams=teams)


def remove_player_from_team(state: AppState, player_id: str) -> AppState:
    state.find_player(player_id)
    teams = _without_member(state.teams, player_id)
    return _with(state, players=sync_player_assignments(state.players, teams), teams=teams)


def update_team_name(state: AppState, team_id: str, name: str) -> AppState:
    index = state.team_index(team_id)
    teams = _copy_teams(state.teams)
    teams[index].name = name.strip() or teams[index].name
    return _with(state, teams=teams)


def add_team(state: AppState) -> AppState:
    teams = _copy_teams(state.teams)
    teams.extend(build_empty_teams(1, start_index=len(teams)))
    return _with(state, teams=teams)


def delete_team(state: AppState, team_id: str) -> AppState:
    """Drop a team; its players become unassigned and later team indexes shift down."""

    index = state.team_index(team_id)
    teams = _copy_teams(state.teams)
    del teams[index]
    for position, team in enumerate(teams):
        team.players = [member.assigned_to(position) for member in team.players]
    return _with(state, players=sync_player_assignments(state.players, teams), teams=teams)


def clear_teams(state: AppState) -> AppState:
    return _with(state, players=sync_player_assignments(state.players, []), teams=[])


def set_team_size(state: AppState, size: int) -> AppState:
    return _with(state, team_size=max(1, min(max_team_size(), int(size))))


def set_max_teams(state: AppState, max_teams: int) -> AppState:
    return _with(state, max_teams=max(0, int(max_teams)))


def set_reserve_players_enabled(state: AppState, enabled: bool) -> AppState:
    """Toggle the reserve list; disabling it returns every reserve to the active roster."""

    if enabled:
        return _with(state, reserve_players_enabled=True)
    players = [player.model_copy(update={"is_reserve": False}) if player.is_reserve else player for player in state.players]
    return _with(state, reserve_players_enabled=False, players=players)


def _next_color(state: AppState) -> str:
    used = {category.color for category in state.skill_categories}
    return next((color for color in CATEGORY_COLORS if color not in used), CATEGORY_COLORS[-1])


def add_skill_category(state: AppState, name: str, color: Optional[str] = None) -> AppState:
    name = name.strip()
    if not name:
        return state
    category = SkillCategory(id=uuid4().hex, name=name, color=color or _next_color(state))
    return _with(state, skill_categories=[*state.skill_categories, category])


def set_skill_balancing(state: AppState, enabled: bool) -> AppState:
    """Toggle skill balancing, seeding default categories when none exist."""

    if not enabled:
        return _with(state, skill_balancing_enabled=False)
    state = _with(state, skill_balancing_enabled=True)
    if not state.skill_categories:
        for name in DEFAULT_CATEGORY_NAMES:
            state = add_skill_category(state, name)
    return state


def rename_skill_category(state: AppState, category_id: str, name: str) -> AppState:
    name = name.strip()
    if not name:
        return state
    categories = [
        category.model_copy(update={"name": name}) if category.id == category_id else category
        for category in state.skill_categories
    ]
    return _with(state, skill_categories=categories)


def delete_skill_category(state: AppState, category_id: str) -> AppState:
    """Remove a category, clearing it from players, rules and team naming."""

    if not any(category.id == category_id for category in state.skill_categories):
        return state
    if len(state.skill_categories) <= 1:
        raise LastCategoryError("At least one skill category is required")

    categories = [category for category in state.skill_categories if category.id != category_id]
    players = [
        player.model_copy(update={"skill_level": None}) if player.skill_level == category_id else player
        for player in state.players
    ]
    rules = {key: count for key, count in state.team_composition_rules.items() if key != category_id}
    naming = None if state.team_naming_category_id == category_id else state.team_naming_category_id
    return _with(
        state,
        skill_categories=categories,
        players=players,
        team_composition_rules=rules,
        team_naming_category_id=naming,
    )


def set_composition_rule(state: AppState, category_id: str, count: int) -> AppState:
    """Set the per-team requirement for a category; counts of zero or less drop the rule."""

    rules = dict(state.team_composition_rules)
    if count <= 0:
        rules.pop(category_id, None)
    else:
        rules[category_id] = max(0, min(int(count), state.team_size))
    return _with(state, team_composition_rules=rules)


def set_naming_category(state: AppState, category_id: Optional[str]) -> AppState:
    return _with(state, team_naming_category_id=category_id or None)


def _record(state: AppState, result: AssignmentResult) -> AppState:
    settings = state.settings()
    entry = snapshot_history(
        result.players,
        result.teams,
        state.event_name,
        state.organizer_name,
        settings=settings.snapshot(),
    )
    return _with(
        state,
        players=result.players,
        teams=result.teams,
        history=push_history(state.history, entry),
    )


def randomize(state: AppState, rng: Optional[random.Random] = None) -> Tuple[AppState, AssignmentResult]:
    result = randomize_teams(state.players, state.settings(), rng=rng)
    if not result.teams:
        return _with(state, players=result.players, teams=[]), result
    return _record(state, result), result


def fill_remaining(state: AppState, rng: Optional[random.Random] = None) -> Tuple[AppState, AssignmentResult]:
    result = fill_remaining_teams(state.players, state.teams, state.settings(), rng=rng)
    return _record(state, result), result


def load_history_entry(state: AppState, entry_id: str) -> AppState:
    """Restore players, teams and captured settings from a history entry."""

    entry = next((item for item in state.history if item.id == entry_id), None)
    if entry is None:
        raise UnknownHistoryEntryError(entry_id)

    players, teams = restore_history_entry(entry)
    changes: dict = {
        "players": players,
        "teams": teams,
        "event_name": entry.event_name,
        "organizer_name": entry.organizer_name,
    }
    for key in (
        "max_teams",
        "team_size",
        "reserve_players_enabled",
        "skill_balancing_enabled",
        "skill_categories",
        "team_composition_rules",
    ):
        value = getattr(entry, key)
        if value is not None:
            changes[key] = value
    return _with(state, **changes)


def clear_history(state: AppState) -> AppState:
    return _with(state, history=[])


def clear_all(state: AppState) -> AppState:
    """Reset the roster, teams and event details; settings and history are kept."""

    return _with(state, event_name="", organizer_name="", players=[], teams=[])

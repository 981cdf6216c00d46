import random

import pytest

from teamsplit.errors import (
    LastCategoryError,
    ReservePlacementError,
    UnknownHistoryEntryError,
    UnknownPlayerError,
    UnknownTeamError,
)
from teamsplit.state import (
    AppState,
    add_player,
    add_players_bulk,
    add_skill_category,
    add_team,
    clear_all,
    clear_history,
    clear_teams,
    delete_skill_category,
    delete_team,
    fill_remaining,
    load_history_entry,
    move_player_to_team,
    parse_player_list,
    player_capacity,
    randomize,
    remove_player,
    remove_player_from_team,
    rename_skill_category,
    set_composition_rule,
    set_max_teams,
    set_naming_category,
    set_player_skill,
    set_reserve_players_enabled,
    set_skill_balancing,
    set_team_size,
    toggle_player_lock,
    toggle_player_reserve,
    update_team_name,
)


def _with_players(*names: str, **settings) -> AppState:
    state = AppState(**settings)
    for name in names:
        state = add_player(state, name)
    return state


def test_add_player_ignores_blank_names_and_trims():
    state = add_player(AppState(), "   ")
    assert state.players == []

    state = add_player(state, "  Alice ")
    assert [player.name for player in state.players] == ["Alice"]
    assert state.players[0].team_id is None


def test_add_player_skill_only_applies_with_balancing():
    state = add_player(AppState(), "Alice", "exp")
    assert state.players[0].skill_level is None

    state = add_player(AppState(skill_balancing_enabled=True), "Alice", "exp")
    assert state.players[0].skill_level == "exp"


def test_add_player_goes_to_reserve_when_capacity_full():
    state = _with_players("A", "B", team_size=2, max_teams=1, reserve_players_enabled=True)
    state = add_player(state, "C")

    assert player_capacity(state) == 2
    assert [player.is_reserve for player in state.players] == [False, False, True]
    assert [player.name for player in state.reserve_players] == ["C"]


def test_capacity_is_unlimited_without_cap():
    assert player_capacity(AppState()) is None


def test_bulk_add_skips_duplicates_case_insensitively():
    state = _with_players("Alice")
    state = add_players_bulk(state, "alice\n\n  Bob  \nBOB\nCara\n")

    assert [player.name for player in state.players] == ["Alice", "Bob", "Cara"]
    assert parse_player_list(" a \n\n b") == ["a", "b"]


def test_unknown_player_raises():
    with pytest.raises(UnknownPlayerError):
        remove_player(AppState(), "missing")


def test_remove_player_also_leaves_team():
    state, _ = randomize(_with_players("A", "B", "C", "D"), random.Random(0))
    victim = state.players[0]

    state = remove_player(state, victim.id)

    assert all(not team.has_player(victim.id) for team in state.teams)
    assert len(state.players) == 3


def test_toggle_lock_and_reserve():
    state = _with_players("A", "B")
    player_id = state.players[0].id

    state = toggle_player_lock(state, player_id)
    assert state.players[0].locked

    state, _ = randomize(state, random.Random(0))
    state = toggle_player_reserve(state, player_id)
    assert state.players[0].is_reserve
    assert state.players[0].team_id is None
    assert all(not team.has_player(player_id) for team in state.teams)

    state = toggle_player_reserve(state, player_id)
    assert not state.players[0].is_reserve
    assert state.players[0].team_id is None


def test_move_player_between_teams():
    state = add_team(add_team(_with_players("A", "B")))
    player_id = state.players[0].id

    state = move_player_to_team(state, player_id, 1)
    assert state.teams[1].player_ids() == [player_id]
    assert state.players[0].team_id == 1

    state = move_player_to_team(state, player_id, 0)
    assert state.teams[1].players == []
    assert state.players[0].team_id == 0

    state = remove_player_from_team(state, player_id)
    assert state.players[0].team_id is None

    with pytest.raises(UnknownTeamError):
        move_player_to_team(state, player_id, 5)


def test_reserve_player_cannot_join_team():
    state = add_team(_with_players("A", reserve_players_enabled=True))
    state = toggle_player_reserve(state, state.players[0].id)

    with pytest.raises(ReservePlacementError):
        move_player_to_team(state, state.players[0].id, 0)


def test_delete_team_shifts_later_indexes():
    state = add_team(add_team(add_team(_with_players("A", "B"))))
    a, b = (player.id for player in state.players)
    state = move_player_to_team(state, a, 0)
    state = move_player_to_team(state, b, 2)

    state = delete_team(state, state.teams[0].id)

    assert len(state.teams) == 2
    assert state.find_player(a).team_id is None
    assert state.find_player(b).team_id == 1
    assert state.teams[1].players[0].team_id == 1


def test_update_team_name():
    state = add_team(AppState())
    team_id = state.teams[0].id

    assert update_team_name(state, team_id, " Sharks ").teams[0].name == "Sharks"
    assert update_team_name(state, team_id, "  ").teams[0].name == "Team 1"
    with pytest.raises(UnknownTeamError):
        update_team_name(state, "nope", "x")


def test_team_size_and_cap_are_clamped(monkeypatch):
    monkeypatch.delenv("TEAMSPLIT_MAX_TEAM_SIZE", raising=False)

    assert set_team_size(AppState(), 0).team_size == 1
    assert set_team_size(AppState(), 50).team_size == 10
    assert set_max_teams(AppState(), -2).max_teams == 0


def test_disabling_reserves_promotes_everyone():
    state = _with_players("A", "B", reserve_players_enabled=True, team_size=1, max_teams=1)
    assert state.players[1].is_reserve

    state = set_reserve_players_enabled(state, False)

    assert not state.reserve_players_enabled
    assert state.reserve_players == []


def test_enabling_balancing_seeds_default_categories():
    state = set_skill_balancing(AppState(), True)

    assert [category.name for category in state.skill_categories] == ["Beginner", "Intermediate", "Expert"]
    assert len({category.color for category in state.skill_categories}) == 3

    again = set_skill_balancing(set_skill_balancing(state, False), True)
    assert again.skill_categories == state.skill_categories


def test_delete_category_clears_players_rules_and_naming():
    state = set_skill_balancing(AppState(), True)
    expert = state.skill_categories[2]
    state = add_player(state, "Alice", expert.id)
    state = set_composition_rule(state, expert.id, 1)
    state = set_naming_category(state, expert.id)

    state = delete_skill_category(state, expert.id)

    assert [category.name for category in state.skill_categories] == ["Beginner", "Intermediate"]
    assert state.players[0].skill_level is None
    assert state.team_composition_rules == {}
    assert state.team_naming_category_id is None


def test_cannot_delete_last_category():
    state = add_skill_category(AppState(), "Only")

    with pytest.raises(LastCategoryError):
        delete_skill_category(state, state.skill_categories[0].id)


def test_composition_rule_is_clamped_and_removable():
    state = AppState(team_size=3)

    state = set_composition_rule(state, "exp", 7)
    assert state.team_composition_rules == {"exp": 3}

    state = set_composition_rule(state, "exp", 0)
    assert state.team_composition_rules == {}


def test_randomize_records_history_with_settings():
    state = _with_players("A", "B", "C", "D", event_name="Cup", team_size=2)

    state, result = randomize(state, random.Random(1))

    assert len(result.teams) == 2
    assert len(state.history) == 1
    entry = state.history[0]
    assert entry.event_name == "Cup"
    assert entry.team_size == 2
    assert [team.player_ids() for team in entry.teams] == [team.player_ids() for team in state.teams]


def test_randomize_without_players_skips_history():
    state, result = randomize(AppState(), random.Random(1))

    assert result.teams == []
    assert state.history == []


def test_fill_remaining_places_new_players():
    state, _ = randomize(_with_players("A", "B", team_size=2), random.Random(0))
    state = add_player(state, "C")

    state, result = fill_remaining(state, random.Random(0))

    assert result.unassigned_players == []
    assert state.find_player(state.players[2].id).team_id is not None
    assert len(state.history) == 2


def test_load_history_entry_restores_layout_and_settings():
    state = _with_players("A", "B", "C", "D", team_size=2)
    state, _ = randomize(state, random.Random(3))
    snapshot_teams = [team.player_ids() for team in state.teams]
    entry_id = state.history[0].id

    state = set_team_size(clear_all(state), 4)
    state = load_history_entry(state, entry_id)

    assert [team.player_ids() for team in state.teams] == snapshot_teams
    assert state.team_size == 2
    assert len(state.players) == 4

    with pytest.raises(UnknownHistoryEntryError):
        load_history_entry(state, "missing")


def test_clear_all_keeps_settings_and_history():
    state, _ = randomize(_with_players("A", "B", team_size=2, event_name="Cup"), random.Random(0))

    cleared = clear_all(state)

    assert cleared.players == [] and cleared.teams == []
    assert cleared.event_name == ""
    assert cleared.team_size == 2
    assert len(cleared.history) == 1
    assert clear_history(cleared).history == []


def test_set_player_skill_replaces_only_that_player():
    state = set_skill_balancing(_with_players("A", "B"), True)
    expert = state.skill_categories[2].id

    updated = set_player_skill(state, state.players[0].id, expert)

    assert [player.skill_level for player in updated.players] == [expert, None]
    assert state.players[0].skill_level is None
    assert set_player_skill(updated, updated.players[0].id, None).players[0].skill_level is None
    with pytest.raises(UnknownPlayerError):
        set_player_skill(state, "ghost", expert)


def test_clear_teams_unassigns_everyone():
    state, _ = randomize(_with_players("A", "B", "C", "D", team_size=2), random.Random(4))
    assert len(state.teams) == 2

    cleared = clear_teams(state)

    assert cleared.teams == []
    assert [player.team_id for player in cleared.players] == [None] * 4
    assert len(cleared.history) == 1


def test_rename_skill_category():
    state = set_skill_balancing(AppState(), True)
    expert = state.skill_categories[2]

    renamed = rename_skill_category(state, expert.id, " Pro ")

    assert [category.name for category in renamed.skill_categories] == ["Beginner", "Intermediate", "Pro"]
    assert renamed.skill_categories[2].id == expert.id
    assert rename_skill_category(state, expert.id, "  ") is state
    assert rename_skill_category(state, "missing", "X").skill_categories == state.skill_categories

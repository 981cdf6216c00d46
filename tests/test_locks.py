from teamsplit.engine import build_empty_teams, reattach_locked, reattach_locked_with_capacity, sync_player_assignments
from teamsplit.models import Player, Team


def test_reattach_locked_pins_to_recorded_team():
    teams = build_empty_teams(3)
    locked = [Player(id="a", name="A", locked=True, team_id=2)]

    result = reattach_locked(teams, locked)

    assert result is teams
    assert teams[2].player_ids() == ["a"]


def test_reattach_locked_invalid_index_falls_back_to_first_team():
    teams = build_empty_teams(2)
    locked = [
        Player(id="a", name="A", locked=True, team_id=5),
        Player(id="b", name="B", locked=True),
    ]

    reattach_locked(teams, locked)

    assert teams[0].player_ids() == ["a", "b"]
    assert all(member.team_id == 0 for member in teams[0].players)


def test_reattach_locked_ignores_capacity_and_reserves():
    teams = [Team(id="t", name="Team 1", players=[Player(id="x", name="X", team_id=0)])]
    locked = [
        Player(id="a", name="A", locked=True, team_id=0),
        Player(id="r", name="R", locked=True, team_id=0, is_reserve=True),
    ]

    reattach_locked(teams, locked)

    assert teams[0].player_ids() == ["x", "a"]


def test_reattach_locked_without_teams_is_noop():
    assert reattach_locked([], [Player(id="a", name="A", locked=True, team_id=0)]) == []


def test_reattach_locked_with_capacity_redirects_or_skips():
    teams = [
        Team(id="t0", name="Team 1", players=[Player(id="x", name="X", team_id=0)]),
        Team(id="t1", name="Team 2"),
    ]
    locked = [
        Player(id="a", name="A", locked=True, team_id=0),
        Player(id="b", name="B", locked=True, team_id=0),
        Player(id="c", name="C", locked=True, team_id=1),
    ]

    reattach_locked_with_capacity(teams, locked, 1)

    assert teams[0].player_ids() == ["x"]
    assert teams[1].player_ids() == ["a"]
    assert teams[1].players[0].team_id == 1


def test_sync_player_assignments_matches_layout():
    roster = [
        Player(id="a", name="A"),
        Player(id="b", name="B", team_id=3),
        Player(id="r", name="R", team_id=1, is_reserve=True),
    ]
    teams = [Team(id="t0", name="Team 1"), Team(id="t1", name="Team 2", players=[roster[0].assigned_to(1)])]

    synced = sync_player_assignments(roster, teams)

    assert [player.team_id for player in synced] == [1, None, None]
    assert roster[1].team_id == 3

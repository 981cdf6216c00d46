import base64
import csv
import json
import random
from datetime import datetime, timezone
from io import StringIO

import pytest

from teamsplit.errors import ShareDecodeError
from teamsplit.state import AppState, add_player, randomize, set_reserve_players_enabled, set_skill_balancing
from teamsplit.transfer import (
    EXPORT_VERSION,
    Bracket,
    build_share_url,
    decode_share_payload,
    encode_share_payload,
    export_configuration,
    export_filename,
    import_configuration,
    team_list_text,
    teams_to_csv,
)


def _assigned_state() -> AppState:
    state = set_skill_balancing(AppState(event_name="Spring Cup", organizer_name="Rec League", team_size=2), True)
    expert = state.skill_categories[2].id
    for name in ("Ana", "Ben", "Cy", "Di"):
        state = add_player(state, name, expert if name in {"Ana", "Cy"} else None)
    state, _ = randomize(state, random.Random(7))
    return state


def test_export_document_shape():
    state = _assigned_state()
    exported_at = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)

    document = json.loads(export_configuration(state, exported_at=exported_at))

    assert document["version"] == EXPORT_VERSION == "1.0"
    assert document["exportDate"] == "2024-03-01T12:00:00+00:00"
    assert document["eventName"] == "Spring Cup"
    assert document["teamSize"] == 2
    assert len(document["players"]) == 4
    assert "teamId" in document["players"][0]
    assert export_filename(state, exported_at=exported_at) == "teams-Spring Cup-2024-03-01.json"


def test_export_then_import_round_trip():
    state = _assigned_state()

    restored, ok = import_configuration(AppState(), export_configuration(state))

    assert ok
    assert restored.players == state.players
    assert restored.teams == state.teams
    assert restored.team_size == state.team_size
    assert restored.skill_categories == state.skill_categories


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        json.dumps({"players": [], "teams": []}),
        json.dumps({"version": "1.0", "players": {}, "teams": []}),
        json.dumps({"version": "1.0", "players": [], "teams": "x"}),
        json.dumps({"version": "1.0", "players": [{"name": "no id"}], "teams": []}),
        json.dumps(["version"]),
        json.dumps({"version": "1.0", "players": [], "teams": [], "teamSize": 0}),
        json.dumps({"version": "1.0", "players": [], "teams": [], "maxTeams": -3}),
    ],
)
def test_import_rejects_bad_documents(text):
    state = _assigned_state()

    result, ok = import_configuration(state, text)

    assert not ok
    assert result is state


def test_import_keeps_settings_missing_from_older_documents():
    state = AppState(team_size=4, max_teams=3)
    text = json.dumps({"version": "0.9", "players": [{"id": "p1", "name": "A"}], "teams": []})

    restored, ok = import_configuration(state, text)

    assert ok
    assert restored.team_size == 4
    assert restored.max_teams == 3
    assert [player.name for player in restored.players] == ["A"]


def test_rejected_import_keeps_capacity_intact():
    state = set_reserve_players_enabled(AppState(team_size=2, max_teams=2), True)
    text = json.dumps({"version": "1.0", "players": [], "teams": [], "teamSize": 0, "maxTeams": -3})

    state, ok = import_configuration(state, text)
    state = add_player(state, "Ann")

    assert not ok
    assert (state.team_size, state.max_teams) == (2, 2)
    assert not state.players[0].is_reserve


def test_share_payload_uses_short_keys_without_padding():
    state = _assigned_state()
    brackets = [Bracket(id="b1", title="Main", embed_url="https://example.com/b1")]

    token = encode_share_payload(state, brackets)

    assert "=" not in token
    raw = json.loads(base64.urlsafe_b64decode(token + "=" * (-len(token) % 4)))
    assert set(raw) == {"e", "o", "t", "s", "sb", "b", "ts"}
    assert raw["e"] == "Spring Cup"
    assert raw["sb"] is True
    assert set(raw["t"][0]) == {"n", "p"}
    assert set(raw["s"][0]) == {"i", "n", "c"}
    assert raw["b"] == [{"i": "b1", "t": "Main", "u": "https://example.com/b1"}]


def test_share_url_round_trip():
    state = _assigned_state()

    url = build_share_url("https://teams.example/view#old", state)
    payload = decode_share_payload(url)

    assert url.startswith("https://teams.example/view#share=")
    assert payload.event_name == "Spring Cup"
    assert payload.organizer_name == "Rec League"
    assert [team.name for team in payload.teams] == [team.name for team in state.teams]
    assert [player.name for player in payload.teams[0].players] == [m.name for m in state.teams[0].players]
    assert len(payload.categories) == 3


def test_share_omits_categories_when_balancing_disabled():
    state = AppState(event_name="Pickup")
    payload = decode_share_payload(encode_share_payload(state))

    assert payload.categories == []
    assert payload.skill_balancing_enabled is False


@pytest.mark.parametrize("fragment", ["", "#share=", "#share=!!!!", "#share=" + base64.urlsafe_b64encode(b"[1]").decode()])
def test_decode_rejects_corrupted_links(fragment):
    with pytest.raises(ShareDecodeError):
        decode_share_payload(fragment)


def test_team_list_text():
    state = _assigned_state()

    names_only = team_list_text(state.teams)
    detailed = team_list_text(state.teams, include_players=True)

    assert names_only.splitlines() == [team.name for team in state.teams]
    first = state.teams[0]
    assert detailed.splitlines()[0] == f"{first.name} ({', '.join(m.name for m in first.players)})"


def test_teams_to_csv_rows():
    state = _assigned_state()

    rows = list(csv.reader(StringIO(teams_to_csv(state.teams, categories=state.skill_categories))))

    assert rows[0] == ["team_number", "team_name", "player_id", "player_name", "skill", "locked"]
    assert len(rows) == 5
    skills = {row[3]: row[4] for row in rows[1:]}
    assert skills["Ana"] == "Expert"
    assert skills["Ben"] == ""

"""Versioned JSON export/import of a full configuration."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple, Union

from pydantic import Field, ValidationError

from teamsplit.models import Player, SkillCategory, Team, WireModel
from teamsplit.state import AppState


logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"


class ConfigurationDocument(WireModel):
    version: Union[str, int, float]
    export_date: Optional[str] = None
    event_name: str = ""
    organizer_name: str = ""
    players: List[Player]
    teams: List[Team]
    team_size: Optional[int] = Field(None, ge=1)
    max_teams: Optional[int] = Field(None, ge=0)
    reserve_players_enabled: Optional[bool] = None
    skill_balancing_enabled: Optional[bool] = None
    skill_categories: Optional[List[SkillCategory]] = None
    team_composition_rules: Optional[Dict[str, int]] = None
    team_naming_category_id: Optional[str] = None


def build_document(state: AppState, *, exported_at: Optional[datetime] = None) -> ConfigurationDocument:
    exported_at = exported_at or datetime.now(timezone.utc)
    return ConfigurationDocument(
        version=EXPORT_VERSION,
        export_date=exported_at.isoformat(),
        event_name=state.event_name,
        organizer_name=state.organizer_name,
        players=list(state.players),
        teams=[team.model_copy(deep=True) for team in state.teams],
        team_size=state.team_size,
        max_teams=state.max_teams,
        reserve_players_enabled=state.reserve_players_enabled,
        skill_balancing_enabled=state.skill_balancing_enabled,
        skill_categories=list(state.skill_categories),
        team_composition_rules=dict(state.team_composition_rules),
        team_naming_category_id=state.team_naming_category_id,
    )


def export_configuration(state: AppState, *, exported_at: Optional[datetime] = None) -> str:
    document = build_document(state, exported_at=exported_at)
    return json.dumps(document.model_dump(mode="json", by_alias=True, exclude_none=True), indent=2)


def export_filename(state: AppState, *, exported_at: Optional[datetime] = None) -> str:
    exported_at = exported_at or datetime.now(timezone.utc)
    return f"teams-{state.event_name or 'config'}-{exported_at.date().isoformat()}.json"


def import_configuration(state: AppState, text: str) -> Tuple[AppState, bool]:
    """Apply an exported document to ``state``.

    Returns ``(new_state, True)`` on success. Malformed JSON, a missing
    ``version`` or non-list ``players``/``teams`` yield ``(state, False)``
    with the input state untouched.
    """

    try:
        raw = json.loads(text)
    except (TypeError, json.JSONDecodeError) as exc:
        logger.warning("Import rejected: invalid JSON (%s)", exc)
        return state, False

    if not isinstance(raw, dict) or "version" not in raw:
        logger.warning("Import rejected: missing version field")
        return state, False
    if not isinstance(raw.get("players"), list) or not isinstance(raw.get("teams"), list):
        logger.warning("Import rejected: players and teams must be lists")
        return state, False

    try:
        document = ConfigurationDocument.model_validate(raw)
    except ValidationError as exc:
        logger.warning("Import rejected: %s validation errors", exc.error_count())
        return state, False

    if str(document.version) != EXPORT_VERSION:
        logger.warning("Importing document version %s (current %s)", document.version, EXPORT_VERSION)

    changes = {
        "event_name": document.event_name,
        "organizer_name": document.organizer_name,
        "players": document.players,
        "teams": document.teams,
    }
    for key in (
        "team_size",
        "max_teams",
        "reserve_players_enabled",
        "skill_balancing_enabled",
        "skill_categories",
        "team_composition_rules",
        "team_naming_category_id",
    ):
        value = getattr(document, key)
        if value is not None:
            changes[key] = value
    return state.model_copy(update=changes), True

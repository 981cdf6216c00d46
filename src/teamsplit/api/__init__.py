"""REST API for the team-assignment engine."""

from __future__ import annotations

import logging
import random
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse, Response
from pydantic import ValidationError

from teamsplit.api.schemas import (
    AssignmentRequest,
    AssignmentResponse,
    BulkPlayersRequest,
    PlayerCreateRequest,
    ShareRequest,
    ShareResponse,
    ValidationResponse,
)
from teamsplit.engine import AssignmentResult, rules_warning, summarize_validations
from teamsplit.errors import UnknownHistoryEntryError
from teamsplit.models import HistoryEntry
from teamsplit.persistence import StateStore
from teamsplit.state import (
    AppState,
    add_player,
    add_players_bulk,
    clear_history,
    fill_remaining,
    load_history_entry,
    randomize,
)
from teamsplit.transfer import (
    build_share_url,
    encode_share_payload,
    export_configuration,
    export_filename,
    import_configuration,
    team_list_text,
    teams_to_csv,
)


logger = logging.getLogger("uvicorn.error")

DEFAULT_DB_PATH = Path(__file__).resolve().parent.parent / "teamsplit.sqlite"


def _rng_for(payload: AssignmentRequest | None) -> random.Random | None:
    if payload is None or payload.seed is None:
        return None
    return random.Random(payload.seed)


def _result_to_response(state: AppState, result: AssignmentResult) -> AssignmentResponse:
    latest = state.history[0].id if state.history and result.teams else None
    return AssignmentResponse(
        teams=result.teams,
        players=result.players,
        notices=result.notices,
        unassigned_player_ids=[player.id for player in result.unassigned_players],
        history_entry_id=latest,
    )


def create_app(db_path: Path | str | None = None) -> FastAPI:
    app = FastAPI(title="teamsplit")
    store = StateStore(db_path or DEFAULT_DB_PATH)
    app.state.state_store = store

    def load() -> AppState:
        return store.load_state()

    def save(state: AppState) -> AppState:
        store.save_state(state)
        return state

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/state", response_model=AppState)
    async def get_state():
        return load()

    @app.put("/state", response_model=AppState)
    async def put_state(payload: dict[str, Any]):
        try:
            state = AppState.model_validate(payload)
        except ValidationError as exc:
            raise HTTPException(status_code=400, detail=f"Invalid state: {exc.error_count()} errors") from exc
        return save(state)

    @app.post("/players", response_model=AppState)
    async def create_player(payload: PlayerCreateRequest):
        state = add_player(load(), payload.name, payload.skill_level, reserve=payload.reserve)
        return save(state)

    @app.post("/players/bulk", response_model=AppState)
    async def create_players_bulk(payload: BulkPlayersRequest):
        state = add_players_bulk(load(), payload.text, payload.default_skill_level)
        return save(state)

    @app.post("/randomize", response_model=AssignmentResponse)
    async def randomize_endpoint(payload: AssignmentRequest | None = None):
        state, result = randomize(load(), _rng_for(payload))
        save(state)
        logger.info("Randomized %s teams via API", len(result.teams))
        return _result_to_response(state, result)

    @app.post("/fill", response_model=AssignmentResponse)
    async def fill_endpoint(payload: AssignmentRequest | None = None):
        state, result = fill_remaining(load(), _rng_for(payload))
        save(state)
        return _result_to_response(state, result)

    @app.get("/validation", response_model=ValidationResponse)
    async def validation():
        state = load()
        settings = state.settings()
        summary = summarize_validations(
            state.teams,
            state.players,
            state.skill_categories,
            settings.active_rules,
            settings.skill_balancing_active,
        )
        warning = rules_warning(settings.active_rules, state.team_size) if settings.skill_balancing_active else None
        return ValidationResponse(summary=summary, rules_warning=warning)

    @app.get("/history", response_model=list[HistoryEntry])
    async def list_history(limit: int | None = Query(None, ge=1)):
        return store.list_history(limit=limit)

    @app.delete("/history", response_model=AppState)
    async def delete_history():
        return save(clear_history(load()))

    @app.post("/history/{entry_id}/load", response_model=AppState)
    async def load_history(entry_id: str):
        try:
            state = load_history_entry(load(), entry_id)
        except UnknownHistoryEntryError as exc:
            raise HTTPException(status_code=404, detail="History entry not found") from exc
        return save(state)

    @app.get("/export")
    async def export_config():
        state = load()
        return Response(
            content=export_configuration(state),
            media_type="application/json",
            headers={"Content-Disposition": f"attachment; filename={export_filename(state)}"},
        )

    @app.post("/import", response_model=AppState)
    async def import_config(request: Request):
        body = await request.body()
        state, ok = import_configuration(load(), body.decode("utf-8", errors="replace"))
        if not ok:
            raise HTTPException(status_code=400, detail="Invalid configuration file")
        return save(state)

    @app.get("/share", response_model=ShareResponse)
    async def share(base_url: str = Query("http://localhost/")):
        state = load()
        url = build_share_url(base_url, state)
        return ShareResponse(url=url, payload=url.split("#share=", 1)[1])

    @app.post("/share", response_model=ShareResponse)
    async def share_with_brackets(payload: ShareRequest):
        state = load()
        token = encode_share_payload(state, payload.brackets)
        return ShareResponse(url=f"{payload.base_url.split('#', 1)[0]}#share={token}", payload=token)

    @app.get("/teams/export.csv")
    async def export_teams_csv():
        state = load()
        return Response(
            content=teams_to_csv(state.teams, categories=state.skill_categories),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=teams.csv"},
        )

    @app.get("/teams/export.txt", response_class=PlainTextResponse)
    async def export_teams_text(include_players: bool = False):
        return team_list_text(load().teams, include_players=include_players)

    return app

"""Static share links: a compact JSON projection encoded into a URL fragment."""

from __future__ import annotations

import base64
import binascii
import json
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from teamsplit.errors import ShareDecodeError
from teamsplit.models import WireModel
from teamsplit.state import AppState

SHARE_PREFIX = "#share="


class Bracket(WireModel):
    id: str
    title: str
    embed_url: str


class _ShortKeyModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class SharedPlayer(_ShortKeyModel):
    name: str = Field(alias="n")
    skill_level: Optional[str] = Field(default=None, alias="s")


class SharedTeam(_ShortKeyModel):
    name: str = Field(alias="n")
    players: List[SharedPlayer] = Field(default_factory=list, alias="p")


class SharedCategory(_ShortKeyModel):
    id: str = Field(alias="i")
    name: str = Field(alias="n")
    color: str = Field(alias="c")


class SharedBracket(_ShortKeyModel):
    id: str = Field(alias="i")
    title: str = Field(alias="t")
    url: str = Field(alias="u")


class SharePayload(_ShortKeyModel):
    event_name: str = Field(default="", alias="e")
    organizer_name: str = Field(default="", alias="o")
    teams: List[SharedTeam] = Field(default_factory=list, alias="t")
    categories: List[SharedCategory] = Field(default_factory=list, alias="s")
    skill_balancing_enabled: bool = Field(default=False, alias="sb")
    brackets: List[SharedBracket] = Field(default_factory=list, alias="b")
    timestamp: int = Field(default=0, alias="ts")


def build_share_payload(
    state: AppState,
    brackets: Sequence[Bracket] = (),
    *,
    shared_at: Optional[datetime] = None,
) -> SharePayload:
    shared_at = shared_at or datetime.now(timezone.utc)
    categories = (
        [SharedCategory(id=c.id, name=c.name, color=c.color) for c in state.skill_categories]
        if state.skill_balancing_enabled
        else []
    )
    return SharePayload(
        event_name=state.event_name,
        organizer_name=state.organizer_name,
        teams=[
            SharedTeam(
                name=team.name,
                players=[SharedPlayer(name=member.name, skill_level=member.skill_level) for member in team.players],
            )
            for team in state.teams
        ],
        categories=categories,
        skill_balancing_enabled=state.skill_balancing_enabled,
        brackets=[SharedBracket(id=b.id, title=b.title, url=b.embed_url) for b in brackets],
        timestamp=int(shared_at.timestamp() * 1000),
    )


def encode_share_payload(
    state: AppState,
    brackets: Sequence[Bracket] = (),
    *,
    shared_at: Optional[datetime] = None,
) -> str:
    """URL-safe base64 of the compact payload, padding stripped."""

    payload = build_share_payload(state, brackets, shared_at=shared_at)
    raw = json.dumps(payload.model_dump(by_alias=True, exclude_none=True), separators=(",", ":"))
    return base64.urlsafe_b64encode(raw.encode("utf-8")).rstrip(b"=").decode("ascii")


def build_share_url(base_url: str, state: AppState, brackets: Sequence[Bracket] = ()) -> str:
    return f"{base_url.split('#', 1)[0]}{SHARE_PREFIX}{encode_share_payload(state, brackets)}"


def decode_share_payload(fragment: str) -> SharePayload:
    """Decode a fragment produced by :func:`encode_share_payload`.

    Accepts the bare token, ``#share=<token>`` or a full URL.
    """

    token = fragment.split(SHARE_PREFIX, 1)[1] if SHARE_PREFIX in fragment else fragment
    token = token.strip()
    if not token:
        raise ShareDecodeError("Invalid or corrupted share link")
    padded = token + "=" * (-len(token) % 4)
    try:
        decoded = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
        return SharePayload.model_validate(json.loads(decoded))
    except (binascii.Error, UnicodeError, ValueError, ValidationError) as exc:
        raise ShareDecodeError("Invalid or corrupted share link") from exc

from __future__ import annotations

from typing import Optional

from pydantic import Field

from teamsplit.models import WireModel


class PlayerCreateRequest(WireModel):
    name: str = Field(min_length=1)
    skill_level: Optional[str] = None
    reserve: bool = False


class BulkPlayersRequest(WireModel):
    text: str
    default_skill_level: Optional[str] = None

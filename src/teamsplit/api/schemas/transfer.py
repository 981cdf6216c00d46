from __future__ import annotations

from typing import List

from pydantic import Field

from teamsplit.models import WireModel
from teamsplit.transfer import Bracket


class ShareRequest(WireModel):
    base_url: str
    brackets: List[Bracket] = Field(default_factory=list)


class ShareResponse(WireModel):
    url: str
    payload: str

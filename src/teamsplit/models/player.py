"""Canonical player and skill category models shared across engine and API layers."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class WireModel(BaseModel):
    """Base model serializing to the camelCase document shape used by exports."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Player(WireModel):
    """A roster entry.

    ``team_id`` is the index of the team the player sits on, or ``None`` when
    unassigned. Reserve players never carry a team index.
    """

    id: str = Field(..., min_length=1)
    name: str
    locked: bool = False
    team_id: Optional[int] = None
    skill_level: Optional[str] = None
    is_reserve: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def is_active(self) -> bool:
        return not self.is_reserve

    def assigned_to(self, team_index: Optional[int]) -> "Player":
        if self.team_id == team_index:
            return self
        return self.model_copy(update={"team_id": team_index})


class SkillCategory(WireModel):
    id: str = Field(..., min_length=1)
    name: str
    color: str = "#6b7280"

    model_config = ConfigDict(frozen=True)

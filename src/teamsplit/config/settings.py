"""Assignment settings and environment-driven limits."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Optional, Tuple

from teamsplit.models import SkillCategory

if TYPE_CHECKING:  # pragma: no cover
    from teamsplit.state import AppState


logger = logging.getLogger(__name__)

_DB_PATH_ENV = "TEAMSPLIT_DB_PATH"
_HISTORY_LIMIT_ENV = "TEAMSPLIT_HISTORY_LIMIT"
_MAX_TEAM_SIZE_ENV = "TEAMSPLIT_MAX_TEAM_SIZE"

HISTORY_LIMIT_DEFAULT = 10
MAX_TEAM_SIZE_DEFAULT = 10
DEFAULT_TEAM_SIZE = 2

CATEGORY_COLORS: Tuple[str, ...] = (
    "#8B5CF6",
    "#3B82F6",
    "#10B981",
    "#F59E0B",
    "#EF4444",
    "#EC4899",
    "#6366F1",
    "#84CC16",
    "#F97316",
    "#6B7280",
)


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def history_limit() -> int:
    return _env_int(_HISTORY_LIMIT_ENV, HISTORY_LIMIT_DEFAULT, min_value=1)


def max_team_size() -> int:
    return _env_int(_MAX_TEAM_SIZE_ENV, MAX_TEAM_SIZE_DEFAULT, min_value=1)


def db_path_override() -> Optional[str]:
    return os.getenv(_DB_PATH_ENV) or None


@dataclass(frozen=True)
class AssignmentSettings:
    """Configuration handed to the engine for one randomization or fill pass."""

    team_size: int = DEFAULT_TEAM_SIZE
    max_teams: int = 0
    reserve_players_enabled: bool = False
    skill_balancing_enabled: bool = False
    skill_categories: Tuple[SkillCategory, ...] = ()
    team_composition_rules: Mapping[str, int] = field(default_factory=dict)
    team_naming_category_id: Optional[str] = None

    def __post_init__(self) -> None:
        # Frozen dataclass: normalize through object.__setattr__.
        object.__setattr__(self, "team_size", max(1, int(self.team_size)))
        object.__setattr__(self, "max_teams", max(0, int(self.max_teams)))
        object.__setattr__(self, "skill_categories", tuple(self.skill_categories))
        object.__setattr__(self, "team_composition_rules", dict(self.team_composition_rules))

    @property
    def skill_balancing_active(self) -> bool:
        return self.skill_balancing_enabled and bool(self.skill_categories)

    @property
    def active_rules(self) -> dict[str, int]:
        """Rules that take part in distribution; empty when balancing is off."""

        if not self.skill_balancing_active:
            return {}
        return {key: count for key, count in self.team_composition_rules.items() if count > 0}

    @property
    def naming_category_id(self) -> Optional[str]:
        if not self.skill_balancing_active:
            return None
        return self.team_naming_category_id

    def snapshot(self) -> dict[str, Any]:
        return {
            "max_teams": self.max_teams,
            "team_size": self.team_size,
            "reserve_players_enabled": self.reserve_players_enabled,
            "skill_balancing_enabled": self.skill_balancing_enabled,
            "skill_categories": list(self.skill_categories),
            "team_composition_rules": dict(self.team_composition_rules),
        }

    @classmethod
    def from_state(cls, state: "AppState") -> "AssignmentSettings":
        return cls(
            team_size=state.team_size,
            max_teams=state.max_teams,
            reserve_players_enabled=state.reserve_players_enabled,
            skill_balancing_enabled=state.skill_balancing_enabled,
            skill_categories=tuple(state.skill_categories),
            team_composition_rules=dict(state.team_composition_rules),
            team_naming_category_id=state.team_naming_category_id,
        )

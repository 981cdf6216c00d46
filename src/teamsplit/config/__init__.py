"""Configuration helpers for assignment settings and runtime limits."""

from .settings import (
    CATEGORY_COLORS,
    DEFAULT_TEAM_SIZE,
    AssignmentSettings,
    db_path_override,
    history_limit,
    max_team_size,
)

__all__ = [
    "AssignmentSettings",
    "CATEGORY_COLORS",
    "DEFAULT_TEAM_SIZE",
    "db_path_override",
    "history_limit",
    "max_team_size",
]

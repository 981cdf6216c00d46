"""Team-assignment engine."""

from .builder import build_empty_teams, default_team_name
from .distribution import (
    distribute_by_rules,
    distribute_by_rules_with_deficits,
    distribute_evenly,
    distribute_standard,
    fill_open_slots,
)
from .grouping import UNASSIGNED, SkillGroups, group_by_skill
from .history import push_history, restore_history_entry, snapshot_history
from .locks import reattach_locked, reattach_locked_with_capacity, sync_player_assignments
from .naming import apply_naming
from .service import AssignmentResult, fill_remaining_teams, randomize_teams
from .team_count import adjust_team_count_for_rules, resolve_team_count
from .validation import (
    rules_fit_team_size,
    rules_warning,
    summarize_validations,
    total_required,
    validate_composition,
)

__all__ = [
    "AssignmentResult",
    "SkillGroups",
    "UNASSIGNED",
    "adjust_team_count_for_rules",
    "apply_naming",
    "build_empty_teams",
    "default_team_name",
    "distribute_by_rules",
    "distribute_by_rules_with_deficits",
    "distribute_evenly",
    "distribute_standard",
    "fill_open_slots",
    "fill_remaining_teams",
    "group_by_skill",
    "push_history",
    "randomize_teams",
    "reattach_locked",
    "reattach_locked_with_capacity",
    "resolve_team_count",
    "restore_history_entry",
    "rules_fit_team_size",
    "rules_warning",
    "snapshot_history",
    "summarize_validations",
    "sync_player_assignments",
    "total_required",
    "validate_composition",
]

"""Read-only composition checks against skill rules."""

from __future__ import annotations

from typing import Mapping, Optional, Sequence

from teamsplit.models import (
    Player,
    SkillBreakdown,
    SkillCategory,
    Team,
    TeamValidation,
    ValidationSummary,
)


def validate_composition(
    team: Team,
    all_players: Sequence[Player],
    categories: Sequence[SkillCategory],
    rules: Mapping[str, int],
    balancing_enabled: bool,
) -> TeamValidation:
    """Compare a team's per-category head count with the required counts.

    Skill levels are read from ``all_players`` rather than the team's
    snapshots, so later skill edits are reflected. Members missing from the
    roster are ignored.
    """

    result = TeamValidation()
    if not balancing_enabled or not rules:
        return result

    roster = {player.id: player for player in all_players}
    members = [roster[member.id] for member in team.players if member.id in roster]
    names = {category.id: category.name for category in categories}

    for category_id, required in rules.items():
        if required <= 0:
            continue
        actual = sum(1 for player in members if player.skill_level == category_id)
        category_name = names.get(category_id, category_id)
        result.skill_distribution[category_id] = SkillBreakdown(
            actual=actual,
            required=required,
            category_name=category_name,
        )
        if actual < required:
            result.violations.append(f"Needs {required - actual} more {category_name} player(s)")
            result.is_valid = False
        elif actual > required:
            result.violations.append(f"Has {actual - required} too many {category_name} player(s)")
            result.is_valid = False

    return result


def summarize_validations(
    teams: Sequence[Team],
    all_players: Sequence[Player],
    categories: Sequence[SkillCategory],
    rules: Mapping[str, int],
    balancing_enabled: bool,
) -> ValidationSummary:
    validations = [
        validate_composition(team, all_players, categories, rules, balancing_enabled)
        for team in teams
    ]
    invalid = [validation for validation in validations if not validation.is_valid]
    return ValidationSummary(
        team_count=len(teams),
        invalid_team_count=len(invalid),
        total_violations=sum(len(validation.violations) for validation in invalid),
        validations=validations,
    )


def total_required(rules: Mapping[str, int]) -> int:
    return sum(max(0, count) for count in rules.values())


def rules_fit_team_size(rules: Mapping[str, int], team_size: int) -> bool:
    return total_required(rules) <= team_size


def rules_warning(rules: Mapping[str, int], team_size: int) -> Optional[str]:
    """Advisory message when the rules ask for more players than a team holds."""

    total = total_required(rules)
    if total <= team_size:
        return None
    return f"Total required players ({total}) exceeds team size ({team_size})"

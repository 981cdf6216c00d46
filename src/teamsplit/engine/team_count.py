"""Team count resolution from roster size, team size and caps."""

from __future__ import annotations

import logging
import math
from typing import List, Mapping, Optional

from .grouping import SkillGroups, category_counts as _category_counts


logger = logging.getLogger(__name__)


def _notify(notices: Optional[List[str]], template: str, *args: object) -> None:
    logger.warning(template, *args)
    if notices is not None:
        notices.append(template % args)


def adjust_team_count_for_rules(
    rules: Mapping[str, int],
    skill_groups: SkillGroups,
    current_team_count: int,
    max_teams: int,
) -> int:
    """Shrink the team count so the scarcest required category can fill every team."""

    return _apply_rule_bottleneck(rules, _category_counts(skill_groups), current_team_count, max_teams)


def _apply_rule_bottleneck(
    rules: Mapping[str, int],
    available: Mapping[str, int],
    current_team_count: int,
    max_teams: int,
    notices: Optional[List[str]] = None,
) -> int:
    if not rules or max_teams <= 0:
        return current_team_count

    per_category = [
        available.get(category_id, 0) // required
        for category_id, required in rules.items()
        if required > 0
    ]
    if not per_category:
        return current_team_count

    bottleneck = min(per_category)
    if bottleneck < current_team_count:
        adjusted = max(1, bottleneck)
        if adjusted != current_team_count:
            _notify(
                notices,
                "Reducing teams from %s to %s to satisfy composition rules",
                current_team_count,
                adjusted,
            )
        return adjusted
    return current_team_count


def resolve_team_count(
    active_player_count: int,
    team_size: int,
    max_teams: int,
    *,
    rules: Optional[Mapping[str, int]] = None,
    category_counts: Optional[Mapping[str, int]] = None,
    notices: Optional[List[str]] = None,
) -> int:
    """Return how many teams to build; always at least one.

    A ``max_teams`` cap larger than the roster needs is reduced to
    ``ceil(active / team_size)`` and reported through ``notices``. With
    composition rules and a cap, the count is further bounded by the scarcest
    required category.
    """

    team_size = max(1, team_size)
    active_player_count = max(0, active_player_count)
    needed = max(1, math.ceil(active_player_count / team_size))

    if max_teams > 0:
        team_count = max_teams
        if team_count > needed:
            _notify(notices, "Reducing teams from %s to %s based on player count", team_count, needed)
            team_count = needed
    else:
        team_count = needed

    if rules and category_counts is not None:
        team_count = _apply_rule_bottleneck(rules, category_counts, team_count, max_teams, notices)

    return team_count

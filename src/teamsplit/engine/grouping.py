"""Skill bucket grouping for balanced distribution."""

from __future__ import annotations

import random
from typing import Dict, Iterable, List, Optional, Sequence

from teamsplit.models import Player, SkillCategory

UNASSIGNED = "unassigned"

# Keys are skill category ids plus the UNASSIGNED sentinel, in category order
# with UNASSIGNED last.
SkillGroups = Dict[str, List[Player]]


def resolve_rng(rng: Optional[random.Random]) -> random.Random:
    return rng if rng is not None else random.Random()


def shuffled(players: Iterable[Player], rng: Optional[random.Random] = None) -> List[Player]:
    pool = list(players)
    resolve_rng(rng).shuffle(pool)
    return pool


def group_by_skill(
    players: Sequence[Player],
    categories: Sequence[SkillCategory],
    *,
    rng: Optional[random.Random] = None,
) -> SkillGroups:
    """Bucket unlocked active players by skill level, each bucket shuffled.

    Players without a skill level, or whose skill level names a category that
    no longer exists, land in the ``UNASSIGNED`` bucket.
    """

    rng = resolve_rng(rng)
    known_ids = [category.id for category in categories if category.id != UNASSIGNED]
    groups: SkillGroups = {category_id: [] for category_id in known_ids}
    groups[UNASSIGNED] = []

    for player in players:
        if player.locked or player.is_reserve:
            continue
        key = player.skill_level if player.skill_level in groups else UNASSIGNED
        groups[key].append(player)

    for bucket in groups.values():
        rng.shuffle(bucket)
    return groups


def category_counts(groups: SkillGroups) -> Dict[str, int]:
    return {key: len(bucket) for key, bucket in groups.items()}

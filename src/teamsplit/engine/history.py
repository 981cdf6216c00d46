"""Snapshots of finished assignments for later restoration."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Sequence, Tuple
from uuid import uuid4

from teamsplit.config import history_limit
from teamsplit.models import HistoryEntry, Player, Team


def snapshot_history(
    players: Sequence[Player],
    teams: Sequence[Team],
    event_name: str,
    organizer_name: str,
    *,
    settings: Optional[Mapping[str, Any]] = None,
) -> HistoryEntry:
    """Build a history entry with deep copies of the roster and teams."""

    extra = dict(settings or {})
    return HistoryEntry(
        id=uuid4().hex,
        timestamp=datetime.now(timezone.utc),
        players=list(players),
        teams=[team.model_copy(deep=True) for team in teams],
        event_name=event_name,
        organizer_name=organizer_name,
        **extra,
    )


def push_history(
    history: Sequence[HistoryEntry],
    entry: HistoryEntry,
    capacity: Optional[int] = None,
) -> List[HistoryEntry]:
    """Prepend ``entry`` and drop the oldest entries beyond ``capacity``."""

    limit = capacity if capacity is not None else history_limit()
    return [entry, *history][: max(1, limit)]


def restore_history_entry(entry: HistoryEntry) -> Tuple[List[Player], List[Team]]:
    """Return fresh copies of the roster and teams captured in ``entry``."""

    return list(entry.players), [team.model_copy(deep=True) for team in entry.teams]

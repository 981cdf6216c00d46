"""Persistence layer for the application state and assignment history."""

from __future__ import annotations

import json
import sqlite3
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from teamsplit.config import db_path_override, history_limit
from teamsplit.models import HistoryEntry
from teamsplit.state import AppState


_STATE_KEY = "default"


class StateStore:
    """Simple SQLite-backed store for one application state and its history."""

    def __init__(self, db_path: Path | str):
        self._use_uri = False
        env_db = db_path_override()
        if env_db:
            if env_db.startswith('file:'):
                self.db_path = env_db
                self._use_uri = True
            else:
                self.db_path = Path(env_db)
        elif isinstance(db_path, str) and db_path.startswith('file:'):
            self.db_path = db_path
            self._use_uri = True
        else:
            self.db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        try:
            if isinstance(self.db_path, Path):
                self.db_path.parent.mkdir(parents=True, exist_ok=True)
                conn = sqlite3.connect(self.db_path)
            else:
                conn = sqlite3.connect(self.db_path, uri=self._use_uri)
        except sqlite3.OperationalError:
            fallback_dir = Path(tempfile.gettempdir()) / 'teamsplit-runtime'
            fallback_dir.mkdir(parents=True, exist_ok=True)
            fallback = fallback_dir / 'teamsplit.sqlite'
            conn = sqlite3.connect(fallback)
            self.db_path = fallback
            self._use_uri = False
            self._create_schema(conn)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            self._create_schema(conn)

    def _create_schema(self, conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS app_state (
                id TEXT PRIMARY KEY,
                state_json TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS history (
                id TEXT PRIMARY KEY,
                created_at TEXT NOT NULL,
                event_name TEXT,
                entry_json TEXT NOT NULL
            )
            """
        )
        conn.commit()

    def save_state(self, state: AppState) -> None:
        """Persist the state; its history list replaces the stored one."""

        payload = state.model_dump(mode="json", by_alias=True, exclude={"history"})
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO app_state (id, state_json, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET state_json = excluded.state_json,
                                              updated_at = excluded.updated_at
                """,
                (_STATE_KEY, json.dumps(payload), now),
            )
            conn.execute("DELETE FROM history")
            self._insert_history(conn, state.history)
            conn.commit()

    def load_state(self) -> AppState:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM app_state WHERE id = ?", (_STATE_KEY,)).fetchone()
        if row is None:
            return AppState(history=self.list_history())
        state = AppState.model_validate(json.loads(row["state_json"]))
        return state.model_copy(update={"history": self.list_history()})

    def append_history(self, entry: HistoryEntry, limit: Optional[int] = None) -> None:
        """Store ``entry`` and evict the oldest rows beyond ``limit``."""

        limit = limit if limit is not None else history_limit()
        with self._connect() as conn:
            self._insert_history(conn, [entry])
            conn.execute(
                """
                DELETE FROM history WHERE id NOT IN (
                    SELECT id FROM history ORDER BY created_at DESC, rowid DESC LIMIT ?
                )
                """,
                (limit,),
            )
            conn.commit()

    def list_history(self, limit: Optional[int] = None) -> List[HistoryEntry]:
        limit = limit if limit is not None else history_limit()
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM history ORDER BY created_at DESC, rowid DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    def get_history_entry(self, entry_id: str) -> Optional[HistoryEntry]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM history WHERE id = ?", (entry_id,)).fetchone()
            if row is None:
                return None
            return self._row_to_entry(row)

    def clear_history(self) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM history")
            conn.commit()

    def _insert_history(self, conn: sqlite3.Connection, entries: Iterable[HistoryEntry]) -> None:
        # Oldest first so rowid order matches recency for equal timestamps.
        for entry in reversed(list(entries)):
            conn.execute(
                """
                INSERT OR REPLACE INTO history (id, created_at, event_name, entry_json)
                VALUES (?, ?, ?, ?)
                """,
                (
                    entry.id,
                    entry.timestamp.isoformat(),
                    entry.event_name,
                    json.dumps(entry.to_wire()),
                ),
            )

    def _row_to_entry(self, row: sqlite3.Row) -> HistoryEntry:
        return HistoryEntry.model_validate(json.loads(row["entry_json"]))

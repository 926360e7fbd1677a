"""Look storage abstractions and a SQLite implementation."""
from __future__ import annotations

import json
import sqlite3
import time
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from models.look import Look, LookPage, parse_look_data


class LookStore:
    """Read interface the style report agent uses to fetch looks."""

    def list_looks_for_report(self, user_id: str, max_count: int) -> LookPage:
        """Return up to ``max_count`` looks for ``user_id``, newest first."""
        raise NotImplementedError


class SQLiteLookStore(LookStore):
    """Local SQLite-backed store for analyzed looks."""

    def __init__(self, database_path: str | Path = "data/looks.db") -> None:
        self.database_path = Path(database_path)
        if self.database_path.parent and not self.database_path.parent.exists():
            self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS looks (
                    look_id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    image_url TEXT,
                    vibe TEXT,
                    occasion TEXT,
                    look_data TEXT,
                    created_at REAL NOT NULL
                );
                """
            )
            conn.execute("CREATE INDEX IF NOT EXISTS looks_user_created ON looks (user_id, created_at)")

    def add_look(
        self,
        user_id: str,
        look_data: Dict[str, Any] | str | None = None,
        image_url: Optional[str] = None,
        vibe: Optional[str] = None,
        occasion: Optional[str] = None,
        look_id: Optional[str] = None,
        created_at: Optional[float] = None,
    ) -> Look:
        """Insert a look; ``look_data`` is stored as JSON text exactly as analysis produced it."""

        look_id = look_id or str(uuid4())
        created_at = time.time() if created_at is None else created_at
        raw_data = look_data if isinstance(look_data, str) else json.dumps(look_data or {})
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO looks (
                    look_id, user_id, image_url, vibe, occasion, look_data, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (look_id, user_id, image_url, vibe, occasion, raw_data, created_at),
            )
        return Look(
            look_id=look_id,
            user_id=user_id,
            image_url=image_url,
            vibe=vibe,
            occasion=occasion,
            created_at=created_at,
            analysis=parse_look_data(raw_data),
        )

    def _row_to_look(self, row: sqlite3.Row) -> Look:
        return Look(
            look_id=row["look_id"],
            user_id=row["user_id"],
            image_url=row["image_url"],
            vibe=row["vibe"],
            occasion=row["occasion"],
            created_at=row["created_at"],
            analysis=parse_look_data(row["look_data"]),
        )

    def list_looks_for_report(self, user_id: str, max_count: int) -> LookPage:
        limit = max(0, int(max_count))
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM looks WHERE user_id = ? ORDER BY created_at DESC, rowid DESC LIMIT ?",
                (user_id, limit),
            ).fetchall()
            total_row = conn.execute(
                "SELECT COUNT(*) AS ct FROM looks WHERE user_id = ?", (user_id,)
            ).fetchone()
        items: List[Look] = [self._row_to_look(row) for row in rows]
        return LookPage(items=items, total=int(total_row["ct"]) if total_row else 0)


__all__ = ["LookStore", "SQLiteLookStore"]

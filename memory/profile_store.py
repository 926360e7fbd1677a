"""Style profile and latest-report persistence."""
from __future__ import annotations

import json
import sqlite3
import time
from pathlib import Path
from typing import Any, Dict, Optional


class ProfileStore:
    """Interface for the per-user style profile and latest style report.

    Both documents are replaced wholesale on every write; there are no
    partial updates.
    """

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Return ``{"user_id", "style_profile": {"updated_at", "source", "data"}}`` or ``None``."""
        raise NotImplementedError

    def write_profile(self, user_id: str, source: str, data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def save_latest_report(self, user_id: str, report_data: Dict[str, Any]) -> None:
        raise NotImplementedError

    def get_latest_report(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Return ``{"report_data", "saved_at"}`` or ``None`` when no report exists."""
        raise NotImplementedError


class JSONProfileStore(ProfileStore):
    """One JSON document per user, suitable for local runs."""

    def __init__(self, base_dir: str | Path = "data/profiles") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, user_id: str) -> Path:
        path = (self.base_dir / f"{user_id}.json").resolve()
        if path.parent != self.base_dir.resolve():
            raise ValueError(f"Invalid user id for profile storage: {user_id!r}")
        return path

    def _load(self, user_id: str) -> Optional[Dict[str, Any]]:
        path = self._path(user_id)
        if not path.exists():
            return None
        return json.loads(path.read_text())

    def _save(self, user_id: str, record: Dict[str, Any]) -> None:
        self._path(user_id).write_text(json.dumps(record, indent=2))

    def _load_or_new(self, user_id: str) -> Dict[str, Any]:
        return self._load(user_id) or {
            "user_id": user_id,
            "style_profile": {"updated_at": None, "source": None, "data": None},
            "latest_report": None,
        }

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        record = self._load(user_id)
        if record is None:
            return None
        return {"user_id": user_id, "style_profile": record.get("style_profile")}

    def write_profile(self, user_id: str, source: str, data: Dict[str, Any]) -> None:
        record = self._load_or_new(user_id)
        record["style_profile"] = {"updated_at": time.time(), "source": source, "data": data}
        self._save(user_id, record)

    def save_latest_report(self, user_id: str, report_data: Dict[str, Any]) -> None:
        record = self._load_or_new(user_id)
        record["latest_report"] = {"report_data": report_data, "saved_at": time.time()}
        self._save(user_id, record)

    def get_latest_report(self, user_id: str) -> Optional[Dict[str, Any]]:
        record = self._load(user_id)
        if not record or not record.get("latest_report"):
            return None
        return dict(record["latest_report"])


class SQLiteProfileStore(ProfileStore):
    """SQLite-backed profile store for lightweight durability."""

    def __init__(self, db_path: str | Path = "data/profiles.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS style_profiles (
                    user_id TEXT PRIMARY KEY,
                    source TEXT,
                    data TEXT,
                    updated_at REAL
                );
                CREATE TABLE IF NOT EXISTS latest_reports (
                    user_id TEXT PRIMARY KEY,
                    report_data TEXT NOT NULL,
                    saved_at REAL
                );
                """
            )

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT source, data, updated_at FROM style_profiles WHERE user_id = ?", (user_id,)
            ).fetchone()
        if row is None:
            return None
        return {
            "user_id": user_id,
            "style_profile": {
                "updated_at": row["updated_at"],
                "source": row["source"],
                "data": json.loads(row["data"]) if row["data"] else None,
            },
        }

    def write_profile(self, user_id: str, source: str, data: Dict[str, Any]) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO style_profiles(user_id, source, data, updated_at) VALUES (?, ?, ?, ?)\n"
                "ON CONFLICT(user_id) DO UPDATE SET source=excluded.source, data=excluded.data, "
                "updated_at=excluded.updated_at",
                (user_id, source, json.dumps(data), time.time()),
            )

    def save_latest_report(self, user_id: str, report_data: Dict[str, Any]) -> None:
        with self._connect() as conn:
            conn.execute(
                "INSERT INTO latest_reports(user_id, report_data, saved_at) VALUES (?, ?, ?)\n"
                "ON CONFLICT(user_id) DO UPDATE SET report_data=excluded.report_data, saved_at=excluded.saved_at",
                (user_id, json.dumps(report_data), time.time()),
            )

    def get_latest_report(self, user_id: str) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT report_data, saved_at FROM latest_reports WHERE user_id = ?", (user_id,)
            ).fetchone()
        if row is None:
            return None
        return {"report_data": json.loads(row["report_data"]), "saved_at": row["saved_at"]}


__all__ = ["ProfileStore", "JSONProfileStore", "SQLiteProfileStore"]

from __future__ import annotations

import sqlite3
from pathlib import Path

from alembic import command
from alembic.config import Config

from studydesk.config import settings as env_settings


def _alembic_cfg(repo_root: Path) -> Config:
    return Config(str(repo_root / "alembic.ini"))


def test_upgrade_head_creates_kv_store(monkeypatch, tmp_path):
    repo_root = Path(__file__).resolve().parents[1]
    db_file = tmp_path / "migrations_kv.db"

    db_url = f"sqlite+aiosqlite:///{db_file.resolve().as_posix()}"
    monkeypatch.setattr(env_settings, "DB_PATH", db_url, raising=False)

    cfg = _alembic_cfg(repo_root)
    command.upgrade(cfg, "head")
    # Running again is a no-op.
    command.upgrade(cfg, "head")

    con = sqlite3.connect(db_file)
    try:
        columns = [row[1] for row in con.execute("PRAGMA table_info(kv_store)").fetchall()]
        assert columns == ["key", "value", "updated_at"]
        con.execute(
            "INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)",
            ("timetable", "[]", "2026-10-19T09:00:00"),
        )
        con.commit()
    finally:
        con.close()

    command.downgrade(cfg, "base")

    con = sqlite3.connect(db_file)
    try:
        tables = {row[0] for row in con.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        assert "kv_store" not in tables
    finally:
        con.close()

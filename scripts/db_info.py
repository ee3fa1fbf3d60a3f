#!/usr/bin/env python3
from __future__ import annotations

import json
import os
import sqlite3
import sys
from pathlib import Path


def _sqlite_path_from_sqla_url(url: str) -> Path:
    if not url.startswith("sqlite"):
        raise ValueError(f"DB_PATH is not sqlite: {url}")
    if url.startswith("sqlite+"):
        # sqlite+aiosqlite:///... -> sqlite:///...
        url = "sqlite:" + url.split(":", 1)[1]
    rest = url[len("sqlite:") :]
    rest = rest.split("?", 1)[0]
    if rest.startswith("///"):
        return Path(rest[3:])
    return Path(rest.lstrip("/"))


def _describe(key: str, value: str) -> str:
    try:
        data = json.loads(value)
    except json.JSONDecodeError:
        return f"unparsable ({len(value)} chars)"
    if key == "timetable" and isinstance(data, list):
        return f"rows={len(data)}"
    if isinstance(data, list):
        return f"items={len(data)}: {', '.join(map(str, data[:10]))}"
    return type(data).__name__


def main() -> int:
    db_url = os.environ.get("DB_PATH", "sqlite+aiosqlite:///./data/studydesk.db")
    try:
        db_path = _sqlite_path_from_sqla_url(db_url)
    except Exception as exc:
        print(f"ERROR: failed to parse DB_PATH={db_url!r}: {exc}", file=sys.stderr)
        return 2

    if not db_path.is_absolute():
        db_path = (Path.cwd() / db_path).resolve()

    print(f"DB_PATH={db_url}")
    print(f"SQLite file={db_path} (exists={db_path.exists()})")
    if not db_path.exists():
        print("WARN: DB file not found. The timetable has never been saved on this machine.", file=sys.stderr)
        return 1

    con = sqlite3.connect(str(db_path))
    try:
        con.execute("PRAGMA busy_timeout=30000;")
        rows = con.execute("SELECT key, value, updated_at FROM kv_store ORDER BY key;").fetchall()
        print(f"keys={len(rows)}")
        for key, value, updated_at in rows:
            print(f"key={key!r} updated_at={updated_at} {_describe(key, value)}")
    finally:
        con.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

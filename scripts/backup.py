"""Backup the configured database.

Note: SQLite uses the online backup API. MySQL needs `mysqldump` on PATH;
otherwise back up with MySQL Workbench or phpMyAdmin.
"""

from __future__ import annotations

import importlib
import sqlite3
import subprocess
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.event_checkin.event_checkin.core.enums import StorageBackend
from src.event_checkin.event_checkin.database.connection import StorageConfig


def backup_sqlite(source: str, out_file: Path) -> None:
    src = sqlite3.connect(source)
    dst = sqlite3.connect(str(out_file))
    try:
        src.backup(dst)
    finally:
        dst.close()
        src.close()


def backup_mysql(storage: StorageConfig, out_file: Path) -> None:
    db = storage.mysql
    cmd = [
        "mysqldump",
        f"-h{db.host}",
        f"-P{db.port}",
        f"-u{db.user}",
        f"-p{db.password}",
        db.database,
    ]
    try:
        with out_file.open("wb") as f:
            subprocess.run(cmd, stdout=f, stderr=subprocess.PIPE, check=True)
    except FileNotFoundError:
        raise SystemExit("`mysqldump` not found. Install the MySQL client tools or back up with Workbench.")


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    storage = StorageConfig.from_settings(vars(settings))

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")

    if storage.backend == StorageBackend.SQLITE:
        out_file = out_dir / f"events_{ts}.db"
        backup_sqlite(storage.sqlite_path, out_file)
    else:
        out_file = out_dir / f"event_checkin_{ts}.sql"
        backup_mysql(storage, out_file)
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()

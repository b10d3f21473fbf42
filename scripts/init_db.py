from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.event_checkin.event_checkin.database.bootstrap import init_storage, list_tables
from src.event_checkin.event_checkin.database.connection import StorageConfig


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    storage = StorageConfig.from_settings(vars(settings))

    init_storage(storage)
    tables = list_tables(storage)
    if storage.backend.value == "mysql" and storage.mysql is not None:
        target = f"{storage.mysql.user}@{storage.mysql.host}:{storage.mysql.port}/{storage.mysql.database}"
    else:
        target = storage.sqlite_path
    print(f"OK: Applied {storage.backend.value} schema -> {target} (tables={len(tables)})")


if __name__ == "__main__":
    main()

"""Seed demo data: event "Hackathon" with categories "Finals" and "Workshops"."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.event_checkin.event_checkin.container import build_container
from src.event_checkin.event_checkin.database.bootstrap import init_storage
from src.event_checkin.event_checkin.database.connection import StorageConfig

DEMO_ROSTER = b"""email,full_name,school
ada@example.com,Ada Lovelace,Analytical College
alan@example.com,Alan Turing,King's College
grace@example.com,Grace Hopper,
"""


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    storage = StorageConfig.from_settings(vars(settings))
    init_storage(storage)
    container = build_container(storage=storage)

    event = container.event_service.create_event(
        name="Hackathon",
        description="Demo event created by scripts/seed_db.py",
        date="2026-11-14",
    )
    finals = container.category_service.create_category(event_id=event.id, name="Finals")
    container.category_service.create_category(event_id=event.id, name="Workshops")

    result = container.roster_import_service.import_file(
        category_id=finals.id,
        content=DEMO_ROSTER,
        filename="demo_roster.csv",
    )
    print(f"OK: Seeded event {event.id} -> {result.to_dict()}")


if __name__ == "__main__":
    main()

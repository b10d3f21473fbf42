"""Example: use the service layer directly (without Flask).

Controllers are a thin layer; the use cases live in the services.
"""

import importlib

from config import get_settings_module

from src.event_checkin.event_checkin.container import build_container
from src.event_checkin.event_checkin.database.connection import StorageConfig


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(storage=StorageConfig.from_settings(vars(settings)))
    for summary in container.stats_service.events_with_stats():
        print(summary.to_dict())
    print(container.stats_service.dashboard_totals().to_dict())


if __name__ == "__main__":
    main()

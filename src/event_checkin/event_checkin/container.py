from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from .categories.repository import CategoryRepository
from .categories.service import CategoryService
from .categories.sql_category_repository import MySQLCategoryRepository, SQLiteCategoryRepository
from .checkin.service import CheckInWorkflow
from .core.enums import StorageBackend
from .core.exceptions import ValidationError
from .database.connection import MySQLConnection, SQLiteConnection, StorageConfig
from .events.repository import EventRepository
from .events.service import EventService
from .events.sql_event_repository import MySQLEventRepository, SQLiteEventRepository
from .participants.repository import ParticipantRepository
from .participants.service import ParticipantDirectory
from .participants.sql_participant_repository import MySQLParticipantRepository, SQLiteParticipantRepository
from .roster.service import RosterImportService
from .stats.service import StatsService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    storage: StorageConfig
    conn: Union[SQLiteConnection, MySQLConnection]

    events_repo: EventRepository
    categories_repo: CategoryRepository
    participants_repo: ParticipantRepository

    event_service: EventService
    category_service: CategoryService
    participant_directory: ParticipantDirectory
    roster_import_service: RosterImportService
    check_in_workflow: CheckInWorkflow
    stats_service: StatsService


def build_container(*, storage: StorageConfig) -> Container:
    if storage.backend == StorageBackend.SQLITE:
        conn = SQLiteConnection(storage.sqlite_path)
        events_repo = SQLiteEventRepository(conn)
        categories_repo = SQLiteCategoryRepository(conn)
        participants_repo = SQLiteParticipantRepository(conn)
        logger.info("Storage backend: sqlite (%s)", storage.sqlite_path)
    elif storage.backend == StorageBackend.MYSQL:
        if storage.mysql is None:
            raise ValidationError("DB_CONFIG is required for the mysql storage backend")
        conn = MySQLConnection(storage.mysql)
        events_repo = MySQLEventRepository(conn)
        categories_repo = MySQLCategoryRepository(conn)
        participants_repo = MySQLParticipantRepository(conn)
        logger.info(
            "Storage backend: mysql (%s@%s:%s/%s)",
            storage.mysql.user,
            storage.mysql.host,
            storage.mysql.port,
            storage.mysql.database,
        )
    else:
        raise ValidationError(f"Unsupported storage backend: {storage.backend}")

    event_service = EventService(events_repo)
    category_service = CategoryService(categories_repo)
    participant_directory = ParticipantDirectory(participants_repo)
    roster_import_service = RosterImportService(participant_directory, categories_repo)
    check_in_workflow = CheckInWorkflow(participant_directory, categories_repo)
    stats_service = StatsService(events_repo, categories_repo, participants_repo)

    return Container(
        storage=storage,
        conn=conn,
        events_repo=events_repo,
        categories_repo=categories_repo,
        participants_repo=participants_repo,
        event_service=event_service,
        category_service=category_service,
        participant_directory=participant_directory,
        roster_import_service=roster_import_service,
        check_in_workflow=check_in_workflow,
        stats_service=stats_service,
    )

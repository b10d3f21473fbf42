from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..database.sql_repository import MySQLRepository, SQLiteRepository, SQLRepository
from .model import AttendanceStats, Participant
from .repository import ParticipantRepository

_COLUMNS = (
    "id, category_id, email, full_name, school_institution, "
    "attendance_status, checked_in_at, winner_rank, created_at"
)
_UPDATABLE = ("email", "full_name", "school_institution", "attendance_status", "checked_in_at", "winner_rank")


def _to_participant(r: Dict[str, Any]) -> Participant:
    return Participant(
        id=str(r["id"]),
        category_id=str(r["category_id"]),
        email=r["email"],
        full_name=r["full_name"],
        school_institution=r.get("school_institution"),
        attendance_status=AttendanceStatus(r.get("attendance_status") or AttendanceStatus.PENDING.value),
        checked_in_at=int(r["checked_in_at"]) if r.get("checked_in_at") is not None else None,
        winner_rank=int(r["winner_rank"]) if r.get("winner_rank") is not None else None,
        created_at=int(r["created_at"]),
    )


class SQLParticipantRepository(SQLRepository, ParticipantRepository):
    def _select(self, where: str, params: tuple, *, ordered: bool = True) -> list[Participant]:
        order = f" ORDER BY created_at DESC, {self.order_tiebreak} DESC" if ordered else ""
        with self._cursor() as (_, cur):
            cur.execute(self._q(f"SELECT {_COLUMNS} FROM participants{where}{order}"), params)
            return [_to_participant(r) for r in self._fetchall(cur)]

    def list_all(self) -> Sequence[Participant]:
        return self._select("", ())

    def list_by_category(self, category_id: str) -> Sequence[Participant]:
        return self._select(" WHERE category_id=?", (category_id,))

    def get_by_id(self, participant_id: str) -> Optional[Participant]:
        rows = self._select(" WHERE id=?", (participant_id,), ordered=False)
        return rows[0] if rows else None

    def get_by_email_and_category(self, email: str, category_id: str) -> Optional[Participant]:
        rows = self._select(" WHERE email=? AND category_id=?", (email, category_id), ordered=False)
        return rows[0] if rows else None

    def find_by_winner_rank(self, category_id: str, winner_rank: int) -> Sequence[Participant]:
        return self._select(" WHERE category_id=? AND winner_rank=?", (category_id, int(winner_rank)))

    def create(
        self,
        *,
        participant_id: str,
        category_id: str,
        email: str,
        full_name: str,
        school_institution: Optional[str],
        created_at: int,
    ) -> Participant:
        with self._cursor() as (_, cur):
            cur.execute(
                self._q(
                    """
                    INSERT INTO participants(id, category_id, email, full_name, school_institution, attendance_status, created_at)
                    VALUES(?,?,?,?,?,?,?)
                    """
                ),
                (participant_id, category_id, email, full_name, school_institution, AttendanceStatus.PENDING.value, created_at),
            )
        return Participant(
            id=participant_id,
            category_id=category_id,
            email=email,
            full_name=full_name,
            school_institution=school_institution,
            attendance_status=AttendanceStatus.PENDING,
            checked_in_at=None,
            winner_rank=None,
            created_at=created_at,
        )

    def update(self, participant_id: str, fields: Mapping[str, object]) -> Optional[Participant]:
        changes = {k: v for k, v in fields.items() if k in _UPDATABLE}
        if changes:
            assignments = ", ".join(f"{col}=?" for col in changes)
            values = [v.value if isinstance(v, AttendanceStatus) else v for v in changes.values()]
            with self._cursor() as (_, cur):
                cur.execute(
                    self._q(f"UPDATE participants SET {assignments} WHERE id=?"),
                    (*values, participant_id),
                )
        return self.get_by_id(participant_id)

    def check_in(self, participant_id: str, *, checked_in_at: int) -> Optional[Participant]:
        with self._cursor() as (_, cur):
            cur.execute(
                self._q("UPDATE participants SET attendance_status=?, checked_in_at=? WHERE id=?"),
                (AttendanceStatus.CHECKED_IN.value, int(checked_in_at), participant_id),
            )
        return self.get_by_id(participant_id)

    def delete_by_id(self, participant_id: str) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(self._q("DELETE FROM participants WHERE id=?"), (participant_id,))
            return cur.rowcount > 0

    def count_by_category(self, category_id: str) -> int:
        return self._scalar("SELECT COUNT(*) AS n FROM participants WHERE category_id=?", (category_id,))

    def count_by_event(self, event_id: str) -> int:
        return self._scalar(
            """
            SELECT COUNT(p.id) AS n
            FROM participants p
            JOIN categories c ON c.id = p.category_id
            WHERE c.event_id=?
            """,
            (event_id,),
        )

    def attendance_stats(self, category_id: str) -> AttendanceStats:
        with self._cursor() as (_, cur):
            cur.execute(
                self._q(
                    """
                    SELECT
                        COUNT(*) AS total,
                        SUM(CASE WHEN attendance_status = 'checked_in' THEN 1 ELSE 0 END) AS checked_in,
                        SUM(CASE WHEN attendance_status = 'pending' THEN 1 ELSE 0 END) AS pending
                    FROM participants
                    WHERE category_id=?
                    """
                ),
                (category_id,),
            )
            r = self._fetchone(cur) or {}
            return AttendanceStats(
                total=int(r.get("total") or 0),
                checked_in=int(r.get("checked_in") or 0),
                pending=int(r.get("pending") or 0),
            )

    def count_all(self) -> int:
        return self._scalar("SELECT COUNT(*) AS n FROM participants")

    def count_checked_in(self) -> int:
        return self._scalar("SELECT COUNT(*) AS n FROM participants WHERE attendance_status='checked_in'")


class SQLiteParticipantRepository(SQLiteRepository, SQLParticipantRepository):
    """Embedded store: UNIQUE(category_id, email) and the category FK live in the schema."""


class MySQLParticipantRepository(MySQLRepository, SQLParticipantRepository):
    def create(
        self,
        *,
        participant_id: str,
        category_id: str,
        email: str,
        full_name: str,
        school_institution: Optional[str],
        created_at: int,
    ) -> Participant:
        with self._cursor() as (_, cur):
            cur.execute(self._q("SELECT id FROM categories WHERE id=?"), (category_id,))
            if not self._fetchone(cur):
                raise NotFoundError("Referenced record does not exist")
        return super().create(
            participant_id=participant_id,
            category_id=category_id,
            email=email,
            full_name=full_name,
            school_institution=school_institution,
            created_at=created_at,
        )

from __future__ import annotations

from dataclasses import replace
from typing import Optional

import pytest

from src.event_checkin.event_checkin.core.enums import AttendanceStatus
from src.event_checkin.event_checkin.core.exceptions import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from src.event_checkin.event_checkin.participants import service as participant_service
from src.event_checkin.event_checkin.participants.model import NewParticipant, Participant
from src.event_checkin.event_checkin.participants.service import ParticipantDirectory


class InMemoryParticipants:
    def __init__(self, categories=("cat-1",)):
        self.categories = set(categories)
        self.rows: dict[str, Participant] = {}
        self.fail_emails: set[str] = set()
        self.check_in_calls = 0

    def create(self, *, participant_id, category_id, email, full_name, school_institution, created_at):
        if email in self.fail_emails:
            raise PersistenceError("connection reset")
        if category_id not in self.categories:
            raise NotFoundError("Referenced record does not exist")
        if any(p.category_id == category_id and p.email == email for p in self.rows.values()):
            raise ConflictError("Record violates a uniqueness constraint")
        p = Participant(
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
        self.rows[participant_id] = p
        return p

    def get_by_id(self, participant_id) -> Optional[Participant]:
        return self.rows.get(participant_id)

    def get_by_email_and_category(self, email, category_id):
        for p in self.rows.values():
            if p.email == email and p.category_id == category_id:
                return p
        return None

    def list_by_category(self, category_id):
        return [p for p in self.rows.values() if p.category_id == category_id]

    def list_all(self):
        return list(self.rows.values())

    def find_by_winner_rank(self, category_id, winner_rank):
        return [p for p in self.rows.values() if p.category_id == category_id and p.winner_rank == winner_rank]

    def update(self, participant_id, fields):
        p = self.rows.get(participant_id)
        if not p:
            return None
        if "email" in fields and any(
            o.id != participant_id and o.category_id == p.category_id and o.email == fields["email"]
            for o in self.rows.values()
        ):
            raise ConflictError("Record violates a uniqueness constraint")
        self.rows[participant_id] = replace(p, **fields)
        return self.rows[participant_id]

    def check_in(self, participant_id, *, checked_in_at):
        self.check_in_calls += 1
        return self.update(
            participant_id,
            {"attendance_status": AttendanceStatus.CHECKED_IN, "checked_in_at": checked_in_at},
        )

    def delete_by_id(self, participant_id):
        return self.rows.pop(participant_id, None) is not None


@pytest.fixture
def repo():
    return InMemoryParticipants()


@pytest.fixture
def directory(repo):
    return ParticipantDirectory(repo)


def test_create_sets_pending_defaults(directory):
    p = directory.create_participant(category_id="cat-1", email="a@b.com", full_name=" Ann ", school_institution="")

    assert p.attendance_status == AttendanceStatus.PENDING
    assert p.checked_in_at is None
    assert p.winner_rank is None
    assert p.full_name == "Ann"
    assert p.school_institution is None


def test_same_pair_twice_gives_one_success_and_one_conflict(directory):
    directory.create_participant(category_id="cat-1", email="a@b.com", full_name="A")

    with pytest.raises(ConflictError, match="already exists"):
        directory.create_participant(category_id="cat-1", email="a@b.com", full_name="A again")

    assert len(directory.list_participants(category_id="cat-1")) == 1


def test_case_variants_are_distinct_on_create(directory):
    directory.create_participant(category_id="cat-1", email="a@b.com", full_name="A")
    directory.create_participant(category_id="cat-1", email="A@B.com", full_name="A upper")

    assert len(directory.list_participants(category_id="cat-1")) == 2


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(category_id="cat-1", email="", full_name="A"),
        dict(category_id="cat-1", email="a@b.com", full_name=""),
        dict(category_id="", email="a@b.com", full_name="A"),
        dict(category_id="cat-1", email="bad", full_name="A"),
    ],
)
def test_create_validation(directory, repo, kwargs):
    with pytest.raises(ValidationError):
        directory.create_participant(**kwargs)
    assert repo.rows == {}


def test_create_in_unknown_category(directory):
    with pytest.raises(NotFoundError, match="Category not found"):
        directory.create_participant(category_id="missing", email="a@b.com", full_name="A")


def test_bulk_create_counts_duplicates_against_existing_and_within_batch(directory):
    directory.create_participant(category_id="cat-1", email="old@x.com", full_name="Old")
    records = [
        NewParticipant("n1@x.com", "N1"),
        NewParticipant("old@x.com", "Dup existing"),
        NewParticipant("n2@x.com", "N2", "School"),
        NewParticipant("n1@x.com", "Dup in batch"),
        NewParticipant("n3@x.com", "N3"),
    ]

    result = directory.bulk_create("cat-1", records)

    assert (result.success, result.failed) == (3, 2)
    assert result.errors == ["Duplicate email: old@x.com", "Duplicate email: n1@x.com"]
    assert len(directory.list_participants(category_id="cat-1")) == 4


def test_bulk_create_keeps_earlier_rows_after_storage_failure(directory, repo):
    repo.fail_emails.add("boom@x.com")
    result = directory.bulk_create(
        "cat-1",
        [NewParticipant("a@x.com", "A"), NewParticipant("boom@x.com", "Boom"), NewParticipant("c@x.com", "C")],
    )

    assert (result.success, result.failed) == (2, 1)
    assert result.errors == ["Failed to add boom@x.com: connection reset"]
    assert {p.email for p in repo.rows.values()} == {"a@x.com", "c@x.com"}


def test_update_only_provided_fields(directory):
    p = directory.create_participant(category_id="cat-1", email="a@b.com", full_name="A", school_institution="MIT")

    updated = directory.update_participant(p.id, full_name="Alice")

    assert updated.full_name == "Alice"
    assert updated.email == "a@b.com"
    assert updated.school_institution == "MIT"


def test_update_to_checked_in_stamps_time(directory, monkeypatch):
    monkeypatch.setattr(participant_service, "now_epoch", lambda: 1_700_000_000)
    p = directory.create_participant(category_id="cat-1", email="a@b.com", full_name="A")

    updated = directory.update_participant(p.id, attendance_status="checked_in")

    assert updated.attendance_status == AttendanceStatus.CHECKED_IN
    assert updated.checked_in_at == 1_700_000_000


def test_update_cannot_reverse_check_in(directory):
    p = directory.create_participant(category_id="cat-1", email="a@b.com", full_name="A")
    directory.check_in(p.id, now=100)

    with pytest.raises(ValidationError):
        directory.update_participant(p.id, attendance_status="pending")

    assert directory.get_participant(p.id).checked_in_at == 100


def test_update_rejects_unknown_status(directory):
    p = directory.create_participant(category_id="cat-1", email="a@b.com", full_name="A")
    with pytest.raises(ValidationError):
        directory.update_participant(p.id, attendance_status="present")


def test_update_email_to_existing_one_conflicts(directory):
    directory.create_participant(category_id="cat-1", email="a@b.com", full_name="A")
    b = directory.create_participant(category_id="cat-1", email="b@b.com", full_name="B")

    with pytest.raises(ConflictError):
        directory.update_participant(b.id, email="a@b.com")


def test_winner_rank_unique_per_category(directory):
    a = directory.create_participant(category_id="cat-1", email="a@b.com", full_name="A")
    b = directory.create_participant(category_id="cat-1", email="b@b.com", full_name="B")

    assert directory.update_participant(a.id, winner_rank=1).winner_rank == 1
    assert directory.update_participant(a.id, winner_rank=1).winner_rank == 1
    with pytest.raises(ConflictError):
        directory.update_participant(b.id, winner_rank=1)

    directory.update_participant(a.id, winner_rank=None)
    assert directory.update_participant(b.id, winner_rank=1).winner_rank == 1


def test_winner_rank_out_of_range(directory):
    a = directory.create_participant(category_id="cat-1", email="a@b.com", full_name="A")
    with pytest.raises(ValidationError):
        directory.update_participant(a.id, winner_rank=4)


def test_directory_check_in_refreshes_timestamp(directory):
    p = directory.create_participant(category_id="cat-1", email="a@b.com", full_name="A")

    first = directory.check_in(p.id, now=100)
    second = directory.check_in(p.id, now=250)

    assert first.checked_in_at == 100
    assert second.attendance_status == AttendanceStatus.CHECKED_IN
    assert second.checked_in_at == 250


def test_check_in_unknown_participant(directory):
    with pytest.raises(NotFoundError):
        directory.check_in("nope")


def test_delete_reports_existence(directory):
    p = directory.create_participant(category_id="cat-1", email="a@b.com", full_name="A")

    assert directory.delete_participant(p.id) is True
    assert directory.delete_participant(p.id) is False


def test_find_by_email_is_exact(directory):
    directory.create_participant(category_id="cat-1", email="Mixed@Case.com", full_name="M")

    assert directory.find_by_email(email="mixed@case.com", category_id="cat-1") is None
    assert directory.find_by_email(email="Mixed@Case.com", category_id="cat-1") is not None

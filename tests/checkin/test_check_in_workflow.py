from __future__ import annotations

import time

import pytest

from src.event_checkin.event_checkin.core.enums import AttendanceStatus, CheckInState
from src.event_checkin.event_checkin.core.exceptions import NotFoundError, ValidationError


@pytest.fixture
def finals(container):
    event = container.event_service.create_event(name="Hackathon")
    return container.category_service.create_category(event_id=event.id, name="Finals")


@pytest.fixture
def workflow(container):
    return container.check_in_workflow


def test_unknown_email_is_not_found(container, workflow, finals):
    container.participant_directory.create_participant(category_id=finals.id, email="ann@example.com", full_name="Ann")

    with pytest.raises(NotFoundError):
        workflow.identify(category_id=finals.id, email="bob@example.com")


def test_unknown_category_is_not_found(workflow):
    with pytest.raises(NotFoundError):
        workflow.identify(category_id="no-such-category", email="ann@example.com")


def test_email_is_trimmed_and_lowercased_before_lookup(container, workflow, finals):
    container.participant_directory.create_participant(category_id=finals.id, email="ann@example.com", full_name="Ann")

    lookup = workflow.identify(category_id=finals.id, email="  ANN@Example.COM ")

    assert lookup.state == CheckInState.IDENTIFIED_PENDING
    assert lookup.category.name == "Finals"


def test_mixed_case_stored_email_is_not_matched(container, workflow, finals):
    container.participant_directory.create_participant(category_id=finals.id, email="Ann@Example.com", full_name="Ann")

    with pytest.raises(NotFoundError):
        workflow.identify(category_id=finals.id, email="Ann@Example.com")


def test_invalid_input(workflow, finals):
    with pytest.raises(ValidationError):
        workflow.identify(category_id=finals.id, email="")
    with pytest.raises(ValidationError):
        workflow.identify(category_id=finals.id, email="no-at-sign")
    with pytest.raises(ValidationError):
        workflow.confirm(participant_id="")


def test_pending_then_confirm(container, workflow, finals):
    created = container.participant_directory.create_participant(
        category_id=finals.id, email="ann@example.com", full_name="Ann"
    )

    lookup = workflow.identify(category_id=finals.id, email="ann@example.com")
    assert lookup.state == CheckInState.IDENTIFIED_PENDING
    assert lookup.participant.id == created.id

    before = int(time.time())
    confirmed = workflow.confirm(participant_id=lookup.participant.id)

    assert confirmed.attendance_status == AttendanceStatus.CHECKED_IN
    assert confirmed.checked_in_at >= before


def test_already_checked_in_branch_does_not_restamp(container, workflow, finals):
    directory = container.participant_directory
    p = directory.create_participant(category_id=finals.id, email="ann@example.com", full_name="Ann")
    directory.check_in(p.id, now=1_000)

    lookup = workflow.identify(category_id=finals.id, email="ann@example.com")
    lookup_again = workflow.identify(category_id=finals.id, email="ann@example.com")

    assert lookup.state == CheckInState.IDENTIFIED_ALREADY_CHECKED
    assert lookup_again.participant.checked_in_at == 1_000
    assert directory.get_participant(p.id).checked_in_at == 1_000


def test_directory_check_in_still_refreshes_for_organizers(container, finals):
    directory = container.participant_directory
    p = directory.create_participant(category_id=finals.id, email="ann@example.com", full_name="Ann")

    directory.check_in(p.id, now=1_000)
    again = directory.check_in(p.id, now=2_000)

    assert again.attendance_status == AttendanceStatus.CHECKED_IN
    assert again.checked_in_at == 2_000


def test_confirm_unknown_participant(workflow):
    with pytest.raises(NotFoundError):
        workflow.confirm(participant_id="ghost")


def test_go_back_resets_without_side_effects(container, workflow, finals):
    p = container.participant_directory.create_participant(
        category_id=finals.id, email="ann@example.com", full_name="Ann"
    )
    workflow.identify(category_id=finals.id, email="ann@example.com")

    assert workflow.go_back() == CheckInState.UNIDENTIFIED
    assert container.participant_directory.get_participant(p.id).attendance_status == AttendanceStatus.PENDING


def test_lookup_payload(container, workflow, finals):
    container.participant_directory.create_participant(
        category_id=finals.id, email="ann@example.com", full_name="Ann", school_institution="HUST"
    )

    data = workflow.identify(category_id=finals.id, email="ann@example.com").to_dict()

    assert data["state"] == "identified_pending"
    assert data["participant"]["school_institution"] == "HUST"
    assert data["participant"]["checked_in_at"] is None
    assert data["category"] == {"id": finals.id, "name": "Finals"}


def test_repeat_confirm_keeps_first_timestamp(container, workflow, finals):
    p = container.participant_directory.create_participant(
        category_id=finals.id, email="ann@example.com", full_name="Ann"
    )
    workflow.identify(category_id=finals.id, email="ann@example.com")

    first = workflow.confirm(participant_id=p.id, now=1_000)
    second = workflow.confirm(participant_id=p.id, now=2_000)

    assert first.checked_in_at == 1_000
    assert second.checked_in_at == 1_000
    assert container.participant_directory.get_participant(p.id).checked_in_at == 1_000

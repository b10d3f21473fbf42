from __future__ import annotations

import logging

from flask import Flask, current_app, jsonify, request
from werkzeug.utils import secure_filename

from ..common.http import json_body
from ..common.validators import is_valid_email, optional_text
from ..container import Container
from ..core.constants import UNSET
from ..core.exceptions import NotFoundError, ValidationError
from ..roster.parser import is_supported_roster_file
from .model import NewParticipant

logger = logging.getLogger(__name__)


def _validate_bulk_records(raw: list) -> tuple[list[NewParticipant], list[str]]:
    """Check each record on its own; every invalid one is reported."""
    records: list[NewParticipant] = []
    problems: list[str] = []
    for i, item in enumerate(raw, start=1):
        if not isinstance(item, dict):
            problems.append(f"Record {i}: must be an object")
            continue
        email = item.get("email")
        full_name = item.get("fullName")
        if not email:
            problems.append(f"Record {i}: Email is required")
            continue
        if not is_valid_email(email):
            problems.append(f"Record {i}: Invalid email format: {email}")
            continue
        if not isinstance(full_name, str) or not full_name.strip():
            problems.append(f"Record {i}: Full name is required")
            continue
        records.append(
            NewParticipant(
                email=email,
                full_name=full_name.strip(),
                school_institution=optional_text(item.get("schoolInstitution")),
            )
        )
    return records, problems


def register(app: Flask, container: Container) -> None:
    directory = container.participant_directory
    roster = container.roster_import_service

    @app.route("/participants", methods=["GET"], endpoint="list_participants")
    def list_participants():
        items = directory.list_participants(category_id=request.args.get("categoryId") or None)
        return jsonify([p.to_dict() for p in items])

    @app.route("/participants", methods=["POST"], endpoint="create_participant")
    def create_participant():
        data = json_body()
        participant = directory.create_participant(
            category_id=data.get("categoryId"),
            email=data.get("email"),
            full_name=data.get("fullName"),
            school_institution=data.get("schoolInstitution"),
        )
        return jsonify(participant.to_dict()), 201

    @app.route("/participants/bulk", methods=["POST"], endpoint="bulk_create_participants")
    def bulk_create_participants():
        data = json_body()
        category_id = data.get("categoryId")
        raw = data.get("participants")
        if not category_id or not isinstance(raw, list):
            raise ValidationError("Category ID and participants array are required")

        records, problems = _validate_bulk_records(raw)
        if problems:
            return jsonify({"error": problems[0], "errors": problems}), 400

        result = directory.bulk_create(str(category_id), records)
        return jsonify(result.to_dict()), 201

    @app.route("/participants/import", methods=["POST"], endpoint="import_participants")
    def import_participants():
        """Upload a CSV/Excel roster (multipart: ``categoryId`` + ``file``)."""
        category_id = request.form.get("categoryId", "")
        upload = request.files.get("file")
        if not category_id or upload is None or not upload.filename:
            raise ValidationError("Category ID and a roster file are required")

        filename = secure_filename(upload.filename) or "roster.csv"
        if not is_supported_roster_file(filename):
            raise ValidationError("Please upload a CSV or Excel (.xlsx) file")

        content = upload.read(current_app.config["MAX_UPLOAD_BYTES"] + 1)
        if len(content) > current_app.config["MAX_UPLOAD_BYTES"]:
            raise ValidationError("Roster file is too large")
        logger.info("Roster upload %s (%d bytes) for category %s", filename, len(content), category_id)

        result = roster.import_file(category_id=category_id, content=content, filename=filename)
        if result.created is None:
            body = result.to_dict()
            body["error"] = "No valid data found in file"
            return jsonify(body), 400
        return jsonify(result.to_dict()), 201

    @app.route("/participants/<participant_id>", methods=["GET"], endpoint="get_participant")
    def get_participant(participant_id: str):
        return jsonify(directory.get_participant(participant_id).to_dict())

    @app.route("/participants/<participant_id>", methods=["PATCH"], endpoint="update_participant")
    def update_participant(participant_id: str):
        data = json_body()
        participant = directory.update_participant(
            participant_id,
            email=data.get("email", UNSET),
            full_name=data.get("fullName", UNSET),
            school_institution=data.get("schoolInstitution", UNSET),
            attendance_status=data.get("attendanceStatus", UNSET),
            winner_rank=data.get("winnerRank", UNSET),
        )
        return jsonify(participant.to_dict())

    @app.route("/participants/<participant_id>", methods=["DELETE"], endpoint="delete_participant")
    def delete_participant(participant_id: str):
        if not directory.delete_participant(participant_id):
            raise NotFoundError("Participant not found")
        return jsonify({"success": True})

    @app.route("/participants/<participant_id>/check-in", methods=["POST"], endpoint="check_in_participant")
    def check_in_participant(participant_id: str):
        return jsonify(directory.check_in(participant_id).to_dict())

from __future__ import annotations

from flask import Flask, jsonify, render_template, request

from ..common.datetime_utils import epoch_to_iso
from ..common.http import json_body
from ..container import Container
from ..core.enums import CheckInState
from ..core.exceptions import NotFoundError, ValidationError


def register(app: Flask, container: Container) -> None:
    workflow = container.check_in_workflow

    @app.route("/check-in", methods=["POST"], endpoint="check_in_identify")
    def check_in_identify():
        data = json_body()
        lookup = workflow.identify(category_id=data.get("categoryId"), email=data.get("email"))
        return jsonify(lookup.to_dict())

    @app.route("/check-in", methods=["PATCH"], endpoint="check_in_confirm")
    def check_in_confirm():
        data = json_body()
        participant = workflow.confirm(participant_id=data.get("participantId"))
        return jsonify(
            {
                "success": True,
                "state": CheckInState.CONFIRMED.value,
                "participant": {
                    "id": participant.id,
                    "email": participant.email,
                    "full_name": participant.full_name,
                    "attendance_status": participant.attendance_status.value,
                    "checked_in_at": participant.checked_in_at,
                },
            }
        )

    @app.route("/check-in/<category_id>", methods=["GET", "POST"], endpoint="check_in_page")
    def check_in_page(category_id: str):
        """Self-service page reached through the category QR code."""
        category = container.category_service.get_category(category_id)
        ctx = {
            "category": category,
            "state": CheckInState.UNIDENTIFIED.value,
            "participant": None,
            "checked_in_at": None,
            "message": None,
            "email": "",
        }

        if request.method == "GET":
            return render_template("check_in.html", **ctx)

        action = request.form.get("action", "identify")
        if action == "back":
            ctx["state"] = workflow.go_back().value
            return render_template("check_in.html", **ctx)

        try:
            if action == "confirm":
                participant = workflow.confirm(participant_id=request.form.get("participant_id"))
                ctx.update(state=CheckInState.CONFIRMED.value, participant=participant)
            else:
                ctx["email"] = request.form.get("email", "")
                lookup = workflow.identify(category_id=category_id, email=ctx["email"])
                ctx.update(state=lookup.state.value, participant=lookup.participant)
                if lookup.state == CheckInState.IDENTIFIED_ALREADY_CHECKED:
                    ctx["message"] = "You are already checked in."
            ctx["checked_in_at"] = epoch_to_iso(ctx["participant"].checked_in_at)
        except NotFoundError:
            ctx["message"] = "Email not found for this category. Please check your email or contact the organizer."
            return render_template("check_in.html", **ctx), 404
        except ValidationError as e:
            ctx["message"] = str(e)
            return render_template("check_in.html", **ctx), 400

        return render_template("check_in.html", **ctx)

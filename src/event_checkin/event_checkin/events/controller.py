from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container
from ..core.constants import UNSET


def register(app: Flask, container: Container) -> None:
    events = container.event_service
    stats = container.stats_service

    @app.route("/events", methods=["GET"], endpoint="list_events")
    def list_events():
        return jsonify([e.to_dict() for e in stats.events_with_stats(events.list_events())])

    @app.route("/events", methods=["POST"], endpoint="create_event")
    def create_event():
        data = json_body()
        event = events.create_event(
            name=data.get("name"),
            description=data.get("description"),
            date=data.get("date"),
        )
        return jsonify(stats.event_with_stats(event).to_dict()), 201

    @app.route("/events/<event_id>", methods=["GET"], endpoint="get_event")
    def get_event(event_id: str):
        return jsonify(stats.event_with_stats(events.get_event(event_id)).to_dict())

    @app.route("/events/<event_id>", methods=["PATCH"], endpoint="update_event")
    def update_event(event_id: str):
        data = json_body()
        event = events.update_event(
            event_id,
            name=data.get("name", UNSET),
            description=data.get("description", UNSET),
            date=data.get("date", UNSET),
        )
        return jsonify(stats.event_with_stats(event).to_dict())

    @app.route("/events/<event_id>", methods=["DELETE"], endpoint="delete_event")
    def delete_event(event_id: str):
        events.delete_event(event_id)
        return jsonify({"success": True})

    @app.route("/dashboard/stats", methods=["GET"], endpoint="dashboard_stats")
    def dashboard_stats():
        return jsonify(stats.dashboard_totals().to_dict())

from __future__ import annotations

import csv
import io
import re

import pandas as pd
from flask import Flask, current_app, jsonify, request, send_file

from ..common.http import json_body
from ..container import Container
from ..stats.service import ATTENDANCE_EXPORT_FIELDS
from .qr import build_check_in_url, render_qr_png


def register(app: Flask, container: Container) -> None:
    categories = container.category_service
    stats = container.stats_service

    def _check_in_url(category_id: str) -> str:
        return build_check_in_url(current_app.config["PUBLIC_BASE_URL"], category_id)

    def _sheet_name(name: str) -> str:
        # Excel forbids some characters and caps sheet names at 31 chars.
        return re.sub(r"[\[\]:*?/\\]", " ", name)[:31].strip() or "Attendance"

    def _export_name(category_id: str, ext: str) -> str:
        return f"attendance_{category_id}.{ext}"

    @app.route("/categories", methods=["GET"], endpoint="list_categories")
    def list_categories():
        items = categories.list_categories(event_id=request.args.get("eventId") or None)
        return jsonify([c.to_dict() for c in stats.categories_with_stats(items)])

    @app.route("/categories", methods=["POST"], endpoint="create_category")
    def create_category():
        data = json_body()
        category = categories.create_category(event_id=data.get("eventId"), name=data.get("name"))
        return jsonify(category.to_dict()), 201

    @app.route("/categories/<category_id>", methods=["GET"], endpoint="get_category")
    def get_category(category_id: str):
        category = categories.get_category(category_id)
        data = stats.categories_with_stats([category])[0].to_dict()
        data["checkInUrl"] = _check_in_url(category.id)
        return jsonify(data)

    @app.route("/categories/<category_id>", methods=["PATCH"], endpoint="update_category")
    def update_category(category_id: str):
        data = json_body()
        return jsonify(categories.rename_category(category_id, name=data.get("name")).to_dict())

    @app.route("/categories/<category_id>", methods=["DELETE"], endpoint="delete_category")
    def delete_category(category_id: str):
        categories.delete_category(category_id)
        return jsonify({"success": True})

    @app.route("/categories/<category_id>/stats", methods=["GET"], endpoint="category_stats")
    def category_stats(category_id: str):
        categories.get_category(category_id)
        return jsonify(stats.attendance_for_category(category_id).to_dict())

    @app.route("/categories/<category_id>/qr.png", methods=["GET"], endpoint="category_qr")
    def category_qr(category_id: str):
        """QR image pointing participants at the self check-in page of this category."""
        category = categories.get_category(category_id)
        png = render_qr_png(_check_in_url(category.id))
        return send_file(io.BytesIO(png), mimetype="image/png")

    @app.route("/categories/<category_id>/attendance.csv", methods=["GET"], endpoint="attendance_csv")
    def attendance_csv(category_id: str):
        categories.get_category(category_id)
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=ATTENDANCE_EXPORT_FIELDS)
        writer.writeheader()
        for row in stats.attendance_rows(category_id):
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={_export_name(category_id, 'csv')}"},
        )

    @app.route("/categories/<category_id>/attendance.xlsx", methods=["GET"], endpoint="attendance_xlsx")
    def attendance_xlsx(category_id: str):
        category = categories.get_category(category_id)
        df = pd.DataFrame(stats.attendance_rows(category_id), columns=ATTENDANCE_EXPORT_FIELDS)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=_sheet_name(category.name))
        output.seek(0)
        return send_file(
            output,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            as_attachment=True,
            download_name=_export_name(category_id, "xlsx"),
        )

from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, parse_location, require_identity
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/sessions/<session_id>/check-in", methods=["POST"], endpoint="check_in")
    def check_in(session_id: str):
        student = require_identity(container.identity)
        location = parse_location(json_body().get("location"))
        record = service.check_in(session_id=session_id, student_address=student, location=location)
        return jsonify(record.to_dict()), 201

    @app.route("/sessions/<session_id>/verify", methods=["POST"], endpoint="verify_check_in")
    def verify_check_in(session_id: str):
        student = require_identity(container.identity)
        location = parse_location(json_body().get("location"))
        check = service.verify(session_id=session_id, student_address=student, location=location)
        return jsonify(
            {
                "overall_valid": check.overall_valid,
                "location_match": check.location_match,
                "time_window": check.time_window,
                "no_duplicates": check.no_duplicates,
                "identity_plausible": check.identity_plausible,
                "session_active": check.session_active,
                "distance_meters": check.distance_meters,
                "reasons": [r.to_dict() for r in check.reasons],
            }
        )

    @app.route("/sessions/<session_id>/records", methods=["GET"], endpoint="session_records")
    def session_records(session_id: str):
        container.session_service.get(session_id)
        return jsonify([r.to_dict() for r in service.session_records(session_id)])

    @app.route("/me/attendance", methods=["GET"], endpoint="my_attendance")
    def my_attendance():
        student = require_identity(container.identity)
        return jsonify([r.to_dict() for r in service.student_history(student)])

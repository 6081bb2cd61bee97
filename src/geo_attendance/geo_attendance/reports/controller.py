from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import require_identity
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    @app.route("/me/eligibility/<course_code>", methods=["GET"], endpoint="my_eligibility")
    def my_eligibility(course_code: str):
        student = require_identity(container.identity)
        return jsonify(service.eligibility(student_address=student, course_code=course_code).to_dict())

    @app.route("/me/summary", methods=["GET"], endpoint="my_summary")
    def my_summary():
        student = require_identity(container.identity)
        return jsonify([s.to_dict() for s in service.course_summaries(student_address=student)])

    @app.route("/me/stats", methods=["GET"], endpoint="my_stats")
    def my_stats():
        student = require_identity(container.identity)
        return jsonify(service.student_stats(student_address=student).to_dict())

    @app.route("/sessions/<session_id>/roster", methods=["GET"], endpoint="session_roster")
    def session_roster(session_id: str):
        return jsonify(service.session_roster(session_id=session_id).to_dict())

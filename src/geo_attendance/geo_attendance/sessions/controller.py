from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import json_body, optional_int, parse_datetime_field, parse_location, require_identity
from ..container import Container
from .model import NewSession


def register(app: Flask, container: Container) -> None:
    service = container.session_service

    @app.route("/sessions", methods=["POST"], endpoint="declare_session")
    def declare_session():
        creator = require_identity(container.identity)
        data = json_body()
        new = NewSession(
            course_code=str(data.get("course_code") or ""),
            course_name=str(data.get("course_name") or ""),
            description=str(data.get("description") or ""),
            start_time=parse_datetime_field(data, "start_time"),
            end_time=parse_datetime_field(data, "end_time"),
            location=parse_location(data.get("location")),
            allowed_radius=optional_int(data, "allowed_radius"),
            check_in_window=optional_int(data, "check_in_window"),
            excuse_deadline_hours=optional_int(data, "excuse_deadline_hours"),
        )
        session = service.declare(creator=creator, data=new)
        return jsonify(session.to_dict()), 201

    @app.route("/sessions", methods=["GET"], endpoint="list_sessions")
    def list_sessions():
        course_code = request.args.get("course")
        created_by = request.args.get("created_by")
        if course_code:
            rows = service.list_for_course(course_code)
        elif created_by:
            rows = service.list_for_creator(created_by)
        else:
            rows = service.list_active()
        return jsonify([s.to_dict() for s in rows])

    @app.route("/sessions/<session_id>", methods=["GET"], endpoint="get_session")
    def get_session(session_id: str):
        return jsonify(service.get(session_id).to_dict())

    @app.route("/sessions/<session_id>/deactivate", methods=["POST"], endpoint="deactivate_session")
    def deactivate_session(session_id: str):
        requester = require_identity(container.identity)
        return jsonify(service.deactivate(requester=requester, session_id=session_id).to_dict())

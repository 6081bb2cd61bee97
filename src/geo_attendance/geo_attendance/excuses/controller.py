from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body, require_identity
from ..container import Container
from ..core.enums import ApprovalStatus
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    service = container.excuse_service

    @app.route("/sessions/<session_id>/excuses", methods=["POST"], endpoint="submit_excuse")
    def submit_excuse(session_id: str):
        student = require_identity(container.identity)
        reason = str(json_body().get("reason") or "")
        excuse = service.submit(session_id=session_id, student_address=student, reason=reason)
        return jsonify(excuse.to_dict()), 201

    @app.route("/sessions/<session_id>/excuses/eligibility", methods=["GET"], endpoint="can_submit_excuse")
    def can_submit_excuse(session_id: str):
        student = require_identity(container.identity)
        return jsonify({"can_submit": service.can_submit(session_id=session_id, student_address=student)})

    @app.route("/sessions/<session_id>/excuses", methods=["GET"], endpoint="session_excuses")
    def session_excuses(session_id: str):
        container.session_service.get(session_id)
        return jsonify([e.to_dict() for e in service.list_for_session(session_id)])

    @app.route("/excuses/<excuse_id>/review", methods=["POST"], endpoint="review_excuse")
    def review_excuse(excuse_id: str):
        reviewer = require_identity(container.identity)
        data = json_body()
        try:
            status = ApprovalStatus(str(data.get("status") or ""))
        except ValueError:
            raise ValidationError("status must be 'approved' or 'rejected'")

        review = service.review(
            reviewer=reviewer,
            excuse_id=excuse_id,
            status=status,
            review_notes=str(data.get("review_notes") or ""),
        )
        return jsonify(
            {
                "excuse": review.excuse.to_dict(),
                "record": review.record.to_dict() if review.record else None,
            }
        )

    @app.route("/me/excuses", methods=["GET"], endpoint="my_excuses")
    def my_excuses():
        student = require_identity(container.identity)
        return jsonify([e.to_dict() for e in service.list_for_student(student)])

    @app.route("/me/excuses/pending-review", methods=["GET"], endpoint="pending_excuses")
    def pending_excuses():
        reviewer = require_identity(container.identity)
        return jsonify([e.to_dict() for e in service.list_pending_for_reviewer(reviewer)])

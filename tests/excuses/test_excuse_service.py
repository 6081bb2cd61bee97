import threading
from datetime import timedelta

import pytest

from geo_attendance.attendance.model import AttendanceRecord
from geo_attendance.core.enums import ApprovalStatus, AttendanceStatus, RejectionCode
from geo_attendance.core.exceptions import (
    AuthorizationError,
    ExcuseRejected,
    NotFoundError,
    PersistenceUnavailable,
    ReviewRejected,
    ValidationError,
)

from conftest import CHECKER, END, OTHER_CHECKER, START, STUDENT, VENUE

AFTER = END + timedelta(hours=1)


def _submit(container, session, *, reason="Medical appointment", now=AFTER, student=STUDENT):
    return container.excuse_service.submit(
        session_id=session.session_id,
        student_address=student,
        reason=reason,
        now=now,
    )


def test_submit_after_session_is_pending(container, session):
    excuse = _submit(container, session, reason="  Medical appointment  ")

    assert excuse.approval_status == ApprovalStatus.PENDING
    assert excuse.is_within_deadline
    assert excuse.reason == "Medical appointment"
    assert excuse.submission_time == AFTER
    assert excuse.transaction_id.startswith("excuse-tx-")


def test_submit_before_session_ends_is_not_open(container, session):
    with pytest.raises(ExcuseRejected) as exc:
        _submit(container, session, now=END - timedelta(minutes=10))
    assert exc.value.codes == [RejectionCode.EXCUSE_NOT_OPEN]


def test_submit_after_deadline(container, session):
    with pytest.raises(ExcuseRejected) as exc:
        _submit(container, session, now=END + timedelta(hours=50))

    assert exc.value.codes == [RejectionCode.DEADLINE_PASSED]
    assert "You had 48 hours after the session ended." in str(exc.value)


def test_submit_on_deadline_is_accepted(container, session):
    assert _submit(container, session, now=END + timedelta(hours=48)).is_pending


def test_duplicate_submission(container, session):
    _submit(container, session)
    with pytest.raises(ExcuseRejected) as exc:
        _submit(container, session, now=AFTER + timedelta(minutes=5))
    assert exc.value.codes == [RejectionCode.DUPLICATE_EXCUSE]


def test_attended_student_cannot_submit(container, session):
    container.attendance_service.check_in(
        session_id=session.session_id,
        student_address=STUDENT,
        location=VENUE,
        now=START + timedelta(minutes=1),
    )
    with pytest.raises(ExcuseRejected) as exc:
        _submit(container, session)
    assert exc.value.codes == [RejectionCode.ALREADY_ATTENDED]


def test_all_submission_problems_are_reported(container, session):
    with pytest.raises(ExcuseRejected) as exc:
        _submit(container, session, reason="   ", now=START)
    assert exc.value.codes == [RejectionCode.EXCUSE_NOT_OPEN, RejectionCode.EMPTY_REASON]


def test_submit_needs_wallet_and_session(container, session):
    with pytest.raises(AuthorizationError):
        _submit(container, session, student="")
    with pytest.raises(NotFoundError):
        container.excuse_service.submit(session_id="missing", student_address=STUDENT, reason="x", now=AFTER)


def test_can_submit(container, session):
    service = container.excuse_service
    assert not service.can_submit(session_id=session.session_id, student_address=STUDENT, now=START)
    assert service.can_submit(session_id=session.session_id, student_address=STUDENT, now=AFTER)
    assert not service.can_submit(session_id="missing", student_address=STUDENT, now=AFTER)

    _submit(container, session)
    assert not service.can_submit(session_id=session.session_id, student_address=STUDENT, now=AFTER)


def test_approval_without_record_creates_excused_record(container, session):
    excuse = _submit(container, session)

    review = container.excuse_service.approve(
        reviewer=CHECKER,
        excuse_id=excuse.excuse_id,
        review_notes="Doctor's note attached",
        now=AFTER + timedelta(hours=2),
    )

    assert review.excuse.approval_status == ApprovalStatus.APPROVED
    assert review.excuse.reviewed_by == CHECKER
    assert review.excuse.review_time == AFTER + timedelta(hours=2)
    assert review.excuse.review_notes == "Doctor's note attached"

    record = container.attendance_service.record_for(session.session_id, STUDENT)
    assert record == review.record
    assert record.status == AttendanceStatus.EXCUSED
    assert record.location is None
    assert not record.location_verified
    assert record.distance_from_class == 0
    assert record.check_in_attempts == 0
    assert record.timestamp == excuse.submission_time
    assert not record.physically_verified


def test_approval_overrides_existing_absent_record(container, session):
    container.attendance_repo.add(
        AttendanceRecord(
            record_id="absent-1",
            session_id=session.session_id,
            student_address=STUDENT,
            timestamp=END,
            status=AttendanceStatus.ABSENT,
            location=None,
            location_verified=False,
            distance_from_class=0,
            check_in_attempts=0,
            transaction_id="import-tx-1",
        )
    )
    excuse = _submit(container, session)

    review = container.excuse_service.approve(reviewer=CHECKER, excuse_id=excuse.excuse_id, now=AFTER)

    assert review.record.record_id == "absent-1"
    assert review.record.status == AttendanceStatus.EXCUSED
    assert container.attendance_service.record_for(session.session_id, STUDENT).status == AttendanceStatus.EXCUSED
    assert len(container.attendance_service.session_records(session.session_id)) == 1


def test_rejection_leaves_attendance_alone(container, session):
    excuse = _submit(container, session)

    review = container.excuse_service.reject(reviewer=CHECKER, excuse_id=excuse.excuse_id, now=AFTER)

    assert review.excuse.approval_status == ApprovalStatus.REJECTED
    assert review.record is None
    assert container.attendance_service.record_for(session.session_id, STUDENT) is None


def test_only_session_creator_can_review(container, session):
    excuse = _submit(container, session)

    with pytest.raises(ReviewRejected) as exc:
        container.excuse_service.approve(reviewer=OTHER_CHECKER, excuse_id=excuse.excuse_id, now=AFTER)

    assert exc.value.codes == [RejectionCode.NOT_AUTHORIZED]
    assert container.excuses_repo.get_by_id(excuse.excuse_id).is_pending


def test_second_review_is_rejected(container, session):
    excuse = _submit(container, session)
    service = container.excuse_service
    service.approve(reviewer=CHECKER, excuse_id=excuse.excuse_id, now=AFTER)

    with pytest.raises(ReviewRejected) as exc:
        service.reject(reviewer=CHECKER, excuse_id=excuse.excuse_id, now=AFTER)
    assert exc.value.codes == [RejectionCode.ALREADY_REVIEWED]

    with pytest.raises(ReviewRejected) as exc:
        service.approve(reviewer=OTHER_CHECKER, excuse_id=excuse.excuse_id, now=AFTER)
    assert exc.value.codes == [RejectionCode.ALREADY_REVIEWED, RejectionCode.NOT_AUTHORIZED]


def test_concurrent_reviews_decide_once(container, session):
    excuse = _submit(container, session)
    service = container.excuse_service
    barrier = threading.Barrier(6)
    done, rejected = [], []

    def review(i):
        barrier.wait()
        try:
            if i % 2:
                done.append(service.approve(reviewer=CHECKER, excuse_id=excuse.excuse_id, now=AFTER))
            else:
                done.append(service.reject(reviewer=CHECKER, excuse_id=excuse.excuse_id, now=AFTER))
        except ReviewRejected as e:
            rejected.append(e)

    threads = [threading.Thread(target=review, args=(i,)) for i in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(done) == 1
    assert len(rejected) == 5
    assert all(e.codes == [RejectionCode.ALREADY_REVIEWED] for e in rejected)

    final = container.excuses_repo.get_by_id(excuse.excuse_id)
    record = container.attendance_service.record_for(session.session_id, STUDENT)
    if final.approval_status == ApprovalStatus.APPROVED:
        assert record.status == AttendanceStatus.EXCUSED
    else:
        assert record is None


def test_review_status_must_be_a_decision(container, session):
    excuse = _submit(container, session)
    with pytest.raises(ValidationError):
        container.excuse_service.review(
            reviewer=CHECKER,
            excuse_id=excuse.excuse_id,
            status=ApprovalStatus.PENDING,
            now=AFTER,
        )


def test_review_unknown_excuse(container):
    with pytest.raises(NotFoundError):
        container.excuse_service.approve(reviewer=CHECKER, excuse_id="missing", now=AFTER)


def test_pending_for_reviewer_only_lists_own_sessions(container, declare):
    mine = declare()
    theirs = declare(creator=OTHER_CHECKER)
    first = _submit(container, mine)
    _submit(container, theirs)

    pending = container.excuse_service.list_pending_for_reviewer(CHECKER)
    assert [e.excuse_id for e in pending] == [first.excuse_id]

    container.excuse_service.approve(reviewer=CHECKER, excuse_id=first.excuse_id, now=AFTER)
    assert container.excuse_service.list_pending_for_reviewer(CHECKER) == []
    assert len(container.excuse_service.list_for_student(STUDENT)) == 2


def test_failed_attendance_write_leaves_excuse_pending(container, session, monkeypatch):
    excuse = _submit(container, session)

    def unavailable(record):
        raise PersistenceUnavailable("Attendance store is unavailable")

    monkeypatch.setattr(container.attendance_repo, "add", unavailable)
    with pytest.raises(PersistenceUnavailable):
        container.excuse_service.approve(reviewer=CHECKER, excuse_id=excuse.excuse_id, now=AFTER)

    stored = container.excuses_repo.get_by_id(excuse.excuse_id)
    assert stored.approval_status == ApprovalStatus.PENDING
    assert stored.reviewed_by is None
    assert stored.review_time is None
    assert container.attendance_service.record_for(session.session_id, STUDENT) is None

    monkeypatch.undo()
    review = container.excuse_service.approve(reviewer=CHECKER, excuse_id=excuse.excuse_id, now=AFTER)
    assert review.excuse.approval_status == ApprovalStatus.APPROVED
    assert review.record.status == AttendanceStatus.EXCUSED

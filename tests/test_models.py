"""
Tests for the models module.
"""

from datetime import datetime, timezone

import pytest

from canvas_submissions.exceptions import ValidationError
from canvas_submissions.models import (
    ENDED,
    IN_PROGRESS,
    NOT_STARTED,
    Assignment,
    Attachment,
    Course,
    Submission,
    course_status,
    parse_timestamp,
)

from .conftest import make_assignment, make_attachment, make_submission


class TestParseTimestamp:
    """Tests for parse_timestamp."""

    def test_zulu_suffix(self):
        assert parse_timestamp("2026-01-16T23:59:00Z") == datetime(2026, 1, 16, 23, 59, tzinfo=timezone.utc)

    def test_offset(self):
        dt = parse_timestamp("2026-01-16T18:59:00-05:00")

        assert dt == datetime(2026, 1, 16, 23, 59, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        assert parse_timestamp("2026-01-16T23:59:00").tzinfo == timezone.utc

    def test_empty(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None

    def test_invalid(self):
        with pytest.raises(ValidationError):
            parse_timestamp("next tuesday")


class TestAttachment:
    """Tests for Attachment decoding."""

    def test_from_json(self):
        attachment = Attachment.from_json(make_attachment(7, "lab report.pdf", b"12345"))

        assert attachment.id == 7
        assert attachment.filename == "lab report.pdf"
        assert attachment.size == 5
        assert attachment.content_type == "application/pdf"
        assert attachment.modified_at == datetime(2026, 1, 10, 12, tzinfo=timezone.utc)

    def test_modified_at_falls_back_to_updated_at(self):
        record = make_attachment(7, "a.pdf", b"1")
        record["modified_at"] = None
        record["updated_at"] = "2026-01-11T00:00:00Z"

        assert Attachment.from_json(record).modified_at == datetime(2026, 1, 11, tzinfo=timezone.utc)

    def test_no_timestamp_is_an_error(self):
        record = make_attachment(7, "a.pdf", b"1")
        for key in ("modified_at", "updated_at", "created_at"):
            del record[key]

        with pytest.raises(ValidationError):
            Attachment.from_json(record)

    def test_missing_size_is_an_error(self):
        record = make_attachment(7, "a.pdf", b"1")
        del record["size"]

        with pytest.raises(ValidationError):
            Attachment.from_json(record)


class TestSubmission:
    """Tests for Submission decoding."""

    def test_from_json(self):
        record = make_submission(1, "alice99", "Alice Smith", [make_attachment(1, "a.pdf", b"1")])

        submission = Submission.from_json(record)

        assert submission.user.login_id == "alice99"
        assert submission.user.short_name == "Alice"
        assert submission.user.label == "alice99:Alice Smith"
        assert submission.submission_type == "online_upload"
        assert len(submission.attachments) == 1

    def test_null_type_and_attachments(self):
        record = make_submission(1, "carol", "Carol White", submission_type=None)
        record["attachments"] = None

        submission = Submission.from_json(record)

        assert submission.submission_type == ""
        assert submission.attachments == []


class TestAssignment:
    """Tests for Assignment decoding."""

    def test_accepts_uploads(self):
        assert Assignment.from_json(make_assignment(1, "Lab")).accepts_uploads is True
        quiz = make_assignment(2, "Quiz", submission_types=("online_quiz",))
        assert Assignment.from_json(quiz).accepts_uploads is False

    def test_null_description(self):
        record = make_assignment(1, "Lab")
        record["description"] = None

        assert Assignment.from_json(record).description == ""


class TestCourseStatus:
    """Tests for course_status."""

    def _course(self, start_at=None, end_at=None):
        return Course.from_json({
            "id": 1, "name": "Course", "course_code": "C 1",
            "start_at": start_at, "end_at": end_at,
        })

    def test_not_started(self):
        course = self._course("2026-03-01T00:00:00Z", "2026-05-01T00:00:00Z")
        assert course_status(course, datetime(2026, 2, 1, tzinfo=timezone.utc)) == NOT_STARTED

    def test_in_progress(self):
        course = self._course("2026-01-01T00:00:00Z", "2026-05-01T00:00:00Z")
        assert course_status(course, datetime(2026, 2, 1, tzinfo=timezone.utc)) == IN_PROGRESS

    def test_ended(self):
        course = self._course("2025-01-01T00:00:00Z", "2025-05-01T00:00:00Z")
        assert course_status(course, datetime(2026, 2, 1, tzinfo=timezone.utc)) == ENDED

    def test_open_ended(self):
        assert course_status(self._course(), datetime(2026, 2, 1, tzinfo=timezone.utc)) == IN_PROGRESS

    def test_course_code_required(self):
        with pytest.raises(ValidationError):
            Course.from_json({"id": 1, "name": "Course"})


class TestNonObjectRecords:
    """Tests for listing elements that are not JSON objects."""

    @pytest.mark.parametrize("model", [Course, Assignment, Submission, Attachment])
    def test_rejects_non_object(self, model):
        with pytest.raises(ValidationError) as exc_info:
            model.from_json("x")

        assert "not a JSON object" in str(exc_info.value)

    def test_rejects_non_object_user(self):
        record = make_submission(1, "alice99", "Alice Smith")
        record["user"] = ["alice99"]

        with pytest.raises(ValidationError):
            Submission.from_json(record)

    def test_rejects_non_object_attachment(self):
        record = make_submission(1, "alice99", "Alice Smith")
        record["attachments"] = [42]

        with pytest.raises(ValidationError):
            Submission.from_json(record)

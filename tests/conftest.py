"""
Pytest fixtures for canvas_submissions tests.
"""

import logging
from datetime import datetime, timezone

import pytest

from canvas_submissions.config import SyncConfig


MODIFIED_AT = "2026-01-10T12:00:00Z"


def make_attachment(att_id, filename, data, modified_at=MODIFIED_AT):
    """Attachment record as returned inside a submission."""
    return {
        "id": att_id,
        "filename": filename,
        "display_name": filename,
        "content-type": "application/pdf",
        "url": f"https://files.test.edu/files/{att_id}/download?verifier=abc",
        "size": len(data),
        "created_at": modified_at,
        "updated_at": modified_at,
        "modified_at": modified_at,
    }


def make_submission(sub_id, login, name, attachments=None, submission_type="online_upload",
                    email=None):
    return {
        "id": sub_id,
        "user_id": sub_id * 10,
        "submitted_at": "2026-01-09T18:30:00Z",
        "submission_type": submission_type,
        "user": {
            "login_id": login,
            "name": name,
            "short_name": name.split()[0],
            "email": email or f"{login}@test.edu",
        },
        "attachments": attachments or [],
    }


def make_assignment(asst_id, name, description="", submission_types=("online_upload",),
                    has_submissions=True, published=True):
    return {
        "id": asst_id,
        "name": name,
        "description": description,
        "published": published,
        "submission_types": list(submission_types),
        "has_submitted_submissions": has_submissions,
        "due_at": "2026-01-10T04:59:59Z",
    }


class FakeCanvasClient:
    """In-memory stand-in for CanvasClient serving canned records."""

    def __init__(self, course=None):
        self.course = course or {
            "id": 42,
            "name": "Systems Programming",
            "course_code": "CS 3400",
            "start_at": "2026-01-05T07:00:00Z",
            "end_at": "2026-05-01T06:00:00Z",
        }
        self.assignments = []
        self.submissions = {}
        self.files = {}
        self.submission_requests = []
        self.downloads = []

    def add_assignment(self, assignment, submissions=()):
        self.assignments.append(assignment)
        self.submissions[assignment["id"]] = list(submissions)
        for sub in submissions:
            for att in sub["attachments"]:
                self.files.setdefault(att["url"], b"x" * att["size"])

    def set_file(self, attachment, data):
        self.files[attachment["url"]] = data

    def get_course(self, course_id):
        return self.course

    def list_assignments(self, course_id):
        return self.assignments

    def list_submissions(self, course_id, assignment_id):
        self.submission_requests.append(assignment_id)
        return self.submissions[assignment_id]

    def get_bytes(self, url):
        self.downloads.append(url)
        return self.files[url]


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handler changes made by the CLI's logging setup."""
    yield
    package_logger = logging.getLogger("canvas_submissions")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def now():
    return datetime(2026, 2, 1, tzinfo=timezone.utc)


@pytest.fixture
def fake_client():
    """Course with two uploading students, one text-entry assignment and one empty one."""
    client = FakeCanvasClient()

    report = make_attachment(1, "lab report.pdf", b"%PDF-alice")
    code = make_attachment(2, "main.c", b"int main() { return 0; }\n")
    bob_report = make_attachment(3, "report.pdf", b"%PDF-bob-report")

    lab1 = make_assignment(100, "Lab 1 Report", description="Upload your lab1 writeup")
    client.add_assignment(lab1, [
        make_submission(1, "alice99", "Alice Smith", [report, code]),
        make_submission(2, "bob", "Bob Jones", [bob_report]),
        make_submission(3, "carol", "Carol White", submission_type=""),
    ])
    client.set_file(report, b"%PDF-alice")
    client.set_file(code, b"int main() { return 0; }\n")
    client.set_file(bob_report, b"%PDF-bob-report")

    client.add_assignment(make_assignment(101, "Reading Quiz", submission_types=("online_quiz",)))
    client.add_assignment(make_assignment(102, "Lab 2", has_submissions=False))
    return client


@pytest.fixture
def sync_config(tmp_path):
    return SyncConfig(course_id=42, directory=tmp_path)

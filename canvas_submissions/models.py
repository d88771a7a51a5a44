"""
Data Model

Typed records decoded from Canvas API JSON. Records are transient: decoded
fresh on every run and never written anywhere.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from .exceptions import ValidationError

logger = logging.getLogger("canvas_submissions.models")

ONLINE_UPLOAD = "online_upload"

NOT_STARTED = "not-started"
IN_PROGRESS = "in-progress"
ENDED = "ended"


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a Canvas ISO 8601 timestamp into a timezone-aware datetime.

    Canvas sends UTC timestamps with a 'Z' suffix, e.g. "2026-01-16T23:59:00Z".
    Naive values are assumed to be UTC.

    Raises:
        ValidationError: If the value is not a valid ISO 8601 timestamp
    """
    if not value:
        return None
    try:
        if value.endswith('Z'):
            dt = datetime.fromisoformat(value[:-1] + '+00:00')
        else:
            dt = datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid timestamp {value!r}: {e}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _check_record(data: Any, kind: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationError(f"{kind} record is not a JSON object: {data!r}")
    return data


def _require(data: Dict[str, Any], key: str, kind: str) -> Any:
    if data.get(key) is None:
        raise ValidationError(f"{kind} record is missing '{key}'")
    return data[key]


@dataclass
class User:
    """The submitter of a submission."""
    login_id: str = ""
    name: str = ""
    short_name: str = ""
    email: str = ""

    @classmethod
    def from_json(cls, data: Optional[Dict[str, Any]]) -> "User":
        data = _check_record(data or {}, "User")
        return cls(
            login_id=data.get("login_id") or "",
            name=data.get("name") or "",
            short_name=data.get("short_name") or "",
            email=data.get("email") or "",
        )

    @property
    def label(self) -> str:
        return f"{self.login_id}:{self.name}"


@dataclass
class Attachment:
    """A file attached to an online-upload submission."""
    id: int
    filename: str
    display_name: str
    size: int
    modified_at: datetime
    url: str
    content_type: str = ""

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Attachment":
        """
        Decode an attachment record.

        modified_at falls back to updated_at and then created_at; an
        attachment with no timestamp at all cannot be change-tracked.
        """
        data = _check_record(data, "Attachment")
        modified_at = (
            parse_timestamp(data.get("modified_at"))
            or parse_timestamp(data.get("updated_at"))
            or parse_timestamp(data.get("created_at"))
        )
        if modified_at is None:
            raise ValidationError(f"Attachment {data.get('id')} has no modification timestamp")

        filename = _require(data, "filename", "Attachment")
        return cls(
            id=_require(data, "id", "Attachment"),
            filename=filename,
            display_name=data.get("display_name") or filename,
            size=int(_require(data, "size", "Attachment")),
            modified_at=modified_at,
            url=_require(data, "url", "Attachment"),
            content_type=data.get("content-type") or data.get("content_type") or "",
        )


@dataclass
class Submission:
    """One user's submission for one assignment."""
    id: int
    user_id: int
    user: User
    submission_type: str = ""
    submitted_at: Optional[datetime] = None
    attachments: List[Attachment] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Submission":
        data = _check_record(data, "Submission")
        return cls(
            id=_require(data, "id", "Submission"),
            user_id=data.get("user_id"),
            user=User.from_json(data.get("user")),
            submission_type=data.get("submission_type") or "",
            submitted_at=parse_timestamp(data.get("submitted_at")),
            attachments=[Attachment.from_json(a) for a in data.get("attachments") or []],
        )


@dataclass
class Assignment:
    """An assignment of the course."""
    id: int
    name: str
    description: str = ""
    published: bool = False
    submission_types: List[str] = field(default_factory=list)
    has_submitted_submissions: bool = False
    due_at: Optional[datetime] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Assignment":
        data = _check_record(data, "Assignment")
        return cls(
            id=_require(data, "id", "Assignment"),
            name=data.get("name") or "",
            description=data.get("description") or "",
            published=bool(data.get("published", False)),
            submission_types=list(data.get("submission_types") or []),
            has_submitted_submissions=bool(data.get("has_submitted_submissions", False)),
            due_at=parse_timestamp(data.get("due_at")),
        )

    @property
    def accepts_uploads(self) -> bool:
        return ONLINE_UPLOAD in self.submission_types


@dataclass
class Course:
    """The course being synced."""
    id: int
    name: str
    course_code: str
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Course":
        data = _check_record(data, "Course")
        return cls(
            id=_require(data, "id", "Course"),
            name=data.get("name") or "",
            course_code=_require(data, "course_code", "Course"),
            start_at=parse_timestamp(data.get("start_at")),
            end_at=parse_timestamp(data.get("end_at")),
        )


def course_status(course: Course, now: datetime) -> str:
    """
    Classify a course relative to now.

    A course without a start date counts as started, and one without an end
    date never ends.
    """
    if course.start_at is not None and now < course.start_at:
        return NOT_STARTED
    if course.end_at is None or now < course.end_at:
        return IN_PROGRESS
    return ENDED

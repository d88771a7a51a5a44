"""
Submission Sync Module

Mirrors the online-upload submissions of one course into a local tree:

    <dir>/<course code>/<assignment>/<login:name>/<filename>

Attachments are downloaded when missing or changed, and anything under the
course directory that no longer corresponds to a remote attachment is
pruned. A local file counts as unchanged when its size matches and its
modification time, rounded to the second, equals the attachment's
modified_at. Downloads set the file's mtime to that value, which is what
makes a second run a no-op.
"""

import os
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .client import CanvasClient
from .config import SyncConfig
from .exceptions import FileOperationError, SizeMismatchError
from .filters import first_failing_term
from .models import (
    ONLINE_UPLOAD,
    NOT_STARTED,
    IN_PROGRESS,
    Assignment,
    Attachment,
    Course,
    Submission,
    course_status,
)
from .naming import normalize_name, user_segment
from .prune import LiveSet, PruneResult, prune

logger = logging.getLogger("canvas_submissions.sync")


@dataclass
class SyncResult:
    """Counts reported at the end of a run."""
    course: Optional[Course] = None
    course_root: Optional[Path] = None
    downloaded: int = 0
    unchanged: int = 0
    pending: int = 0
    skipped_submissions: int = 0
    live: LiveSet = field(default_factory=LiveSet)
    pruned: Optional[PruneResult] = None


def _round_seconds(timestamp: float) -> int:
    return int(timestamp + 0.5) if timestamp >= 0 else -int(-timestamp + 0.5)


def is_unchanged(path: Path, attachment: Attachment) -> bool:
    """
    Check whether a local file already matches an attachment.

    Only size and whole-second mtime are compared; some filesystems do not
    keep sub-second timestamps.
    """
    try:
        stat = path.stat()
    except FileNotFoundError:
        return False
    except OSError as e:
        raise FileOperationError("stat file", str(path), e)

    return (
        stat.st_size == attachment.size
        and _round_seconds(stat.st_mtime) == _round_seconds(attachment.modified_at.timestamp())
    )


def download_attachment(client: CanvasClient, attachment: Attachment, path: Path) -> None:
    """
    Download an attachment to path and stamp it with the remote mtime.

    Nothing is written if the body size differs from the declared size.

    Raises:
        APIError: If the download fails
        SizeMismatchError: If the body has the wrong length
        FileOperationError: If the file cannot be written or stamped
    """
    data = client.get_bytes(attachment.url)
    if len(data) != attachment.size:
        raise SizeMismatchError(str(path), attachment.size, len(data))

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileOperationError("create directory", str(path.parent), e)

    try:
        path.write_bytes(data)
    except OSError as e:
        raise FileOperationError("write file", str(path), e)

    mtime = attachment.modified_at.timestamp()
    try:
        os.utime(path, (mtime, mtime))
    except OSError as e:
        raise FileOperationError("set timestamp on", str(path), e)


def _describe(attachment: Attachment) -> str:
    return (
        f"{attachment.filename} (size {attachment.size}) "
        f"modified at {attachment.modified_at.astimezone()}"
    )


def _log_course(course: Course, now: datetime) -> None:
    status = course_status(course, now)
    if status == NOT_STARTED:
        logger.info(f"{course.course_code} (starts in {course.start_at - now})")
    elif status == IN_PROGRESS and course.end_at is not None:
        logger.info(f"{course.name} (ends in {course.end_at - now})")
    elif status == IN_PROGRESS:
        logger.info(f"{course.name} (in progress)")
    else:
        logger.info(f"{course.name} (course has ended)")


def _sync_attachments(
    client: CanvasClient,
    config: SyncConfig,
    assignment_dir: Path,
    user_dir: Path,
    submission: Submission,
    result: SyncResult,
) -> None:
    for attachment in submission.attachments:
        path = user_dir / normalize_name(attachment.filename, config.normalize)

        # Desired state, whether or not anything gets downloaded
        result.live.add_file(path, user_dir, assignment_dir)

        if is_unchanged(path, attachment):
            logger.info(f"        (unchanged) {attachment.filename}")
            result.unchanged += 1
            continue

        if config.dry_run:
            logger.info(f"        need to download {_describe(attachment)}")
            result.pending += 1
            continue

        logger.info(f"        downloading {_describe(attachment)}")
        download_attachment(client, attachment, path)
        result.downloaded += 1


def _sync_assignment(
    client: CanvasClient,
    config: SyncConfig,
    assignment_dir: Path,
    assignment: Assignment,
    result: SyncResult,
) -> None:
    records = client.list_submissions(config.course_id, assignment.id)

    for record in records:
        submission = Submission.from_json(record)
        user = submission.user

        failed = first_failing_term(config.terms, assignment, user)
        if failed is not None:
            logger.info(f"    {user.label} does not match filter term {failed!r}")
            result.skipped_submissions += 1
            continue

        if submission.submission_type == "":
            logger.info(f"    {user.label} has no submission")
        elif submission.submission_type == ONLINE_UPLOAD:
            submitted = submission.submitted_at.astimezone() if submission.submitted_at else "unknown time"
            logger.info(f"    {user.label} submitted at {submitted}")
            user_dir = assignment_dir / user_segment(user, config.normalize)
            _sync_attachments(client, config, assignment_dir, user_dir, submission, result)
        else:
            logger.info(
                f"    {user.label} has submission of type {submission.submission_type} (skipping)"
            )


def sync_course(client: CanvasClient, config: SyncConfig, now: Optional[datetime] = None) -> SyncResult:
    """
    Sync every online-upload submission of a course to the local tree.

    Args:
        client: CanvasClient instance
        config: Settings for this run
        now: Current time, for the course status line

    Returns:
        SyncResult with counts and the prune result

    Raises:
        CanvasSyncError: On any error; nothing is retried
    """
    config.validate()
    now = now or datetime.now(timezone.utc)
    result = SyncResult()

    course = Course.from_json(client.get_course(config.course_id))
    result.course = course
    _log_course(course, now)

    course_root = config.course_root(course.course_code)
    result.course_root = course_root
    result.live.dirs.add(course_root)

    records = client.list_assignments(config.course_id)
    for record in records:
        assignment = Assignment.from_json(record)

        msg = f"==> {assignment.name}"
        if not assignment.published:
            msg += " (unpublished)"
        if not assignment.accepts_uploads:
            logger.info(msg + " (online uploads not enabled)")
            continue
        if not assignment.has_submitted_submissions:
            logger.info(msg + " (online uploads enabled, but no submissions)")
            continue
        logger.info(msg)

        assignment_dir = course_root / normalize_name(assignment.name, config.normalize)
        _sync_assignment(client, config, assignment_dir, assignment, result)

    if config.prune:
        result.pruned = prune(course_root, result.live, dry_run=config.dry_run)

    return result

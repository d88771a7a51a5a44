"""
Canvas Submission Sync - mirror Canvas assignment submissions to a local directory.

Downloads new and changed online-upload attachments for one course and prunes
local files that no longer correspond to anything on Canvas.
"""

__version__ = "0.1.0"

from .client import CanvasClient, list_courses
from .config import SyncConfig, load_env
from .filters import matches, first_failing_term, normalize_terms
from .naming import normalize_name, user_segment
from .prune import LiveSet, PruneResult, find_stale, prune
from .sync import SyncResult, sync_course, is_unchanged, download_attachment
from .models import Course, Assignment, Submission, Attachment, User, course_status
from .exceptions import (
    CanvasSyncError,
    ConfigurationError,
    ValidationError,
    AuthenticationError,
    APIError,
    PartialResultError,
    ResponseFormatError,
    SizeMismatchError,
    FileOperationError,
)

__all__ = [
    # Client
    "CanvasClient",
    "list_courses",
    # Configuration
    "SyncConfig",
    "load_env",
    # Filter
    "matches",
    "first_failing_term",
    "normalize_terms",
    # Naming
    "normalize_name",
    "user_segment",
    # Sync
    "SyncResult",
    "sync_course",
    "is_unchanged",
    "download_attachment",
    "LiveSet",
    "PruneResult",
    "find_stale",
    "prune",
    # Models
    "Course",
    "Assignment",
    "Submission",
    "Attachment",
    "User",
    "course_status",
    # Exceptions
    "CanvasSyncError",
    "ConfigurationError",
    "ValidationError",
    "AuthenticationError",
    "APIError",
    "PartialResultError",
    "ResponseFormatError",
    "SizeMismatchError",
    "FileOperationError",
]

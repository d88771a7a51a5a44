"""
Name Normalization

Maps remote display names to local path segments. The mapping must be
deterministic: the same remote entity has to land on the same local path on
every run, or the pruner would delete and re-download it.
"""

import os

from .models import User

# Rewritten even when despacing is off, so a name is always one segment
SEPARATORS = tuple(sep for sep in (os.sep, os.altsep) if sep)


def normalize_name(name: str, enabled: bool = True) -> str:
    """
    Map a remote name to a single path segment.

    Spaces become underscores unless disabled. Path separators always do, and
    the special names '', '.' and '..' are rewritten so a segment can never
    point at the current or parent directory.
    """
    if enabled:
        name = name.replace(" ", "_")
    for sep in SEPARATORS:
        name = name.replace(sep, "_")
    if name in ("", ".", ".."):
        name = "_" * max(len(name), 1)
    return name


def user_segment(user: User, enabled: bool = True) -> str:
    """Directory name for a submitter: '<login>:<name>'."""
    # ':' is never rewritten by normalize_name
    return normalize_name(user.label, enabled)

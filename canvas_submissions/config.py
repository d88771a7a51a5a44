"""
Configuration

The settings of a single sync run, built once by the CLI and passed
explicitly to the planner, plus discovery of .env files holding credentials.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .exceptions import ValidationError
from .naming import normalize_name

HOME_ENV_FILE = ".canvas-submission-sync.env"


def load_env(start: Optional[Path] = None) -> Optional[Path]:
    """
    Load the first .env found in the start dir, its parents, or the home dir.

    Returns:
        The loaded file, or None if no file was found
    """
    current = (start or Path.cwd()).resolve()
    locations = [current / ".env"]
    locations.extend(parent / ".env" for parent in current.parents)
    locations.append(Path.home() / HOME_ENV_FILE)

    for env_file in locations:
        if env_file.is_file():
            load_dotenv(env_file)
            return env_file
    return None


@dataclass
class SyncConfig:
    """Settings for one sync run."""
    course_id: int
    directory: Path = field(default_factory=lambda: Path("."))
    dry_run: bool = False
    normalize: bool = True
    terms: List[str] = field(default_factory=list)
    prune: bool = True

    def __post_init__(self):
        self.directory = Path(os.path.abspath(self.directory))

    def validate(self) -> None:
        """
        Raises:
            ValidationError: If the course ID is not a positive integer
        """
        if isinstance(self.course_id, bool) or not isinstance(self.course_id, int) or self.course_id <= 0:
            raise ValidationError(f"Course ID must be a positive integer, got {self.course_id!r}")

    def course_root(self, course_code: str) -> Path:
        """Local directory holding everything synced for the course."""
        return self.directory / normalize_name(course_code, self.normalize)

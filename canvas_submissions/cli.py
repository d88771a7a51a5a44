#!/usr/bin/env python3
"""
Canvas Submission Sync CLI

Mirror the online-upload submissions of a Canvas course into a local directory.

Usage:
    canvas-submission-sync --course ID [--dir DIR] [--dry] [terms ...]
    canvas-submission-sync --list-courses

If filter terms are supplied, a submission will only be downloaded
if every term is satisfied. A term is satisfied if it is a
case-insensitive substring match for any of the following:
  * Assignment name
  * Assignment description
  * Student login
  * Student name
  * Student short name
  * Student email

Directory structure:
    DIR/
    └── COURSE_CODE/
        └── Assignment_Name/
            └── login:Student_Name/
                └── submitted_file.pdf

Credentials are read from the environment or a .env file:
    CANVAS_DOMAIN=canvas.instructure.com
    CANVAS_API_TOKEN=your_token_here
"""

import argparse
import logging
import sys
from typing import List, Optional

from .client import CanvasClient, list_courses
from .config import SyncConfig, load_env
from .exceptions import CanvasSyncError
from .filters import normalize_terms
from .sync import sync_course

logger = logging.getLogger("canvas_submissions.cli")


def setup_logging(verbose: bool = False) -> None:
    """Send progress lines to stdout as plain text."""
    package_logger = logging.getLogger("canvas_submissions")
    package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.propagate = False


def positive_int(value: str) -> int:
    """argparse type for the course ID."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid course ID: {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"course ID must be positive: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="canvas-submission-sync",
        description="Canvas Submission Sync - Mirror assignment submissions to a local directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument("--course", "-c", type=positive_int, help="Canvas course ID")
    target.add_argument("--list-courses", action="store_true", help="List courses you teach and exit")

    parser.add_argument("--dir", "-d", default=".", help="Directory to download into (default: current)")
    parser.add_argument("--dry", action="store_true", help="Dry run: report actions without changing anything")
    parser.add_argument("--no-despace", dest="despace", action="store_false",
                        help="Keep spaces in file and directory names")
    parser.add_argument("--no-prune", dest="prune", action="store_false",
                        help="Do not delete local files that are no longer on Canvas")
    parser.add_argument("--domain", help="Canvas domain (default: $CANVAS_DOMAIN)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every request")
    parser.add_argument("terms", nargs="*", help="Filter terms (all must match)")
    return parser


def cmd_list_courses(client: CanvasClient) -> int:
    """List available Canvas courses."""
    courses = list_courses(client)

    if not courses:
        print("No courses found")
        return 0

    print(f"Found {len(courses)} courses:\n")
    for course in courses:
        print(f"  {course['id']:>10}  {course['name']}")
        if course.get('course_code'):
            print(f"             ({course['course_code']})")

    return 0


def cmd_sync(client: CanvasClient, args: argparse.Namespace) -> int:
    """Sync submissions of one course."""
    config = SyncConfig(
        course_id=args.course,
        directory=args.dir,
        dry_run=args.dry,
        normalize=args.despace,
        terms=normalize_terms(args.terms),
        prune=args.prune,
    )
    config.validate()

    result = sync_course(client, config)

    if result.course is not None:
        print(f"\n{result.course.name} ({result.course.course_code}) -> {result.course_root}")
    if config.dry_run:
        summary = f"\n{result.pending} to download, {result.unchanged} unchanged"
    else:
        summary = f"\n{result.downloaded} downloaded, {result.unchanged} unchanged"
    if result.pruned is not None:
        verb = "to delete" if config.dry_run else "deleted"
        summary += f", {len(result.pruned.files)} files and {len(result.pruned.dirs)} directories {verb}"
    print(summary)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.list_courses and args.terms:
        parser.error("filter terms cannot be combined with --list-courses")

    load_env()
    setup_logging(args.verbose)

    client = CanvasClient(domain=args.domain)
    try:
        client.check_credentials()
        if args.list_courses:
            return cmd_list_courses(client)
        return cmd_sync(client, args)
    except CanvasSyncError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

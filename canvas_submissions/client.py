"""
Canvas API Client

Authenticated, fail-fast access to the Canvas REST API. Every request either
returns a complete decoded value or raises; there is no retry and no
following of pagination links.
"""

import os
import re
import logging
from typing import Any, Dict, Optional

import requests
from canvasapi import Canvas
from canvasapi.exceptions import CanvasException, InvalidAccessToken

from .exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    PartialResultError,
    ResponseFormatError,
    ValidationError,
)

logger = logging.getLogger("canvas_submissions.client")

# Large enough that course listings never paginate
PAGE_SIZE = 1000

# Valid domain pattern
DOMAIN_PATTERN = re.compile(r'^[a-zA-Z0-9][a-zA-Z0-9\-\.]*[a-zA-Z0-9]$')

TOKEN_VARIABLES = ("CANVAS_API_TOKEN", "CANVAS_TOKEN")


def _validate_domain(domain: str) -> None:
    """Validate Canvas domain format."""
    if not domain:
        raise ConfigurationError(
            "CANVAS_DOMAIN not set.\n"
            "Set it in your .env file or environment, or pass --domain:\n"
            "  CANVAS_DOMAIN=canvas.instructure.com"
        )
    if not DOMAIN_PATTERN.match(domain):
        raise ValidationError(f"Invalid Canvas domain format: {domain}")


def _validate_token(token: str) -> None:
    """Validate Canvas API token."""
    if not token:
        raise ConfigurationError(
            "CANVAS_API_TOKEN not set.\n"
            "Set it in your .env file or environment:\n"
            "  CANVAS_API_TOKEN=your_token_here\n"
            "Generate a token at: https://<your-domain>/profile/settings"
        )


def _token_from_environment() -> Optional[str]:
    for name in TOKEN_VARIABLES:
        value = os.getenv(name)
        if value:
            return value
    return None


def _has_next_page(response: requests.Response) -> bool:
    """Check the Link header for a continuation link."""
    if "next" in response.links:
        return True
    return 'rel="next"' in response.headers.get("Link", "")


class CanvasClient:
    """Bearer-token session against a single Canvas instance."""

    def __init__(
        self,
        domain: Optional[str] = None,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Canvas client.

        Args:
            domain: Canvas domain (e.g., 'canvas.instructure.com')
            token: Canvas API token
            session: Optional requests session (mainly for tests)

        If not provided, reads from CANVAS_DOMAIN and CANVAS_API_TOKEN
        (or CANVAS_TOKEN) environment variables. Nothing is validated until
        check_credentials() or the first request.
        """
        self.domain = domain or os.getenv("CANVAS_DOMAIN")
        self.token = token or _token_from_environment()
        self._session = session
        self._canvas: Optional[Canvas] = None

    def check_credentials(self) -> None:
        """
        Validate domain and token without contacting Canvas.

        Raises:
            ConfigurationError: If credentials are missing
            ValidationError: If domain format is invalid
        """
        _validate_token(self.token)
        _validate_domain(self.domain)

    @property
    def session(self) -> requests.Session:
        """Get or create the authenticated HTTP session."""
        if self._session is None:
            self._session = requests.Session()
        self._session.headers["Authorization"] = f"Bearer {self.token}"
        return self._session

    @property
    def canvas(self) -> Canvas:
        """canvasapi handle, used for course discovery only."""
        if self._canvas is None:
            self.check_credentials()
            self._canvas = Canvas(f"https://{self.domain}", self.token)
            logger.debug(f"canvasapi client initialized with domain: {self.domain}")
        return self._canvas

    def api_url(self, path: str) -> str:
        """Build an absolute REST API URL from a path like 'courses/1'."""
        return f"https://{self.domain}/api/v1/{path.lstrip('/')}"

    def _get(self, url: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        self.check_credentials()
        session = self.session
        logger.debug(f"GET {url} {params or ''}")

        try:
            response = session.get(url, params=params)
        except requests.RequestException as e:
            raise APIError(f"GET error for {url}: {e}")

        if response.status_code == 401:
            raise AuthenticationError(
                "Canvas rejected the API token (401). Please check your token and try again.\n"
                f"Generate a new token at: https://{self.domain}/profile/settings"
            )
        if not 200 <= response.status_code <= 299:
            raise APIError(
                f"GET response {response.status_code} {response.reason} for {url}",
                status_code=response.status_code,
                response=response.text,
            )
        if _has_next_page(response):
            raise PartialResultError(url)

        return response

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None, expect: type = dict) -> Any:
        """
        Fetch a JSON record or list.

        Args:
            url: Absolute URL
            params: Optional query parameters
            expect: dict for a single record, list for a listing

        Returns:
            The decoded JSON value

        Raises:
            APIError: On transport errors or non-2xx responses
            PartialResultError: If the response has more pages
            ResponseFormatError: If the body is not JSON of the expected shape
        """
        response = self._get(url, params)

        content_type = response.headers.get("Content-Type", "")
        if "application/json" not in content_type:
            raise ResponseFormatError(url, f"expected JSON, got content type {content_type!r}")

        try:
            value = response.json()
        except ValueError as e:
            raise ResponseFormatError(url, f"error decoding object: {e}")

        if not isinstance(value, expect):
            raise ResponseFormatError(
                url, f"expected a JSON {expect.__name__}, got {type(value).__name__}"
            )
        return value

    def get_bytes(self, url: str) -> bytes:
        """Fetch a raw response body, e.g. an attachment download."""
        return self._get(url).content

    def get_course(self, course_id: int) -> Dict[str, Any]:
        """Get a course record by ID."""
        return self.get_json(self.api_url(f"courses/{course_id}"))

    def list_assignments(self, course_id: int) -> list:
        """Get every assignment of a course in a single request."""
        return self.get_json(
            self.api_url(f"courses/{course_id}/assignments"),
            params={"per_page": PAGE_SIZE},
            expect=list,
        )

    def list_submissions(self, course_id: int, assignment_id: int) -> list:
        """Get every submission of an assignment, with embedded user records."""
        return self.get_json(
            self.api_url(f"courses/{course_id}/assignments/{assignment_id}/submissions"),
            params={"include[]": "user", "per_page": PAGE_SIZE},
            expect=list,
        )


def list_courses(client: CanvasClient, enrollment_type: str = "teacher") -> list:
    """
    List courses for the current user.

    Args:
        client: CanvasClient instance
        enrollment_type: Filter by enrollment type ('teacher', 'ta', etc.)

    Returns:
        List of course dicts with keys: id, name, course_code
    """
    result = []
    try:
        courses = client.canvas.get_courses(enrollment_type=enrollment_type, per_page=100)
        for course in courses:
            result.append({
                "id": course.id,
                "name": getattr(course, "name", ""),
                "course_code": getattr(course, "course_code", ""),
            })
    except InvalidAccessToken:
        raise AuthenticationError("Invalid Canvas API token. Please check your token and try again.")
    except CanvasException as e:
        raise APIError(f"Error listing courses: {e}")
    except requests.RequestException as e:
        raise APIError(f"GET error while listing courses: {e}")

    logger.debug(f"Canvas API returned {len(result)} courses")
    return result

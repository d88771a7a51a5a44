"""
Submission Filter

Free-text match terms from the command line. A submission is kept only if
every term is a case-insensitive substring of its assignment or submitter
metadata.
"""

from typing import Iterable, List, Optional

from .models import Assignment, User

# Joins fields so a term cannot match across a field boundary by accident
FIELD_SEPARATOR = ","


def normalize_terms(raw: Iterable[str]) -> List[str]:
    """Case-fold terms as given on the command line."""
    return [term.lower() for term in raw]


def haystack(assignment: Assignment, user: User) -> str:
    """Lowercased text searched by the filter terms."""
    return FIELD_SEPARATOR.join([
        assignment.name,
        assignment.description,
        user.login_id,
        user.name,
        user.short_name,
        user.email,
    ]).lower()


def first_failing_term(terms: List[str], assignment: Assignment, user: User) -> Optional[str]:
    """Return the first term that does not match, or None if all of them do."""
    if not terms:
        return None
    text = haystack(assignment, user)
    for term in terms:
        if term not in text:
            return term
    return None


def matches(terms: List[str], assignment: Assignment, user: User) -> bool:
    """True iff every term matches. An empty term list matches everything."""
    return first_failing_term(terms, assignment, user) is None

from .resolver import (
    build_review_snapshot,
    existing_reviewer_logins,
    latest_reviews_by_user,
    resolve_approved_users,
)
from .types import ExpandedTeam, Review, ReviewSnapshot

__all__ = [
    "ExpandedTeam",
    "Review",
    "ReviewSnapshot",
    "build_review_snapshot",
    "existing_reviewer_logins",
    "latest_reviews_by_user",
    "resolve_approved_users",
]

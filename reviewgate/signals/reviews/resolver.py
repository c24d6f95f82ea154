"""
Reduce a PR's review events to one state per reviewer.

GitHub lists every review a user has submitted. Only the most recent one
decides whether that user currently approves the PR, so an APPROVED
followed by CHANGES_REQUESTED is no longer an approval.
"""
from __future__ import annotations

from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from .types import ExpandedTeam, Review, ReviewSnapshot

APPROVED = "APPROVED"
# Draft reviews are only visible to their author and have no effect yet.
UNSUBMITTED_STATES = {"PENDING"}


def _submission_order(reviews: Sequence[Review]) -> List[Review]:
    # An undated review takes the time of the review listed before it, so it
    # keeps its place relative to its neighbours.
    keyed: List[Tuple[float, int, Review]] = []
    current = float("-inf")
    for index, review in enumerate(reviews):
        submitted_at: Optional[datetime] = review.submitted_at
        if isinstance(submitted_at, datetime):
            current = submitted_at.timestamp()
        keyed.append((current, index, review))
    keyed.sort(key=lambda item: (item[0], item[1]))
    return [review for _, _, review in keyed]


def latest_reviews_by_user(reviews: Sequence[Review]) -> Dict[str, Review]:
    """
    Map each reviewer to their most recent submitted review.

    Reviews are ordered by ``submitted_at``; ties and undated reviews keep
    input order, which for GitHub is submission order.
    """
    latest: Dict[str, Review] = {}
    for review in _submission_order(reviews):
        reviewer = str(review.reviewer or "").strip()
        if not reviewer:
            continue
        if str(review.state or "").upper() in UNSUBMITTED_STATES:
            continue
        latest[reviewer] = review
    return latest


def resolve_approved_users(reviews: Sequence[Review]) -> Set[str]:
    return {
        reviewer
        for reviewer, review in latest_reviews_by_user(reviews).items()
        if str(review.state or "").upper() == APPROVED
    }


def existing_reviewer_logins(reviews: Iterable[Review]) -> List[str]:
    seen: List[str] = []
    for review in reviews:
        reviewer = str(review.reviewer or "").strip()
        if reviewer and reviewer not in seen:
            seen.append(reviewer)
    return seen


def build_review_snapshot(
    *,
    reviews: Sequence[Review],
    pr_author: str,
    requested_team_slugs: Iterable[str] = (),
    expanded_teams: Iterable[ExpandedTeam] = (),
) -> ReviewSnapshot:
    return ReviewSnapshot(
        approved_users=frozenset(resolve_approved_users(reviews)),
        pr_author=str(pr_author or "").strip(),
        requested_team_slugs=tuple(requested_team_slugs),
        existing_reviewer_logins=tuple(existing_reviewer_logins(reviews)),
        expanded_teams=tuple(expanded_teams),
    )

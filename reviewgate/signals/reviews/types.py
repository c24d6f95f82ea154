"""
Review snapshot types.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional, Tuple


@dataclass(frozen=True)
class Review:
    """A single submitted PR review event."""
    reviewer: str
    state: str # APPROVED, CHANGES_REQUESTED, COMMENTED, DISMISSED, PENDING
    submitted_at: Optional[datetime] = None
    commit_id: str = ""


@dataclass(frozen=True)
class ExpandedTeam:
    """An organization team with its resolved member logins."""
    org: str
    team_slug: str
    members: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class ReviewSnapshot:
    """Everything the engine needs to know about a PR's review state."""
    approved_users: FrozenSet[str]
    pr_author: str
    requested_team_slugs: Tuple[str, ...] = ()
    existing_reviewer_logins: Tuple[str, ...] = ()
    expanded_teams: Tuple[ExpandedTeam, ...] = ()

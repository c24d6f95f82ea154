"""
Offline review snapshots stored as JSON.

Either ``approved_users`` or raw ``reviews`` may be given, not both.
Reviews are reduced last-state-wins like live GitHub data.
"""
from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from reviewgate.errors import ConfigurationError

from .resolver import build_review_snapshot
from .types import ExpandedTeam, Review, ReviewSnapshot


class ReviewEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    reviewer: str
    state: str
    submitted_at: Optional[datetime] = None
    commit_id: str = ""


class TeamEntry(BaseModel):
    model_config = ConfigDict(extra="forbid")

    org: str
    team_slug: str
    members: List[str] = Field(default_factory=list)


class SnapshotFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    pr_author: str
    approved_users: Optional[List[str]] = None
    reviews: List[ReviewEntry] = Field(default_factory=list)
    requested_team_slugs: List[str] = Field(default_factory=list)
    teams: List[TeamEntry] = Field(default_factory=list)

    @model_validator(mode="after")
    def _one_approval_source(self) -> "SnapshotFile":
        if self.approved_users is not None and self.reviews:
            raise ValueError("give either approved_users or reviews, not both")
        return self

    def to_snapshot(self) -> ReviewSnapshot:
        reviews = [Review(**entry.model_dump()) for entry in self.reviews]
        teams = [
            ExpandedTeam(org=t.org, team_slug=t.team_slug, members=frozenset(t.members))
            for t in self.teams
        ]
        snapshot = build_review_snapshot(
            reviews=reviews,
            pr_author=self.pr_author,
            requested_team_slugs=self.requested_team_slugs,
            expanded_teams=teams,
        )
        if self.approved_users is None:
            return snapshot
        return ReviewSnapshot(
            approved_users=frozenset(self.approved_users),
            pr_author=snapshot.pr_author,
            requested_team_slugs=snapshot.requested_team_slugs,
            existing_reviewer_logins=snapshot.existing_reviewer_logins,
            expanded_teams=snapshot.expanded_teams,
        )


def load_snapshot_file(path: str) -> ReviewSnapshot:
    snapshot_path = Path(path)
    if not snapshot_path.is_file():
        raise ConfigurationError(f"Snapshot file not found: {path}")
    try:
        raw = json.loads(snapshot_path.read_text(encoding="utf-8"))
        return SnapshotFile.model_validate(raw).to_snapshot()
    except (OSError, ValueError) as exc:
        # pydantic's ValidationError is a ValueError
        raise ConfigurationError(f"Invalid snapshot file {path}: {exc}") from exc

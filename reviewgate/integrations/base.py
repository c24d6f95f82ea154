from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional, Sequence

from reviewgate.policy.types import ApprovalGroup
from reviewgate.signals.reviews.types import ExpandedTeam, Review

logger = logging.getLogger(__name__)


class ReviewProvider(ABC):
    """
    Source of PR review data and sink for the gatekeeper's outcome.
    """

    max_workers: int = 4

    @abstractmethod
    def list_reviews(self, repo: str, number: int) -> List[Review]:
        """Return every submitted review on the PR, oldest first."""

    @abstractmethod
    def list_requested_team_slugs(self, repo: str, number: int) -> List[str]:
        """Return the slugs of teams with a pending review request."""

    @abstractmethod
    def list_team_members(self, org: str, team_slug: str) -> List[str]:
        """Return member logins; raise ConfigurationError if the team does not exist."""

    @abstractmethod
    def create_commit_status(
        self,
        repo: str,
        sha: str,
        *,
        state: str,
        context: str,
        target_url: Optional[str] = None,
        description: Optional[str] = None,
    ) -> None:
        pass

    @abstractmethod
    def request_team_reviewers(self, repo: str, number: int, team_slugs: Sequence[str]) -> None:
        pass

    def expand_team(self, org: str, team_slug: str) -> ExpandedTeam:
        logger.info("Expanding team: '%s' '%s'", org, team_slug)
        members = self.list_team_members(org, team_slug)
        return ExpandedTeam(org=org, team_slug=team_slug, members=frozenset(members))

    def expand_teams(self, groups: Iterable[ApprovalGroup]) -> List[ExpandedTeam]:
        """
        Expand every group's team concurrently.

        Results come back in group order; the first failure propagates.
        """
        groups = list(groups)
        if not groups:
            return []
        workers = max(1, min(int(self.max_workers), len(groups)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="team-expand") as pool:
            teams = list(pool.map(lambda g: self.expand_team(g.org, g.team_slug), groups))
        for group, team in zip(groups, teams):
            logger.info(
                "Members of %s expanded to: %s",
                group.display_name,
                ", ".join(sorted(team.members)) or "<none>",
            )
        return teams

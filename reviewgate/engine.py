"""
Team-based review policy evaluation.

Pure logic, no I/O: every input is passed in explicitly and the same
inputs always produce the same Verdict.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from reviewgate.errors import ConfigurationError
from reviewgate.policy.types import ApprovalGroup, ReviewPolicy
from reviewgate.signals.reviews.types import ExpandedTeam, ReviewSnapshot


@dataclass(frozen=True)
class GroupResult:
    group: ApprovalGroup
    eligible: int
    approved_by: List[str]
    author_excluded: bool
    satisfied: bool


@dataclass
class Verdict:
    satisfied: bool
    teams_to_request: List[ApprovalGroup] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    results: List[GroupResult] = field(default_factory=list)


def unsatisfied_message(group: ApprovalGroup, eligible: int) -> str:
    return (
        f"{group.display_name} requires {group.required} approval(s) "
        f"from {group.team_slug}; {eligible} found."
    )


def _index_teams(expanded_teams: Iterable[ExpandedTeam]) -> Dict[Tuple[str, str], ExpandedTeam]:
    # Slugs are only unique within an org.
    index: Dict[Tuple[str, str], ExpandedTeam] = {}
    for team in expanded_teams:
        index.setdefault((team.org, team.team_slug), team)
    return index


def evaluate_group(
    group: ApprovalGroup,
    team: ExpandedTeam,
    approved_users: Iterable[str],
    pr_author: str,
) -> GroupResult:
    members = set(team.members)
    counted = set(approved_users)
    author_excluded = bool(group.exclude_author and pr_author and pr_author in members)
    if author_excluded:
        counted.discard(pr_author)

    approved_by = sorted(members & counted)
    return GroupResult(
        group=group,
        eligible=len(approved_by),
        approved_by=approved_by,
        author_excluded=author_excluded,
        satisfied=len(approved_by) >= group.required,
    )


def evaluate(
    groups: Sequence[ApprovalGroup],
    expanded_teams: Iterable[ExpandedTeam],
    approved_users: Iterable[str],
    pr_author: str,
    requested_team_slugs: Iterable[str] = (),
) -> Verdict:
    """
    Decide whether the approvals satisfy every group.

    Raises ConfigurationError when a group's team has no expansion. A
    policy with no groups is satisfied.
    """
    teams = _index_teams(expanded_teams)
    approved = frozenset(approved_users)
    author = str(pr_author or "").strip()
    already_requested = set(requested_team_slugs)

    results: List[GroupResult] = []
    for group in groups or ():
        team = teams.get((group.org, group.team_slug))
        if team is None:
            raise ConfigurationError(
                f"Team '{group.org}/{group.team_slug}' for group '{group.display_name}' "
                "could not be resolved to a member list."
            )
        results.append(evaluate_group(group, team, approved, author))

    messages: List[str] = []
    teams_to_request: List[ApprovalGroup] = []
    for result in results:
        if result.satisfied:
            continue
        messages.append(unsatisfied_message(result.group, result.eligible))
        if result.group.team_slug not in already_requested:
            teams_to_request.append(result.group)

    return Verdict(
        satisfied=all(result.satisfied for result in results),
        teams_to_request=teams_to_request,
        messages=messages,
        results=results,
    )


class ReviewGatekeeper:
    """
    Evaluates a ReviewPolicy against one ReviewSnapshot.

    The verdict is computed on first use and reused afterwards.
    """

    def __init__(self, policy: ReviewPolicy, snapshot: ReviewSnapshot):
        self.policy = policy
        self.snapshot = snapshot
        self._verdict: Optional[Verdict] = None

    def check_satisfied(self) -> Verdict:
        if self._verdict is None:
            self._verdict = evaluate(
                self.policy.groups,
                self.snapshot.expanded_teams,
                self.snapshot.approved_users,
                self.snapshot.pr_author,
                self.snapshot.requested_team_slugs,
            )
        return self._verdict

    def get_messages(self) -> List[str]:
        return list(self.check_satisfied().messages)

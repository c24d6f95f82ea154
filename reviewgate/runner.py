"""
End-to-end gatekeeper run for one pull request event.
"""
from __future__ import annotations

import logging
from typing import Optional

from reviewgate.config import Settings
from reviewgate.engine import ReviewGatekeeper, Verdict
from reviewgate.errors import ReviewGateError
from reviewgate.integrations.base import ReviewProvider
from reviewgate.integrations.github.event import PullRequestEvent, load_event
from reviewgate.policy.loader import load_policy
from reviewgate.policy.types import ReviewPolicy
from reviewgate.reporting import failure_report, status_description
from reviewgate.signals.reviews.resolver import build_review_snapshot
from reviewgate.signals.reviews.types import ReviewSnapshot

logger = logging.getLogger(__name__)


def collect_snapshot(provider: ReviewProvider, event: PullRequestEvent, policy: ReviewPolicy) -> ReviewSnapshot:
    """
    Fetch everything the engine needs before evaluation starts.
    """
    reviews = provider.list_reviews(event.repository, event.number)
    requested = provider.list_requested_team_slugs(event.repository, event.number)
    logger.info("Requested reviewers: %s", ", ".join(requested) or "<none>")

    expanded = provider.expand_teams(policy.groups)
    for group, team in zip(policy.groups, expanded):
        if group.required > len(team.members):
            logger.warning(
                "%s requires %s approval(s) but %s/%s has only %s member(s)",
                group.display_name,
                group.required,
                group.org,
                group.team_slug,
                len(team.members),
            )
    snapshot = build_review_snapshot(
        reviews=reviews,
        pr_author=event.author,
        requested_team_slugs=requested,
        expanded_teams=expanded,
    )
    logger.info("Existing reviewers: %s", ", ".join(snapshot.existing_reviewer_logins) or "<none>")
    logger.info("Approved users: %s", ", ".join(sorted(snapshot.approved_users)) or "<none>")
    return snapshot


def publish_verdict(
    provider: ReviewProvider,
    event: PullRequestEvent,
    verdict: Verdict,
    settings: Settings,
) -> None:
    state = "success" if verdict.satisfied else "failure"
    logger.info("Setting a status on commit (%s)", event.head_sha)
    provider.create_commit_status(
        event.repository,
        event.head_sha,
        state=state,
        context=settings.status_context,
        target_url=settings.workflow_url,
        description=status_description(verdict, settings.description_limit),
    )

    # Teams with a pending request are never asked twice.
    if not verdict.satisfied and verdict.teams_to_request:
        provider.request_team_reviewers(
            event.repository,
            event.number,
            [group.team_slug for group in verdict.teams_to_request],
        )


def run_gatekeeper(
    settings: Settings,
    provider: ReviewProvider,
    event: Optional[PullRequestEvent] = None,
) -> int:
    """
    Evaluate the PR behind the current event and publish the outcome.

    Returns 0 when the policy is satisfied and 1 otherwise, including
    when a ReviewGateError ends the run early.
    """
    try:
        if event is None:
            event = load_event(settings.event_name, settings.event_path, settings.repository or None)
        policy = load_policy(settings.config_file)
        snapshot = collect_snapshot(provider, event, policy)

        gatekeeper = ReviewGatekeeper(policy, snapshot)
        verdict = gatekeeper.check_satisfied()
        logger.info("Satisfied: %s", verdict.satisfied)
        if not verdict.satisfied:
            logger.error("%s", failure_report(verdict))

        publish_verdict(provider, event, verdict, settings)
    except ReviewGateError as exc:
        logger.error("%s", exc)
        logger.debug("Gatekeeper run failed", exc_info=True)
        return 1

    return 0 if verdict.satisfied else 1

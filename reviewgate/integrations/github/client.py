"""
GitHub access for the gatekeeper, built on PyGithub.
"""
from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Sequence

import jwt
import requests
from github import Auth, Github, GithubException, UnknownObjectException

from reviewgate.config import Settings
from reviewgate.errors import ConfigurationError, GitHubAPIError
from reviewgate.integrations.base import ReviewProvider
from reviewgate.signals.reviews.types import Review

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 15
REQUEST_RETRIES = 3


def _exception_detail(exc: GithubException) -> str:
    data = exc.data if isinstance(exc.data, dict) else {}
    message = str(data.get("message") or "").strip()
    return f"status={exc.status} {message}".strip()


def get_installation_token(app_id: str, private_key: str, installation_id: str, api_url: str) -> str:
    """
    Exchange a GitHub App JWT for an installation access token.
    """
    now = int(time.time())
    payload = {
        "iat": now - 60,
        "exp": now + 600, # 10 min
        "iss": app_id,
    }
    encoded_jwt = jwt.encode(payload, private_key, algorithm="RS256")

    url = f"{api_url.rstrip('/')}/app/installations/{installation_id}/access_tokens"
    headers = {
        "Authorization": f"Bearer {encoded_jwt}",
        "Accept": "application/vnd.github+json",
    }
    resp = requests.post(url, headers=headers, timeout=REQUEST_TIMEOUT_SECONDS)
    resp.raise_for_status()
    return resp.json()["token"]


def build_client(settings: Settings) -> Github:
    """
    Initialize a GitHub client using App auth (preferred) or a token.
    """
    token = settings.token
    if settings.has_app_auth:
        try:
            token = get_installation_token(
                settings.app_id,
                settings.app_private_key,
                settings.installation_id,
                settings.api_url,
            )
            logger.info("Using GitHub App authentication")
        except (requests.RequestException, jwt.PyJWTError, KeyError, ValueError) as exc:
            if not settings.token:
                raise ConfigurationError(f"GitHub App authentication failed: {exc}") from exc
            logger.warning("GitHub App authentication failed: %s. Falling back to token.", exc)
            token = settings.token

    if not token:
        raise ConfigurationError("No GitHub token configured; set INPUT_TOKEN or GITHUB_TOKEN")
    return Github(
        auth=Auth.Token(token),
        base_url=settings.api_url,
        timeout=REQUEST_TIMEOUT_SECONDS,
        retry=REQUEST_RETRIES,
    )


class GitHubGateway(ReviewProvider):
    """
    ReviewProvider backed by the GitHub REST API.
    """

    def __init__(self, client: Github, *, max_workers: int = 4):
        self.client = client
        self.max_workers = max_workers

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubGateway":
        return cls(build_client(settings), max_workers=settings.team_fetch_workers)

    def _pull(self, repo: str, number: int):
        return self.client.get_repo(repo).get_pull(int(number))

    def list_reviews(self, repo: str, number: int) -> List[Review]:
        try:
            reviews = []
            for r in self._pull(repo, number).get_reviews():
                if r.user is None:
                    continue
                reviews.append(Review(
                    reviewer=r.user.login,
                    state=str(r.state or ""),
                    submitted_at=r.submitted_at,
                    commit_id=getattr(r, "commit_id", "") or "",
                ))
            return reviews
        except GithubException as exc:
            raise GitHubAPIError(f"list reviews for {repo}#{number}", _exception_detail(exc)) from exc

    def list_requested_team_slugs(self, repo: str, number: int) -> List[str]:
        try:
            _users, teams = self._pull(repo, number).get_review_requests()
            return [team.slug for team in teams]
        except GithubException as exc:
            raise GitHubAPIError(
                f"list requested reviewers for {repo}#{number}", _exception_detail(exc)
            ) from exc

    def list_team_members(self, org: str, team_slug: str) -> List[str]:
        try:
            team = self.client.get_organization(org).get_team_by_slug(team_slug)
            return [m.login for m in team.get_members() if getattr(m, "login", None)]
        except UnknownObjectException as exc:
            raise ConfigurationError(
                f"Team '{org}/{team_slug}' was not found or is not visible to this token"
            ) from exc
        except GithubException as exc:
            raise GitHubAPIError(f"list members of {org}/{team_slug}", _exception_detail(exc)) from exc

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
        kwargs: Dict[str, Any] = {"context": context}
        if target_url:
            kwargs["target_url"] = target_url
        if description:
            kwargs["description"] = description
        try:
            self.client.get_repo(repo).get_commit(sha).create_status(state, **kwargs)
        except GithubException as exc:
            raise GitHubAPIError(f"create commit status on {sha}", _exception_detail(exc)) from exc
        logger.info("Set commit status %s=%s on %s", context, state, sha)

    def request_team_reviewers(self, repo: str, number: int, team_slugs: Sequence[str]) -> None:
        if not team_slugs:
            return
        try:
            self._pull(repo, number).create_review_request(team_reviewers=list(team_slugs))
        except GithubException as exc:
            raise GitHubAPIError(f"request reviewers on {repo}#{number}", _exception_detail(exc)) from exc
        logger.info("Requested reviews from teams: %s", ", ".join(team_slugs))

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import requests
from github import Github, GithubException, UnknownObjectException

from reviewgate.config import Settings
from reviewgate.errors import ConfigurationError, GitHubAPIError
from reviewgate.integrations.github import client as github_client
from reviewgate.integrations.github.client import GitHubGateway, build_client
from reviewgate.policy.types import ApprovalGroup


def _user(login):
    return SimpleNamespace(login=login)


def _gateway():
    client = MagicMock()
    return GitHubGateway(client, max_workers=2), client


def test_list_reviews_normalizes_and_skips_deleted_users():
    gateway, client = _gateway()
    at = datetime(2026, 1, 1, tzinfo=timezone.utc)
    pull = client.get_repo.return_value.get_pull.return_value
    pull.get_reviews.return_value = [
        SimpleNamespace(user=_user("alice"), state="APPROVED", submitted_at=at, commit_id="abc"),
        SimpleNamespace(user=None, state="APPROVED", submitted_at=at, commit_id="abc"),
    ]

    reviews = gateway.list_reviews("acme/widgets", 7)

    client.get_repo.assert_called_with("acme/widgets")
    client.get_repo.return_value.get_pull.assert_called_with(7)
    assert len(reviews) == 1
    assert reviews[0].reviewer == "alice"
    assert reviews[0].state == "APPROVED"
    assert reviews[0].submitted_at == at


def test_list_requested_team_slugs_returns_team_slugs_only():
    gateway, client = _gateway()
    pull = client.get_repo.return_value.get_pull.return_value
    pull.get_review_requests.return_value = (
        [_user("bob")],
        [SimpleNamespace(slug="core"), SimpleNamespace(slug="docs")],
    )

    assert gateway.list_requested_team_slugs("acme/widgets", 7) == ["core", "docs"]


def test_unknown_team_is_a_configuration_error():
    gateway, client = _gateway()
    client.get_organization.return_value.get_team_by_slug.side_effect = UnknownObjectException(
        404, {"message": "Not Found"}, None
    )

    with pytest.raises(ConfigurationError) as exc:
        gateway.list_team_members("acme", "ghost")
    assert "acme/ghost" in str(exc.value)


def test_other_api_failures_are_wrapped():
    gateway, client = _gateway()
    client.get_repo.side_effect = GithubException(502, {"message": "Bad Gateway"}, None)

    with pytest.raises(GitHubAPIError) as exc:
        gateway.list_reviews("acme/widgets", 7)
    assert "status=502" in str(exc.value)


def test_expand_teams_preserves_group_order():
    gateway, client = _gateway()
    members = {"core": ["alice", "bob"], "docs": ["erin"], "ops": []}

    def get_team_by_slug(slug):
        team = MagicMock()
        team.get_members.return_value = [_user(login) for login in members[slug]]
        return team

    client.get_organization.return_value.get_team_by_slug.side_effect = get_team_by_slug
    groups = [
        ApprovalGroup(org="acme", team_slug=slug, display_name=slug.title(), required=1)
        for slug in ["ops", "core", "docs"]
    ]

    teams = gateway.expand_teams(groups)

    assert [t.team_slug for t in teams] == ["ops", "core", "docs"]
    assert teams[1].members == frozenset({"alice", "bob"})
    assert teams[0].members == frozenset()


def test_create_commit_status_omits_unset_fields():
    gateway, client = _gateway()
    commit = client.get_repo.return_value.get_commit.return_value

    gateway.create_commit_status(
        "acme/widgets", "abc123", state="success", context="PR Gatekeeper Status"
    )

    client.get_repo.return_value.get_commit.assert_called_with("abc123")
    commit.create_status.assert_called_once_with("success", context="PR Gatekeeper Status")


def test_create_commit_status_passes_description_and_url():
    gateway, client = _gateway()
    commit = client.get_repo.return_value.get_commit.return_value

    gateway.create_commit_status(
        "acme/widgets",
        "abc123",
        state="failure",
        context="PR Gatekeeper Status",
        target_url="https://github.com/acme/widgets/actions/runs/1",
        description="Core Team requires 2 approval(s) from core; 1 found.",
    )

    commit.create_status.assert_called_once_with(
        "failure",
        context="PR Gatekeeper Status",
        target_url="https://github.com/acme/widgets/actions/runs/1",
        description="Core Team requires 2 approval(s) from core; 1 found.",
    )


def test_request_team_reviewers_skips_empty_list():
    gateway, client = _gateway()
    gateway.request_team_reviewers("acme/widgets", 7, [])
    client.get_repo.assert_not_called()


def test_request_team_reviewers_sends_team_slugs():
    gateway, client = _gateway()
    pull = client.get_repo.return_value.get_pull.return_value

    gateway.request_team_reviewers("acme/widgets", 7, ["core", "docs"])

    pull.create_review_request.assert_called_once_with(team_reviewers=["core", "docs"])


def test_build_client_requires_credentials():
    with pytest.raises(ConfigurationError):
        build_client(Settings())


def test_build_client_with_token():
    assert isinstance(build_client(Settings(token="t0ken")), Github)


def test_build_client_prefers_app_installation_token(monkeypatch):
    calls = []

    def fake_token(app_id, private_key, installation_id, api_url):
        calls.append((app_id, installation_id, api_url))
        return "installation-token"

    monkeypatch.setattr(github_client, "get_installation_token", fake_token)
    settings = Settings(app_id="1", app_private_key="key", installation_id="99")

    assert isinstance(build_client(settings), Github)
    assert calls == [("1", "99", "https://api.github.com")]


def test_build_client_falls_back_to_token_when_app_auth_fails(monkeypatch):
    def failing_token(*_args):
        raise requests.HTTPError("401 Unauthorized")

    monkeypatch.setattr(github_client, "get_installation_token", failing_token)
    settings = Settings(token="t0ken", app_id="1", app_private_key="key", installation_id="99")

    assert isinstance(build_client(settings), Github)


def test_build_client_passes_timeout_and_retry(monkeypatch):
    captured = {}

    def fake_github(**kwargs):
        captured.update(kwargs)
        return "client"

    monkeypatch.setattr(github_client, "Github", fake_github)

    assert build_client(Settings(token="t0ken", api_url="https://ghe.example.com/api/v3")) == "client"
    assert captured["base_url"] == "https://ghe.example.com/api/v3"
    assert captured["timeout"] == github_client.REQUEST_TIMEOUT_SECONDS
    assert captured["retry"] == github_client.REQUEST_RETRIES

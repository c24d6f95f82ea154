import json

import pytest

from reviewgate.errors import ConfigurationError
from reviewgate.signals.reviews.snapshot_file import load_snapshot_file


def test_snapshot_file_resolves_raw_reviews(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({
        "pr_author": "dave",
        "reviews": [
            {"reviewer": "alice", "state": "APPROVED", "submitted_at": "2026-01-01T10:00:00Z"},
            {"reviewer": "alice", "state": "CHANGES_REQUESTED", "submitted_at": "2026-01-01T11:00:00Z"},
            {"reviewer": "bob", "state": "APPROVED", "submitted_at": "2026-01-01T10:30:00Z"},
        ],
        "requested_team_slugs": ["core"],
        "teams": [{"org": "acme", "team_slug": "core", "members": ["alice", "bob"]}],
    }), encoding="utf-8")

    snapshot = load_snapshot_file(str(path))
    assert snapshot.approved_users == frozenset({"bob"})
    assert snapshot.existing_reviewer_logins == ("alice", "bob")
    assert snapshot.expanded_teams[0].members == frozenset({"alice", "bob"})


def test_snapshot_file_accepts_explicit_approved_users(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"pr_author": "dave", "approved_users": ["alice"]}), encoding="utf-8")

    snapshot = load_snapshot_file(str(path))
    assert snapshot.approved_users == frozenset({"alice"})
    assert snapshot.expanded_teams == ()


def test_snapshot_file_rejects_malformed_json(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_snapshot_file(str(path))


def test_snapshot_file_requires_author(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({"approved_users": []}), encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_snapshot_file(str(path))


def test_snapshot_file_rejects_approved_users_with_reviews(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(json.dumps({
        "pr_author": "dave",
        "approved_users": ["alice"],
        "reviews": [
            {"reviewer": "alice", "state": "CHANGES_REQUESTED", "submitted_at": "2026-01-01T11:00:00Z"},
        ],
    }), encoding="utf-8")

    with pytest.raises(ConfigurationError) as exc:
        load_snapshot_file(str(path))
    assert "not both" in str(exc.value)

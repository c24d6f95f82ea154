import pytest

from reviewgate.policy.types import ApprovalGroup
from reviewgate.signals.reviews.types import ExpandedTeam


@pytest.fixture
def core_group():
    return ApprovalGroup(org="acme", team_slug="core", display_name="Core Team", required=2)


@pytest.fixture
def core_team():
    return ExpandedTeam(org="acme", team_slug="core", members=frozenset({"alice", "bob", "carol"}))

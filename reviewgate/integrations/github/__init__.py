from reviewgate.integrations.github.client import GitHubGateway, build_client
from reviewgate.integrations.github.event import PullRequestEvent, load_event, parse_event_payload

__all__ = [
    "GitHubGateway",
    "PullRequestEvent",
    "build_client",
    "load_event",
    "parse_event_payload",
]

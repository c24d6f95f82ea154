"""
Pull request event payloads delivered to a workflow run.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from reviewgate.config import SUPPORTED_EVENTS
from reviewgate.errors import InvalidEventError


@dataclass(frozen=True)
class PullRequestEvent:
    event_name: str
    repository: str # owner/name
    number: int
    author: str
    head_sha: str


def parse_event_payload(
    event_name: str,
    payload: Dict[str, Any],
    repository: Optional[str] = None,
) -> PullRequestEvent:
    if event_name not in SUPPORTED_EVENTS:
        raise InvalidEventError(
            f"Invalid event: {event_name or '<unset>'}. "
            f"This action should be triggered on {' and '.join(SUPPORTED_EVENTS)}"
        )

    pull_request = payload.get("pull_request") if isinstance(payload, dict) else None
    if not isinstance(pull_request, dict):
        raise InvalidEventError("Pull Request is Null")

    repo = repository or str((payload.get("repository") or {}).get("full_name") or "")
    number = pull_request.get("number")
    author = str((pull_request.get("user") or {}).get("login") or "").strip()
    head_sha = str((pull_request.get("head") or {}).get("sha") or "").strip()
    if not repo or not isinstance(number, int) or not author or not head_sha:
        raise InvalidEventError(
            "Pull request payload is missing repository, number, author or head sha"
        )

    return PullRequestEvent(
        event_name=event_name,
        repository=repo,
        number=number,
        author=author,
        head_sha=head_sha,
    )


def load_event(event_name: str, event_path: str, repository: Optional[str] = None) -> PullRequestEvent:
    # Check the event name before touching the file so unsupported triggers fail fast.
    if event_name not in SUPPORTED_EVENTS:
        return parse_event_payload(event_name, {}, repository)
    path = Path(event_path or "")
    if not event_path or not path.is_file():
        raise InvalidEventError(f"Event payload not found: {event_path or '<unset>'}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise InvalidEventError(f"Failed to read event payload {event_path}: {exc}") from exc
    return parse_event_payload(event_name, payload, repository)

from __future__ import annotations

from typing import Any, Dict, Optional

from reviewgate.config import DEFAULT_DESCRIPTION_LIMIT
from reviewgate.engine import Verdict


def status_description(verdict: Verdict, limit: int = DEFAULT_DESCRIPTION_LIMIT) -> Optional[str]:
    """Commit status descriptions are short; None leaves it unset."""
    if verdict.satisfied:
        return None
    return " ".join(verdict.messages)[: max(0, int(limit))]


def failure_report(verdict: Verdict) -> str:
    return "\n".join(verdict.messages)


def verdict_to_dict(verdict: Verdict) -> Dict[str, Any]:
    return {
        "satisfied": verdict.satisfied,
        "messages": list(verdict.messages),
        "teams_to_request": [group.team_slug for group in verdict.teams_to_request],
        "groups": [
            {
                "org": result.group.org,
                "team_slug": result.group.team_slug,
                "display_name": result.group.display_name,
                "required": result.group.required,
                "eligible": result.eligible,
                "approved_by": list(result.approved_by),
                "author_excluded": result.author_excluded,
                "satisfied": result.satisfied,
            }
            for result in verdict.results
        ],
    }


def render_text(verdict: Verdict) -> str:
    lines = [f"Satisfied: {str(verdict.satisfied).lower()}"]
    for result in verdict.results:
        mark = "ok" if result.satisfied else "missing"
        lines.append(
            f"- [{mark}] {result.group.display_name} ({result.group.org}/{result.group.team_slug}): "
            f"{result.eligible}/{result.group.required}"
            + (f" by {', '.join(result.approved_by)}" if result.approved_by else "")
        )
    for message in verdict.messages:
        lines.append(message)
    if verdict.teams_to_request:
        lines.append("Teams to request: " + ", ".join(g.team_slug for g in verdict.teams_to_request))
    return "\n".join(lines)

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import ValidationError

from reviewgate.errors import ConfigurationError
from reviewgate.policy.types import ReviewPolicy

logger = logging.getLogger(__name__)


def _load_yaml_file(path: str) -> Dict[str, Any]:
    loaded_path = Path(path)
    if not loaded_path.is_file():
        raise ConfigurationError(f"Policy file not found: {path}")
    try:
        with loaded_path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to read policy file {path}: {exc}") from exc
    # An empty file is an empty policy.
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Expected a YAML object at top-level in {path}")
    return data


def parse_policy(data: Dict[str, Any], source: str = "<memory>") -> ReviewPolicy:
    try:
        return ReviewPolicy.model_validate(data)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid review policy in {source}: {exc}") from exc


def load_policy(path: str) -> ReviewPolicy:
    """
    Load and validate the review policy YAML at *path*.

    Raises ConfigurationError for a missing, unreadable or invalid file.
    """
    policy = parse_policy(_load_yaml_file(path), source=path)
    logger.info(
        "Loaded review policy from %s: %s",
        path,
        ", ".join(f"{g.org}/{g.team_slug} x{g.required}" for g in policy.groups) or "no groups",
    )
    return policy


@dataclass
class PolicyIssue:
    severity: Literal["ERROR", "WARN"]
    code: str
    message: str
    location: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        payload = {
            "severity": self.severity,
            "code": self.code,
            "message": self.message,
        }
        if self.location:
            payload["location"] = self.location
        return payload


def lint_policy(policy: ReviewPolicy) -> List[PolicyIssue]:
    issues: List[PolicyIssue] = []
    if not policy.groups:
        issues.append(
            PolicyIssue(
                severity="WARN",
                code="POLICY_EMPTY",
                message="No groups configured; every pull request will pass.",
                location="groups",
            )
        )

    seen: Dict[str, int] = {}
    for idx, group in enumerate(policy.groups):
        location = f"groups[{idx}]"
        if group.team_slug in seen:
            issues.append(
                PolicyIssue(
                    severity="WARN",
                    code="TEAM_SLUG_DUPLICATE",
                    message=(
                        f"team_slug `{group.team_slug}` is also used by groups[{seen[group.team_slug]}]; "
                        "both groups are evaluated independently."
                    ),
                    location=location,
                )
            )
        else:
            seen[group.team_slug] = idx
        if not group.exclude_author:
            issues.append(
                PolicyIssue(
                    severity="WARN",
                    code="SELF_APPROVAL_ALLOWED",
                    message=f"Group `{group.display_name}` counts the PR author's own approval.",
                    location=location,
                )
            )
    return issues


def validate_policy_file(path: str) -> Dict[str, Any]:
    issues: List[PolicyIssue] = []
    try:
        policy = parse_policy(_load_yaml_file(path), source=path)
    except ConfigurationError as exc:
        issues.append(
            PolicyIssue(
                severity="ERROR",
                code="POLICY_INVALID",
                message=str(exc),
                location=path,
            )
        )
        policy = None

    if policy is not None:
        issues.extend(lint_policy(policy))

    errors = [issue.as_dict() for issue in issues if issue.severity == "ERROR"]
    warnings = [issue.as_dict() for issue in issues if issue.severity == "WARN"]
    status = "FAIL" if errors else ("WARN" if warnings else "OK")
    return {
        "ok": not errors,
        "status": status,
        "error_count": len(errors),
        "warning_count": len(warnings),
        "group_count": len(policy.groups) if policy is not None else 0,
        "issues": errors + warnings,
    }

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ApprovalGroup(BaseModel):
    """
    One team whose members must approve a pull request.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    org: str
    team_slug: str
    display_name: str
    required: int = Field(ge=1)
    exclude_author: bool = True

    @field_validator("org", "team_slug", "display_name")
    @classmethod
    def _strip_strings(cls, value: str) -> str:
        cleaned = str(value).strip()
        if not cleaned:
            raise ValueError("must be a non-empty string")
        return cleaned


class ReviewPolicy(BaseModel):
    """
    Ordered approval groups. Group order drives message order.

    A top-level ``exclude_author`` sets the default for groups that do not
    set their own.
    """
    model_config = ConfigDict(extra="forbid", frozen=True)

    exclude_author: bool = True
    groups: List[ApprovalGroup] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _apply_author_default(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if data.get("groups") is None:
            data["groups"] = []
        default = data.get("exclude_author", True)
        if isinstance(data["groups"], list):
            data["groups"] = [
                {"exclude_author": default, **group} if isinstance(group, dict) else group
                for group in data["groups"]
            ]
        return data

    @property
    def team_slugs(self) -> List[str]:
        return [group.team_slug for group in self.groups]

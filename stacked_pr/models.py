"""Pull request data models.

This module defines the Pydantic models shared by the data sources, the
resolver and the CLI. Records are validated once when they are decoded from
the source's JSON and are immutable afterwards.

Example:
    >>> from stacked_pr.models import PullRequest
    >>> pr = PullRequest.model_validate(
    ...     {
    ...         "number": 12,
    ...         "title": "Add parser",
    ...         "body": "Depends on #11",
    ...         "state": "OPEN",
    ...         "baseRefName": "feature-a",
    ...         "headRefName": "feature-b",
    ...     }
    ... )
    >>> pr.base_ref
    'feature-a'
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PullRequestState(str, Enum):
    """Pull request states as reported by the GitHub CLI."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"
    MERGED = "MERGED"

    def __str__(self) -> str:
        return self.value


class PullRequest(BaseModel):
    """A single pull request.

    Field aliases follow the ``gh pr view --json`` schema so CLI output can be
    validated directly. The REST source maps its payload onto the same names.

    Attributes:
        number: Repository-scoped pull request number
        title: Pull request title
        body: Description text, empty when the author left none
        state: State text exactly as the source reported it
        base_ref: Branch the pull request merges into
        head_ref: Branch containing the pull request's commits
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    number: int = Field(..., ge=1)
    title: str
    body: str = ""
    state: str
    base_ref: str = Field(..., alias="baseRefName", min_length=1)
    head_ref: str = Field(..., alias="headRefName", min_length=1)

    @field_validator("body", mode="before")
    @classmethod
    def none_body_to_empty(cls, v: str | None) -> str:
        """GitHub returns null for an empty description."""
        return v or ""


class PullRequestRef(BaseModel):
    """Pull request location parsed from a URL.

    Attributes:
        host: Hostname the URL points at (e.g. github.com)
        owner: Repository owner/organization
        repo: Repository name
        number: Pull request number
    """

    model_config = ConfigDict(frozen=True)

    host: str
    owner: str = Field(..., min_length=1)
    repo: str = Field(..., min_length=1)
    number: int = Field(..., ge=1)

    @property
    def full_name(self) -> str:
        """Return owner/repo format."""
        return f"{self.owner}/{self.repo}"

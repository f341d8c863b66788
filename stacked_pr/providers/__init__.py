"""Pull request data sources.

Key Components:
    - RequestSource: Abstract read-only source of pull request records
    - GhCliSource: Shells out to the GitHub CLI (``gh``)
    - GitHubRestSource: Talks to the GitHub REST API with httpx
    - create_request_source: Picks one of the above from StackSettings

Example:
    >>> from stacked_pr.providers import create_request_source
    >>> with create_request_source(settings, ref) as source:
    ...     pr = source.fetch(ref.number)
"""

from stacked_pr.providers.base import RequestSource
from stacked_pr.providers.factory import create_request_source, resolve_token
from stacked_pr.providers.gh_cli import GhCliSource
from stacked_pr.providers.github_rest import GitHubRestSource

__all__ = [
    "GhCliSource",
    "GitHubRestSource",
    "RequestSource",
    "create_request_source",
    "resolve_token",
]

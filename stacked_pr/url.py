"""Pull request URL parsing.

Supported URL formats:
    - https://github.com/owner/repo/pull/123
    - https://github.com/owner/repo/pull/123/files
    - https://github.example.com/owner/repo/pull/123#discussion_r1
    - github.com/owner/repo/pull/123 (scheme omitted)

Example:
    >>> from stacked_pr.url import parse_pull_request_url
    >>> ref = parse_pull_request_url("https://github.com/owner/repo/pull/123")
    >>> ref.full_name, ref.number
    ('owner/repo', 123)
"""

import re

from stacked_pr.exceptions import InvalidPullRequestUrlError
from stacked_pr.models import PullRequestRef

DEFAULT_HOST = "github.com"

# Hostnames that are the public github.com service.
GITHUB_HOST_ALIASES = frozenset({"github.com", "www.github.com"})

# Trailing path, query or fragment after the number is allowed; the number
# itself must be digits only.
PULL_URL_PATTERN = re.compile(
    r"^(?:https?://)?"
    r"(?:(?P<host>[a-zA-Z0-9._:-]+)/)?"
    r"(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+)/pull/(?P<number>\d+)"
    r"(?:[/?#]\S*)?$",
    re.ASCII,
)


def parse_pull_request_url(url: str) -> PullRequestRef:
    """Parse a pull request URL into its components.

    Args:
        url: URL given on the command line

    Returns:
        PullRequestRef with host, owner, repo and number.

    Raises:
        InvalidPullRequestUrlError: If the URL does not end in
            ``<owner>/<repo>/pull/<number>``.
    """
    match = PULL_URL_PATTERN.match(url.strip())
    if not match:
        raise InvalidPullRequestUrlError(url)

    number = int(match.group("number"))
    if number < 1:
        raise InvalidPullRequestUrlError(url)

    host = (match.group("host") or DEFAULT_HOST).lower()
    if host in GITHUB_HOST_ALIASES:
        host = DEFAULT_HOST

    return PullRequestRef(
        host=host,
        owner=match.group("owner"),
        repo=match.group("repo").removesuffix(".git"),
        number=number,
    )

"""
Abstract base class for pull request data sources.

The resolver only needs two read operations from a data source, so every
implementation (GitHub CLI, GitHub REST) is small and synchronous.
"""

from abc import ABC, abstractmethod
from typing import Any

from stacked_pr.models import PullRequest


class RequestSource(ABC):
    """Read-only access to the pull requests of one repository.

    Implementations translate their own failure modes (non-zero exit codes,
    HTTP errors, undecodable payloads) into FetchFailedError and
    ListingFailedError so callers can treat every backend alike.
    """

    @abstractmethod
    def fetch(self, number: int) -> PullRequest:
        """Fetch a single pull request.

        Args:
            number: Repository-scoped pull request number

        Returns:
            The validated PullRequest record.

        Raises:
            PullRequestNotFoundError: If the pull request does not exist.
            FetchFailedError: If the lookup failed for any other reason
                (transport, authentication, malformed response).
        """
        pass

    @abstractmethod
    def list_open(self) -> list[int]:
        """List the numbers of open pull requests.

        The result is capped at the configured limit and may silently be
        incomplete for repositories with more open pull requests.

        Returns:
            Pull request numbers in the order the backend reports them.

        Raises:
            ListingFailedError: If the listing could not be obtained.
        """
        pass

    def close(self) -> None:
        """Release any resources held by the source."""

    def __enter__(self) -> "RequestSource":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

"""Custom exception hierarchy for stacked-pr.

Exception Hierarchy:
    StackedPrError (base)
    ├── ConfigurationError
    ├── InvalidPullRequestUrlError
    ├── StartNotFoundError
    └── RequestSourceError
        ├── FetchFailedError
        │   └── PullRequestNotFoundError
        ├── ListingFailedError
        └── AuthenticationError

Only InvalidPullRequestUrlError, StartNotFoundError, ConfigurationError and
AuthenticationError are meant to reach the user. FetchFailedError and
ListingFailedError are recovered by the resolver, which degrades the result
instead of aborting the run.

Example Usage:
    >>> from stacked_pr.exceptions import FetchFailedError
    >>> try:
    ...     pr = source.fetch(12)
    ... except FetchFailedError as e:
    ...     log.warning("pr_fetch_failed", number=e.number, error=e.reason)
"""


class StackedPrError(Exception):
    """Base exception for all stacked-pr errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(StackedPrError):
    """Configuration-related errors.

    Examples:
        - Configuration file not found
        - Invalid YAML syntax
        - Invalid configuration values
    """

    pass


class InvalidPullRequestUrlError(StackedPrError):
    """The pull request URL does not have the expected shape.

    Attributes:
        url: The URL that failed to parse
        hint: Suggestion for the expected format
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self.hint = "Expected a URL like https://github.com/<owner>/<repo>/pull/<number>"
        super().__init__(f"invalid pull request URL format: {url}")

    def __str__(self) -> str:
        return f"{self.message}\n\nHint: {self.hint}"


class StartNotFoundError(StackedPrError):
    """The pull request the user asked about could not be fetched.

    Attributes:
        number: Pull request number
        reason: Underlying failure description
    """

    def __init__(self, number: int, reason: str) -> None:
        self.number = number
        self.reason = reason
        super().__init__(f"failed to fetch starting PR #{number}: {reason}")


class RequestSourceError(StackedPrError):
    """Base class for failures of the pull request data source."""

    pass


class FetchFailedError(RequestSourceError):
    """A single pull request could not be fetched.

    Covers transport failures, authentication problems and malformed
    responses. The resolver excludes the number from the stack.

    Attributes:
        number: Pull request number that failed
        reason: Underlying failure description
    """

    def __init__(self, number: int, reason: str) -> None:
        self.number = number
        self.reason = reason
        super().__init__(f"Failed to fetch PR #{number}: {reason}")


class PullRequestNotFoundError(FetchFailedError):
    """The pull request does not exist in the repository."""

    pass


class ListingFailedError(RequestSourceError):
    """Enumerating open pull requests failed.

    Attributes:
        reason: Underlying failure description
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to list open PRs: {reason}")


class AuthenticationError(RequestSourceError):
    """No usable credentials for the data source.

    Attributes:
        suggestion: How to fix the problem
    """

    def __init__(self, message: str, suggestion: str | None = "Run: gh auth login") -> None:
        self.suggestion = suggestion
        full_message = message
        if suggestion:
            full_message = f"{message}\nSuggestion: {suggestion}"
        super().__init__(full_message)

"""Pull request source backed by the GitHub REST API."""

from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from stacked_pr.exceptions import FetchFailedError, ListingFailedError, PullRequestNotFoundError
from stacked_pr.models import PullRequest, PullRequestRef, PullRequestState
from stacked_pr.providers.base import RequestSource

log = structlog.get_logger(__name__)

MAX_PER_PAGE = 100


class GitHubRestSource(RequestSource):
    """GitHub implementation using direct REST API calls."""

    def __init__(
        self,
        ref: PullRequestRef,
        token: str,
        base_url: str = "https://api.github.com",
        list_limit: int = 100,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize GitHub REST source.

        Args:
            ref: Repository the pull requests belong to (number is ignored)
            token: Personal access token or ``gh auth token`` output
            base_url: API base URL (for GitHub Enterprise)
            list_limit: Maximum number of open pull requests to list
            timeout: Seconds allowed per request
            transport: Optional httpx transport (used by tests)
        """
        self.owner = ref.owner
        self.repo = ref.repo
        self.base_url = base_url.rstrip("/")
        self.list_limit = list_limit
        self._client = httpx.Client(
            base_url=self.base_url,
            headers={
                "Authorization": f"token {token.strip()}",
                "Accept": "application/vnd.github.v3+json",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def fetch(self, number: int) -> PullRequest:
        log.debug("github_get_pull", number=number, owner=self.owner, repo=self.repo)
        try:
            response = self._client.get(f"/repos/{self.owner}/{self.repo}/pulls/{number}")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            reason = f"GitHub API error {e.response.status_code}: {e.response.text}"
            if e.response.status_code == 404:
                raise PullRequestNotFoundError(number, reason) from e
            raise FetchFailedError(number, reason) from e
        except httpx.HTTPError as e:
            raise FetchFailedError(number, str(e)) from e
        except ValueError as e:
            raise FetchFailedError(number, f"malformed response: {e}") from e

        try:
            return self._parse_pull_request(data)
        except (ValidationError, AttributeError, KeyError, TypeError) as e:
            raise FetchFailedError(number, f"malformed response: {e}") from e

    def list_open(self) -> list[int]:
        numbers: list[int] = []
        per_page = min(self.list_limit, MAX_PER_PAGE)
        page = 1

        while len(numbers) < self.list_limit:
            log.debug("github_list_pulls", owner=self.owner, repo=self.repo, page=page)
            try:
                response = self._client.get(
                    f"/repos/{self.owner}/{self.repo}/pulls",
                    params={"state": "open", "per_page": per_page, "page": page},
                )
                response.raise_for_status()
                items = response.json()
                batch = [int(item["number"]) for item in items]
            except httpx.HTTPStatusError as e:
                raise ListingFailedError(f"GitHub API error {e.response.status_code}: {e.response.text}") from e
            except httpx.HTTPError as e:
                raise ListingFailedError(str(e)) from e
            except (KeyError, TypeError, ValueError) as e:
                raise ListingFailedError(f"malformed response: {e}") from e

            numbers.extend(batch)
            if len(batch) < per_page:
                break
            page += 1

        return numbers[: self.list_limit]

    @staticmethod
    def _parse_pull_request(data: dict[str, Any]) -> PullRequest:
        """Map a REST pull request payload onto the gh-style model."""
        if data.get("merged_at"):
            state = PullRequestState.MERGED.value
        else:
            state = str(data["state"]).upper()

        return PullRequest(
            number=data["number"],
            title=data["title"],
            body=data.get("body"),
            state=state,
            base_ref=data["base"]["ref"],
            head_ref=data["head"]["ref"],
        )

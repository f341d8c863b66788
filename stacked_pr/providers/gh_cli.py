"""Pull request source backed by the GitHub CLI (``gh``).

Every call runs ``gh`` as a blocking subprocess and decodes its ``--json``
output. Authentication is whatever ``gh auth login`` stored; by default
``GITHUB_TOKEN`` is blanked for the child process so a stale token in the
environment does not shadow that login.
"""

import json
import os
import subprocess

import structlog
from pydantic import ValidationError

from stacked_pr.exceptions import FetchFailedError, ListingFailedError, PullRequestNotFoundError
from stacked_pr.models import PullRequest, PullRequestRef
from stacked_pr.providers.base import RequestSource

log = structlog.get_logger(__name__)

PR_JSON_FIELDS = "number,title,body,state,baseRefName,headRefName"

# Substrings of gh's stderr that mean the pull request does not exist.
NOT_FOUND_MARKERS = ("could not resolve to a pullrequest", "no pull requests found")


class GhCommandError(Exception):
    """A gh invocation did not produce usable output."""

    def __init__(self, reason: str, stderr: str = "") -> None:
        self.reason = reason
        self.stderr = stderr
        super().__init__(reason)

    @property
    def not_found(self) -> bool:
        lowered = self.stderr.lower()
        return any(marker in lowered for marker in NOT_FOUND_MARKERS)


class GhCliSource(RequestSource):
    """Fetch pull requests with ``gh pr view`` and ``gh pr list``."""

    def __init__(
        self,
        ref: PullRequestRef,
        gh_path: str = "gh",
        list_limit: int = 100,
        timeout: float | None = None,
        clear_env_token: bool = True,
    ) -> None:
        """Initialize the source.

        Args:
            ref: Repository the pull requests belong to (number is ignored)
            gh_path: GitHub CLI executable
            list_limit: Maximum number of open pull requests to list
            timeout: Seconds allowed per gh invocation, None to wait forever
            clear_env_token: Blank GITHUB_TOKEN for the child process
        """
        self.gh_path = gh_path
        self.list_limit = list_limit
        self.timeout = timeout
        self.clear_env_token = clear_env_token
        # gh accepts HOST/OWNER/REPO for non-github.com hosts
        if ref.host == "github.com":
            self.repo_arg = ref.full_name
        else:
            self.repo_arg = f"{ref.host}/{ref.full_name}"

    def fetch(self, number: int) -> PullRequest:
        log.debug("gh_pr_view", number=number, repo=self.repo_arg)
        try:
            stdout = self._execute("pr", "view", str(number), "--repo", self.repo_arg, "--json", PR_JSON_FIELDS)
        except GhCommandError as e:
            if e.not_found:
                raise PullRequestNotFoundError(number, e.reason) from e
            raise FetchFailedError(number, e.reason) from e

        try:
            return PullRequest.model_validate_json(stdout)
        except ValidationError as e:
            raise FetchFailedError(number, f"malformed gh output: {e}") from e

    def list_open(self) -> list[int]:
        log.debug("gh_pr_list", repo=self.repo_arg, limit=self.list_limit)
        try:
            stdout = self._execute(
                "pr",
                "list",
                "--repo",
                self.repo_arg,
                "--state",
                "open",
                "--limit",
                str(self.list_limit),
                "--json",
                "number",
            )
        except GhCommandError as e:
            raise ListingFailedError(e.reason) from e

        try:
            items = json.loads(stdout)
            return [int(item["number"]) for item in items]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise ListingFailedError(f"malformed gh output: {e}") from e

    def _execute(self, *args: str) -> str:
        """Run gh with the given arguments and return its stdout.

        Raises:
            GhCommandError: If gh is missing, times out or exits non-zero.
        """
        env = os.environ.copy()
        if self.clear_env_token:
            env["GITHUB_TOKEN"] = ""

        try:
            result = subprocess.run(  # nosec B603
                [self.gh_path, *args],
                capture_output=True,
                text=True,
                env=env,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise GhCommandError(f"GitHub CLI not found: {self.gh_path}") from e
        except subprocess.TimeoutExpired as e:
            raise GhCommandError(f"gh timed out after {self.timeout}s") from e
        except OSError as e:
            raise GhCommandError(f"cannot run {self.gh_path}: {e}") from e

        if result.returncode != 0:
            stderr = result.stderr.strip()
            raise GhCommandError(stderr or f"gh exited with status {result.returncode}", stderr)

        return result.stdout

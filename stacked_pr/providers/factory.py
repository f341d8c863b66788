"""Factory for creating the configured pull request source."""

import subprocess

import structlog

from stacked_pr.config.settings import SourceType, StackSettings
from stacked_pr.exceptions import AuthenticationError
from stacked_pr.models import PullRequestRef
from stacked_pr.providers.base import RequestSource
from stacked_pr.providers.gh_cli import GhCliSource
from stacked_pr.providers.github_rest import GitHubRestSource

log = structlog.get_logger(__name__)


def resolve_token(settings: StackSettings) -> str:
    """Return the REST API token.

    Uses the configured token when present, otherwise asks the GitHub CLI
    for the token of its stored login (``gh auth token``).

    Raises:
        AuthenticationError: If no token is configured and gh cannot supply one.
    """
    if settings.token is not None and settings.token.get_secret_value().strip():
        return settings.token.get_secret_value().strip()

    try:
        result = subprocess.run(  # nosec B603
            [settings.gh_path, "auth", "token"],
            capture_output=True,
            text=True,
            timeout=settings.command_timeout,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise AuthenticationError(f"gh CLI not available for token lookup: {e}") from e

    if result.returncode != 0:
        raise AuthenticationError("gh CLI not authenticated")

    token = result.stdout.strip()
    if not token:
        raise AuthenticationError("empty token from gh CLI")

    return token


def create_request_source(settings: StackSettings, ref: PullRequestRef) -> RequestSource:
    """Create the pull request source described by the settings.

    Args:
        settings: Effective settings for this run
        ref: Repository (and start pull request) the run is about

    Returns:
        GhCliSource or GitHubRestSource.

    Raises:
        AuthenticationError: If the REST source is selected and no token is available.
    """
    if settings.source == SourceType.REST:
        log.debug("creating_github_rest_source", base_url=settings.api_url, repo=ref.full_name)
        return GitHubRestSource(
            ref,
            token=resolve_token(settings),
            base_url=settings.api_url,
            list_limit=settings.list_limit,
            timeout=settings.request_timeout,
        )

    log.debug("creating_gh_cli_source", gh_path=settings.gh_path, repo=ref.full_name)
    return GhCliSource(
        ref,
        gh_path=settings.gh_path,
        list_limit=settings.list_limit,
        timeout=settings.command_timeout,
        clear_env_token=settings.clear_env_token,
    )

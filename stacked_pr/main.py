"""CLI entry point for stacked-pr."""

import sys

import click
import structlog

from stacked_pr.config.settings import SourceType, StackSettings
from stacked_pr.exceptions import StackedPrError
from stacked_pr.output import format_stack
from stacked_pr.providers.factory import create_request_source
from stacked_pr.resolver import StackResolver
from stacked_pr.url import parse_pull_request_url
from stacked_pr.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


def load_settings(
    config_path: str | None,
    source: str | None,
    token: str | None,
    log_level: str | None,
    json_logs: bool | None,
) -> StackSettings:
    """Build the effective settings: environment, then config file, then options.

    An explicit token without an explicit source selects the REST source.

    Raises:
        ConfigurationError: If the file or any value is invalid.
    """
    settings = StackSettings.from_yaml(config_path) if config_path else StackSettings.load()
    if token and source is None:
        source = SourceType.REST.value
    return settings.with_overrides(source=source, token=token, log_level=log_level, json_logs=json_logs)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("pr_url")
@click.option(
    "--source",
    type=click.Choice([s.value for s in SourceType]),
    default=None,
    help="Where to read pull requests from (default: gh)",
)
@click.option("--token", "-t", default=None, help="GitHub token for the REST source (implies --source rest)")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a YAML configuration file",
)
@click.option("--log-level", default=None, help="Logging level (default: WARNING)")
@click.option("--json-logs/--no-json-logs", default=None, help="Render logs as JSON")
def cli(
    pr_url: str,
    source: str | None,
    token: str | None,
    config_path: str | None,
    log_level: str | None,
    json_logs: bool | None,
) -> None:
    """Show the stack of GitHub pull requests that PR_URL belongs to.

    Requires GitHub CLI authentication (gh auth login) unless a token is
    given.

    Examples:
        stacked-pr https://github.com/owner/repo/pull/123
    """
    configure_logging()
    try:
        settings = load_settings(config_path, source, token, log_level, json_logs)
        configure_logging(settings.log_level, settings.json_logs)

        ref = parse_pull_request_url(pr_url)
        click.echo(f"Analyzing {ref.full_name} #{ref.number}...")

        with create_request_source(settings, ref) as request_source:
            resolver = StackResolver(request_source, trunk_branch=settings.trunk_branch)
            stack = resolver.resolve(ref.number)
    except StackedPrError as e:
        click.echo(f"Error: {e}", err=True)
        log.debug("stacked_pr_error", exc_info=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        log.error("stacked_pr_unexpected", exc_info=True)
        sys.exit(1)

    click.echo(format_stack(stack, ref.number), nl=False)


if __name__ == "__main__":
    cli()

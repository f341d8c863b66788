"""Configuration for stacked-pr.

Settings are read from ``STACKED_PR_*`` environment variables and, optionally,
a YAML file. Command-line options override both.

Example:
    >>> from stacked_pr.config import StackSettings
    >>> settings = StackSettings.from_yaml("stacked-pr.yaml")
    >>> settings.trunk_branch
    'main'
"""

from stacked_pr.config.settings import SourceType, StackSettings

__all__ = ["SourceType", "StackSettings"]

"""stacked-pr: show the stack of GitHub pull requests a pull request belongs to."""

__version__ = "0.1.0"

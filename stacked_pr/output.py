"""Text rendering of a resolved stack.

Two blocks are produced: a detailed one for reading, and a compact one with
numbers only that can be pasted into a pull request description. The start
pull request is marked with a trailing `` <-`` in both.
"""

from stacked_pr.models import PullRequest

CURRENT_MARKER = " <-"
SEPARATOR = "--------"


def _marker(pr: PullRequest, current: int) -> str:
    return CURRENT_MARKER if pr.number == current else ""


def format_stack(stack: list[PullRequest], current: int) -> str:
    """Render both stack blocks.

    Args:
        stack: Pull requests in stack order
        current: Number of the pull request to mark

    Returns:
        Text ending in a newline.
    """
    lines = ["", "stack:"]
    lines.extend(f"- #{pr.number} ({pr.state}): {pr.title}{_marker(pr, current)}" for pr in stack)
    lines.append(SEPARATOR)
    lines.extend(["", "stack:"])
    lines.extend(f"- #{pr.number}{_marker(pr, current)}" for pr in stack)
    return "\n".join(lines) + "\n"

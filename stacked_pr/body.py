"""Pull request description parsing.

Two kinds of hints are read from a pull request body:

Stack section:
    An explicit, ordered declaration of the whole stack::

        Stack:
        - #10 Add models
        - #11 Add parser <-
        - #12 Wire CLI

Dependency phrases:
    Free-text references to another pull request, matched case-insensitively:
    "depends on #N", "based on #N", "stacked on #N", "build(s) on #N",
    "require(s) #N" and "follow(s) #N".

Example:
    >>> from stacked_pr.body import extract_dependencies, extract_stack_info
    >>> extract_stack_info("Stack:\\n- #2 foo\\n- #5 bar\\n")
    [2, 5]
    >>> extract_dependencies("Depends on #3 and based on #7")
    [3, 7]
"""

import re

# Header line followed by zero or more "- #N ..." list lines.
STACK_SECTION_PATTERN = re.compile(r"stack:\s*\n((?:\s*-\s*#\d+[^\n]*\n?)*)", re.IGNORECASE | re.ASCII)

STACK_ENTRY_PATTERN = re.compile(r"#(\d+)", re.ASCII)

DEPENDENCY_PATTERN = re.compile(
    r"(?:depends\s+on|based\s+on|stacked\s+on|builds?\s+on|requires?|follows?)\s+#(\d+)",
    re.IGNORECASE | re.ASCII,
)

MIN_STACK_ENTRIES = 2


def extract_stack_info(body: str) -> list[int] | None:
    """Extract the declared stack from a pull request body.

    Only the first "stack:" section is considered. The first ``#N`` on each
    list line is taken; repeated numbers keep their first position.

    Args:
        body: Pull request description

    Returns:
        Ordered pull request numbers, or None when fewer than two distinct
        numbers are declared.
    """
    match = STACK_SECTION_PATTERN.search(body)
    if not match:
        return None

    numbers: list[int] = []
    for line in match.group(1).split("\n"):
        entry = STACK_ENTRY_PATTERN.search(line)
        if entry:
            number = int(entry.group(1))
            if number not in numbers:
                numbers.append(number)

    if len(numbers) < MIN_STACK_ENTRIES:
        return None
    return numbers


def extract_dependencies(body: str) -> list[int]:
    """Extract pull request numbers referenced by dependency phrases.

    Args:
        body: Pull request description

    Returns:
        Referenced numbers in left-to-right order, repeats included.
    """
    return [int(m.group(1)) for m in DEPENDENCY_PATTERN.finditer(body)]

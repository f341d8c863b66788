"""Stack discovery.

Given one pull request, StackResolver works out which other open pull
requests belong to the same stack. There is no single source of truth, so a
cascade of strategies is tried in order and the first one that finds more
than the start pull request wins:

    1. Declared stack: the start body has a "stack:" section listing two or
       more pull requests. The list is fetched in order and then extended with
       pull requests that chain to any member by branch name.
    2. Referencing stack: another open pull request declares a "stack:"
       section that includes the start. That declared list is returned as is.
    3. Branch chain: pull requests whose base branch is another one's head
       branch (in either direction) are followed depth-first. Requests based
       on the trunk branch sort first.
    4. Dependency phrases: "depends on #N" style references are followed
       depth-first in both directions. Requests with fewer phrases sort first.

Every record fetched during a run is cached, failed fetches included, so the
data source is asked about each number at most once. Only the start pull
request has to be fetchable; any other failure just removes that number from
the result.

Example:
    >>> from stacked_pr.resolver import StackResolver
    >>> resolver = StackResolver(source)
    >>> [pr.number for pr in resolver.resolve(10)]
    [10, 11, 12]
"""

from collections.abc import Callable

import structlog

from stacked_pr.body import extract_dependencies, extract_stack_info
from stacked_pr.exceptions import FetchFailedError, ListingFailedError, StartNotFoundError
from stacked_pr.models import PullRequest
from stacked_pr.providers.base import RequestSource

log = structlog.get_logger(__name__)


def is_branch_related(a: PullRequest, b: PullRequest) -> bool:
    """Return True if one pull request is stacked directly on the other."""
    return a.base_ref == b.head_ref or b.base_ref == a.head_ref


class StackResolver:
    """Reconstruct the stack a pull request belongs to.

    A resolver instance owns its cache and is meant for a single run against
    a single repository.

    Attributes:
        source: Where pull request records come from
        trunk_branch: Base branch name whose pull requests sort first when
            the stack is inferred from branch names
    """

    def __init__(self, source: RequestSource, trunk_branch: str = "main") -> None:
        self.source = source
        self.trunk_branch = trunk_branch
        self._cache: dict[int, PullRequest] = {}
        self._failures: dict[int, FetchFailedError] = {}
        self._open_numbers: list[int] | None = None

    def resolve(self, start: int) -> list[PullRequest]:
        """Return the ordered stack containing ``start``.

        Args:
            start: Number of the pull request the user asked about

        Returns:
            Pull requests in stack order. A pull request that is not part of
            any discoverable stack yields a single-element list.

        Raises:
            StartNotFoundError: If the start pull request cannot be fetched.
        """
        try:
            start_pr = self.fetch(start)
        except FetchFailedError as e:
            raise StartNotFoundError(start, e.reason) from e

        declared = extract_stack_info(start_pr.body)
        if declared:
            log.debug("stack_strategy", strategy="declared", number=start, declared=declared)
            return self._expand_by_branch(self._fetch_all(declared) or [start_pr])

        stack = self._find_referencing_stack(start)
        if stack is not None:
            return stack

        stack = self._depth_first(start, self._related_by_branch)
        if len(stack) > 1:
            log.debug("stack_strategy", strategy="branch_chain", number=start, size=len(stack))
            return sorted(stack, key=lambda pr: pr.base_ref != self.trunk_branch)

        stack = self._depth_first(start, self._dependency_neighbours)
        log.debug("stack_strategy", strategy="dependency_phrases", number=start, size=len(stack))
        return sorted(stack, key=lambda pr: len(extract_dependencies(pr.body)))

    def fetch(self, number: int) -> PullRequest:
        """Fetch a pull request through the run cache.

        Raises:
            FetchFailedError: If the source could not supply the record, now
                or on an earlier attempt during this run.
        """
        if number in self._cache:
            return self._cache[number]
        if number in self._failures:
            raise self._failures[number]

        try:
            pr = self.source.fetch(number)
        except FetchFailedError as e:
            self._failures[number] = e
            raise

        self._cache[number] = pr
        return pr

    def open_numbers(self) -> list[int]:
        """Return the open pull request numbers, listing them once per run.

        A failed listing is logged and treated as an empty repository.
        """
        if self._open_numbers is None:
            try:
                self._open_numbers = self.source.list_open()
            except ListingFailedError as e:
                log.warning("open_pr_listing_failed", error=e.reason)
                self._open_numbers = []
        return self._open_numbers

    def _try_fetch(self, number: int) -> PullRequest | None:
        already_failed = number in self._failures
        try:
            return self.fetch(number)
        except FetchFailedError as e:
            if not already_failed:
                log.warning("pr_fetch_failed", number=number, error=e.reason)
            return None

    def _fetch_all(self, numbers: list[int]) -> list[PullRequest]:
        return [pr for pr in map(self._try_fetch, numbers) if pr is not None]

    def _candidates(self, exclude: int) -> list[PullRequest]:
        """Fetch every open pull request other than ``exclude``."""
        numbers = [number for number in self.open_numbers() if number != exclude]
        return [pr for pr in map(self._try_fetch, numbers) if pr is not None]

    def _related_by_branch(self, target: PullRequest) -> list[int]:
        return [pr.number for pr in self._candidates(target.number) if is_branch_related(pr, target)]

    def _dependency_neighbours(self, target: PullRequest) -> list[int]:
        """Numbers ``target`` depends on, followed by open PRs depending on it."""
        dependents = [
            pr.number for pr in self._candidates(target.number) if target.number in extract_dependencies(pr.body)
        ]
        return extract_dependencies(target.body) + dependents

    def _expand_by_branch(self, stack: list[PullRequest]) -> list[PullRequest]:
        """Append pull requests branch-chained to any member until none are new."""
        seen = {pr.number for pr in stack}
        index = 0
        while index < len(stack):
            for number in self._related_by_branch(stack[index]):
                if number in seen:
                    continue
                seen.add(number)
                pr = self._try_fetch(number)
                if pr is not None:
                    stack.append(pr)
            index += 1
        return stack

    def _find_referencing_stack(self, start: int) -> list[PullRequest] | None:
        """Return the declared stack of another open PR that lists ``start``."""
        for number in self.open_numbers():
            if number == start:
                continue
            pr = self._try_fetch(number)
            if pr is None:
                continue
            declared = extract_stack_info(pr.body)
            if declared and start in declared:
                log.debug("stack_strategy", strategy="referencing", number=start, declared_by=number)
                return self._fetch_all(declared)
        return None

    def _depth_first(self, start: int, neighbours: Callable[[PullRequest], list[int]]) -> list[PullRequest]:
        """Collect pull requests reachable from ``start`` in depth-first pre-order.

        Uses an explicit work-list; a number is visited at most once and an
        unfetchable number contributes neither itself nor its neighbours.
        """
        visited: set[int] = set()
        collected: list[PullRequest] = []
        pending = [start]

        while pending:
            number = pending.pop()
            if number in visited:
                continue
            visited.add(number)

            pr = self._try_fetch(number)
            if pr is None:
                continue
            collected.append(pr)
            pending.extend(reversed(neighbours(pr)))

        return collected

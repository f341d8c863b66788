"""Pytest configuration and shared fixtures."""

from collections.abc import Callable

import pytest
import structlog

from stacked_pr.exceptions import FetchFailedError, ListingFailedError, PullRequestNotFoundError
from stacked_pr.models import PullRequest
from stacked_pr.providers.base import RequestSource


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo logging configuration done by CLI tests."""
    yield
    structlog.reset_defaults()


class FakeRequestSource(RequestSource):
    """In-memory RequestSource that records every call."""

    def __init__(
        self,
        pulls: list[PullRequest] | None = None,
        open_numbers: list[int] | None = None,
        failing: set[int] | None = None,
        listing_fails: bool = False,
    ) -> None:
        self.pulls = {pr.number: pr for pr in pulls or []}
        self.open_numbers = open_numbers if open_numbers is not None else sorted(self.pulls)
        self.failing = failing or set()
        self.listing_fails = listing_fails
        self.fetch_calls: list[int] = []
        self.list_calls = 0
        self.closed = False

    def fetch(self, number: int) -> PullRequest:
        self.fetch_calls.append(number)
        if number in self.failing:
            raise FetchFailedError(number, "boom")
        if number not in self.pulls:
            raise PullRequestNotFoundError(number, "not found")
        return self.pulls[number]

    def list_open(self) -> list[int]:
        self.list_calls += 1
        if self.listing_fails:
            raise ListingFailedError("listing unavailable")
        return list(self.open_numbers)

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_pr() -> Callable[..., PullRequest]:
    """Factory for PullRequest records with sensible defaults."""

    def _make(
        number: int,
        body: str = "",
        base: str = "main",
        head: str | None = None,
        title: str | None = None,
        state: str = "OPEN",
    ) -> PullRequest:
        return PullRequest(
            number=number,
            title=title or f"PR {number}",
            body=body,
            state=state,
            base_ref=base,
            head_ref=head or f"branch-{number}",
        )

    return _make


@pytest.fixture
def fake_source_cls() -> type[FakeRequestSource]:
    """The in-memory source class, for tests that build their own."""
    return FakeRequestSource

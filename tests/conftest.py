"""
tests/conftest.py

Minimal, safe env defaults and shared fixtures: a controllable clock and a
repository/reader pair over the in-memory content store.
"""

import os
from datetime import datetime, timedelta, timezone

import pytest

# Ensure an isolated test environment (no network, no real repository)
os.environ.setdefault("GITHUB_OWNER", "acme")
os.environ.setdefault("GITHUB_REPO", "snippets-test")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from gitsnip.infrastructure.memory.content_store import InMemoryContentStore  # noqa: E402
from gitsnip.infrastructure.repositories.revision_repository import GitRevisionReader  # noqa: E402
from gitsnip.infrastructure.repositories.snippet_repository import GitSnippetRepository  # noqa: E402


class FakeClock:
    """Returns a fixed instant; ``advance`` moves it forward."""

    def __init__(self, start: datetime = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float = 60) -> datetime:
        self.current = self.current + timedelta(seconds=seconds)
        return self.current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return InMemoryContentStore(clock=clock)


@pytest.fixture
def repository(store, clock):
    return GitSnippetRepository(lambda credential=None: store, "snippets", now=clock)


@pytest.fixture
def reader(store):
    return GitRevisionReader(lambda credential=None: store, "snippets", max_revisions=50)

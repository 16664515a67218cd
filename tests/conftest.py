"""
Shared fixtures for advisor tests.

Environment overrides are applied before the application is imported
so that no real OpenRouter key or rate limit leaks into the tests.
"""

import os

os.environ["OPENROUTER_API_KEY"] = ""
os.environ["RATE_LIMIT_ENABLED"] = "false"

import pytest  # noqa: E402

from kalshorb.domain.advisor.errors import UpstreamCompletionError  # noqa: E402
from tests.fakes import (  # noqa: E402
    InMemoryMessageStore,
    InMemorySessionStore,
    StubCompletion,
)


@pytest.fixture
def message_store() -> InMemoryMessageStore:
    return InMemoryMessageStore()


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def disabled_completion() -> StubCompletion:
    return StubCompletion(enabled=False)


@pytest.fixture
def failing_completion() -> StubCompletion:
    return StubCompletion(error=UpstreamCompletionError("HTTP 502", status_code=502))

"""E2E test fixtures and configuration."""

from collections.abc import Iterator

import pytest

from search_sync.utils.logger import configure_logging


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """Point logging back at the real stderr after each CLI run.

    The CLI configures logging against the stream CliRunner substitutes
    for stderr, which is closed once the invocation ends.
    """
    yield
    configure_logging("INFO")

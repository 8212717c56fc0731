"""Test setup for notion2view."""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config: pytest.Config) -> None:
    """Register the ``integration`` marker for tests that call the live store.

    Select them with ``pytest -m integration``; skip them with
    ``pytest -m "not integration"``.
    """
    config.addinivalue_line("markers", "integration: calls the live document store over the network")


@pytest.fixture
def store_client() -> MagicMock:
    """A stand-in for NotionClient whose request methods are AsyncMocks."""
    client = MagicMock()
    client.retrieve_page = AsyncMock()
    client.retrieve_database = AsyncMock(return_value={"properties": {}})
    client.list_block_children = AsyncMock()
    client.query_database = AsyncMock()
    return client

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from retrywire.core.global_config import GlobalConfigStore, default_store

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def isolated_store() -> GlobalConfigStore:
    """Create a process-wide configuration store private to one test."""
    return GlobalConfigStore()


@pytest.fixture(autouse=True)
def _reset_default_store() -> Generator[None, None, None]:
    """Make sure no test leaks process-wide configuration."""
    default_store.reset()
    yield
    default_store.reset()

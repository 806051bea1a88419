"""Shared test fixtures."""

import pytest

from src.parsers.helius import client as helius_client_module


@pytest.fixture
def no_retry_delay(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make Helius client retries immediate."""
    monkeypatch.setattr(helius_client_module, "RETRY_DELAYS", [0.0, 0.0])

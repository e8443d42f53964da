"""Shared fixtures for integration tests.

These tests wire the real adapters together through the composition root
with mocked HTTP via respx.
"""

from __future__ import annotations

import os

import pytest
import respx


@pytest.fixture()
def respx_mock() -> respx.MockRouter:
    """Explicit respx mock router for request interception."""
    with respx.mock(assert_all_called=False) as router:
        yield router


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep VIDFAST_* variables from the host out of config tests."""
    for key in list(os.environ):
        if key.startswith("VIDFAST_"):
            monkeypatch.delenv(key, raising=False)

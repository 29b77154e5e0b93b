"""
Pytest configuration for the toolturn test suite.

Async tests are marked ``@pytest.mark.anyio`` and run on asyncio only.
"""

from __future__ import annotations

import os

import pytest


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Keep a developer's TOOLTURN_* environment and .env out of the tests."""
    for key in list(os.environ):
        if key.startswith("TOOLTURN_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)

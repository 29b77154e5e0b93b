"""Shared fixtures for the built-in tool tests."""

from __future__ import annotations

from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest


def _mock_response(json_data: Any, status_code: int = 200) -> MagicMock:
    """Build a mock httpx Response."""
    resp = MagicMock(spec=httpx.Response)
    resp.status_code = status_code
    resp.json.return_value = json_data
    if status_code >= 400:
        resp.raise_for_status.side_effect = httpx.HTTPStatusError(
            f"HTTP {status_code}", request=MagicMock(), response=resp
        )
    else:
        resp.raise_for_status = MagicMock()
    return resp


@pytest.fixture
def mock_response() -> Callable[..., MagicMock]:
    return _mock_response


@pytest.fixture
def make_client_mock() -> Callable[..., tuple[MagicMock, AsyncMock]]:
    """Return a factory for (AsyncClient class mock, client instance mock).

    The instance's ``get`` returns the given responses in sequence.
    """

    def _factory(*responses: MagicMock) -> tuple[MagicMock, AsyncMock]:
        client_instance = AsyncMock()
        client_instance.get = AsyncMock(side_effect=list(responses))

        ctx_manager = MagicMock()
        ctx_manager.__aenter__ = AsyncMock(return_value=client_instance)
        ctx_manager.__aexit__ = AsyncMock(return_value=False)

        return MagicMock(return_value=ctx_manager), client_instance

    return _factory

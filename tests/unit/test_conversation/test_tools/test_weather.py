"""Unit tests for toolturn.conversation.tools.weather.WeatherTool."""

from __future__ import annotations

from typing import Any
from unittest.mock import patch

import httpx
import pytest

from toolturn.conversation.errors import HandlerError, ToolArgumentsError
from toolturn.conversation.messages import ToolInput
from toolturn.conversation.tools.weather import WeatherTool, describe_weather_code

_PATCH_TARGET = "toolturn.conversation.tools.weather.httpx.AsyncClient"


def _geo_response() -> dict[str, Any]:
    return {
        "results": [
            {
                "name": "Kansas City",
                "admin1": "Missouri",
                "country": "United States",
                "latitude": 39.0997,
                "longitude": -94.5786,
            }
        ]
    }


def _weather_response(temp_c: float = 20.0, code: int = 2) -> dict[str, Any]:
    return {
        "current": {
            "temperature_2m": temp_c,
            "relative_humidity_2m": 55,
            "weather_code": code,
            "wind_speed_10m": 10.0,
        }
    }


def _input(**tool_args: Any) -> ToolInput:
    return ToolInput(user_message="weather?", tool_args=tool_args)


class TestToolDefinition:
    def test_name(self) -> None:
        assert WeatherTool.TOOL_DEFINITION.name == "get_weather"

    def test_parameters_have_location(self) -> None:
        params = WeatherTool.TOOL_DEFINITION.parameters
        assert "location" in params["properties"]
        assert params["required"] == ["location"]


class TestDescribeWeatherCode:
    def test_known_codes(self) -> None:
        assert describe_weather_code(0) == "Clear sky"
        assert describe_weather_code(63) == "Rain"
        assert describe_weather_code(99) == "Thunderstorm"

    def test_unknown_code(self) -> None:
        assert describe_weather_code(42) == "Unknown conditions (code 42)"


@pytest.mark.anyio
async def test_execute_returns_conditions(mock_response, make_client_mock) -> None:
    client_cls, client = make_client_mock(
        mock_response(_geo_response()), mock_response(_weather_response())
    )

    with patch(_PATCH_TARGET, client_cls):
        result = await WeatherTool().execute(_input(location="Kansas City"))

    assert result == {
        "location": "Kansas City, Missouri, United States",
        "temperature_c": 20.0,
        "temperature_f": 68.0,
        "conditions": "Mainly clear, partly cloudy, or overcast",
        "humidity_percent": 55,
        "wind_speed_kmh": 10.0,
        "wind_speed_mph": 6.2,
    }
    forecast_params = client.get.call_args_list[1].kwargs["params"]
    assert forecast_params["latitude"] == 39.0997
    assert forecast_params["longitude"] == -94.5786


@pytest.mark.anyio
async def test_execute_unknown_location_raises(mock_response, make_client_mock) -> None:
    client_cls, client = make_client_mock(mock_response({"results": []}))

    with patch(_PATCH_TARGET, client_cls):
        with pytest.raises(HandlerError, match="Location not found"):
            await WeatherTool().execute(_input(location="Atlantis"))

    assert client.get.call_count == 1


@pytest.mark.anyio
async def test_execute_http_error_propagates(mock_response, make_client_mock) -> None:
    client_cls, _ = make_client_mock(mock_response({}, status_code=500))

    with patch(_PATCH_TARGET, client_cls):
        with pytest.raises(httpx.HTTPStatusError):
            await WeatherTool().execute(_input(location="Paris"))


@pytest.mark.anyio
async def test_execute_missing_location_raises() -> None:
    with pytest.raises(ToolArgumentsError):
        await WeatherTool().execute(_input())

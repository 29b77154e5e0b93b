"""
Weather lookup tool using Open-Meteo (https://open-meteo.com/, no API key).

A lookup is two requests: the geocoding API turns the location string into
coordinates, then the forecast API returns current conditions there.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from toolturn.conversation.errors import HandlerError
from toolturn.conversation.messages import ToolDefinition, ToolInput
from toolturn.conversation.tools.base import make_definition, validate_args

logger = logging.getLogger(__name__)

_GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
_FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

# WMO weather interpretation codes, grouped the way Open-Meteo documents them.
_WMO_CODE_GROUPS: list[tuple[tuple[int, ...], str]] = [
    ((0,), "Clear sky"),
    ((1, 2, 3), "Mainly clear, partly cloudy, or overcast"),
    ((45, 48), "Fog"),
    ((51, 53, 55), "Drizzle"),
    ((56, 57), "Freezing drizzle"),
    ((61, 63, 65), "Rain"),
    ((66, 67), "Freezing rain"),
    ((71, 73, 75, 77), "Snow"),
    ((80, 81, 82), "Rain showers"),
    ((85, 86), "Snow showers"),
    ((95, 96, 99), "Thunderstorm"),
]


def describe_weather_code(code: int) -> str:
    """Return a human-readable description for a WMO weather *code*."""
    for codes, description in _WMO_CODE_GROUPS:
        if code in codes:
            return description
    return f"Unknown conditions (code {code})"


class WeatherArgs(BaseModel):
    location: str = Field(
        ...,
        min_length=1,
        description=(
            "City name, 'City, State', or 'City, Country'. "
            "Examples: 'London', 'Paris, France', 'Austin, Texas'."
        ),
    )


class WeatherTool:
    """Current weather for a named place.

    Attributes:
        TOOL_DEFINITION: Ready-to-use ``ToolDefinition`` for the registry.
        timeout: HTTP request timeout in seconds.
    """

    TOOL_DEFINITION: ToolDefinition = make_definition(
        name="get_weather",
        description=(
            "Use this tool to get the current weather for a location. Returns "
            "temperature in Celsius and Fahrenheit, conditions, humidity, and "
            "wind speed."
        ),
        args_model=WeatherArgs,
    )

    def __init__(self, timeout: float = 10.0) -> None:
        self.timeout = timeout

    async def execute(self, tool_input: ToolInput) -> dict[str, Any]:
        """Look up current conditions for the requested location.

        Raises:
            ToolArgumentsError: If ``location`` is missing or empty.
            HandlerError: If the geocoder finds no match.
            httpx.HTTPStatusError: If either API call returns a non-2xx status.
        """
        args = validate_args(self.TOOL_DEFINITION.name, WeatherArgs, tool_input.tool_args)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            place = await self._geocode(client, args.location)
            current = await self._current_conditions(
                client, place["latitude"], place["longitude"]
            )

        temp_c = current["temperature_2m"]
        wind_kmh = current["wind_speed_10m"]
        return {
            "location": _place_name(place),
            "temperature_c": temp_c,
            "temperature_f": round(temp_c * 9 / 5 + 32, 1),
            "conditions": describe_weather_code(int(current["weather_code"])),
            "humidity_percent": int(current["relative_humidity_2m"]),
            "wind_speed_kmh": wind_kmh,
            "wind_speed_mph": round(wind_kmh * 0.621371, 1),
        }

    def as_dispatcher_entry(self):
        """Return the async handler to register with ``ToolRegistry``."""
        return self.execute

    async def _geocode(self, client: httpx.AsyncClient, location: str) -> dict[str, Any]:
        response = await client.get(
            _GEOCODING_URL,
            params={"name": location, "count": 1, "language": "en", "format": "json"},
        )
        response.raise_for_status()
        results = response.json().get("results")
        if not results:
            raise HandlerError(
                f"Location not found: {location!r}", self.TOOL_DEFINITION.name
            )
        logger.debug("Geocoded %r -> %s", location, _place_name(results[0]))
        return results[0]

    async def _current_conditions(
        self, client: httpx.AsyncClient, lat: float, lon: float
    ) -> dict[str, Any]:
        response = await client.get(
            _FORECAST_URL,
            params={
                "latitude": lat,
                "longitude": lon,
                "current": "temperature_2m,relative_humidity_2m,weather_code,wind_speed_10m",
            },
        )
        response.raise_for_status()
        return response.json()["current"]


def _place_name(place: dict[str, Any]) -> str:
    parts = [place.get("name"), place.get("admin1"), place.get("country")]
    return ", ".join(p for p in parts if p)

"""Venue conditions: live weather lookup with generated fallback."""

from __future__ import annotations

import logging
import math
import random
from typing import Any, Callable, Dict, Mapping, Sequence, Tuple
from urllib.parse import quote

from .errors import DecodeError, SquadGenerationPartialFailure, TransportError
from .models import Conditions, DewFactor, PitchType
from .sources.common import AsyncHTTPClient

logger = logging.getLogger(__name__)

DEFAULT_WEATHER_ENDPOINTS: Tuple[str, ...] = (
    "https://api.openweathermap.org/data/2.5/weather?q={city}&units=metric",
    "https://wttr.in/{city}?format=j1",
    "https://api.weatherapi.com/v1/current.json?q={city}",
)

# First matching substring wins.
VENUE_PITCH: Tuple[Tuple[str, PitchType], ...] = (
    ("wankhede", PitchType.BATTING),
    ("eden", PitchType.SPIN),
    ("lords", PitchType.BALANCED),
    ("mcg", PitchType.BOWLING),
    ("oval", PitchType.BOWLING),
    ("chinnaswamy", PitchType.BATTING),
    ("mumbai", PitchType.BATTING),
    ("kolkata", PitchType.SPIN),
    ("delhi", PitchType.BATTING),
    ("chennai", PitchType.SPIN),
    ("bangalore", PitchType.BATTING),
)

RANDOM_PITCHES: Tuple[PitchType, ...] = (
    PitchType.BATTING,
    PitchType.BOWLING,
    PitchType.BALANCED,
    PitchType.SPIN,
)

GENERATED_WEATHER: Tuple[str, ...] = ("Clear", "Cloudy", "Overcast", "Partly Cloudy")


def city_from_venue(venue: str) -> str:
    """Last comma-separated segment of ``venue``, or the first if that is blank."""

    parts = venue.split(",")
    return parts[-1].strip() or parts[0].strip()


def infer_pitch(venue: str, rng: random.Random) -> PitchType:
    lowered = venue.lower()
    for marker, pitch in VENUE_PITCH:
        if marker in lowered:
            return pitch
    return rng.choice(RANDOM_PITCHES)


def _round(value: Any) -> int:
    return int(math.floor(float(value) + 0.5))


def _as_int(value: Any, default: int) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _openweathermap(body: Mapping[str, Any]) -> Dict[str, Any]:
    weather = body.get("weather") or [{}]
    wind = body.get("wind") or {}
    main = body["main"]
    return {
        "weather": weather[0].get("main") or "Clear",
        "temperature": _round(main["temp"]),
        "humidity": _as_int(main.get("humidity"), 60),
        "wind_speed": _round(float(wind["speed"]) * 3.6) if wind.get("speed") is not None else 10,
    }


def _wttr(body: Mapping[str, Any]) -> Dict[str, Any]:
    current = body["current_condition"][0]
    descriptions = current.get("weatherDesc") or [{}]
    return {
        "weather": descriptions[0].get("value") or "Clear",
        "temperature": _as_int(current.get("temp_C"), 25),
        "humidity": _as_int(current.get("humidity"), 60),
        "wind_speed": _as_int(current.get("windspeedKmph"), 10),
    }


def _weatherapi(body: Mapping[str, Any]) -> Dict[str, Any]:
    current = body["current"]
    condition = current.get("condition") or {}
    return {
        "weather": condition.get("text") or "Clear",
        "temperature": _round(current["temp_c"]),
        "humidity": _as_int(current.get("humidity"), 60),
        "wind_speed": _round(current["wind_kph"]),
    }


WEATHER_SHAPES: Sequence[Tuple[str, Callable[[Mapping[str, Any]], Dict[str, Any]]]] = (
    ("main", _openweathermap),
    ("current_condition", _wttr),
    ("current", _weatherapi),
)


def parse_weather(body: Any) -> Dict[str, Any] | None:
    """Normalise the first recognised provider shape, or return ``None``."""

    if not isinstance(body, Mapping):
        return None
    for marker, parser in WEATHER_SHAPES:
        if body.get(marker):
            return parser(body)
    return None


def generated_conditions(venue: str, rng: random.Random) -> Conditions:
    return Conditions(
        pitch_type=infer_pitch(venue, rng),
        weather=rng.choice(GENERATED_WEATHER),
        temperature=rng.randrange(20, 35),
        humidity=rng.randrange(40, 80),
        wind_speed=rng.randrange(5, 25),
        dew_factor=DewFactor.HIGH if rng.random() > 0.5 else DewFactor.LOW,
        source="generated",
    )


class WeatherLookup:
    """Try each weather provider in order and fall back to generated values."""

    def __init__(
        self,
        client: AsyncHTTPClient | None = None,
        *,
        endpoints: Sequence[str] = DEFAULT_WEATHER_ENDPOINTS,
        rng: random.Random | None = None,
        enabled: bool = True,
    ) -> None:
        self._client = client
        self.endpoints = tuple(endpoints)
        self.rng = rng or random.Random()
        self.enabled = enabled and client is not None

    async def conditions(self, venue: str) -> Conditions:
        live = await self.fetch(venue) if self.enabled else None
        if live is None:
            return generated_conditions(venue, self.rng)
        return Conditions(
            pitch_type=infer_pitch(venue, self.rng),
            dew_factor=DewFactor.HIGH if self.rng.random() > 0.5 else DewFactor.LOW,
            source="live",
            **live,
        )

    async def fetch(self, venue: str) -> Dict[str, Any] | None:
        assert self._client is not None
        city = quote(city_from_venue(venue))
        for template in self.endpoints:
            url = template.format(city=city)
            try:
                parsed = parse_weather(await self._client.get_json(url))
            except (TransportError, DecodeError) as err:
                logger.debug("%s", SquadGenerationPartialFailure(venue, str(err)))
                continue
            except (AttributeError, KeyError, IndexError, TypeError, ValueError) as err:
                logger.debug(
                    "%s", SquadGenerationPartialFailure(venue, f"unreadable weather body from {url}: {err}")
                )
                continue
            if parsed is not None:
                logger.debug("Weather for %s resolved from %s", venue, url)
                return parsed
        logger.info("Weather lookup failed for %s; generating conditions", venue)
        return None


__all__ = [
    "DEFAULT_WEATHER_ENDPOINTS",
    "VENUE_PITCH",
    "WeatherLookup",
    "city_from_venue",
    "generated_conditions",
    "infer_pitch",
    "parse_weather",
]

"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from weather_screen.app import app
from weather_screen.models.weather import (
    Coordinate,
    CurrentConditions,
    ForecastSeries,
    OpenWeatherCurrentResponse,
    OpenWeatherForecastResponse,
    WeatherBundle,
)

# 2024-01-01 is a Monday
FORECAST_START = datetime(2024, 1, 1, 12, 0, 0)


def make_current_payload(
    category="Rain",
    description="light rain",
    temp=18.4,
    feels_like=17.9,
    name="Philadelphia",
    country="US",
):
    """Build a current-conditions body shaped like OpenWeatherMap's."""
    return {
        "coord": {"lon": -75.0, "lat": 40.0},
        "weather": [{"id": 500, "main": category, "description": description, "icon": "10d"}],
        "main": {
            "temp": temp,
            "feels_like": feels_like,
            "temp_min": temp - 1,
            "temp_max": temp + 1,
            "pressure": 1012,
            "humidity": 81,
        },
        "wind": {"speed": 3.6, "deg": 200},
        "sys": {"country": country},
        "name": name,
        "cod": 200,
    }


def make_forecast_payload(count=40, start=FORECAST_START, categories=None):
    """Build a 3-hour forecast body with `count` entries.

    Entry `i` has temperature `10 + i / 10` and cycles through `categories`.
    """
    categories = categories or ["Clear", "Clouds", "Rain", "Snow", "Mist"]
    items = []
    for i in range(count):
        ts = start + timedelta(hours=3 * i)
        items.append(
            {
                "dt": int(ts.timestamp()),
                "main": {"temp": 10 + i / 10, "feels_like": 9 + i / 10, "humidity": 70, "pressure": 1010},
                "weather": [{"main": categories[i % len(categories)], "description": "whatever"}],
                "dt_txt": ts.strftime("%Y-%m-%d %H:%M:%S"),
            }
        )
    return {"cod": "200", "message": 0, "cnt": count, "list": items}


def make_bundle(current_payload=None, forecast_payload=None) -> WeatherBundle:
    current = OpenWeatherCurrentResponse.model_validate(current_payload or make_current_payload())
    forecast = OpenWeatherForecastResponse.model_validate(forecast_payload or make_forecast_payload())
    return WeatherBundle(
        current=CurrentConditions.from_payload(current),
        forecast=ForecastSeries.from_payload(forecast),
    )


class FakeGateway:
    """Weather gateway stand-in returning queued results and recording calls."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls: list[Coordinate] = []

    async def fetch_weather(self, coordinate: Coordinate) -> WeatherBundle:
        self.calls.append(coordinate)
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result


@pytest.fixture
def coordinate():
    return Coordinate(latitude=40.0, longitude=-75.0)


@pytest.fixture
def bundle():
    return make_bundle()


@pytest.fixture(scope="function")
def client():
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client

"""Tests for API endpoints."""

import asyncio
import re

from pytest_httpx import HTTPXMock

from conftest import FakeGateway, make_bundle, make_current_payload, make_forecast_payload
from weather_screen.api.routes import get_gateway
from weather_screen.services.location import StaticLocationProvider
from weather_screen.services.openweather import (
    OpenWeatherClient,
    WeatherGateway,
    WeatherNetworkError,
    WeatherProviderRejectedError,
)
from weather_screen.services.session import WeatherSession


def _install_session(client, coordinate, *results, granted=True):
    gateway = FakeGateway(*results)
    session = WeatherSession(StaticLocationProvider(coordinate, permission_granted=granted), gateway)
    asyncio.run(session.start())
    client.app.state.session = session
    return gateway


def _override_gateway(client, *results):
    gateway = FakeGateway(*results)
    client.app.dependency_overrides[get_gateway] = lambda: gateway
    return gateway


class TestHealthEndpoints:
    """Test health check endpoints."""

    def test_health_endpoint(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_readiness_reports_session(self, client):
        """With no configured coordinate the mounted session cannot locate."""
        response = client.get("/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "session": "location_failed"}


class TestWeatherEndpoint:
    """Test the stateless pipeline endpoint."""

    def teardown_method(self):
        from weather_screen.app import app

        app.dependency_overrides.clear()

    def test_success(self, client):
        gateway = _override_gateway(
            client,
            make_bundle(current_payload=make_current_payload(category="Rain", temp=18.4)),
        )

        response = client.get("/v1/weather?lat=40.0&lon=-75.0")

        assert response.status_code == 200
        data = response.json()
        assert data["iconId"] == "cloud-rain"
        assert data["temperatureDisplay"] == "18°"
        assert data["description"] == "Light rain"
        assert len(data["forecast"]) == 5
        assert gateway.calls[0].latitude == 40.0
        assert gateway.calls[0].longitude == -75.0

    def test_long_parameter_names(self, client):
        _override_gateway(client, make_bundle())

        response = client.get("/v1/weather?latitude=40.0&longitude=-75.0")

        assert response.status_code == 200

    def test_missing_parameters(self, client):
        _override_gateway(client)

        response = client.get("/v1/weather?lat=40.0")

        assert response.status_code == 400
        assert "required" in response.json()["detail"]["error"]

    def test_conflicting_parameters(self, client):
        _override_gateway(client)

        response = client.get("/v1/weather?lat=40.0&latitude=41.0&lon=-75.0")

        assert response.status_code == 400
        assert "Conflicting" in response.json()["detail"]["error"]

    def test_out_of_range(self, client):
        _override_gateway(client)

        response = client.get("/v1/weather?lat=91.0&lon=-75.0")

        assert response.status_code == 422

    def test_provider_rejected(self, client):
        _override_gateway(client, WeatherProviderRejectedError("Invalid API key."))

        response = client.get("/v1/weather?lat=40.0&lon=-75.0")

        assert response.status_code == 502
        assert response.json()["detail"] == {"error": "Invalid API key."}

    def test_network_failure(self, client):
        _override_gateway(client, WeatherNetworkError("down"))

        response = client.get("/v1/weather?lat=40.0&lon=-75.0")

        assert response.status_code == 502
        assert response.json()["detail"] == {"error": "Network error. Please try again."}


class TestSessionEndpoints:
    """Test the screen session endpoints."""

    def test_session_and_fetch(self, client, coordinate, bundle):
        gateway = _install_session(client, coordinate, bundle)

        before = client.get("/v1/session").json()
        assert before["state"] == "awaiting_fetch"
        assert before["fetchEnabled"] is True
        assert before["weather"] is None

        after = client.post("/v1/session/fetch").json()
        assert after["state"] == "success"
        assert after["loading"] is False
        assert after["weather"]["locationName"] == "Philadelphia"
        assert {t["target"] for t in after["transitions"]} >= {"card.opacity", "city.opacity"}
        assert gateway.calls == [coordinate]

    def test_fetch_without_permission(self, client, coordinate):
        gateway = _install_session(client, coordinate, granted=False)

        response = client.post("/v1/session/fetch")

        assert response.status_code == 200
        data = response.json()
        assert data["state"] == "location_failed"
        assert data["message"] == "Location not available yet. Please wait..."
        assert data["fetchEnabled"] is False
        assert gateway.calls == []

    def test_retry_after_failure(self, client, coordinate, bundle):
        _install_session(client, coordinate, WeatherNetworkError("down"), bundle)

        failed = client.post("/v1/session/fetch").json()
        assert failed["state"] == "failed"
        assert failed["message"] == "Network error. Please try again."

        success = client.post("/v1/session/fetch").json()
        assert success["state"] == "success"
        assert success["message"] is None


class TestMetricsEndpoint:
    """Test metrics endpoint."""

    def test_metrics_endpoint(self, client):
        response = client.get("/metrics")

        assert response.status_code == 200
        assert "text/plain" in response.headers.get("content-type", "")

    def test_fetch_outcomes_exported(self, client, coordinate, httpx_mock: HTTPXMock):
        """Gateway calls show up in the scrape labelled by outcome."""
        httpx_mock.add_response(url=re.compile(r"https://owm\.test/weather\?.*"), json=make_current_payload())
        httpx_mock.add_response(url=re.compile(r"https://owm\.test/forecast\?.*"), json=make_forecast_payload())
        gateway = WeatherGateway(
            client_factory=lambda: OpenWeatherClient(base_url="https://owm.test", api_key="", timeout=1.0)
        )
        asyncio.run(gateway.fetch_weather(coordinate))

        response = client.get("/metrics")

        assert "weather_fetch" in response.text
        assert 'outcome="success"' in response.text


class TestCORS:
    """Test CORS configuration."""

    def test_cors_headers(self, client):
        origin = "https://example.com"
        response = client.options(
            "/v1/weather",
            headers={"Origin": origin, "Access-Control-Request-Method": "GET"},
        )

        # With credentials allowed the wildcard is echoed back as the request origin
        assert response.headers["access-control-allow-origin"] in ("*", origin)

    def test_simple_request_cors_header(self, client):
        origin = "https://example.com"
        response = client.get("/health", headers={"Origin": origin})

        assert response.headers["access-control-allow-origin"] in ("*", origin)

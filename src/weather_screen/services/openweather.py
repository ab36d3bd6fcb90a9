"""OpenWeatherMap gateway fetching current conditions and the 5-day forecast."""

import asyncio
from typing import Any

import httpx
from loguru import logger
from opentelemetry import metrics
from pydantic import BaseModel, ValidationError

from ..core.config import settings
from ..models.weather import (
    Coordinate,
    CurrentConditions,
    ForecastSeries,
    OpenWeatherCurrentResponse,
    OpenWeatherForecastResponse,
    WeatherBundle,
)

# Fixed unit system; unit conversion is not configurable
UNITS = "metric"

DEFAULT_REJECTION_MESSAGE = "Failed to fetch weather data."

meter = metrics.get_meter(__name__)
fetch_counter = meter.create_counter(
    "weather_fetch_total",
    description="Weather gateway calls by outcome",
)


class WeatherError(Exception):
    """Base exception for weather gateway errors."""

    pass


class WeatherProviderRejectedError(WeatherError):
    """Raised when either endpoint reports a non-success status or a malformed payload."""

    def __init__(self, message: str = DEFAULT_REJECTION_MESSAGE):
        super().__init__(message)
        self.message = message


class WeatherNetworkError(WeatherError):
    """Raised when either request gets no usable response (connection, timeout, non-JSON)."""

    pass


def _provider_succeeded(response: httpx.Response, payload: Any) -> bool:
    """Check both the HTTP status and the provider's own `cod` status indicator.

    Example:
        >>> _provider_succeeded(httpx.Response(200), {"cod": "200"})
        True
        >>> _provider_succeeded(httpx.Response(200), {"cod": 401})
        False
    """
    if not response.is_success or not isinstance(payload, dict):
        return False
    cod = payload.get("cod")
    if cod is None:
        return True
    return str(cod).strip() == "200"


def _provider_message(payload: Any) -> str | None:
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


class OpenWeatherClient:
    """Client for the OpenWeatherMap current and forecast endpoints.

    Uses httpx for async HTTP requests. Both endpoints are queried concurrently
    and the call succeeds only when both do; there is no retry and no partial result.

    Example:
        >>> async def example():
        ...     async with OpenWeatherClient() as client:
        ...         bundle = await client.fetch_weather(Coordinate(latitude=40.0, longitude=-75.0))
        ...         return bundle.current.temperature
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ):
        """Initialize the client, defaulting to configuration from settings."""
        self._client: httpx.AsyncClient | None = None
        self._base_url = (base_url or settings.OPENWEATHER_BASE_URL).rstrip("/")
        if api_key is None and settings.OPENWEATHER_API_KEY is not None:
            api_key = settings.OPENWEATHER_API_KEY.get_secret_value()
        self._api_key = api_key
        self._timeout = timeout or settings.UPSTREAM_TIMEOUT

    async def __aenter__(self):
        """Async context manager entry."""
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout),
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()

    def _params(self, coordinate: Coordinate) -> dict[str, float | str]:
        params: dict[str, float | str] = {
            "lat": coordinate.latitude,
            "lon": coordinate.longitude,
            "units": UNITS,
        }
        # Add API key if configured
        if self._api_key:
            params["appid"] = self._api_key
        return params

    async def _get_json(self, endpoint: str, coordinate: Coordinate) -> tuple[httpx.Response, Any]:
        """Issue one GET and decode its JSON body.

        Raises:
            WeatherNetworkError: On connection errors, timeouts or a non-JSON body
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        url = f"{self._base_url}/{endpoint}"
        logger.debug("Fetching from OpenWeatherMap", endpoint=endpoint)

        try:
            response = await self._client.get(url, params=self._params(coordinate))
        except httpx.TimeoutException as e:
            logger.warning("OpenWeatherMap request timed out", endpoint=endpoint)
            raise WeatherNetworkError("Upstream API request timed out") from e
        except httpx.HTTPError as e:
            logger.warning("OpenWeatherMap request failed", endpoint=endpoint, error=str(e))
            raise WeatherNetworkError(f"Network error: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning(
                "OpenWeatherMap returned a non-JSON body",
                endpoint=endpoint,
                status_code=response.status_code,
            )
            raise WeatherNetworkError("Upstream API returned a malformed body") from e

        return response, payload

    def _parse(self, endpoint: str, response: httpx.Response, payload: Any, model: type[BaseModel]):
        """Validate one endpoint result against its payload model.

        Raises:
            WeatherProviderRejectedError: On a non-success status or a malformed payload
        """
        if not _provider_succeeded(response, payload):
            logger.warning(
                "OpenWeatherMap rejected request",
                endpoint=endpoint,
                status_code=response.status_code,
            )
            raise WeatherProviderRejectedError(
                _provider_message(payload) or DEFAULT_REJECTION_MESSAGE
            )
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            logger.warning(
                "OpenWeatherMap payload failed validation",
                endpoint=endpoint,
                errors=e.error_count(),
            )
            raise WeatherProviderRejectedError(DEFAULT_REJECTION_MESSAGE) from e

    async def fetch_weather(self, coordinate: Coordinate) -> WeatherBundle:
        """Fetch current conditions and the forecast for a coordinate.

        Both requests run concurrently and are joined before anything is decided.
        A network failure on either side wins over a rejection on the other.

        Args:
            coordinate: Location to fetch weather for

        Returns:
            Current conditions together with the full 3-hour forecast series

        Raises:
            WeatherNetworkError: If either request fails at the network level
            WeatherProviderRejectedError: If either endpoint rejects the request
                or returns a payload that does not validate
        """
        current_result, forecast_result = await asyncio.gather(
            self._get_json("weather", coordinate),
            self._get_json("forecast", coordinate),
            return_exceptions=True,
        )

        for result in (current_result, forecast_result):
            if isinstance(result, WeatherNetworkError):
                fetch_counter.add(1, {"outcome": "network_failure"})
                raise result
            if isinstance(result, BaseException):
                raise result

        try:
            current_payload = self._parse("weather", *current_result, OpenWeatherCurrentResponse)
            forecast_payload = self._parse("forecast", *forecast_result, OpenWeatherForecastResponse)
            bundle = WeatherBundle(
                current=CurrentConditions.from_payload(current_payload),
                forecast=ForecastSeries.from_payload(forecast_payload),
            )
        except ValidationError as e:
            # Payload parsed but values are out of the plausible range
            fetch_counter.add(1, {"outcome": "rejected"})
            logger.warning("OpenWeatherMap returned implausible values", errors=e.error_count())
            raise WeatherProviderRejectedError(DEFAULT_REJECTION_MESSAGE) from e
        except WeatherProviderRejectedError:
            fetch_counter.add(1, {"outcome": "rejected"})
            raise

        fetch_counter.add(1, {"outcome": "success"})
        logger.info(
            "Weather fetched",
            category=bundle.current.category.value,
            forecast_entries=len(bundle.forecast),
        )
        return bundle


class WeatherGateway:
    """Weather gateway owning one short-lived client per call.

    Example:
        >>> async def example():
        ...     gateway = WeatherGateway()
        ...     bundle = await gateway.fetch_weather(Coordinate(latitude=40.0, longitude=-75.0))
        ...     return bundle.current.category
    """

    def __init__(self, client_factory=OpenWeatherClient):
        self._client_factory = client_factory

    async def fetch_weather(self, coordinate: Coordinate) -> WeatherBundle:
        async with self._client_factory() as client:
            return await client.fetch_weather(coordinate)

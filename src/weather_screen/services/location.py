"""Location providers resolving a single device coordinate behind a permission grant."""

from abc import ABC, abstractmethod

import httpx
from loguru import logger
from pydantic import ValidationError

from ..core.config import Settings, settings
from ..models.weather import Coordinate


class LocationError(Exception):
    """Base exception for location resolution errors."""

    pass


class LocationPermissionDeniedError(LocationError):
    """Raised when the user did not grant access to their location."""

    pass


class LocationResolutionError(LocationError):
    """Raised when permission was granted but the lookup itself failed."""

    pass


class LocationProvider(ABC):
    """Single-shot, permission-gated coordinate source.

    Subclasses implement the permission request and the actual lookup;
    `resolve_location` enforces that the lookup never runs without permission.
    """

    @abstractmethod
    async def request_permission(self) -> bool:
        """Ask for access to the device location."""

    @abstractmethod
    async def current_position(self) -> Coordinate:
        """Read one coordinate snapshot.

        Raises:
            LocationResolutionError: If the lookup fails
        """

    async def resolve_location(self) -> Coordinate:
        """Request permission, then read the current coordinate once.

        Returns:
            Coordinate snapshot

        Raises:
            LocationPermissionDeniedError: If permission is denied (no lookup attempted)
            LocationResolutionError: If the lookup fails after permission was granted
        """
        if not await self.request_permission():
            logger.info("Location permission denied")
            raise LocationPermissionDeniedError("Permission to access location was denied")

        coordinate = await self.current_position()
        logger.debug(
            "Location resolved",
            latitude=coordinate.latitude,
            longitude=coordinate.longitude,
        )
        return coordinate


class StaticLocationProvider(LocationProvider):
    """Provider returning a configured coordinate.

    Example:
        >>> provider = StaticLocationProvider(Coordinate(latitude=40.0, longitude=-75.0))
        >>> import asyncio
        >>> asyncio.run(provider.resolve_location()).latitude
        40.0
    """

    def __init__(self, coordinate: Coordinate | None, permission_granted: bool = True):
        self._coordinate = coordinate
        self._permission_granted = permission_granted

    async def request_permission(self) -> bool:
        return self._permission_granted

    async def current_position(self) -> Coordinate:
        if self._coordinate is None:
            raise LocationResolutionError("No coordinate configured")
        return self._coordinate


class IPLocationProvider(LocationProvider):
    """Provider approximating the device location from its public IP address.

    Expects an ip-api.com style JSON body: `{"status": "success", "lat": .., "lon": ..}`.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        permission_granted: bool = True,
    ):
        self._url = url or settings.IP_GEOLOCATION_URL
        self._timeout = timeout or settings.UPSTREAM_TIMEOUT
        self._permission_granted = permission_granted

    async def request_permission(self) -> bool:
        return self._permission_granted

    async def current_position(self) -> Coordinate:
        try:
            async with httpx.AsyncClient(timeout=httpx.Timeout(self._timeout)) as client:
                response = await client.get(self._url)
                response.raise_for_status()
                payload = response.json()
        except httpx.TimeoutException as e:
            logger.warning("IP geolocation timed out")
            raise LocationResolutionError("Location lookup timed out") from e
        except httpx.HTTPError as e:
            logger.warning("IP geolocation failed", error=str(e))
            raise LocationResolutionError(f"Location lookup failed: {e}") from e
        except ValueError as e:
            logger.warning("IP geolocation returned a non-JSON body")
            raise LocationResolutionError("Location lookup returned a malformed body") from e

        if not isinstance(payload, dict) or payload.get("status", "success") != "success":
            message = payload.get("message") if isinstance(payload, dict) else None
            logger.warning("IP geolocation rejected lookup", message=message)
            raise LocationResolutionError(f"Location lookup rejected: {message or 'unknown error'}")

        try:
            return Coordinate(latitude=payload["lat"], longitude=payload["lon"])
        except (KeyError, ValidationError) as e:
            raise LocationResolutionError("Location lookup returned no usable coordinate") from e


def build_location_provider(config: Settings = settings) -> LocationProvider:
    """Create the location provider selected by configuration.

    Example:
        >>> build_location_provider(Settings(LOCATION_SOURCE="ip")).__class__.__name__
        'IPLocationProvider'
    """
    if config.LOCATION_SOURCE == "ip":
        return IPLocationProvider(
            url=config.IP_GEOLOCATION_URL,
            timeout=config.UPSTREAM_TIMEOUT,
            permission_granted=config.LOCATION_PERMISSION_GRANTED,
        )

    coordinate = None
    if config.LOCATION_LATITUDE is not None and config.LOCATION_LONGITUDE is not None:
        coordinate = Coordinate(
            latitude=config.LOCATION_LATITUDE,
            longitude=config.LOCATION_LONGITUDE,
        )
    return StaticLocationProvider(coordinate, permission_granted=config.LOCATION_PERMISSION_GRANTED)

"""API routes for the weather pipeline and the screen session."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from loguru import logger

from ..models.view import RenderPayload, ScreenPayload
from ..models.weather import Coordinate
from ..services.assembler import assemble
from ..services.openweather import (
    WeatherGateway,
    WeatherNetworkError,
    WeatherProviderRejectedError,
)
from ..services.session import NETWORK_FAILURE_MESSAGE, WeatherSession

router = APIRouter()


def get_gateway(request: Request) -> WeatherGateway:
    return request.app.state.gateway


def get_session(request: Request) -> WeatherSession:
    return request.app.state.session


def _pick(name: str, short: float | None, long: float | None) -> float:
    """Choose between the short and long spelling of a coordinate parameter.

    Example:
        >>> _pick("latitude", 52.52, None)
        52.52
    """
    if short is not None and long is not None and short != long:
        raise HTTPException(
            status_code=400,
            detail={"error": f"Conflicting {name} values provided"},
        )
    value = short if short is not None else long
    if value is None:
        raise HTTPException(
            status_code=400,
            detail={"error": f"{name.capitalize()} parameter required"},
        )
    return value


@router.get(
    "/v1/weather",
    response_model=RenderPayload,
    summary="Get the weather card for a coordinate",
    description="Fetch current conditions and the 5-day forecast from OpenWeatherMap and assemble the render payload",
    responses={
        400: {"description": "Missing or conflicting coordinates"},
        502: {
            "description": "Provider rejected the request or was unreachable",
            "content": {
                "application/json": {
                    "example": {"detail": {"error": "Invalid API key."}}
                }
            },
        },
    },
)
async def get_weather(
    gateway: Annotated[WeatherGateway, Depends(get_gateway)],
    lat: Annotated[float | None, Query(ge=-90.0, le=90.0, examples=[40.0])] = None,
    latitude: Annotated[float | None, Query(ge=-90.0, le=90.0)] = None,
    lon: Annotated[float | None, Query(ge=-180.0, le=180.0, examples=[-75.0])] = None,
    longitude: Annotated[float | None, Query(ge=-180.0, le=180.0)] = None,
) -> RenderPayload:
    """Run the retrieval and presentation pipeline for one coordinate.

    Both `lat`/`lon` and `latitude`/`longitude` are accepted.

    Raises:
        HTTPException: 400 for missing/conflicting parameters, 502 for provider failures
    """
    coordinate = Coordinate(
        latitude=_pick("latitude", lat, latitude),
        longitude=_pick("longitude", lon, longitude),
    )

    logger.info("Weather request received")

    try:
        bundle = await gateway.fetch_weather(coordinate)
    except WeatherProviderRejectedError as e:
        raise HTTPException(status_code=502, detail={"error": e.message}) from e
    except WeatherNetworkError as e:
        raise HTTPException(status_code=502, detail={"error": NETWORK_FAILURE_MESSAGE}) from e

    return assemble(bundle.current, bundle.forecast)


@router.get(
    "/v1/session",
    response_model=ScreenPayload,
    summary="Get the screen session state",
)
async def get_screen(
    session: Annotated[WeatherSession, Depends(get_session)],
) -> ScreenPayload:
    return session.render()


@router.post(
    "/v1/session/fetch",
    response_model=ScreenPayload,
    summary="Trigger the user's weather fetch",
    description="Ignored while a fetch is pending; reports a message when no location is available",
)
async def trigger_fetch(
    session: Annotated[WeatherSession, Depends(get_session)],
) -> ScreenPayload:
    """Run the session's fetch action and return the resulting screen."""
    await session.fetch()
    return session.render()

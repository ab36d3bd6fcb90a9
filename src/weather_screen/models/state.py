"""Session request states and the events that move between them."""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from .weather import Coordinate, CurrentConditions, ForecastSeries


class LocationFailure(str, Enum):
    """Why the session could not obtain a coordinate."""

    PERMISSION_DENIED = "permission_denied"
    RESOLUTION_FAILED = "resolution_failed"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class IdleState(_Frozen):
    kind: Literal["idle"] = "idle"
    message: str | None = None


class LocatingState(_Frozen):
    kind: Literal["locating"] = "locating"
    message: str | None = None


class LocationFailedState(_Frozen):
    """Terminal for the session: no coordinate, so no fetch is possible."""

    kind: Literal["location_failed"] = "location_failed"
    reason: LocationFailure
    message: str


class AwaitingFetchState(_Frozen):
    kind: Literal["awaiting_fetch"] = "awaiting_fetch"
    coordinate: Coordinate


class LoadingState(_Frozen):
    kind: Literal["loading"] = "loading"
    coordinate: Coordinate


class SuccessState(_Frozen):
    kind: Literal["success"] = "success"
    coordinate: Coordinate
    current: CurrentConditions
    forecast: ForecastSeries


class FailedState(_Frozen):
    kind: Literal["failed"] = "failed"
    coordinate: Coordinate
    message: str


RequestState = Annotated[
    Union[
        IdleState,
        LocatingState,
        LocationFailedState,
        AwaitingFetchState,
        LoadingState,
        SuccessState,
        FailedState,
    ],
    Field(discriminator="kind"),
]


class Mounted(_Frozen):
    kind: Literal["mounted"] = "mounted"


class LocationResolved(_Frozen):
    kind: Literal["location_resolved"] = "location_resolved"
    coordinate: Coordinate


class LocationUnavailable(_Frozen):
    kind: Literal["location_unavailable"] = "location_unavailable"
    reason: LocationFailure


class FetchRequested(_Frozen):
    kind: Literal["fetch_requested"] = "fetch_requested"


class WeatherLoaded(_Frozen):
    kind: Literal["weather_loaded"] = "weather_loaded"
    current: CurrentConditions
    forecast: ForecastSeries


class WeatherFailed(_Frozen):
    kind: Literal["weather_failed"] = "weather_failed"
    message: str = Field(..., min_length=1)


SessionEvent = Annotated[
    Union[
        Mounted,
        LocationResolved,
        LocationUnavailable,
        FetchRequested,
        WeatherLoaded,
        WeatherFailed,
    ],
    Field(discriminator="kind"),
]

"""Render-ready models consumed by the presentation layer."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class PresentationMetadata(BaseModel):
    """Presentation metadata derived from a condition category.

    Example:
        >>> meta = PresentationMetadata(iconId="sun", backgroundTone="#7f8c8d", advisoryNote="Hi")
        >>> meta.iconId
        'sun'
    """

    model_config = ConfigDict(frozen=True)

    iconId: str = Field(..., description="Feather icon identifier")
    backgroundTone: str = Field(..., description="Hex background color")
    advisoryNote: str = Field(..., description="Short human-readable note")


class ForecastDay(BaseModel):
    """One tile of the 5-day forecast strip."""

    model_config = ConfigDict(frozen=True)

    weekday: str = Field(..., description="Short English weekday label, e.g. 'Mon'")
    iconId: str
    temperature: int = Field(..., description="Temperature rounded to whole degrees")
    temperatureDisplay: str = Field(..., description="Rounded temperature with degree sign")
    condition: str = Field(default="", description="Provider's condition label")


class RenderPayload(BaseModel):
    """Fully-resolved weather card, decoupled from the provider schema.

    Example:
        >>> payload = RenderPayload(
        ...     locationName="Philadelphia",
        ...     countryCode="US",
        ...     iconId="cloud-rain",
        ...     backgroundTone="#7f8c8d",
        ...     advisoryNote="Don't forget your umbrella!",
        ...     temperature=18,
        ...     temperatureDisplay="18°",
        ...     feelsLike=18,
        ...     feelsLikeDisplay="18°",
        ...     description="Light rain",
        ... )
        >>> payload.temperatureUnit
        'C'
    """

    model_config = ConfigDict(frozen=True)

    locationName: str
    countryCode: str
    iconId: str
    backgroundTone: str
    advisoryNote: str
    temperature: int
    temperatureDisplay: str
    feelsLike: int
    feelsLikeDisplay: str
    temperatureUnit: Literal["C"] = "C"
    humidity: int | float | None = Field(default=None, description="Percent, provider precision")
    pressure: int | float | None = Field(default=None, description="hPa, provider precision")
    windSpeed: int | float | None = Field(default=None, description="m/s, provider precision")
    description: str
    forecast: list[ForecastDay] = Field(default_factory=list)


class TransitionSpec(BaseModel):
    """Declarative animation step applied by the presentation layer."""

    model_config = ConfigDict(frozen=True)

    target: str = Field(..., description="Animated property, e.g. 'card.opacity'")
    fromValue: float
    toValue: float
    durationMs: int = Field(..., ge=0)
    startDelayMs: int = Field(default=0, ge=0)
    easing: Literal["timing", "spring"] = "timing"


class ScreenPayload(BaseModel):
    """Everything the single screen needs to draw the current session state."""

    state: str = Field(..., description="Session state kind")
    message: str | None = Field(default=None, description="User-visible error or notice")
    loading: bool = False
    fetchEnabled: bool = Field(..., description="Whether the fetch trigger is enabled")
    buttonLabel: str
    backgroundTone: str
    weather: RenderPayload | None = None
    transitions: list[TransitionSpec] = Field(default_factory=list)

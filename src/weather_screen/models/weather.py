"""Weather data models for provider payloads and the domain pipeline."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Plausible surface air temperature bounds in Celsius
MIN_TEMPERATURE_C = -100.0
MAX_TEMPERATURE_C = 70.0


class ConditionCategory(str, Enum):
    """Coarse weather classification, distinct from the free-text description.

    Example:
        >>> ConditionCategory.parse("Rain")
        <ConditionCategory.RAIN: 'rain'>
        >>> ConditionCategory.parse("Tornado")
        <ConditionCategory.UNKNOWN: 'unknown'>
    """

    CLEAR = "clear"
    CLOUDS = "clouds"
    RAIN = "rain"
    SNOW = "snow"
    THUNDERSTORM = "thunderstorm"
    DRIZZLE = "drizzle"
    MIST = "mist"
    FOG = "fog"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: "str | ConditionCategory | None") -> "ConditionCategory":
        """Parse a provider category, case-insensitively.

        Absent or unrecognized values map to UNKNOWN instead of failing.
        """
        if isinstance(value, ConditionCategory):
            return value
        if not isinstance(value, str) or not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class Coordinate(BaseModel):
    """Geographic coordinate snapshot.

    Example:
        >>> coord = Coordinate(latitude=40.0, longitude=-75.0)
        >>> coord.latitude
        40.0
    """

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(
        ...,
        description="Latitude in decimal degrees",
        ge=-90.0,
        le=90.0,
    )
    longitude: float = Field(
        ...,
        description="Longitude in decimal degrees",
        ge=-180.0,
        le=180.0,
    )


class OpenWeatherCondition(BaseModel):
    """Element of the provider's `weather` array."""

    main: str | None = None
    description: str = ""


class OpenWeatherMain(BaseModel):
    """The provider's `main` block."""

    temp: float
    feels_like: float | None = None
    humidity: int | float | None = None
    pressure: int | float | None = None


class OpenWeatherWind(BaseModel):
    speed: int | float | None = None


class OpenWeatherSys(BaseModel):
    country: str = ""


class OpenWeatherCurrentResponse(BaseModel):
    """Payload of the current-conditions endpoint.

    Example:
        >>> data = OpenWeatherCurrentResponse(
        ...     name="Philadelphia",
        ...     sys={"country": "US"},
        ...     main={"temp": 18.4, "feels_like": 18.0, "humidity": 80, "pressure": 1012},
        ...     weather=[{"main": "Rain", "description": "light rain"}],
        ...     wind={"speed": 3.6},
        ...     cod=200,
        ... )
        >>> data.weather[0].main
        'Rain'
    """

    name: str = ""
    sys: OpenWeatherSys = Field(default_factory=OpenWeatherSys)
    main: OpenWeatherMain
    weather: list[OpenWeatherCondition] = Field(default_factory=list)
    wind: OpenWeatherWind = Field(default_factory=OpenWeatherWind)
    cod: int | str | None = None


class OpenWeatherForecastItem(BaseModel):
    """One 3-hour slot of the forecast endpoint."""

    dt_txt: datetime
    main: OpenWeatherMain
    weather: list[OpenWeatherCondition] = Field(default_factory=list)


class OpenWeatherForecastResponse(BaseModel):
    """Payload of the 5-day/3-hour forecast endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    cod: int | str | None = None
    items: list[OpenWeatherForecastItem] = Field(default_factory=list, alias="list")


def _first_condition(conditions: list[OpenWeatherCondition]) -> OpenWeatherCondition:
    return conditions[0] if conditions else OpenWeatherCondition()


class CurrentConditions(BaseModel):
    """Validated current conditions for one location.

    Temperatures must be finite and physically plausible; the condition
    category falls back to UNKNOWN when the provider omits it.
    """

    model_config = ConfigDict(frozen=True)

    location_name: str = ""
    country_code: str = ""
    temperature: float = Field(
        ...,
        ge=MIN_TEMPERATURE_C,
        le=MAX_TEMPERATURE_C,
        allow_inf_nan=False,
    )
    feels_like: float = Field(
        ...,
        ge=MIN_TEMPERATURE_C,
        le=MAX_TEMPERATURE_C,
        allow_inf_nan=False,
    )
    humidity: int | float | None = None
    pressure: int | float | None = None
    wind_speed: int | float | None = None
    category: ConditionCategory = ConditionCategory.UNKNOWN
    description: str = ""

    @classmethod
    def from_payload(cls, payload: OpenWeatherCurrentResponse) -> "CurrentConditions":
        """Create current conditions from the provider payload.

        A missing feels-like value falls back to the air temperature.
        """
        condition = _first_condition(payload.weather)
        main = payload.main
        return cls(
            location_name=payload.name,
            country_code=payload.sys.country,
            temperature=main.temp,
            feels_like=main.feels_like if main.feels_like is not None else main.temp,
            humidity=main.humidity,
            pressure=main.pressure,
            wind_speed=payload.wind.speed,
            category=ConditionCategory.parse(condition.main),
            description=condition.description,
        )


class ForecastEntry(BaseModel):
    """One 3-hour forecast slot."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    temperature: float = Field(
        ...,
        ge=MIN_TEMPERATURE_C,
        le=MAX_TEMPERATURE_C,
        allow_inf_nan=False,
    )
    category: ConditionCategory = ConditionCategory.UNKNOWN
    condition: str = Field(
        default="",
        description="Provider's raw condition label, e.g. 'Rain'",
    )


class ForecastSeries(BaseModel):
    """Ordered forecast entries at fixed 3-hour intervals."""

    model_config = ConfigDict(frozen=True)

    entries: tuple[ForecastEntry, ...] = ()

    @classmethod
    def from_payload(cls, payload: OpenWeatherForecastResponse) -> "ForecastSeries":
        entries = []
        for item in payload.items:
            condition = _first_condition(item.weather)
            entries.append(
                ForecastEntry(
                    timestamp=item.dt_txt,
                    temperature=item.main.temp,
                    category=ConditionCategory.parse(condition.main),
                    condition=condition.main or "",
                )
            )
        return cls(entries=tuple(entries))

    def __len__(self) -> int:
        return len(self.entries)


class WeatherBundle(BaseModel):
    """Successful result of one gateway call: both halves, never one alone."""

    model_config = ConfigDict(frozen=True)

    current: CurrentConditions
    forecast: ForecastSeries

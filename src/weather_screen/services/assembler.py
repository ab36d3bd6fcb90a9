"""View-model assembler turning domain weather data into a render payload."""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from ..models.view import ForecastDay, RenderPayload
from ..models.weather import CurrentConditions, ForecastEntry, ForecastSeries
from .conditions import icon_for, metadata_for

# One entry per day out of a 3-hour series
FORECAST_STRIDE = 8
FORECAST_DAYS = 5

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


def round_temperature(value: float) -> int:
    """Round to the nearest whole degree, halves away from zero.

    Rounding goes through the decimal text of the value so that 2.5 is
    treated as exactly half.

    Example:
        >>> round_temperature(21.6)
        22
        >>> round_temperature(-0.4)
        0
        >>> round_temperature(-2.5)
        -3
    """
    rounded = Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(rounded)


def format_temperature(value: float) -> str:
    """Render a temperature for display.

    Example:
        >>> format_temperature(18.4)
        '18°'
    """
    return f"{round_temperature(value)}°"


def capitalize_first(text: str) -> str:
    """Upper-case the first character and leave the rest untouched.

    Example:
        >>> capitalize_first("light rain")
        'Light rain'
    """
    return text[:1].upper() + text[1:]


def sample_daily(entries: "ForecastSeries | Sequence[ForecastEntry]") -> list[ForecastEntry]:
    """Down-sample a 3-hour series to one entry per day.

    Keeps indices 0, 8, 16, 24, 32 that exist, in order. Shorter series
    simply yield fewer entries.

    Example:
        >>> sample_daily(list(range(40)))
        [0, 8, 16, 24, 32]
        >>> sample_daily(list(range(10)))
        [0, 8]
    """
    if isinstance(entries, ForecastSeries):
        entries = entries.entries
    return list(entries[::FORECAST_STRIDE][:FORECAST_DAYS])


def weekday_label(entry: ForecastEntry) -> str:
    return _WEEKDAYS[entry.timestamp.weekday()]


def _forecast_day(entry: ForecastEntry) -> ForecastDay:
    return ForecastDay(
        weekday=weekday_label(entry),
        iconId=icon_for(entry.category),
        temperature=round_temperature(entry.temperature),
        temperatureDisplay=format_temperature(entry.temperature),
        condition=entry.condition,
    )


def assemble(current: CurrentConditions, forecast: ForecastSeries) -> RenderPayload:
    """Build the render payload for the weather card and forecast strip.

    Pure: identical inputs always produce an identical payload.

    Args:
        current: Validated current conditions
        forecast: Full 3-hour forecast series

    Returns:
        Render payload with rounded temperatures, capitalized description,
        classifier metadata and the daily forecast sample
    """
    meta = metadata_for(current.category)
    return RenderPayload(
        locationName=current.location_name,
        countryCode=current.country_code,
        iconId=meta.iconId,
        backgroundTone=meta.backgroundTone,
        advisoryNote=meta.advisoryNote,
        temperature=round_temperature(current.temperature),
        temperatureDisplay=format_temperature(current.temperature),
        feelsLike=round_temperature(current.feels_like),
        feelsLikeDisplay=format_temperature(current.feels_like),
        humidity=current.humidity,
        pressure=current.pressure,
        windSpeed=current.wind_speed,
        description=capitalize_first(current.description),
        forecast=[_forecast_day(entry) for entry in sample_daily(forecast)],
    )

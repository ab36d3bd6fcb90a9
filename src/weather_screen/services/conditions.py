"""Condition classifier: category to icon, background tone and advisory note."""

from ..models.view import PresentationMetadata
from ..models.weather import ConditionCategory

_CLEAR = PresentationMetadata(
    iconId="sun",
    backgroundTone="#7f8c8d",
    advisoryNote="It's a sunny day! Great time for outdoor activities.",
)

_LOW_VISIBILITY = PresentationMetadata(
    iconId="wind",
    backgroundTone="#85929e",
    advisoryNote="Visibility is low due to mist or fog. Drive carefully.",
)

DEFAULT_METADATA = PresentationMetadata(
    iconId=_CLEAR.iconId,
    backgroundTone=_CLEAR.backgroundTone,
    advisoryNote="Check the forecast for more updates.",
)

# Single source of truth for the current card and every forecast tile.
# UNKNOWN is deliberately absent and resolves to DEFAULT_METADATA.
PRESENTATION_TABLE: dict[ConditionCategory, PresentationMetadata] = {
    ConditionCategory.CLEAR: _CLEAR,
    ConditionCategory.CLOUDS: PresentationMetadata(
        iconId="cloud",
        backgroundTone="#95a5a6",
        advisoryNote="Cloudy skies ahead. Might want a light jacket.",
    ),
    ConditionCategory.RAIN: PresentationMetadata(
        iconId="cloud-rain",
        backgroundTone="#7f8c8d",
        advisoryNote="Don't forget your umbrella!",
    ),
    ConditionCategory.SNOW: PresentationMetadata(
        iconId="cloud-snow",
        backgroundTone="#bdc3c7",
        advisoryNote="Snowfall expected. Stay warm and safe.",
    ),
    ConditionCategory.THUNDERSTORM: PresentationMetadata(
        iconId="cloud-lightning",
        backgroundTone="#616a6b",
        advisoryNote="Thunderstorm warning. Better to stay indoors.",
    ),
    ConditionCategory.DRIZZLE: PresentationMetadata(
        iconId="cloud-drizzle",
        backgroundTone="#aeb6bf",
        advisoryNote="Light rain. A raincoat should be enough.",
    ),
    ConditionCategory.MIST: _LOW_VISIBILITY,
    ConditionCategory.FOG: _LOW_VISIBILITY,
}


def metadata_for(category: str | ConditionCategory | None) -> PresentationMetadata:
    """Return the presentation metadata for a condition category.

    Total and case-insensitive: anything outside the table gets the default entry.

    Example:
        >>> metadata_for("RAIN").iconId
        'cloud-rain'
        >>> metadata_for(None) == DEFAULT_METADATA
        True
    """
    return PRESENTATION_TABLE.get(ConditionCategory.parse(category), DEFAULT_METADATA)


def icon_for(category: str | ConditionCategory | None) -> str:
    return metadata_for(category).iconId


def background_tone_for(category: str | ConditionCategory | None) -> str:
    return metadata_for(category).backgroundTone


def advisory_note_for(category: str | ConditionCategory | None) -> str:
    return metadata_for(category).advisoryNote

"""Declarative animation descriptors derived from session state transitions.

The presentation layer plays these back; nothing in the pipeline waits for them.
"""

from ..models.state import (
    AwaitingFetchState,
    LoadingState,
    LocatingState,
    RequestState,
    SuccessState,
)
from ..models.view import TransitionSpec

CONTENT_ENTRANCE = [
    TransitionSpec(target="content.scale", fromValue=0.8, toValue=1.0, durationMs=1000),
]

CARD_RESET = [
    TransitionSpec(target="card.opacity", fromValue=0.0, toValue=0.0, durationMs=0),
    TransitionSpec(target="card.translateY", fromValue=50.0, toValue=50.0, durationMs=0),
]

CARD_REVEAL = [
    TransitionSpec(target="card.opacity", fromValue=0.0, toValue=1.0, durationMs=800),
    TransitionSpec(target="card.translateY", fromValue=50.0, toValue=0.0, durationMs=800),
    TransitionSpec(
        target="city.opacity",
        fromValue=0.0,
        toValue=1.0,
        durationMs=1000,
        startDelayMs=400,
    ),
]

BUTTON_PRESS = [
    TransitionSpec(target="button.scale", fromValue=1.0, toValue=0.95, durationMs=100),
    TransitionSpec(
        target="button.scale",
        fromValue=0.95,
        toValue=1.0,
        durationMs=0,
        startDelayMs=100,
        easing="spring",
    ),
]


def transitions_for(
    previous: RequestState,
    current: RequestState,
    fetch_requested: bool = False,
) -> list[TransitionSpec]:
    """Return the animation steps for moving from `previous` to `current`.

    Args:
        previous: State before the transition
        current: State after the transition
        fetch_requested: Whether the transition was caused by the fetch trigger

    Returns:
        Ordered list of transition descriptors (possibly empty)

    Example:
        >>> from weather_screen.models.weather import Coordinate
        >>> coord = Coordinate(latitude=1.0, longitude=2.0)
        >>> [t.target for t in transitions_for(LocatingState(), AwaitingFetchState(coordinate=coord))]
        ['content.scale']
    """
    steps: list[TransitionSpec] = []
    if fetch_requested:
        steps.extend(BUTTON_PRESS)
    if isinstance(previous, LocatingState) and isinstance(current, AwaitingFetchState):
        steps.extend(CONTENT_ENTRANCE)
    elif isinstance(current, LoadingState) and not isinstance(previous, LoadingState):
        steps.extend(CARD_RESET)
    elif isinstance(previous, LoadingState) and isinstance(current, SuccessState):
        steps.extend(CARD_REVEAL)
    return steps

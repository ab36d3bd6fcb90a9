"""Screen session: one request state, pure transitions, and the controller driving them."""

from loguru import logger

from ..models.state import (
    AwaitingFetchState,
    FailedState,
    FetchRequested,
    IdleState,
    LoadingState,
    LocatingState,
    LocationFailedState,
    LocationFailure,
    LocationResolved,
    LocationUnavailable,
    Mounted,
    RequestState,
    SessionEvent,
    SuccessState,
    WeatherFailed,
    WeatherLoaded,
)
from ..models.view import ScreenPayload, TransitionSpec
from .animations import transitions_for
from .assembler import assemble
from .conditions import DEFAULT_METADATA
from .location import (
    LocationPermissionDeniedError,
    LocationProvider,
    LocationResolutionError,
)
from .openweather import (
    WeatherGateway,
    WeatherNetworkError,
    WeatherProviderRejectedError,
)

LOCATION_NOT_AVAILABLE_MESSAGE = "Location not available yet. Please wait..."
NETWORK_FAILURE_MESSAGE = "Network error. Please try again."
LOCATION_FAILURE_MESSAGES = {
    LocationFailure.PERMISSION_DENIED: "Permission to access location was denied.",
    LocationFailure.RESOLUTION_FAILED: "Failed to get location. Please try again.",
}

BUTTON_LABEL = "Check Weather"
BUTTON_LABEL_LOADING = "Loading..."


class InvalidTransitionError(Exception):
    """Raised when an event cannot happen in the current state."""

    def __init__(self, state: RequestState, event: SessionEvent):
        super().__init__(f"Event '{event.kind}' is not valid in state '{state.kind}'")
        self.state = state
        self.event = event


def _on_fetch_requested(state: RequestState) -> RequestState:
    if isinstance(state, (IdleState, LocatingState)):
        return state.model_copy(update={"message": LOCATION_NOT_AVAILABLE_MESSAGE})
    if isinstance(state, LocationFailedState):
        return LocationFailedState(reason=state.reason, message=LOCATION_NOT_AVAILABLE_MESSAGE)
    if isinstance(state, LoadingState):
        # Trigger is disabled while loading
        return state
    return LoadingState(coordinate=state.coordinate)


def transition(state: RequestState, event: SessionEvent) -> RequestState:
    """Compute the next request state.

    Pure: never mutates `state`, always returns a replacement.

    Args:
        state: Current request state
        event: Event to apply

    Returns:
        The next request state

    Raises:
        InvalidTransitionError: If the event cannot occur in `state`

    Example:
        >>> transition(IdleState(), Mounted()).kind
        'locating'
    """
    if isinstance(event, FetchRequested):
        return _on_fetch_requested(state)

    if isinstance(event, Mounted) and isinstance(state, IdleState):
        return LocatingState()

    if isinstance(state, LocatingState):
        if isinstance(event, LocationResolved):
            return AwaitingFetchState(coordinate=event.coordinate)
        if isinstance(event, LocationUnavailable):
            return LocationFailedState(
                reason=event.reason,
                message=LOCATION_FAILURE_MESSAGES[event.reason],
            )

    if isinstance(state, LoadingState):
        if isinstance(event, WeatherLoaded):
            return SuccessState(
                coordinate=state.coordinate,
                current=event.current,
                forecast=event.forecast,
            )
        if isinstance(event, WeatherFailed):
            return FailedState(coordinate=state.coordinate, message=event.message)

    raise InvalidTransitionError(state, event)


class WeatherSession:
    """Controller owning the single request state of one screen session.

    Resolves the location once on `start`, runs user-initiated fetches through
    the weather gateway, and renders the current state for the presentation layer.

    Example:
        >>> async def example(provider, gateway):
        ...     session = WeatherSession(provider, gateway)
        ...     await session.start()
        ...     await session.fetch()
        ...     return session.render().weather
    """

    def __init__(
        self,
        location_provider: LocationProvider,
        gateway: WeatherGateway,
        auto_fetch: bool = False,
    ):
        self._location_provider = location_provider
        self._gateway = gateway
        self._auto_fetch = auto_fetch
        self._state: RequestState = IdleState()
        self._transitions: list[TransitionSpec] = []

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def transitions(self) -> list[TransitionSpec]:
        """Animation steps produced by the most recent transition."""
        return list(self._transitions)

    def _apply(self, event: SessionEvent, fetch_requested: bool = False) -> RequestState:
        previous = self._state
        self._state = transition(previous, event)
        self._transitions = transitions_for(previous, self._state, fetch_requested)
        logger.debug(
            "Session transition",
            event=event.kind,
            previous=previous.kind,
            current=self._state.kind,
        )
        return self._state

    async def start(self) -> RequestState:
        """Mount the screen: resolve the location once, then optionally auto-fetch."""
        self._apply(Mounted())

        try:
            coordinate = await self._location_provider.resolve_location()
        except LocationPermissionDeniedError:
            return self._apply(LocationUnavailable(reason=LocationFailure.PERMISSION_DENIED))
        except LocationResolutionError as e:
            logger.warning("Location resolution failed", error=str(e))
            return self._apply(LocationUnavailable(reason=LocationFailure.RESOLUTION_FAILED))
        except Exception:
            logger.exception("Unexpected error during location lookup")
            self._apply(LocationUnavailable(reason=LocationFailure.RESOLUTION_FAILED))
            raise

        self._apply(LocationResolved(coordinate=coordinate))

        if self._auto_fetch:
            return await self.fetch()
        return self._state

    async def fetch(self) -> RequestState:
        """Handle the user's fetch action.

        Without a coordinate this only sets the "location not available" message,
        and while a fetch is pending it does nothing. Otherwise the gateway result
        replaces whatever Success or Failed state came before.
        """
        previous = self._state
        state = self._apply(FetchRequested(), fetch_requested=True)
        if isinstance(previous, LoadingState) or not isinstance(state, LoadingState):
            return state

        try:
            bundle = await self._gateway.fetch_weather(state.coordinate)
        except WeatherProviderRejectedError as e:
            return self._apply(WeatherFailed(message=e.message))
        except WeatherNetworkError:
            return self._apply(WeatherFailed(message=NETWORK_FAILURE_MESSAGE))
        except Exception:
            logger.exception("Unexpected error during weather fetch")
            self._apply(WeatherFailed(message=NETWORK_FAILURE_MESSAGE))
            raise

        return self._apply(WeatherLoaded(current=bundle.current, forecast=bundle.forecast))

    def render(self) -> ScreenPayload:
        """Build the screen payload for the current state."""
        state = self._state
        weather = None
        if isinstance(state, SuccessState):
            weather = assemble(state.current, state.forecast)

        loading = isinstance(state, LoadingState)
        return ScreenPayload(
            state=state.kind,
            message=getattr(state, "message", None),
            loading=loading,
            fetchEnabled=isinstance(state, (AwaitingFetchState, SuccessState, FailedState)),
            buttonLabel=BUTTON_LABEL_LOADING if loading else BUTTON_LABEL,
            backgroundTone=weather.backgroundTone if weather else DEFAULT_METADATA.backgroundTone,
            weather=weather,
            transitions=self.transitions,
        )

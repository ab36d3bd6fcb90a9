"""Tests for transition descriptors."""

from weather_screen.models.state import (
    AwaitingFetchState,
    FailedState,
    IdleState,
    LoadingState,
    LocatingState,
    SuccessState,
)
from weather_screen.services.animations import transitions_for


class TestTransitionsFor:
    """Test which animation steps each state change produces."""

    def test_location_resolved_scales_content_in(self, coordinate):
        steps = transitions_for(LocatingState(), AwaitingFetchState(coordinate=coordinate))

        assert len(steps) == 1
        assert steps[0].target == "content.scale"
        assert (steps[0].fromValue, steps[0].toValue, steps[0].durationMs) == (0.8, 1.0, 1000)

    def test_success_reveals_card(self, coordinate, bundle):
        steps = transitions_for(
            LoadingState(coordinate=coordinate),
            SuccessState(coordinate=coordinate, current=bundle.current, forecast=bundle.forecast),
        )

        by_target = {step.target: step for step in steps}
        assert set(by_target) == {"card.opacity", "card.translateY", "city.opacity"}
        assert by_target["card.opacity"].durationMs == 800
        assert by_target["card.translateY"].fromValue == 50.0
        assert by_target["card.translateY"].toValue == 0.0
        assert by_target["city.opacity"].startDelayMs == 400
        assert by_target["city.opacity"].durationMs == 1000

    def test_fetch_resets_card_and_presses_button(self, coordinate):
        steps = transitions_for(
            AwaitingFetchState(coordinate=coordinate),
            LoadingState(coordinate=coordinate),
            fetch_requested=True,
        )

        targets = [step.target for step in steps]
        assert targets[:2] == ["button.scale", "button.scale"]
        assert steps[1].easing == "spring"
        assert "card.opacity" in targets
        assert "card.translateY" in targets

    def test_failure_has_no_card_animation(self, coordinate):
        steps = transitions_for(
            LoadingState(coordinate=coordinate),
            FailedState(coordinate=coordinate, message="nope"),
        )

        assert steps == []

    def test_mount_has_no_animation(self):
        assert transitions_for(IdleState(), LocatingState()) == []

    def test_press_while_loading_only_animates_button(self, coordinate):
        loading = LoadingState(coordinate=coordinate)

        steps = transitions_for(loading, loading, fetch_requested=True)

        assert {step.target for step in steps} == {"button.scale"}

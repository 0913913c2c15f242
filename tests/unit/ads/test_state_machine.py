"""Unit tests for the ad request state machine."""

import pytest

from dashboard.ads.base import AdAction, AdEvent, AdStatus
from dashboard.ads.exceptions import InvalidTransitionError
from dashboard.ads.state_machine import (
    VALID_TRANSITIONS,
    apply_event,
    available_actions,
    can_review,
    can_transition,
    can_update_schedule,
    is_terminal,
    next_status,
)

EXPECTED_ACTIONS: dict[AdStatus, set[AdAction]] = {
    AdStatus.SUBMITTED: {AdAction.APPROVE, AdAction.REJECT, AdAction.CANCEL},
    AdStatus.UNDER_REVIEW: {AdAction.REJECT, AdAction.CANCEL},
    AdStatus.PENDING_PAYMENT: {AdAction.CANCEL},
    AdStatus.PAID: {AdAction.SCHEDULE},
    AdStatus.SCHEDULED: {AdAction.UPDATE_SCHEDULE},
    AdStatus.RUNNING: {
        AdAction.PAUSE,
        AdAction.COMPLETE,
        AdAction.CANCEL,
        AdAction.UPDATE_SCHEDULE,
    },
    AdStatus.PAUSED: {
        AdAction.RESUME,
        AdAction.COMPLETE,
        AdAction.CANCEL,
        AdAction.UPDATE_SCHEDULE,
    },
    AdStatus.COMPLETED: set(),
    AdStatus.REJECTED: set(),
    AdStatus.CANCELLED: set(),
}


class TestAvailableActions:
    def test_every_status_has_a_row(self):
        assert set(VALID_TRANSITIONS) == set(AdStatus)

    @pytest.mark.parametrize("status", list(AdStatus))
    @pytest.mark.parametrize("action", list(AdAction))
    def test_matches_transition_table(self, status, action):
        expected = action in EXPECTED_ACTIONS[status]
        assert (action in available_actions(status)) is expected
        assert can_transition(status, action) is expected

    def test_eighty_combinations(self):
        assert len(AdStatus) * len(AdAction) == 80

    @pytest.mark.parametrize(
        "status", [AdStatus.COMPLETED, AdStatus.REJECTED, AdStatus.CANCELLED]
    )
    def test_terminal_statuses_offer_nothing(self, status):
        assert available_actions(status) == frozenset()
        assert is_terminal(status) is True

    def test_accepts_string_values(self):
        assert available_actions("PAID") == frozenset({AdAction.SCHEDULE})
        assert can_transition("RUNNING", "pause") is True
        assert can_transition("PAUSED", "update-schedule") is True

    def test_unknown_status_offers_nothing(self):
        assert available_actions("ARCHIVED") == frozenset()
        assert can_transition("ARCHIVED", "approve") is False

    def test_unknown_action_is_not_available(self):
        assert can_transition(AdStatus.SUBMITTED, "publish") is False

    def test_non_terminal_statuses(self):
        for status in [AdStatus.SUBMITTED, AdStatus.PAID, AdStatus.PAUSED]:
            assert is_terminal(status) is False


class TestNextStatus:
    def test_happy_path_lifecycle(self):
        status = next_status(AdStatus.SUBMITTED, AdAction.APPROVE)
        assert status == AdStatus.PENDING_PAYMENT
        status = apply_event(status, AdEvent.PAYMENT_CONFIRMED)
        assert status == AdStatus.PAID
        status = next_status(status, AdAction.SCHEDULE)
        assert status == AdStatus.SCHEDULED
        status = apply_event(status, AdEvent.START_REACHED)
        assert status == AdStatus.RUNNING
        status = next_status(status, AdAction.PAUSE)
        assert status == AdStatus.PAUSED
        status = next_status(status, AdAction.RESUME)
        assert status == AdStatus.RUNNING
        status = next_status(status, AdAction.COMPLETE)
        assert status == AdStatus.COMPLETED
        assert available_actions(status) == frozenset()

    def test_reject_from_review(self):
        assert next_status(AdStatus.UNDER_REVIEW, AdAction.REJECT) == AdStatus.REJECTED

    def test_cancel_while_paused(self):
        assert next_status(AdStatus.PAUSED, AdAction.CANCEL) == AdStatus.CANCELLED

    def test_update_schedule_keeps_status(self):
        for status in [AdStatus.SCHEDULED, AdStatus.RUNNING, AdStatus.PAUSED]:
            assert next_status(status, AdAction.UPDATE_SCHEDULE) == status

    def test_invalid_transition_raises(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            next_status(AdStatus.RUNNING, AdAction.APPROVE)
        assert exc_info.value.current_status == "RUNNING"
        assert exc_info.value.action == "approve"
        assert exc_info.value.error_type == "invalid_transition"

    def test_terminal_raises(self):
        with pytest.raises(InvalidTransitionError):
            next_status(AdStatus.CANCELLED, AdAction.RESUME)


class TestExternalEvents:
    def test_events_are_never_operator_actions(self):
        values = {action.value for action in AdAction}
        for event in AdEvent:
            assert event.value not in values

    def test_payment_only_from_pending_payment(self):
        with pytest.raises(InvalidTransitionError, match="cannot occur"):
            apply_event(AdStatus.SUBMITTED, AdEvent.PAYMENT_CONFIRMED)

    def test_start_only_from_scheduled(self):
        with pytest.raises(InvalidTransitionError):
            apply_event(AdStatus.PAID, AdEvent.START_REACHED)

    def test_unknown_event_raises(self):
        with pytest.raises(InvalidTransitionError):
            apply_event(AdStatus.SCHEDULED, "station_rebooted")

    def test_string_event(self):
        assert apply_event("PENDING_PAYMENT", "payment_confirmed") == AdStatus.PAID


class TestAmendmentPredicates:
    @pytest.mark.parametrize(
        "status,expected",
        [
            (AdStatus.SUBMITTED, True),
            (AdStatus.UNDER_REVIEW, True),
            (AdStatus.PENDING_PAYMENT, False),
            (AdStatus.RUNNING, False),
            (AdStatus.REJECTED, False),
        ],
    )
    def test_can_review(self, status, expected):
        assert can_review(status) is expected

    @pytest.mark.parametrize(
        "status,expected",
        [
            (AdStatus.PAID, False),
            (AdStatus.SCHEDULED, True),
            (AdStatus.RUNNING, True),
            (AdStatus.PAUSED, True),
            (AdStatus.COMPLETED, False),
        ],
    )
    def test_can_update_schedule(self, status, expected):
        assert can_update_schedule(status) is expected

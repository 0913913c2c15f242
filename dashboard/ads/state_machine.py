"""Ad request lifecycle state machine.

States: SUBMITTED → PENDING_PAYMENT → PAID → SCHEDULED → RUNNING ↔ PAUSED → COMPLETED
        also: SUBMITTED/UNDER_REVIEW → REJECTED, most pre-completion states → CANCELLED

The operator table below is the only place action legality is defined;
the action list offered for a record, the validator and the tests all
read it.
"""

from __future__ import annotations

from dashboard.ads.base import TERMINAL_STATUSES, AdAction, AdEvent, AdStatus
from dashboard.ads.exceptions import InvalidTransitionError

# Map of current_status → {action: next_status}
VALID_TRANSITIONS: dict[AdStatus, dict[AdAction, AdStatus]] = {
    AdStatus.SUBMITTED: {
        AdAction.APPROVE: AdStatus.PENDING_PAYMENT,
        AdAction.REJECT: AdStatus.REJECTED,
        AdAction.CANCEL: AdStatus.CANCELLED,
    },
    AdStatus.UNDER_REVIEW: {
        AdAction.REJECT: AdStatus.REJECTED,
        AdAction.CANCEL: AdStatus.CANCELLED,
    },
    AdStatus.PENDING_PAYMENT: {
        AdAction.CANCEL: AdStatus.CANCELLED,
    },
    AdStatus.PAID: {
        AdAction.SCHEDULE: AdStatus.SCHEDULED,
    },
    AdStatus.SCHEDULED: {
        AdAction.UPDATE_SCHEDULE: AdStatus.SCHEDULED,
    },
    AdStatus.RUNNING: {
        AdAction.PAUSE: AdStatus.PAUSED,
        AdAction.COMPLETE: AdStatus.COMPLETED,
        AdAction.CANCEL: AdStatus.CANCELLED,
        AdAction.UPDATE_SCHEDULE: AdStatus.RUNNING,
    },
    AdStatus.PAUSED: {
        AdAction.RESUME: AdStatus.RUNNING,
        AdAction.COMPLETE: AdStatus.COMPLETED,
        AdAction.CANCEL: AdStatus.CANCELLED,
        AdAction.UPDATE_SCHEDULE: AdStatus.PAUSED,
    },
    AdStatus.COMPLETED: {},  # terminal
    AdStatus.REJECTED: {},   # terminal
    AdStatus.CANCELLED: {},  # terminal
}

# Transitions driven by payment confirmation and the campaign clock
EVENT_TRANSITIONS: dict[AdStatus, dict[AdEvent, AdStatus]] = {
    AdStatus.PENDING_PAYMENT: {AdEvent.PAYMENT_CONFIRMED: AdStatus.PAID},
    AdStatus.SCHEDULED: {AdEvent.START_REACHED: AdStatus.RUNNING},
}

REVIEWABLE_STATUSES: frozenset[AdStatus] = frozenset(
    {AdStatus.SUBMITTED, AdStatus.UNDER_REVIEW}
)


def _coerce_status(status: AdStatus | str) -> AdStatus | None:
    try:
        return AdStatus(status)
    except ValueError:
        return None


def _coerce_action(action: AdAction | str) -> AdAction | None:
    try:
        return AdAction(action)
    except ValueError:
        return None


def _label(value: AdStatus | AdAction | str) -> str:
    return value.value if isinstance(value, (AdStatus, AdAction)) else str(value)


def available_actions(status: AdStatus | str) -> frozenset[AdAction]:
    """Return the actions an operator may take on an ad in this status."""
    current = _coerce_status(status)
    if current is None:
        return frozenset()
    return frozenset(VALID_TRANSITIONS[current])


def can_transition(status: AdStatus | str, action: AdAction | str) -> bool:
    """Check whether the action is legal from the given status."""
    target = _coerce_action(action)
    return target is not None and target in available_actions(status)


def next_status(status: AdStatus | str, action: AdAction | str) -> AdStatus:
    """Return the status the action leads to, raising InvalidTransitionError if illegal."""
    if not can_transition(status, action):
        raise InvalidTransitionError(_label(status), _label(action))
    return VALID_TRANSITIONS[AdStatus(status)][AdAction(action)]


def apply_event(status: AdStatus | str, event: AdEvent | str) -> AdStatus:
    """Return the status an external event leads to."""
    current = _coerce_status(status)
    try:
        trigger = AdEvent(event)
    except ValueError:
        trigger = None
    transitions = EVENT_TRANSITIONS.get(current, {}) if current else {}
    if trigger is None or trigger not in transitions:
        label = event.value if isinstance(event, AdEvent) else str(event)
        raise InvalidTransitionError(
            _label(status),
            label,
            f"Event '{label}' cannot occur while the ad is {_label(status)}",
        )
    return transitions[trigger]


def is_terminal(status: AdStatus | str) -> bool:
    return _coerce_status(status) in TERMINAL_STATUSES


def can_review(status: AdStatus | str) -> bool:
    """Check whether the ad's content and placement may still be configured."""
    return _coerce_status(status) in REVIEWABLE_STATUSES


def can_update_schedule(status: AdStatus | str) -> bool:
    return can_transition(status, AdAction.UPDATE_SCHEDULE)

"""Pure entry points combining the state machine and the field validator.

Nothing here performs I/O or keeps state; identical inputs always give
identical verdicts. Committing an accepted verdict is the job of
:mod:`dashboard.ads.service`.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from dashboard.ads.base import (
    TRANSITION_ERROR_KEY,
    AdAction,
    AdStatus,
    TransitionAccepted,
    TransitionRejected,
    TransitionResult,
)
from dashboard.ads.config import AdSettings
from dashboard.ads.exceptions import InvalidTransitionError
from dashboard.ads.state_machine import (
    VALID_TRANSITIONS,
    available_actions,
    can_review,
    can_transition,
)
from dashboard.ads.validator import validate_fields

REVIEW = "review"

__all__ = [
    "REVIEW",
    "available_actions",
    "validate_and_transition",
    "validate_review",
]


def _label(value: Any) -> str:
    return value.value if isinstance(value, (AdStatus, AdAction)) else str(value)


def validate_and_transition(
    status: AdStatus | str,
    action: AdAction | str,
    fields: Mapping[str, Any] | None = None,
    *,
    today: date | None = None,
    current: Mapping[str, Any] | None = None,
    settings: AdSettings | None = None,
) -> TransitionResult:
    """
    Decide whether an action may be applied to an ad in the given status.

    The transition table is consulted first; field contracts are only
    checked for actions that are legal from ``status``.

    Args:
        status: The ad's current status.
        action: The requested action.
        fields: Operator input for the action.
        today: Reference day for date checks.
        current: Values stored on the record, needed by ``update-schedule``.
        settings: Validation limits.

    Returns:
        TransitionAccepted with the next status and the fields to submit,
        or TransitionRejected with one message per problem.
    """
    if not can_transition(status, action):
        error = InvalidTransitionError(_label(status), _label(action))
        return TransitionRejected(
            errors={TRANSITION_ERROR_KEY: error.message},
            status=_label(status),
            action=_label(action),
        )

    previous = AdStatus(status)
    requested = AdAction(action)
    normalized, errors = validate_fields(
        requested.value, fields, today=today, current=current, settings=settings
    )
    if errors:
        return TransitionRejected(errors=errors, status=previous.value, action=requested.value)

    return TransitionAccepted(
        action=requested.value,
        previous_status=previous,
        next_status=VALID_TRANSITIONS[previous][requested],
        normalized_fields=normalized,
    )


def validate_review(
    status: AdStatus | str,
    fields: Mapping[str, Any] | None = None,
    *,
    today: date | None = None,
    settings: AdSettings | None = None,
) -> TransitionResult:
    """Validate the review/configure step; the status is left unchanged."""
    if not can_review(status):
        error = InvalidTransitionError(
            _label(status),
            REVIEW,
            f"Ad request cannot be reviewed while it is {_label(status)}",
        )
        return TransitionRejected(
            errors={TRANSITION_ERROR_KEY: error.message},
            status=_label(status),
            action=REVIEW,
        )

    previous = AdStatus(status)
    normalized, errors = validate_fields(REVIEW, fields, today=today, settings=settings)
    if errors:
        return TransitionRejected(errors=errors, status=previous.value, action=REVIEW)

    return TransitionAccepted(
        action=REVIEW,
        previous_status=previous,
        next_status=previous,
        normalized_fields=normalized,
    )

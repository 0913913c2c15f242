"""Enumerations and verdict types shared by the ads lifecycle."""

from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from dashboard.ads.exceptions import FieldValidationError, InvalidTransitionError

# Error key for a state machine rejection
TRANSITION_ERROR_KEY = "_transition"
# Error key for a rejection that belongs to no single field
FORM_ERROR_KEY = "_form"


class AdStatus(str, Enum):
    """Lifecycle status of an ad request."""

    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    PENDING_PAYMENT = "PENDING_PAYMENT"
    PAID = "PAID"
    SCHEDULED = "SCHEDULED"
    RUNNING = "RUNNING"
    PAUSED = "PAUSED"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"


class AdAction(str, Enum):
    """Operator-initiated actions on an ad request."""

    APPROVE = "approve"
    REJECT = "reject"
    SCHEDULE = "schedule"
    PAUSE = "pause"
    RESUME = "resume"
    CANCEL = "cancel"
    COMPLETE = "complete"
    UPDATE_SCHEDULE = "update-schedule"


class AdEvent(str, Enum):
    """Transitions triggered outside the dashboard."""

    PAYMENT_CONFIRMED = "payment_confirmed"
    START_REACHED = "start_reached"


TERMINAL_STATUSES: frozenset[AdStatus] = frozenset(
    {AdStatus.COMPLETED, AdStatus.REJECTED, AdStatus.CANCELLED}
)


class TransitionAccepted(BaseModel):
    """Verdict for an action that may be committed."""

    model_config = ConfigDict(frozen=True)

    ok: Literal[True] = True
    action: str
    previous_status: AdStatus
    next_status: AdStatus
    normalized_fields: dict[str, Any] = Field(default_factory=dict)


class TransitionRejected(BaseModel):
    """Verdict for an action that must not be committed.

    ``errors`` maps a field name (or ``_transition`` / ``_form``) to the
    message shown to the operator.
    """

    model_config = ConfigDict(frozen=True)

    ok: Literal[False] = False
    errors: dict[str, str]
    status: str | None = None
    action: str | None = None

    @property
    def is_transition_error(self) -> bool:
        return TRANSITION_ERROR_KEY in self.errors

    def raise_for_errors(self) -> None:
        """Raise the exception matching this verdict."""
        if self.is_transition_error:
            raise InvalidTransitionError(
                self.status or "unknown",
                self.action or "unknown",
                self.errors[TRANSITION_ERROR_KEY],
            )
        raise FieldValidationError(dict(self.errors))


TransitionResult = Union[TransitionAccepted, TransitionRejected]

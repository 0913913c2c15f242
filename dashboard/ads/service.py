"""Ad lifecycle service: validate against the stored record, then commit."""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Mapping

from dashboard.ads.base import AdAction, TransitionAccepted, TransitionRejected
from dashboard.ads.client import AdsBackendClient
from dashboard.ads.config import AdSettings, get_ad_settings
from dashboard.ads.exceptions import ConflictingStateError
from dashboard.ads.lifecycle import (
    REVIEW,
    available_actions,
    validate_and_transition,
    validate_review,
)
from dashboard.ads.schemas import AdRequest
from dashboard.shared.utils.datetime_utils import today_utc
from dashboard.shared.utils.logging import ad_log_context, get_logger

logger = get_logger(__name__)


class AdLifecycleService:
    """
    Runs operator actions on ad requests.

    Each call re-reads the record, validates the request against the
    status actually stored, and only then hands the normalized fields to
    the backend, which re-checks the status when committing. Nothing is
    retried: a conflict is reported to the caller, who must reload.
    """

    def __init__(
        self,
        client: AdsBackendClient,
        today_provider: Callable[[], date] = today_utc,
        settings: AdSettings | None = None,
    ):
        self._client = client
        self._today = today_provider
        self._settings = settings or get_ad_settings()

    async def actions_for(self, ad_id: str, token: str | None) -> list[AdAction]:
        """Return the actions to offer for an ad, in declaration order."""
        record = await self._client.get_ad_request(ad_id, token)
        allowed = available_actions(record.status)
        return [action for action in AdAction if action in allowed]

    async def execute_action(
        self,
        ad_id: str,
        action: AdAction | str,
        fields: Mapping[str, Any] | None,
        token: str | None,
    ) -> AdRequest:
        """
        Validate and submit a lifecycle action.

        Raises:
            InvalidTransitionError: The action is not available in the stored status.
            FieldValidationError: One or more fields break the action's contract.
            ConflictingStateError: The status changed before the backend committed.
        """
        action_name = action.value if isinstance(action, AdAction) else str(action)
        with ad_log_context(ad_id, action=action_name):
            record = await self._client.get_ad_request(ad_id, token)
            verdict = validate_and_transition(
                record.status,
                action,
                fields,
                today=self._today(),
                current=record.schedule(),
                settings=self._settings,
            )
            accepted = self._require_accepted(verdict)

            try:
                if accepted.action == AdAction.UPDATE_SCHEDULE.value:
                    updated = await self._client.update_schedule(
                        ad_id, accepted.normalized_fields, token
                    )
                else:
                    updated = await self._client.execute_action(
                        ad_id, accepted.action, accepted.normalized_fields, token
                    )
            except ConflictingStateError:
                logger.warning(
                    "ad_state_conflict",
                    validated_status=accepted.previous_status.value,
                )
                raise

            logger.info(
                "ad_action_submitted",
                from_status=accepted.previous_status.value,
                to_status=updated.status.value,
            )
            return updated

    async def review(
        self,
        ad_id: str,
        fields: Mapping[str, Any] | None,
        token: str | None,
    ) -> AdRequest:
        """Validate and submit the review/configure step."""
        with ad_log_context(ad_id, action=REVIEW):
            record = await self._client.get_ad_request(ad_id, token)
            verdict = validate_review(
                record.status, fields, today=self._today(), settings=self._settings
            )
            accepted = self._require_accepted(verdict)

            try:
                updated = await self._client.review_ad_request(
                    ad_id, accepted.normalized_fields, token
                )
            except ConflictingStateError:
                logger.warning("ad_state_conflict")
                raise

            logger.info("ad_reviewed", fields=sorted(accepted.normalized_fields))
            return updated

    @staticmethod
    def _require_accepted(
        verdict: TransitionAccepted | TransitionRejected,
    ) -> TransitionAccepted:
        if isinstance(verdict, TransitionRejected):
            logger.info(
                "ad_action_rejected",
                status=verdict.status,
                errors=sorted(verdict.errors),
            )
            verdict.raise_for_errors()
        return verdict

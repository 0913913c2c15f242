"""HTTP client for the ads backend.

The backend owns ad request storage and performs the actual status
change; this client forwards the admin's ``Authorization`` header with
every call and turns backend failures into ad lifecycle exceptions.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Mapping, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from dashboard.ads.base import AdAction
from dashboard.ads.config import get_ad_settings
from dashboard.ads.exceptions import (
    AdAuthorizationError,
    AdBackendError,
    AdNotFoundError,
    ConflictingStateError,
)
from dashboard.ads.schemas import (
    AdRequest,
    AdRequestDetailResponse,
    AdRequestFilters,
    AdRequestListResponse,
)
from dashboard.shared.utils.logging import get_logger

logger = get_logger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


def encode_form(fields: Mapping[str, Any]) -> dict[str, str | list[str]]:
    """Serialize normalized fields as form values; lists become repeated keys."""
    form: dict[str, str | list[str]] = {}
    for name, value in fields.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            form[name] = [str(item) for item in value]
        elif isinstance(value, date):
            form[name] = value.isoformat()
        elif isinstance(value, Decimal):
            form[name] = f"{value:.2f}"
        else:
            form[name] = str(value)
    return form


class AdsBackendClient:
    """
    Client for the ``/ads/requests`` endpoints of the backend.

    Every call takes the caller's authorization token; the client holds
    no credentials of its own.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_ad_settings()
        self._base_url = (base_url or settings.backend_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.request_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> AdsBackendClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        token: str | None,
        response_model: type[ResponseT],
        failure_message: str,
        ad_id: str | None = None,
        **kwargs: Any,
    ) -> ResponseT:
        if not token:
            raise AdAuthorizationError()

        client = await self._get_client()
        try:
            response = await client.request(
                method,
                f"{self._base_url}/ads/requests{path}",
                headers={"Authorization": token},
                **kwargs,
            )
        except httpx.HTTPError as e:
            logger.error("ads_backend_unreachable", method=method, path=path, error=str(e))
            raise AdBackendError(failure_message) from e

        if response.is_success:
            try:
                return response_model.model_validate(response.json())
            except (ValidationError, ValueError) as e:
                logger.warning(
                    "ads_backend_invalid_response",
                    method=method,
                    path=path,
                    status_code=response.status_code,
                    error=str(e),
                )
                raise AdBackendError(failure_message, response.status_code) from e

        message = self._error_message(response) or failure_message
        logger.warning(
            "ads_backend_error",
            method=method,
            path=path,
            status_code=response.status_code,
            message=message,
        )
        if response.status_code in (401, 403):
            raise AdAuthorizationError(message)
        if response.status_code == 404 and ad_id is not None:
            raise AdNotFoundError(ad_id)
        if response.status_code == 409 and ad_id is not None:
            raise ConflictingStateError(ad_id, message)
        raise AdBackendError(message, response.status_code)

    @staticmethod
    def _error_message(response: httpx.Response) -> str | None:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            message = body.get("message") or body.get("detail")
            return message if isinstance(message, str) else None
        return None

    # ===========================================
    # READ OPERATIONS
    # ===========================================

    async def list_ad_requests(
        self,
        filters: AdRequestFilters | None,
        token: str | None,
    ) -> AdRequestListResponse:
        """List ad requests matching the filters."""
        params = filters.to_params() if filters else {}
        return await self._request(
            "GET",
            "",
            token,
            AdRequestListResponse,
            "Failed to fetch ad requests",
            params=params,
        )

    async def get_ad_request(self, ad_id: str, token: str | None) -> AdRequest:
        """Fetch one ad request with its stations, content and transaction."""
        response = await self._request(
            "GET",
            f"/{ad_id}",
            token,
            AdRequestDetailResponse,
            "Failed to fetch ad request detail",
            ad_id=ad_id,
        )
        return response.data

    # ===========================================
    # WRITE OPERATIONS
    # ===========================================

    async def review_ad_request(
        self,
        ad_id: str,
        fields: Mapping[str, Any],
        token: str | None,
    ) -> AdRequest:
        """Submit validated review/configure fields."""
        response = await self._request(
            "PATCH",
            f"/{ad_id}/review",
            token,
            AdRequestDetailResponse,
            "Failed to review ad request",
            ad_id=ad_id,
            data=encode_form(fields),
        )
        return response.data

    async def execute_action(
        self,
        ad_id: str,
        action: AdAction | str,
        fields: Mapping[str, Any],
        token: str | None,
    ) -> AdRequest:
        """Submit a validated lifecycle action."""
        action_value = action.value if isinstance(action, AdAction) else action
        form = {"action": action_value, **encode_form(fields)}
        response = await self._request(
            "POST",
            f"/{ad_id}/action",
            token,
            AdRequestDetailResponse,
            "Failed to execute ad action",
            ad_id=ad_id,
            data=form,
        )
        return response.data

    async def update_schedule(
        self,
        ad_id: str,
        fields: Mapping[str, Any],
        token: str | None,
    ) -> AdRequest:
        """Submit changed schedule dates."""
        response = await self._request(
            "PATCH",
            f"/{ad_id}/update-schedule",
            token,
            AdRequestDetailResponse,
            "Failed to update schedule",
            ad_id=ad_id,
            data=encode_form(fields),
        )
        return response.data

"""Custom exceptions for the ads lifecycle."""

from fastapi import HTTPException, status


class AdServiceError(Exception):
    """Base exception for ad lifecycle errors."""

    def __init__(self, message: str, error_type: str = "ad_service_error"):
        self.message = message
        self.error_type = error_type
        super().__init__(message)


class InvalidTransitionError(AdServiceError):
    """Raised when an action is not available in the ad's current status."""

    def __init__(self, current_status: str, action: str, message: str | None = None):
        super().__init__(
            message
            or f"Action '{action}' is not available while the ad is {current_status}",
            "invalid_transition",
        )
        self.current_status = current_status
        self.action = action


class FieldValidationError(AdServiceError):
    """Raised when one or more fields break the action's field contract."""

    def __init__(self, errors: dict[str, str]):
        fields = ", ".join(sorted(errors))
        super().__init__(f"Invalid fields: {fields}", "field_validation")
        self.errors = errors


class ConflictingStateError(AdServiceError):
    """Raised when the ad's status changed between validation and commit.

    The record must be re-fetched and the action re-validated; the old
    verdict is never reapplied.
    """

    def __init__(self, ad_id: str, message: str | None = None):
        super().__init__(
            message or f"Ad request '{ad_id}' changed status; reload and try again",
            "conflicting_state",
        )
        self.ad_id = ad_id


class AdNotFoundError(AdServiceError):
    """Raised when the backend has no ad request with the given id."""

    def __init__(self, ad_id: str):
        super().__init__(f"Ad request '{ad_id}' not found", "ad_not_found")
        self.ad_id = ad_id


class AdAuthorizationError(AdServiceError):
    """Raised when a backend call is attempted without credentials."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message, "unauthorized")


class AdBackendError(AdServiceError):
    """Raised when the ads backend answers with an unexpected error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message, "backend_error")
        self.status_code = status_code


def raise_http_exception(error: AdServiceError) -> None:
    """Convert AdServiceError to HTTPException for the embedding HTTP layer."""
    status_map = {
        "invalid_transition": status.HTTP_409_CONFLICT,
        "field_validation": status.HTTP_400_BAD_REQUEST,
        "conflicting_state": status.HTTP_409_CONFLICT,
        "ad_not_found": status.HTTP_404_NOT_FOUND,
        "unauthorized": status.HTTP_401_UNAUTHORIZED,
        "backend_error": status.HTTP_502_BAD_GATEWAY,
        "ad_service_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
    }
    code = status_map.get(error.error_type, status.HTTP_500_INTERNAL_SERVER_ERROR)

    detail = {
        "type": f"https://admin.chargenet.app/errors/{error.error_type}",
        "title": error.error_type.replace("_", " ").title(),
        "status": code,
        "detail": error.message,
    }
    if isinstance(error, FieldValidationError):
        detail["errors"] = error.errors

    raise HTTPException(status_code=code, detail=detail)

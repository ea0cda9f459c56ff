"""Domain errors raised by the editor services and request gate.

Every error carries the HTTP status and machine-readable code it is reported
with, so the HTTP layer maps them to responses in a single handler.
"""

from typing import Any


class PriceEditorError(Exception):
    """Base class for errors reported to editor clients."""

    status_code: int = 500
    code: str = "wpe_error"
    default_message: str = "Server error. Please try again later."

    def __init__(self, message: str | None = None, **context: Any) -> None:
        self.message = message or self.default_message
        self.context = context
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class AuthenticationError(PriceEditorError):
    status_code = 401
    code = "rest_not_logged_in"
    default_message = "You must be logged in to access this endpoint."


class PermissionDeniedError(PriceEditorError):
    status_code = 403
    code = "rest_forbidden"
    default_message = "You do not have permission to manage products."


class InvalidNonceError(PriceEditorError):
    status_code = 403
    code = "invalid_nonce"
    default_message = "Security check failed."


class RateLimitExceededError(PriceEditorError):
    status_code = 429
    code = "rest_rate_limit"
    default_message = "Rate limit exceeded. Please try again later."

    def __init__(self, retry_after: int = 0, message: str | None = None) -> None:
        super().__init__(message, retry_after=retry_after)
        self.retry_after = max(0, retry_after)

    @property
    def headers(self) -> dict[str, str] | None:
        return {"Retry-After": str(self.retry_after)}


class FieldValidationError(PriceEditorError):
    """A submitted value failed the rules of its field."""

    status_code = 400
    code = "wpe_invalid_field"
    default_message = "Invalid value."


class UnknownFieldError(FieldValidationError):
    def __init__(self, field: str) -> None:
        super().__init__(f"Unknown field: {field}", field=field)
        self.field = field


class BadRequestError(PriceEditorError):
    """A required request parameter is missing or malformed."""

    status_code = 400
    code = "invalid_argument"
    default_message = "Invalid request."


class ProductNotFoundError(PriceEditorError):
    status_code = 404
    code = "wpe_product_not_found"
    default_message = "Product not found"

    def __init__(self, product_id: int) -> None:
        super().__init__(product_id=product_id)
        self.product_id = product_id


class ProductSaveError(PriceEditorError):
    """The host store refused to persist a change."""

    status_code = 400
    code = "wpe_update_failed"
    default_message = "Failed to save product"


class HostUnavailableError(PriceEditorError):
    """The host store could not be reached or answered with a server error."""

    status_code = 502
    code = "wpe_host_unavailable"
    default_message = "The store is not reachable. Please try again later."

"""Error taxonomy shared by the store, the services and the HTTP layer.

Every error carries a machine-readable ``kind`` and the HTTP status the web
layer answers with.  ``retryable`` tells callers whether resubmitting the same
request can succeed; nothing in this package retries on its own.
"""

from __future__ import annotations


class CarServiceError(Exception):
    kind = "error"
    status_code = 500
    retryable = False

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"status": "error", "message": self.message, "error": self.kind}
        if self.details:
            body["details"] = self.details
        return body


class ValidationError(CarServiceError):
    kind = "validation_error"
    status_code = 400


class UnauthorizedError(CarServiceError):
    kind = "unauthorized"
    status_code = 401


class NotFoundError(CarServiceError):
    kind = "not_found"
    status_code = 404


class ConflictError(CarServiceError):
    kind = "conflict"
    status_code = 409
    retryable = True


class InternalError(CarServiceError):
    kind = "internal_error"
    status_code = 500
    retryable = True


class MalformedBillNumberError(InternalError):
    """A stored or supplied bill number does not match ``<prefix>/<seq>``."""

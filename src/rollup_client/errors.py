"""Error hierarchy for the rollup Python client."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(slots=True)
class RequestDetails:
    operation: str
    method: str
    path: str
    status_code: int | None = None
    response_body: Any | None = None


class RollupClientError(Exception):
    """Base class for all client errors."""


class ParameterTypeError(RollupClientError, TypeError):
    """Raised when a parameter is read or written as the wrong wire type.

    This signals a bug in a parameter declaration, not a condition callers
    are expected to recover from.
    """

    def __init__(self, name: str, wire_type: str, value: Any) -> None:
        super().__init__(f"parameter {name!r} cannot be handled as {wire_type}: {value!r}")
        self.name = name
        self.wire_type = wire_type
        self.value = value


class BodyNotSupportedError(RollupClientError, ValueError):
    """Raised when a body is attached to an endpoint that does not accept one."""

    def __init__(self, operation: str, method: str) -> None:
        super().__init__(f"{operation} ({method}) does not accept a request body")
        self.operation = operation
        self.method = method


class TransportError(RollupClientError):
    """Raised when the engine could not be reached or did not answer."""


class ApiError(RollupClientError):
    """Raised when the engine answers with a status the caller did not allow."""

    def __init__(self, message: str, *, details: RequestDetails) -> None:
        super().__init__(message)
        self.details = details

    @property
    def reason(self) -> str | None:
        return engine_reason(self.details.response_body)


class AuthError(ApiError):
    """Raised for 401 and 403 answers."""


class ValidationError(ApiError):
    """Raised for invalid requests rejected by the engine."""


class NotFoundError(ApiError):
    """Raised when the requested job or index does not exist."""


class ConflictError(ApiError):
    """Raised when a job already exists or is in the wrong state."""


class ServerError(ApiError):
    """Raised for 5xx answers."""


class ClientTimeoutError(TransportError):
    """Raised when the engine does not answer within the client timeout."""


_STATUS_ERRORS: dict[int, type[ApiError]] = {
    400: ValidationError,
    401: AuthError,
    403: AuthError,
    404: NotFoundError,
    409: ConflictError,
}


def engine_reason(body: Any) -> str | None:
    """Pull ``type: reason`` out of an engine error body, if it has one."""
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, str):
        return error or None
    if not isinstance(error, dict):
        return None
    parts = [str(error[key]) for key in ("type", "reason") if error.get(key)]
    return ": ".join(parts) or None


def classify_api_error(details: RequestDetails) -> ApiError:
    status = details.status_code or 0
    message = f"{details.operation} ({details.method} {details.path}) failed with status {status}"
    reason = engine_reason(details.response_body)
    if reason:
        message = f"{message}: {reason}"

    error_type = _STATUS_ERRORS.get(status)
    if error_type is None:
        error_type = ServerError if status >= 500 else ApiError
    return error_type(message, details=details)

from __future__ import annotations

from enum import Enum


class ServiceErrorKind(str, Enum):
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    UNKNOWN = "unknown"


class ServiceError(RuntimeError):
    """Failure reported by a translation or speech backend."""

    kind = ServiceErrorKind.UNKNOWN

    def __init__(self, message: str = "") -> None:
        super().__init__(message or "Service request failed")

    @property
    def message(self) -> str:
        return str(self)


class ServiceUnauthorizedError(ServiceError):
    kind = ServiceErrorKind.UNAUTHORIZED


class ServiceRateLimitedError(ServiceError):
    kind = ServiceErrorKind.RATE_LIMITED


class ServiceBadRequestError(ServiceError):
    kind = ServiceErrorKind.BAD_REQUEST


class ServiceNotFoundError(ServiceError):
    kind = ServiceErrorKind.NOT_FOUND


class ServiceUnknownError(ServiceError):
    kind = ServiceErrorKind.UNKNOWN


class PlaybackError(RuntimeError):
    pass


_BY_STATUS: dict[int, type[ServiceError]] = {
    400: ServiceBadRequestError,
    401: ServiceUnauthorizedError,
    404: ServiceNotFoundError,
    429: ServiceRateLimitedError,
}


def error_for_status(
    status: int,
    message: str,
    *,
    allowed: tuple[ServiceErrorKind, ...] | None = None,
) -> ServiceError:
    """Map an HTTP status to the error taxonomy.

    `allowed` narrows the kinds an endpoint can report; anything outside it
    degrades to ServiceUnknownError.
    """
    cls = _BY_STATUS.get(int(status), ServiceUnknownError)
    if allowed is not None and cls.kind not in allowed:
        cls = ServiceUnknownError
    return cls(message)

"""Error taxonomy shared by adapters and the reconciliation workflow.

Upstream errors carry the same metadata the upstream service uses in its own
error envelopes (an error code, a numeric code and the HTTP status), so a run
report can echo them verbatim. Soft outcomes such as "already persisted" or
"content unchanged" are not errors; they are reported through item statuses and
write results instead.
"""

from __future__ import annotations

from typing import ClassVar


class AuthError(RuntimeError):
    """Raised when the client-credentials exchange fails or yields no access token."""


class UpstreamAPIError(RuntimeError):
    """Base class for non-2xx responses and malformed payloads from the upstream API."""

    error_code: ClassVar[str] = "errors.hotfixmirror.upstream"
    numeric_code: ClassVar[int] = 1000
    status_code: ClassVar[int] = 500
    default_message: ClassVar[str] = "Upstream error"

    def __init__(self, message: str | None = None, *message_vars: str) -> None:
        self.template = message or self.default_message
        self.message_vars = message_vars
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """Message with ``{0}``-style placeholders substituted by the message variables."""

        rendered = self.template
        for index, value in enumerate(self.message_vars):
            rendered = rendered.replace(f"{{{index}}}", value)
        return rendered

    def shortened(self) -> str:
        return f"{self.error_code} - {self.message}"


class BadRequestError(UpstreamAPIError):
    """4xx responses other than 401, and payloads failing schema validation."""

    error_code = "errors.hotfixmirror.badRequest"
    numeric_code = 1001
    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(UpstreamAPIError):
    error_code = "errors.hotfixmirror.unauthorized"
    numeric_code = 1002
    status_code = 401
    default_message = "Unauthorized"


class NotFoundError(UpstreamAPIError):
    error_code = "errors.hotfixmirror.notFound"
    numeric_code = 1004
    status_code = 404
    default_message = "Not found"


class UpstreamError(UpstreamAPIError):
    """5xx responses other than 502/503."""

    error_code = "errors.hotfixmirror.serviceUnavailable"
    numeric_code = 1011
    status_code = 503
    default_message = "Service unavailable"


class UpstreamUnavailableError(UpstreamAPIError):
    """502 and 503 responses: the upstream gateway could not serve the request."""

    error_code = "errors.hotfixmirror.badGateway"
    numeric_code = 1010
    status_code = 502
    default_message = "Bad gateway"


class RunDeadlineExceededError(RuntimeError):
    """Raised between steps once the workflow-wide time budget is spent."""


def error_for_status(status_code: int, message: str) -> UpstreamAPIError:
    """Map a non-2xx upstream status to the matching error type."""

    if status_code == 401:
        return UnauthorizedError(message)
    if status_code in {502, 503}:
        return UpstreamUnavailableError(message)
    if status_code >= 500:
        return UpstreamError(message)
    return BadRequestError(message)


__all__ = [
    "AuthError",
    "BadRequestError",
    "NotFoundError",
    "RunDeadlineExceededError",
    "UnauthorizedError",
    "UpstreamAPIError",
    "UpstreamError",
    "UpstreamUnavailableError",
    "error_for_status",
]

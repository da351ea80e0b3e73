"""Exceptions raised by TemplateSync."""


class TemplateSyncError(Exception):
    """Base class for all TemplateSync errors."""
    pass


class TransportError(TemplateSyncError):
    """Raised when the HTTP request itself fails (connection, timeout)."""
    pass


class UnexpectedStatusError(TemplateSyncError):
    """Raised when the API answers with a status code the caller did not expect."""

    def __init__(self, method: str, path: str, status_code: int, body: str = ""):
        self.method = method
        self.path = path
        self.status_code = status_code
        self.body = body
        message = f"{method} {path} returned unexpected status {status_code}"
        if body:
            message = f"{message}: {body}"
        super().__init__(message)


class TemplateApiError(TemplateSyncError):
    """Raised when a template API call fails.

    Attributes:
        status_code: HTTP status of the failed call, when the API answered.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        self.status_code: int | None = getattr(cause, "status_code", None)
        super().__init__(f"{message}: {cause}" if cause is not None else message)


class RateLimitedError(TemplateSyncError):
    """Raised when the API rejects a request with HTTP 429.

    Attributes:
        retry_after: Seconds to wait before the next attempt.
    """

    def __init__(self, method: str, path: str, retry_after: float):
        self.method = method
        self.path = path
        self.retry_after = retry_after
        super().__init__(f"{method} {path} was rate limited, retry in {retry_after:.1f}s")


class ResponseDecodeError(TemplateSyncError):
    """Raised when a response body does not match the expected shape."""
    pass


class WaitTimeoutError(TemplateSyncError):
    """Raised when a polled resource does not reach its target state in time."""

    def __init__(self, timeout: float, last_state: str | None, attempts: int):
        self.timeout = timeout
        self.last_state = last_state
        self.attempts = attempts
        super().__init__(
            f"timeout while waiting for target state "
            f"(last state: {last_state!r}, timeout: {timeout:g}s, attempts: {attempts})"
        )


class UnexpectedStateError(TemplateSyncError):
    """Raised when a refresh reports a state that is neither pending nor target."""

    def __init__(self, state: str, expected: list[str]):
        self.state = state
        self.expected = expected
        super().__init__(f"unexpected state {state!r}, wanted one of {expected}")


class TemplateNotFoundError(TemplateSyncError):
    """Raised when an operation requires a template that does not exist."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Template ({template_id}) not found")


class InvalidTemplateIdError(TemplateSyncError, ValueError):
    """Raised when a composite template identity cannot be parsed."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(
            f"unexpected format of ID ({identifier}), expected id:name:versions"
        )


class PartialCreateError(TemplateSyncError):
    """Raised when create fails after the remote template already exists.

    The template_id lets the caller track or delete the orphaned template.
    """

    def __init__(self, template_id: str, message: str):
        self.template_id = template_id
        super().__init__(f"template ({template_id}) was created but {message}")


class CreateTimeoutError(PartialCreateError):
    """Raised when a created template does not become visible in time."""

    def __init__(self, template_id: str, timeout: float):
        self.timeout = timeout
        super().__init__(
            template_id,
            f"did not become visible within {timeout:g}s",
        )

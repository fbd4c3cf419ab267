"""
Exception classes for the demo client.

Every failure surfaced by the client falls into one of these categories:
- ValidationError: local precondition failed, no request was sent
- TransientError: network or timeout failure, worth retrying
- ClientError: 4xx response from the API
- NotFoundError: 404 for a demo or other resource
- ServerError: 5xx response or a malformed payload

Per project patterns:
- All inherit from DemoClientError so callers can catch one type
- Store context data in attributes for error handling
- Include descriptive message with relevant details
"""

GENERIC_ERROR_MESSAGE = "An error occurred. Please try again."


class DemoClientError(Exception):
    """Base class for every error raised by demo_client."""


class ValidationError(DemoClientError):
    """
    Raised when a local precondition fails before any request is made.

    Attributes:
        field: Name of the offending input (e.g. "prompt", "quota")
        reason: Human-readable explanation
    """

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(reason)


class TransientError(DemoClientError):
    """
    Raised on network or timeout failures.

    The request may or may not have reached the server. An active poll
    loop keeps running through these.

    Attributes:
        method: HTTP method of the failed request
        path: Request path relative to the API base URL
    """

    def __init__(self, method: str, path: str, reason: str) -> None:
        self.method = method
        self.path = path
        self.reason = reason
        super().__init__(f"{method} {path} failed: {reason}")


class HTTPError(DemoClientError):
    """
    Base for errors carrying an HTTP response status.

    The message comes from the server payload when it has one, otherwise
    GENERIC_ERROR_MESSAGE.

    Attributes:
        status_code: HTTP status of the response
        message: Message shown to the user
    """

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.status_code = status_code
        self.message = message or GENERIC_ERROR_MESSAGE
        super().__init__(self.message)


class ClientError(HTTPError):
    """Raised on 4xx responses."""


class NotFoundError(ClientError):
    """
    Raised when the requested resource does not exist server-side.

    Attributes:
        resource: Path of the missing resource
    """

    def __init__(self, resource: str, message: str | None = None) -> None:
        self.resource = resource
        super().__init__(404, message or f"Not found: {resource}")


class ServerError(HTTPError):
    """Raised on 5xx responses and on payloads that fail validation."""


class InvalidStateError(DemoClientError):
    """
    Raised when a lifecycle operation is not legal in the current state.

    Attributes:
        operation: The attempted operation
        state: State name at the time of the attempt
    """

    def __init__(self, operation: str, state: str) -> None:
        self.operation = operation
        self.state = state
        super().__init__(f"Cannot {operation} while {state}")

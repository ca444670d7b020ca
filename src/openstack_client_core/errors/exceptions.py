"""Structured exceptions for OpenStack client errors."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx

    from openstack_client_core.errors.models import FaultDetail


class OpenStackError(Exception):
    """Base exception for every error raised by this library."""

    pass


class MissingInputError(OpenStackError):
    """A required option was not provided, or a field-group constraint failed."""

    def __init__(self, argument: str, info: str = ""):
        self.argument = argument
        self.info = info
        message = f"Missing input for argument [{argument}]"
        if info:
            message = f"{message}: {info}"
        super().__init__(message)


class InvalidInputError(MissingInputError):
    """An option was provided with a value the marshaler cannot encode."""

    def __init__(self, argument: str, value: Any, info: str = ""):
        super().__init__(argument, info)
        self.value = value
        message = f"Invalid input provided for argument [{argument}]: [{value!r}]"
        if info:
            message = f"{message}: {info}"
        self.args = (message,)


class InvalidOptionsTypeError(OpenStackError, TypeError):
    """Options passed to a marshaler were not a dataclass instance."""

    def __init__(self, actual: Any):
        self.actual = type(actual).__name__
        super().__init__(f"Options type is not a dataclass instance: got {self.actual}")


class UnexpectedTypeError(OpenStackError):
    """A response body did not have the shape the decoder expected."""

    def __init__(self, expected: str, actual: str):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected} but got {actual}")


class APIError(OpenStackError):
    """An HTTP response came back with a status code the caller did not expect."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "httpx.Response | None" = None,
        fault: "FaultDetail | None" = None,
        expected: tuple[int, ...] = (),
        method: str | None = None,
        url: str | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.response = response
        self.fault = fault
        self.expected = expected
        self.method = method
        self.url = url


class ClientError(APIError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class MethodNotAllowedError(ClientError):
    """405 Method Not Allowed."""

    pass


class RequestTimeoutError(ClientError):
    """408 Request Timeout."""

    pass


class ConflictError(ClientError):
    """409 Conflict."""

    pass


class RequestEntityTooLargeError(ClientError):
    """413 Request Entity Too Large (also used by some services for over-quota)."""

    pass


class RateLimitError(ClientError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(APIError):
    """5xx server errors."""

    pass


class InternalServerError(ServerError):
    """500 Internal Server Error."""

    pass


class BadGatewayError(ServerError):
    """502 Bad Gateway."""

    pass


class ServiceUnavailableError(ServerError):
    """503 Service Unavailable."""

    pass


class GatewayTimeoutError(ServerError):
    """504 Gateway Timeout."""

    pass

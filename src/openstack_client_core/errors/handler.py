"""Error handling utilities for HTTP responses."""

from collections.abc import Collection

import httpx

from openstack_client_core.errors.exceptions import (
    APIError,
    BadGatewayError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    GatewayTimeoutError,
    InternalServerError,
    MethodNotAllowedError,
    NotFoundError,
    RateLimitError,
    RequestEntityTooLargeError,
    RequestTimeoutError,
    ServerError,
    ServiceUnavailableError,
    UnauthorizedError,
)
from openstack_client_core.errors.models import FaultDetail

EXCEPTION_MAP: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    405: MethodNotAllowedError,
    408: RequestTimeoutError,
    409: ConflictError,
    413: RequestEntityTooLargeError,
    429: RateLimitError,
    500: InternalServerError,
    502: BadGatewayError,
    503: ServiceUnavailableError,
    504: GatewayTimeoutError,
}


def raise_for_status(response: httpx.Response, ok_codes: Collection[int] | None = None) -> None:
    """Raise appropriate exception when a response carries an unexpected status.

    Args:
        response: HTTP response object
        ok_codes: Status codes the caller accepts. When omitted any 2xx passes.

    Raises:
        APIError subclass based on status code
    """
    status_code = response.status_code
    if ok_codes is None:
        if response.is_success:
            return
        expected: tuple[int, ...] = ()
    else:
        if status_code in ok_codes:
            return
        expected = tuple(ok_codes)

    fault = FaultDetail.from_response(response)

    # Determine exception class
    if status_code in EXCEPTION_MAP:
        exc_class = EXCEPTION_MAP[status_code]
    elif 400 <= status_code < 500:
        exc_class = ClientError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = APIError

    method, url = _request_line(response)

    # Build error message
    if expected and method:
        message = (
            f"Expected HTTP response code {list(expected)} when accessing [{method} {url}], "
            f"but got {status_code} instead"
        )
    elif method:
        message = f"HTTP {status_code} when accessing [{method} {url}]"
    else:
        message = f"HTTP {status_code}"

    if fault:
        message = f"{message}: {fault.to_exception_message()}"
    else:
        response_text = response.text[:200]
        if response_text:
            message = f"{message}: {response_text}"

    kwargs = {
        "status_code": status_code,
        "response": response,
        "fault": fault,
        "expected": expected,
        "method": method,
        "url": url,
    }

    if exc_class is RateLimitError:
        retry_after = None
        if "retry-after" in response.headers:
            try:
                retry_after = int(response.headers["retry-after"])
            except (ValueError, TypeError):
                # HTTP-date form; the retry transport handles that one
                retry_after = None
        raise RateLimitError(message, retry_after=retry_after, **kwargs)

    raise exc_class(message, **kwargs)


def response_code_is(exc: BaseException, status_code: int) -> bool:
    """Return True when ``exc`` is an APIError for the given status code."""
    return isinstance(exc, APIError) and exc.status_code == status_code


def _request_line(response: httpx.Response) -> tuple[str | None, str | None]:
    try:
        request = response.request
    except RuntimeError:
        # Responses built by hand in tests have no request attached
        return None, None
    return request.method, str(request.url)

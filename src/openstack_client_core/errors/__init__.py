"""Error handling and OpenStack fault parsing."""

from openstack_client_core.errors.exceptions import (
    APIError,
    BadGatewayError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    GatewayTimeoutError,
    InternalServerError,
    InvalidInputError,
    InvalidOptionsTypeError,
    MethodNotAllowedError,
    MissingInputError,
    NotFoundError,
    OpenStackError,
    RateLimitError,
    RequestEntityTooLargeError,
    RequestTimeoutError,
    ServerError,
    ServiceUnavailableError,
    UnauthorizedError,
    UnexpectedTypeError,
)
from openstack_client_core.errors.handler import raise_for_status, response_code_is
from openstack_client_core.errors.models import FaultDetail

__all__ = [
    "APIError",
    "BadGatewayError",
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "FaultDetail",
    "ForbiddenError",
    "GatewayTimeoutError",
    "InternalServerError",
    "InvalidInputError",
    "InvalidOptionsTypeError",
    "MethodNotAllowedError",
    "MissingInputError",
    "NotFoundError",
    "OpenStackError",
    "RateLimitError",
    "RequestEntityTooLargeError",
    "RequestTimeoutError",
    "ServerError",
    "ServiceUnavailableError",
    "UnauthorizedError",
    "UnexpectedTypeError",
    "raise_for_status",
    "response_code_is",
]

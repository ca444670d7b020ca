"""Service client used by resource modules to talk to one OpenStack service."""

import logging
from typing import Any

import httpx

from openstack_client_core import __version__
from openstack_client_core.errors.handler import raise_for_status
from openstack_client_core.transport.retry import RateLimitRetry
from openstack_client_core.util import normalize_url

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = f"openstack-client-core/{__version__}"

# Status codes accepted when the caller does not pass ok_codes
DEFAULT_OK_CODES: dict[str, tuple[int, ...]] = {
    "GET": (200,),
    "POST": (201, 202),
    "PUT": (201, 202),
    "PATCH": (200, 202, 204),
    "DELETE": (202, 204),
    "HEAD": (204,),
}

# Legacy per-service microversion headers, sent next to OpenStack-API-Version
MICROVERSION_HEADERS: dict[str, str] = {
    "compute": "X-OpenStack-Nova-API-Version",
    "sharev2": "X-OpenStack-Manila-API-Version",
    "volume": "X-OpenStack-Volume-API-Version",
    "baremetal": "X-OpenStack-Ironic-API-Version",
    "baremetal-introspection": "X-OpenStack-Ironic-Inspector-API-Version",
}


class ServiceClient:
    """HTTP client bound to one service endpoint.

    Args:
        endpoint: Base URL of the service, as found in the catalog
        token: Keystone token sent as ``X-Auth-Token``
        service_type: Catalog type (``compute``, ``volume``...), used for microversions
        microversion: API microversion to request
        resource_base: Base URL for resources when it differs from ``endpoint``
        more_headers: Headers added to every request
        user_agent: Value of the ``User-Agent`` header
        max_retries: Install RateLimitRetry with this many attempts when positive
        transport: Underlying httpx transport (tests pass ``httpx.MockTransport``)
        timeout: Request timeout, as accepted by httpx

    Example:
        ```python
        async with ServiceClient("https://compute.example.com/v2.1/", token=token) as client:
            response = await client.get(client.service_url("servers", "detail"))
        ```
    """

    def __init__(
        self,
        endpoint: str,
        *,
        token: str | None = None,
        service_type: str = "",
        microversion: str = "",
        resource_base: str = "",
        more_headers: dict[str, str] | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        max_retries: int = 0,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | httpx.Timeout | None = 30.0,
    ) -> None:
        self.endpoint = normalize_url(endpoint)
        self.resource_base = normalize_url(resource_base) if resource_base else ""
        self.token = token
        self.service_type = service_type
        self.microversion = microversion
        self.more_headers = dict(more_headers or {})
        self.user_agent = user_agent

        if max_retries > 0:
            transport = RateLimitRetry(
                wrapped_transport=transport or httpx.AsyncHTTPTransport(),
                max_retries=max_retries,
            )
        self._http = httpx.AsyncClient(transport=transport, timeout=timeout)

    async def __aenter__(self) -> "ServiceClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def resource_base_url(self) -> str:
        return self.resource_base or self.endpoint

    def service_url(self, *parts: str) -> str:
        """Join path parts onto the resource base URL."""
        return self.resource_base_url() + "/".join(parts)

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        headers: dict[str, str] | None = None,
        ok_codes: tuple[int, ...] | None = None,
    ) -> httpx.Response:
        """Send a request and check its status code.

        Per-request headers override the defaults; an empty value removes a
        default header.

        Raises:
            APIError: if the status code is not in ``ok_codes``
            httpx.TransportError: on connection failures and timeouts
        """
        method = method.upper()
        request_headers = self._headers(has_body=json is not None)
        for name, value in (headers or {}).items():
            if value == "":
                request_headers.pop(name, None)
            else:
                request_headers[name] = value

        logger.debug(f"{method} {url}")
        response = await self._http.request(method, url, json=json, headers=request_headers)
        logger.debug(f"{method} {url} -> {response.status_code}")

        raise_for_status(response, ok_codes or DEFAULT_OK_CODES.get(method, (200,)))
        return response

    async def get(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: str, json: Any = None, **kwargs) -> httpx.Response:
        return await self.request("POST", url, json=json, **kwargs)

    async def put(self, url: str, json: Any = None, **kwargs) -> httpx.Response:
        return await self.request("PUT", url, json=json, **kwargs)

    async def patch(self, url: str, json: Any = None, **kwargs) -> httpx.Response:
        return await self.request("PATCH", url, json=json, **kwargs)

    async def delete(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("DELETE", url, **kwargs)

    async def head(self, url: str, **kwargs) -> httpx.Response:
        return await self.request("HEAD", url, **kwargs)

    def _headers(self, has_body: bool) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        if self.token:
            headers["X-Auth-Token"] = self.token
        headers.update(self.more_headers)

        if self.microversion:
            legacy = MICROVERSION_HEADERS.get(self.service_type)
            if legacy:
                headers[legacy] = self.microversion
            if self.service_type:
                headers["OpenStack-API-Version"] = f"{self.service_type} {self.microversion}"

        return headers

"""Testing utilities for code built on openstack-client-core.

Example:
    ```python
    from openstack_client_core.testing import PageServer, mock_service_client


    async def test_lists_servers():
        server = PageServer()
        server.add("/servers", {"servers": [{"id": "1"}]})
        client = mock_service_client(server)
        response = await client.get(client.service_url("servers"))
        assert server.requests[0].url.path == "/servers"
    ```
"""

import json
from collections.abc import Callable
from typing import Any

import httpx

from openstack_client_core.client import ServiceClient

ENDPOINT = "http://openstack.example.com/"


class PageServer:
    """An ``httpx.MockTransport`` handler serving canned bodies by path and query.

    Routes are matched on the path plus the raw query string, so
    ``add("/servers?marker=2", ...)`` only answers that exact page. Unknown
    routes answer 404 with a nova-style fault body. Every request is recorded
    in ``requests``.
    """

    def __init__(self) -> None:
        self.routes: dict[str, tuple[int, Any, dict[str, str]]] = {}
        self.requests: list[httpx.Request] = []

    def add(self, route: str, body: Any, status_code: int = 200, headers: dict[str, str] | None = None) -> None:
        self.routes[route] = (status_code, body, headers or {})

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = request.url.path
        if request.url.query:
            route = f"{route}?{request.url.query.decode()}"

        if route not in self.routes:
            return httpx.Response(
                404,
                json={"itemNotFound": {"message": f"No route for {route}", "code": 404}},
            )

        status_code, body, headers = self.routes[route]
        if isinstance(body, bytes | str):
            return httpx.Response(status_code, content=body, headers=headers)
        return httpx.Response(
            status_code,
            content=json.dumps(body).encode(),
            headers={"Content-Type": "application/json", **headers},
        )


def mock_service_client(
    handler: Callable[[httpx.Request], httpx.Response],
    endpoint: str = ENDPOINT,
    **kwargs,
) -> ServiceClient:
    """Create a ServiceClient whose requests are answered by ``handler``."""
    kwargs.setdefault("token", "abc123")
    return ServiceClient(endpoint, transport=httpx.MockTransport(handler), **kwargs)


__all__ = ["ENDPOINT", "PageServer", "mock_service_client"]

"""OpenStack Client Core - the shared runtime behind OpenStack service bindings.

This library provides the pieces every resource module is built from:
- Options dataclasses marshaled into query strings, request bodies and headers
- Pagination over single-page, linked and marker-based collections
- An async service client with OpenStack status-code and microversion handling
- Fault parsing into typed exceptions
- Configuration from ``OS_*`` environment variables and .env files

Example:
    ```python
    from dataclasses import dataclass

    from openstack_client_core.client import ServiceClient
    from openstack_client_core.pagination import LinkedPage, Pager
    from openstack_client_core.params import build_query_string, opt


    @dataclass
    class ListOpts:
        limit: int = opt(q="limit")
        marker: str = opt(q="marker")


    class ServerPage(LinkedPage):
        items_key = "servers"
        link_path = ("servers_links",)


    async with ServiceClient("https://compute.example.com/v2.1/", token=token) as client:
        url = f"{client.service_url('servers')}?{build_query_string(ListOpts(limit=10))}"
        page = await Pager(client, url, ServerPage).all_pages()
        servers = page.items()
    ```
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

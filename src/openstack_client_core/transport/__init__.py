"""Transport layers wrapped around httpx's async transport.

Example:
    ```python
    import httpx

    from openstack_client_core.transport import RateLimitRetry

    transport = RateLimitRetry(wrapped_transport=httpx.AsyncHTTPTransport(), max_retries=3)
    ```
"""

from openstack_client_core.transport.retry import RateLimitRetry

__all__ = ["RateLimitRetry"]

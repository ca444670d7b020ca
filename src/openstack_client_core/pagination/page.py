"""Page abstractions shared by every pagination strategy."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from openstack_client_core.errors.exceptions import UnexpectedTypeError
from openstack_client_core.results import Result


@dataclass
class PageResult(Result):
    """The decoded response for one page, plus the URL it was fetched from."""

    url: httpx.URL | None = None

    @classmethod
    def from_response(cls, response: httpx.Response, **kwargs) -> "PageResult":
        return super().from_response(response, url=response.request.url, **kwargs)


class Page(ABC):
    """One fetched unit of a paginated collection.

    Subclasses decide how to find the next page. Resource types normally set
    ``items_key`` (``"servers"``, ``"networks"``...) and add typed extraction on
    top of ``items()``.
    """

    items_key: str | None = None

    def __init__(self, result: PageResult):
        self.result = result

    @property
    def body(self) -> Any:
        return self.result.body

    @property
    def url(self) -> httpx.URL | None:
        return self.result.url

    @property
    def status_code(self) -> int:
        return self.result.status_code

    @property
    def headers(self) -> httpx.Headers:
        return self.result.headers

    def items(self) -> list[Any]:
        """Return the raw items held by this page.

        Raises:
            UnexpectedTypeError: if the body does not contain an item list
        """
        body = self.body
        if body is None:
            return []
        if isinstance(body, bytes):
            # Listings served without a text content type
            return [line for line in body.splitlines() if line]
        if self.items_key is not None:
            if not isinstance(body, dict):
                raise UnexpectedTypeError("dict", type(body).__name__)
            body = body.get(self.items_key, [])
        if not isinstance(body, list):
            raise UnexpectedTypeError("list", type(body).__name__)
        return body

    def is_empty(self) -> bool:
        return len(self.items()) == 0

    @abstractmethod
    def next_page_url(self) -> str | None:
        """Return the location of the next page, or None at the end."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={str(self.url)!r}, status_code={self.status_code})"

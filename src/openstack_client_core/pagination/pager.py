"""Walk paginated collections page by page.

A Pager only describes a collection: where it starts and how to wrap each
response into a page. Every call re-walks the collection from the start.

```python
from openstack_client_core.pagination import LinkedPage, Pager


class ServerPage(LinkedPage):
    items_key = "servers"
    link_path = ("servers_links",)


pager = Pager(client, client.service_url("servers"), ServerPage)


async def handler(page):
    for server in page.items():
        print(server["id"])
    return True


await pager.each_page(handler)

# or
async for page in pager:
    ...

everything = await pager.all_pages()
```
"""

import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import aclosing
from typing import TYPE_CHECKING, Any

from openstack_client_core.errors.exceptions import UnexpectedTypeError
from openstack_client_core.pagination.page import Page, PageResult
from openstack_client_core.pagination.single import SinglePage

if TYPE_CHECKING:
    from openstack_client_core.client import ServiceClient

logger = logging.getLogger(__name__)

PAGE_OK_CODES = (200, 204, 300)

PageHandler = Callable[[Page], Any | Awaitable[Any]]


class Pager:
    """Iterate over the pages of a collection.

    Args:
        client: Service client used to fetch pages
        initial_url: URL of the first page, query string included
        create_page: Wraps a PageResult into a Page; usually a Page subclass
        headers: Extra headers sent with every page request
    """

    def __init__(
        self,
        client: "ServiceClient",
        initial_url: str,
        create_page: Callable[[PageResult], Page],
        *,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.client = client
        self.initial_url = initial_url
        self.create_page = create_page
        self.headers = headers

    def __aiter__(self) -> AsyncIterator[Page]:
        return self.pages()

    async def pages(self) -> AsyncIterator[Page]:
        """Yield non-empty pages in order, fetching each one only when asked for."""
        async with aclosing(self._walk()) as pages:
            async for page in pages:
                yield page

    async def each_page(self, handler: PageHandler) -> None:
        """Call ``handler`` with each page until it returns a falsy value.

        The handler may be a plain function or a coroutine function. Exceptions
        raised by the handler or by a page fetch stop the iteration and propagate.

        Args:
            handler: Called with each non-empty page; return True to continue
        """
        async with aclosing(self._walk()) as pages:
            async for page in pages:
                keep_going = handler(page)
                if inspect.isawaitable(keep_going):
                    keep_going = await keep_going
                if not keep_going:
                    logger.debug(f"Pagination of {self.initial_url} stopped by handler")
                    return

    async def all_pages(self) -> Page:
        """Fetch every page and return one page holding the combined body.

        List bodies are concatenated. For mapping bodies every list-valued key
        that is not a ``*links`` key is concatenated. Byte bodies are joined
        with newlines. Single-page collections are returned as fetched.

        Raises:
            UnexpectedTypeError: if page bodies cannot be combined
        """
        first = await self._fetch(self.initial_url)
        if isinstance(first, SinglePage):
            return first

        body = first.body
        if isinstance(body, dict):
            combined: Any = {k: [] for k, v in body.items() if isinstance(v, list) and not k.endswith("links")}

            def accumulate(page: Page) -> bool:
                for key, value in page.body.items():
                    if isinstance(value, list) and not key.endswith("links"):
                        combined.setdefault(key, []).extend(value)
                return True

        elif isinstance(body, list) or body is None:
            combined = []

            def accumulate(page: Page) -> bool:
                combined.extend(page.body)
                return True

        elif isinstance(body, bytes):
            chunks: list[bytes] = []

            def accumulate(page: Page) -> bool:
                chunks.append(page.body)
                return True

        else:
            raise UnexpectedTypeError("dict, list or bytes page body", type(body).__name__)

        count = 0
        async with aclosing(self._walk(first)) as pages:
            async for page in pages:
                if type(page.body) is not type(body) and body is not None:
                    raise UnexpectedTypeError(type(body).__name__, type(page.body).__name__)
                accumulate(page)
                count += 1

        if isinstance(body, bytes):
            combined = b"\n".join(chunks)

        logger.debug(f"Collected {count} page(s) from {self.initial_url}")
        result = PageResult(
            body=combined,
            status_code=first.status_code,
            headers=first.headers,
            url=first.url,
        )
        return self.create_page(result)

    async def _walk(self, first: Page | None = None) -> AsyncIterator[Page]:
        page = first
        url = self.initial_url
        while True:
            if page is None:
                page = await self._fetch(url)

            # An empty page ends the walk even when it links onward
            if page.is_empty():
                logger.debug(f"Empty page at {page.url}, stopping")
                return

            yield page

            next_url = page.next_page_url()
            if not next_url:
                return
            url = str(page.url.join(next_url)) if page.url is not None else next_url
            page = None

    async def _fetch(self, url: str) -> Page:
        logger.debug(f"Fetching page {url}")
        response = await self.client.get(url, headers=self.headers, ok_codes=PAGE_OK_CODES)
        return self.create_page(PageResult.from_response(response))

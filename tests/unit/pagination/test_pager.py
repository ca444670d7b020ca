"""Tests for Pager against canned collections."""

import asyncio

import httpx
import pytest

from openstack_client_core.errors import NotFoundError, ServiceUnavailableError, UnexpectedTypeError
from openstack_client_core.pagination import LinkedPage, MarkerPage, Pager, SinglePage
from openstack_client_core.testing import ENDPOINT, mock_service_client

BASE = ENDPOINT.rstrip("/")


class ServerPage(LinkedPage):
    items_key = "servers"
    link_path = ("servers_links",)


def linked_body(ids, next_marker=None):
    body = {"servers": [{"id": i} for i in ids]}
    if next_marker:
        body["servers_links"] = [{"rel": "next", "href": f"{BASE}/servers?marker={next_marker}"}]
    return body


@pytest.fixture
def three_pages(page_server):
    page_server.add("/servers", linked_body(["1", "2"], next_marker="2"))
    page_server.add("/servers?marker=2", linked_body(["3", "4"], next_marker="4"))
    page_server.add("/servers?marker=4", linked_body(["5"]))
    return page_server


class TestEachPage:
    @pytest.mark.unit
    async def test_linked_pages_in_order(self, client, three_pages):
        seen = []

        async def handler(page):
            seen.append([s["id"] for s in page.items()])
            return True

        await Pager(client, client.service_url("servers"), ServerPage).each_page(handler)

        assert seen == [["1", "2"], ["3", "4"], ["5"]]
        assert len(three_pages.requests) == 3

    @pytest.mark.unit
    async def test_sync_handler(self, client, three_pages):
        count = 0

        def handler(page):
            nonlocal count
            count += 1
            return True

        await Pager(client, client.service_url("servers"), ServerPage).each_page(handler)

        assert count == 3

    @pytest.mark.unit
    async def test_stop_after_first_page_makes_one_request(self, client, three_pages):
        calls = 0

        async def handler(page):
            nonlocal calls
            calls += 1
            return False

        await Pager(client, client.service_url("servers"), ServerPage).each_page(handler)

        assert calls == 1
        assert len(three_pages.requests) == 1

    @pytest.mark.unit
    async def test_handler_error_propagates(self, client, three_pages):
        async def handler(page):
            raise ValueError("bad page")

        with pytest.raises(ValueError, match="bad page"):
            await Pager(client, client.service_url("servers"), ServerPage).each_page(handler)

        assert len(three_pages.requests) == 1

    @pytest.mark.unit
    async def test_single_page_calls_handler_once(self, client, page_server):
        page_server.add("/os-availability-zone", [{"zoneName": "nova"}])
        calls = 0

        def handler(page):
            nonlocal calls
            calls += 1
            return True

        await Pager(client, client.service_url("os-availability-zone"), SinglePage).each_page(handler)

        assert calls == 1

    @pytest.mark.unit
    async def test_empty_page_ends_iteration_despite_next_link(self, client, page_server):
        page_server.add("/servers", linked_body([], next_marker="x"))
        calls = 0

        def handler(page):
            nonlocal calls
            calls += 1
            return True

        await Pager(client, client.service_url("servers"), ServerPage).each_page(handler)

        assert calls == 0
        assert len(page_server.requests) == 1

    @pytest.mark.unit
    async def test_fetch_error_stops_iteration(self, client, page_server):
        page_server.add("/servers", linked_body(["1"], next_marker="1"))
        # /servers?marker=1 is not routed and answers 404
        seen = []

        def handler(page):
            seen.append(page)
            return True

        with pytest.raises(NotFoundError) as exc_info:
            await Pager(client, client.service_url("servers"), ServerPage).each_page(handler)

        assert len(seen) == 1
        assert exc_info.value.method == "GET"
        assert "marker=1" in exc_info.value.url

    @pytest.mark.unit
    async def test_server_error_is_not_retried(self, client, page_server):
        page_server.add("/servers", {"computeFault": {"message": "down", "code": 503}}, status_code=503)

        with pytest.raises(ServiceUnavailableError):
            await Pager(client, client.service_url("servers"), ServerPage).each_page(lambda page: True)

        assert len(page_server.requests) == 1

    @pytest.mark.unit
    async def test_relative_next_link(self, client, page_server):
        class ImagePage(LinkedPage):
            items_key = "images"
            link_path = ("next",)

        page_server.add("/v2/images", {"images": [{"id": "a"}], "next": "/v2/images?marker=a"})
        page_server.add("/v2/images?marker=a", {"images": [{"id": "b"}]})
        ids = []

        def handler(page):
            ids.extend(i["id"] for i in page.items())
            return True

        await Pager(client, client.service_url("v2", "images"), ImagePage).each_page(handler)

        assert ids == ["a", "b"]

    @pytest.mark.unit
    async def test_headers_sent_with_every_page(self, client, three_pages):
        pager = Pager(client, client.service_url("servers"), ServerPage, headers={"X-Custom": "yes"})

        await pager.each_page(lambda page: True)

        assert all(r.headers["X-Custom"] == "yes" for r in three_pages.requests)

    @pytest.mark.unit
    async def test_pager_can_be_walked_twice(self, client, three_pages):
        pager = Pager(client, client.service_url("servers"), ServerPage)

        await pager.each_page(lambda page: True)
        await pager.each_page(lambda page: True)

        assert len(three_pages.requests) == 6

    @pytest.mark.unit
    async def test_cancellation_propagates(self):
        started = asyncio.Event()

        async def slow_handler(request: httpx.Request) -> httpx.Response:
            started.set()
            await asyncio.sleep(10)
            return httpx.Response(200, json=[])

        client = mock_service_client(slow_handler)
        task = asyncio.create_task(Pager(client, client.service_url("servers"), SinglePage).each_page(lambda p: True))
        await started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        await client.aclose()


class TestAsyncIteration:
    @pytest.mark.unit
    async def test_async_for(self, client, three_pages):
        ids = []
        async for page in Pager(client, client.service_url("servers"), ServerPage):
            ids.extend(s["id"] for s in page.items())

        assert ids == ["1", "2", "3", "4", "5"]

    @pytest.mark.unit
    async def test_break_stops_fetching(self, client, three_pages):
        pager = Pager(client, client.service_url("servers"), ServerPage)
        async for _ in pager.pages():
            break

        assert len(three_pages.requests) == 1


class TestAllPages:
    @pytest.mark.unit
    async def test_linked_pages_are_concatenated(self, client, three_pages):
        page = await Pager(client, client.service_url("servers"), ServerPage).all_pages()

        assert isinstance(page, ServerPage)
        assert [s["id"] for s in page.items()] == ["1", "2", "3", "4", "5"]
        assert "servers_links" not in page.body
        assert page.next_page_url() is None
        assert len(three_pages.requests) == 3

    @pytest.mark.unit
    async def test_single_page_returned_as_fetched(self, client, page_server):
        page_server.add("/os-availability-zone", [{"zoneName": "nova"}])

        page = await Pager(client, client.service_url("os-availability-zone"), SinglePage).all_pages()

        assert page.body == [{"zoneName": "nova"}]
        assert len(page_server.requests) == 1

    @pytest.mark.unit
    async def test_marker_pages_are_concatenated(self, client, page_server):
        class ImagePage(MarkerPage):
            items_key = "images"

        page_server.add("/images?limit=2", {"images": [{"id": "a"}, {"id": "b"}]})
        page_server.add("/images?limit=2&marker=b", {"images": [{"id": "c"}]})
        page_server.add("/images?limit=2&marker=c", {"images": []})

        page = await Pager(client, client.service_url("images") + "?limit=2", ImagePage).all_pages()

        assert [i["id"] for i in page.items()] == ["a", "b", "c"]
        assert len(page_server.requests) == 3

    @pytest.mark.unit
    async def test_list_bodies_are_concatenated(self, client, page_server):
        page_server.add("/v1/AUTH_x/c", b"a.txt\nb.txt\n", headers={"Content-Type": "text/plain"})
        page_server.add("/v1/AUTH_x/c?marker=b.txt", b"c.txt\n", headers={"Content-Type": "text/plain"})
        page_server.add("/v1/AUTH_x/c?marker=c.txt", b"", status_code=204)

        page = await Pager(client, client.service_url("v1", "AUTH_x", "c"), MarkerPage).all_pages()

        assert page.body == ["a.txt", "b.txt", "c.txt"]

    @pytest.mark.unit
    async def test_binary_bodies_are_joined(self, client, page_server):
        octets = {"Content-Type": "application/octet-stream"}
        page_server.add("/v1/AUTH_x/c", b"a\nb", headers=octets)
        page_server.add("/v1/AUTH_x/c?marker=b", b"c", headers=octets)
        page_server.add("/v1/AUTH_x/c?marker=c", b"", status_code=204)

        page = await Pager(client, client.service_url("v1", "AUTH_x", "c"), MarkerPage).all_pages()

        assert page.body == b"a\nb\nc"
        assert page.items() == [b"a", b"b", b"c"]
        assert len(page_server.requests) == 3

    @pytest.mark.unit
    async def test_empty_collection(self, client, page_server):
        page_server.add("/servers", {"servers": []})

        page = await Pager(client, client.service_url("servers"), ServerPage).all_pages()

        assert page.items() == []
        assert page.is_empty()

    @pytest.mark.unit
    async def test_error_on_later_page_aborts(self, client, page_server):
        page_server.add("/servers", linked_body(["1"], next_marker="1"))

        with pytest.raises(NotFoundError):
            await Pager(client, client.service_url("servers"), ServerPage).all_pages()

    @pytest.mark.unit
    async def test_unsupported_body(self, client, page_server):
        page_server.add("/count", 3)

        class CountPage(LinkedPage):
            pass

        with pytest.raises(UnexpectedTypeError):
            await Pager(client, client.service_url("count"), CountPage).all_pages()

"""Collections returned in one response."""

from openstack_client_core.pagination.page import Page


class SinglePage(Page):
    """A page that holds the whole collection; there is never a next page."""

    def next_page_url(self) -> str | None:
        return None

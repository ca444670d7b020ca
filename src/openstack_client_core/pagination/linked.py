"""Collections that embed the location of the next page in the body."""

from collections.abc import Mapping

from openstack_client_core.errors.exceptions import UnexpectedTypeError
from openstack_client_core.pagination.page import Page
from openstack_client_core.results import extract_next_url


class LinkedPage(Page):
    """A page whose body carries a link to the next page.

    ``link_path`` is walked through nested mappings. The value at the end may be:

    - a URL string: ``{"links": {"next": "http://..."}}`` with ``("links", "next")``
    - a mapping with a ``"next"`` entry: ``{"links": {"next": "http://..."}}``
    - a list of link objects: ``{"servers_links": [{"rel": "next", "href": "..."}]}``

    A missing path or an empty value marks the end of the collection.
    """

    link_path: tuple[str, ...] = ("links",)

    def next_page_url(self) -> str | None:
        value = self.body
        for key in self.link_path:
            if not isinstance(value, Mapping):
                raise UnexpectedTypeError(f"mapping at {key!r}", type(value).__name__)
            if key not in value:
                return None
            value = value[key]

        if value is None:
            return None
        if isinstance(value, str):
            return value or None
        if isinstance(value, Mapping):
            return value.get("next") or None
        if isinstance(value, list):
            return extract_next_url(value)
        raise UnexpectedTypeError("link string, mapping or list", type(value).__name__)

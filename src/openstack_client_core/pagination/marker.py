"""Collections continued by echoing the last-seen item as a marker."""

from openstack_client_core.pagination.page import Page


class MarkerPage(Page):
    """A page whose successor is requested with ``?marker=<last item>``.

    The default marker is the ``marker_key`` of the last item. Resource types
    with other conventions (object names, offsets) override ``last_marker()``.
    """

    marker_key: str = "id"
    marker_param: str = "marker"

    def last_marker(self) -> str:
        items = self.items()
        if not items:
            return ""
        last = items[-1]
        if isinstance(last, dict):
            return str(last.get(self.marker_key) or "")
        # Plain text listings (object storage) are lists of names
        if isinstance(last, bytes):
            return last.decode()
        return str(last)

    def next_page_url(self) -> str | None:
        marker = self.last_marker()
        if not marker or self.url is None:
            return None
        return str(self.url.copy_set_param(self.marker_param, marker))

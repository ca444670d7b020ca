"""Pagination over OpenStack collections.

Three strategies are provided:

- SinglePage: the whole collection comes back in one response
- LinkedPage: the body links to the next page
- MarkerPage: the next page is requested with the last item as a marker
"""

from openstack_client_core.pagination.linked import LinkedPage
from openstack_client_core.pagination.marker import MarkerPage
from openstack_client_core.pagination.page import Page, PageResult
from openstack_client_core.pagination.pager import Pager
from openstack_client_core.pagination.single import SinglePage

__all__ = [
    "LinkedPage",
    "MarkerPage",
    "Page",
    "PageResult",
    "Pager",
    "SinglePage",
]

"""Interface shared by TAXII 2.1 clients."""

from abc import ABC, abstractmethod
from typing import List

import requests

from ..models import Discovery

TAXII_MEDIA_TYPE = "application/taxii+json;version=2.1"
DISCOVERY_PATH = "taxii2/"


class TaxiiClient(ABC):
    """
    Read-only operations a TAXII 2.1 client offers.

    Implementations hold their own credentials and base URL; every path passed
    to ``request`` is relative to that base URL.
    """

    @abstractmethod
    def request(self, path: str) -> requests.Response:
        """
        Send an authenticated GET for ``path``.

        Raises:
            TaxiiAuthorizationError: On HTTP 401
            TaxiiNotFoundError: On HTTP 404
            TaxiiGenericError: On any other non-2xx status
            TaxiiConnectionError: If the request could not be executed
        """

    @abstractmethod
    def get_discovery(self) -> Discovery:
        """Fetch and decode the server discovery document."""

    @abstractmethod
    def get_collections(self, root: str) -> List[str]:
        """List the collection ids of an API root, in server order."""

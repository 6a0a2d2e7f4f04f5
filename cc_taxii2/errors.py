"""Exception hierarchy for the TAXII client.

The library never prints or logs-and-swallows a failure: every error below is
raised to the caller, which decides how to report it.
"""

from typing import Optional

import requests


class TaxiiError(Exception):
    """Base class for every error raised by the client."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TaxiiConnectionError(TaxiiError):
    """The request could not be executed (DNS, connect, TLS or timeout)."""


class TaxiiResponseError(TaxiiError):
    """The server answered with a non-success status.

    The raw response is kept so callers can inspect headers or the body.
    """

    def __init__(self, response: requests.Response, message: Optional[str] = None):
        self.response = response
        self.status_code = response.status_code
        super().__init__(message or f"TAXII server returned HTTP {response.status_code} for {response.url}")


class TaxiiAuthorizationError(TaxiiResponseError):
    """HTTP 401: credentials are wrong or lack access to the resource."""


class TaxiiNotFoundError(TaxiiResponseError):
    """HTTP 404: unknown API root, collection or endpoint."""


class TaxiiGenericError(TaxiiResponseError):
    """Any other non-2xx status."""


class TaxiiCollectionError(TaxiiError):
    """No collection id was given and the API root lists none."""


class JsonDeserializationError(TaxiiError):
    """The response body is not JSON or does not have the expected shape."""


class ConfigurationError(TaxiiError):
    """A required setting, usually a credential, is missing."""

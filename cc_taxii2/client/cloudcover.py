"""Client for the CloudCover TAXII 2.1 server."""

import base64
import http.cookiejar
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar, Union
from urllib.parse import quote

import requests
from pydantic import ValidationError

from ..config import Config
from ..errors import (
    JsonDeserializationError,
    TaxiiAuthorizationError,
    TaxiiCollectionError,
    TaxiiConnectionError,
    TaxiiGenericError,
    TaxiiNotFoundError,
)
from ..models import CCEnvelope, CCIndicator, Collections, Discovery, Envelope, TaxiiModel
from .base import DISCOVERY_PATH, TAXII_MEDIA_TYPE, TaxiiClient

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://taxii2.cloudcover.net"
DEFAULT_TIMEOUT = 30
DEFAULT_LIMIT = 1000
PUBLIC_ROOT = "api"

Matches = Union[Mapping[str, str], Iterable[Tuple[str, str]]]
Page = TypeVar('Page', bound=TaxiiModel)


def _encode(value: str) -> str:
    return quote(str(value), safe='')


def _format_timestamp(timestamp: Union[str, datetime]) -> str:
    if isinstance(timestamp, datetime):
        return timestamp.strftime('%Y-%m-%dT%H:%M:%S.%fZ')
    return timestamp


class CCTaxiiClient(TaxiiClient):
    """
    Read-only client for the CloudCover TAXII 2.1 server.

    The instance holds no mutable state after construction, so one client can
    serve independent calls from several threads. Its own session refuses
    cookies; a session passed in by the caller is used as is.
    """

    def __init__(self,
                 username: str,
                 api_key: str,
                 base_url: str = DEFAULT_BASE_URL,
                 timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        """
        Initialize the client.

        Args:
            username: Account name; also the name of the private API root
            api_key: API key for the account
            base_url: Server address, without trailing slash
            timeout: Per-request timeout in seconds
            session: Optional requests session to reuse a connection pool
        """
        token = base64.b64encode(f"{username}:{api_key}".encode('utf-8')).decode('ascii')
        self.account = username
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.common_headers = {
            'Content-Type': TAXII_MEDIA_TYPE,
            'Accept': TAXII_MEDIA_TYPE,
            'Authorization': f"Basic {token}",
        }
        self._session = session or self._create_session()

    @staticmethod
    def _create_session() -> requests.Session:
        """Create an HTTP session that never stores server cookies."""
        session = requests.Session()
        session.cookies.set_policy(http.cookiejar.DefaultCookiePolicy(allowed_domains=[]))
        return session

    @classmethod
    def from_config(cls, config: Config, session: Optional[requests.Session] = None) -> 'CCTaxiiClient':
        """Build a client from the configured server settings and credentials."""
        username, api_key = config.get_credentials()
        return cls(username, api_key,
                   base_url=config.get_base_url(),
                   timeout=config.get_timeout(),
                   session=session)

    def request(self, path: str) -> requests.Response:
        endpoint = f"{self.base_url}/{path}"
        logger.debug(f"GET {endpoint}")

        try:
            response = self._session.get(endpoint, headers=self.common_headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise TaxiiConnectionError(f"Request failed to execute: {e}")

        status = response.status_code
        if status == 401:
            logger.warning(f"Authorization rejected for {endpoint}")
            raise TaxiiAuthorizationError(response)
        if status == 404:
            logger.warning(f"Not found: {endpoint}")
            raise TaxiiNotFoundError(response)
        if not 200 <= status < 300:
            logger.warning(f"HTTP {status} from {endpoint}")
            raise TaxiiGenericError(response)

        return response

    def _get_model(self, path: str, model: Type[Page]) -> Page:
        """Fetch `path` and validate the body against `model`."""
        response = self.request(path)
        try:
            data = response.json()
        except ValueError as e:
            raise JsonDeserializationError(f"Invalid JSON from {path}: {e}")

        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise JsonDeserializationError(f"Unexpected {model.__name__} body from {path}: {e}")

    def get_discovery(self) -> Discovery:
        return self._get_model(DISCOVERY_PATH, Discovery)

    def get_collections(self, root: str) -> List[str]:
        collections = self._get_model(f"{root}/collections/", Collections)
        return collections.ids()

    def _resolve_root(self, private: bool) -> str:
        return self.account if private else PUBLIC_ROOT

    def _build_objects_query(self,
                             collection_id: Optional[str],
                             limit: Optional[int],
                             private: bool,
                             added_after: Optional[Union[str, datetime]],
                             matches: Optional[Matches]) -> str:
        """
        Build the first-page query for a collection's objects endpoint.

        Without a collection id the first collection of the resolved root is
        used.

        Raises:
            TaxiiCollectionError: If no id was given and the root has no collections
        """
        root = self._resolve_root(private)

        if collection_id is None:
            available = self.get_collections(root)
            if not available:
                raise TaxiiCollectionError("No collections available")
            collection_id = available[0]
            logger.debug(f"Using first collection of root '{root}': {collection_id}")

        if limit is None:
            limit = DEFAULT_LIMIT
        query = f"{root}/collections/{collection_id}/objects/?limit={limit}"

        if added_after is not None:
            query += f"&added_after={_encode(_format_timestamp(added_after))}"

        if matches:
            pairs = matches.items() if hasattr(matches, 'items') else matches
            for key, value in pairs:
                query += f"&match[{_encode(key)}]={_encode(value)}"

        return query

    def _paginate(self,
                  query: str,
                  envelope_model: Type[TaxiiModel],
                  follow_pages: bool,
                  max_pages: Optional[int]) -> List[Any]:
        """
        Walk the server's pagination cursor and concatenate page objects.

        A failing page aborts the whole walk; objects from earlier pages are
        discarded with it.
        """
        results: List[Any] = []
        url = query
        pages = 0
        more = True

        while more:
            envelope = self._get_model(url, envelope_model)
            objects = envelope.objects or []
            results.extend(objects)
            pages += 1
            logger.debug(f"Page {pages}: {len(objects)} objects (more={envelope.more})")

            more = follow_pages and bool(envelope.more)
            if envelope.next is None:
                break
            url = f"{query}&next={_encode(envelope.next)}"

            if more and max_pages is not None and pages >= max_pages:
                logger.warning(f"Stopping after {pages} pages; server still reports more data")
                break

        logger.info(f"Retrieved {len(results)} objects in {pages} page(s)")
        return results

    def get_cc_indicators(self,
                          collection_id: Optional[str] = None,
                          limit: Optional[int] = None,
                          private: bool = False,
                          added_after: Optional[Union[str, datetime]] = None,
                          matches: Optional[Matches] = None,
                          follow_pages: bool = False,
                          max_pages: Optional[int] = None) -> List[CCIndicator]:
        """
        Retrieve indicators from a collection.

        Args:
            collection_id: Collection to read; defaults to the first collection of the root
            limit: Page size sent to the server (default 1000); not a cap on the total
            private: Query the account's private root instead of the public 'api' root
            added_after: Only objects added after this timestamp (string or datetime)
            matches: Field filters, a mapping or (key, value) pairs, sent as match[key]=value
            follow_pages: Keep requesting pages while the server reports more data
            max_pages: Optional upper bound on pages requested

        Returns:
            Indicators from all fetched pages, in page order

        Raises:
            TaxiiCollectionError: No collection id given and the root lists none
            JsonDeserializationError: A page does not decode into indicators
            TaxiiError: Any transport or status failure on any page
        """
        query = self._build_objects_query(collection_id, limit, private, added_after, matches)
        return self._paginate(query, CCEnvelope, follow_pages, max_pages)

    def get_objects(self,
                    collection_id: Optional[str] = None,
                    limit: Optional[int] = None,
                    private: bool = False,
                    added_after: Optional[Union[str, datetime]] = None,
                    matches: Optional[Matches] = None,
                    follow_pages: bool = False,
                    max_pages: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Retrieve raw STIX objects of any type from a collection.

        Same parameters and pagination as ``get_cc_indicators``, but objects are
        returned undecoded so filters may select malware, identities and so on.
        """
        query = self._build_objects_query(collection_id, limit, private, added_after, matches)
        return self._paginate(query, Envelope, follow_pages, max_pages)

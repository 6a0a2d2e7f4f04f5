"""Pydantic models for TAXII 2.1 response bodies.

Unknown fields are ignored. Scalar fields use strict types so a number sent
where a string is expected fails validation instead of being coerced.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr


class TaxiiModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')


class Discovery(TaxiiModel):
    """Server metadata returned by the discovery endpoint."""

    api_roots: List[StrictStr] = Field(..., description="URLs of the API roots on this server")
    contact: StrictStr
    default: StrictStr = Field(..., description="Default API root")
    description: StrictStr
    title: StrictStr


class Collection(TaxiiModel):
    """One collection of an API root."""

    can_read: StrictBool
    can_write: StrictBool
    id: StrictStr
    media_types: List[StrictStr]
    name: StrictStr
    title: StrictStr


class Collections(TaxiiModel):
    """Body of the collections endpoint."""

    collections: List[Collection]

    def ids(self) -> List[str]:
        """Collection identifiers in server order."""
        return [collection.id for collection in self.collections]


class CCIndicator(TaxiiModel):
    """
    A STIX indicator as served by the CloudCover TAXII server.

    Timestamps are kept as the strings the server sent.
    """

    created: StrictStr
    description: StrictStr
    id: StrictStr
    modified: StrictStr
    name: StrictStr
    pattern: StrictStr
    pattern_type: StrictStr
    pattern_version: StrictStr
    spec_version: StrictStr
    type: StrictStr
    valid_from: StrictStr


class Envelope(TaxiiModel):
    """A page of arbitrary STIX objects, kept as raw dictionaries."""

    more: Optional[StrictBool] = None
    next: Optional[StrictStr] = Field(None, description="Opaque cursor for the next page")
    objects: Optional[List[Dict[str, Any]]] = None


class CCEnvelope(TaxiiModel):
    """A page of indicators from the CloudCover TAXII server."""

    more: Optional[StrictBool] = None
    next: Optional[StrictStr] = Field(None, description="Opaque cursor for the next page")
    objects: List[CCIndicator]

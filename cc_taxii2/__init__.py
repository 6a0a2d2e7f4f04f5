"""
CloudCover TAXII 2.1 client

A small read-only client for discovering TAXII server capabilities, listing
collections, and retrieving paginated indicator objects.
"""

__version__ = "0.1.5"

from .client import CCTaxiiClient, TaxiiClient
from .errors import (
    ConfigurationError,
    JsonDeserializationError,
    TaxiiAuthorizationError,
    TaxiiCollectionError,
    TaxiiConnectionError,
    TaxiiError,
    TaxiiGenericError,
    TaxiiNotFoundError,
    TaxiiResponseError,
)
from .models import CCEnvelope, CCIndicator, Collection, Collections, Discovery, Envelope

__all__ = [
    'CCTaxiiClient',
    'TaxiiClient',
    'CCEnvelope',
    'CCIndicator',
    'Collection',
    'Collections',
    'Discovery',
    'Envelope',
    'ConfigurationError',
    'JsonDeserializationError',
    'TaxiiAuthorizationError',
    'TaxiiCollectionError',
    'TaxiiConnectionError',
    'TaxiiError',
    'TaxiiGenericError',
    'TaxiiNotFoundError',
    'TaxiiResponseError',
]

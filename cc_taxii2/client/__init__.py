"""Client package initialization."""

from .base import TaxiiClient
from .cloudcover import CCTaxiiClient

__all__ = ['TaxiiClient', 'CCTaxiiClient']

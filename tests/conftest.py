"""Pytest fixtures for the TAXII client tests."""

import json
from typing import Any, Optional
from unittest.mock import Mock

import pytest
import requests

from cc_taxii2.client import CCTaxiiClient

BASE_URL = "https://taxii.test"


def build_response(status: int = 200, payload: Any = None, body: Optional[str] = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = f"{BASE_URL}/stub/"
    if body is None:
        body = json.dumps(payload if payload is not None else {})
    response._content = body.encode('utf-8')
    response.encoding = 'utf-8'
    return response


def build_indicator(n: int) -> dict:
    return {
        "created": "2024-01-01T00:00:00.000Z",
        "description": f"Botnet C2 address {n}",
        "id": f"indicator--00000000-0000-4000-8000-{n:012d}",
        "modified": "2024-01-02T00:00:00.000Z",
        "name": f"c2-{n}",
        "pattern": f"[ipv4-addr:value = '198.51.100.{n}']",
        "pattern_type": "stix",
        "pattern_version": "2.1",
        "spec_version": "2.1",
        "type": "indicator",
        "valid_from": "2024-01-01T00:00:00Z",
    }


def build_page(start: int, count: int, more: Optional[bool] = None, next: Optional[str] = None) -> dict:
    page = {"objects": [build_indicator(n) for n in range(start, start + count)]}
    if more is not None:
        page["more"] = more
    if next is not None:
        page["next"] = next
    return page


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep real credentials and server settings out of the tests."""
    for name in ('TAXII_BASE_URL', 'TAXII_TIMEOUT', 'TAXII_USERNAME', 'TAXII_API_KEY'):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def make_page():
    return build_page


@pytest.fixture
def indicator_dict():
    return build_indicator


@pytest.fixture
def session() -> Mock:
    """A requests session whose get() is driven by each test."""
    return Mock(spec=requests.Session)


@pytest.fixture
def client(session) -> CCTaxiiClient:
    return CCTaxiiClient("acme", "s3cr3t", base_url=BASE_URL, session=session)


def requested_urls(session: Mock) -> list:
    """URLs passed to session.get, in call order."""
    return [c.args[0] for c in session.get.call_args_list]


@pytest.fixture
def urls():
    return requested_urls

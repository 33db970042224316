"""Wire the business tier to the in-process data tier.

``DataTierAdapter`` is a ``requests`` transport that hands each request
to Django's test client, so the Store Gateway talks real HTTP semantics
to ``/data/`` without a network socket.
"""

from urllib.parse import urlsplit

import pytest
import requests
from django.test import Client
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from modules.catalog.gateway import StoreGateway

DATA_SERVICE_URL = "http://data-service.test/"


class DataTierAdapter(BaseAdapter):
    def __init__(self) -> None:
        super().__init__()
        self.client = Client()
        self.calls: list[tuple[str, str]] = []
        self.request_ids: list[str | None] = []

    def send(self, request, **kwargs):
        url = urlsplit(request.url)
        path = f"{url.path}?{url.query}" if url.query else url.path
        self.calls.append((request.method, url.path))
        self.request_ids.append(request.headers.get("X-Request-ID"))
        extra = {}
        if request.headers.get("X-Request-ID"):
            extra["HTTP_X_REQUEST_ID"] = request.headers["X-Request-ID"]

        django_response = self.client.generic(
            request.method,
            path,
            data=request.body or b"",
            content_type="application/json",
            **extra,
        )

        response = requests.Response()
        response.status_code = django_response.status_code
        response.reason = django_response.reason_phrase
        response._content = django_response.content
        response.headers = CaseInsensitiveDict(django_response.headers)
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self) -> None:
        pass


@pytest.fixture()
def data_tier():
    return DataTierAdapter()


@pytest.fixture()
def wired_gateway(data_tier, monkeypatch):
    """Every ``StoreGateway.from_settings()`` talks to the in-process data tier."""
    session = requests.Session()
    session.mount(DATA_SERVICE_URL, data_tier)

    monkeypatch.setattr(
        StoreGateway,
        "from_settings",
        classmethod(lambda cls: cls(DATA_SERVICE_URL, timeout=1.0, session=session)),
    )
    return data_tier

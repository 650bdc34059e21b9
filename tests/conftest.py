import json

import pytest

from api_client import EsctApiClient
from token_store import InMemoryTokenStore

BASE_URL = "http://esct.test/api"


class FakeResponse:
    """Enough of aiohttp.ClientResponse for the client: status + text()."""

    def __init__(self, status=200, body=None, raw_text=None):
        self.status = status
        if raw_text is not None:
            self._text = raw_text
        else:
            self._text = "" if body is None else json.dumps(body)

    async def text(self):
        return self._text

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """
    Stands in for aiohttp.ClientSession.

    Routes map "METHOD /path" to a FakeResponse or an exception instance to raise.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []
        self.closed = False

    def request(self, method, url, **kwargs):
        path = url[len(BASE_URL):] if url.startswith(BASE_URL) else url
        self.calls.append({"method": method, "url": url, "path": path, **kwargs})
        outcome = self.routes.get(f"{method} {path}", FakeResponse(404, {"message": "Not found"}))
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def close(self):
        self.closed = True


@pytest.fixture
def token_store():
    return InMemoryTokenStore("test-token")


@pytest.fixture
def make_client(token_store):
    def _make(routes=None, store=None):
        session = FakeSession(routes)
        client = EsctApiClient(base_url=BASE_URL, token_store=store or token_store, session=session)
        return client, session
    return _make

"""
Shared test fixtures.
No network calls: the HTTP session, document store and sleeps are all fakes.
"""
import pytest

from services.local_storage import InMemoryStorage


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else str(payload)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Replays a script of responses or exceptions, one per post() call."""

    def __init__(self, script):
        self.script = list(script)
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append({"url": url, "json": json, "timeout": timeout})
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, Exception):
            raise item
        return item


def ok_response(content="Generated text"):
    return FakeResponse(200, {"choices": [{"message": {"role": "assistant", "content": content}}]})


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def sleeps():
    """Records requested waits instead of sleeping."""
    return []

import json

import pytest
import requests

from data_extraction import ChapterLoader

TEST_API_URL = "https://api.test/geeta.php"


class StubResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body)

    def json(self):
        return json.loads(self.text)


class StubSession:
    """Stands in for requests: records GETs and replays one canned response."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.exc is not None:
            raise self.exc
        return self.response


def lyrics_payload(lyrics):
    return {"data": [{"id": 1, "lyrics": lyrics}]}


@pytest.fixture
def make_loader():
    def _make(response=None, exc=None):
        session = StubSession(response=response, exc=exc)
        return ChapterLoader(base_url=TEST_API_URL, timeout=5, session=session), session

    return _make


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")

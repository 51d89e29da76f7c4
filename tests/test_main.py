import pytest
from fastapi.testclient import TestClient

import main

from conftest import StubResponse, lyrics_payload


@pytest.fixture
def client():
    return TestClient(main.app)


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "api_url": main.loader.base_url}


def test_chapter_success(client, monkeypatch, make_loader):
    loader, session = make_loader(StubResponse(body=lyrics_payload("<p>A</p><p>B</p>")))
    monkeypatch.setattr(main, "loader", loader)

    resp = client.get("/api/chapter/2")

    assert resp.status_code == 200
    assert resp.json() == {
        "chapterData": [{"shlok_no": 1, "shlok": "A"}, {"shlok_no": 2, "shlok": "B"}],
        "fullText": "A. B",
    }
    assert session.calls[0][0].endswith("?q=2")


def test_chapter_error_payload(client, monkeypatch, make_loader):
    loader, _ = make_loader(StubResponse(status_code=503, body={}))
    monkeypatch.setattr(main, "loader", loader)

    resp = client.get("/api/chapter/2")

    assert resp.status_code == 200
    assert resp.json() == {
        "error": True,
        "message": "API fetch failed with status: 503",
        "chapterData": [],
        "fullText": "",
    }

import time


def test_health(client):
    before = int(time.time() * 1000)
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert isinstance(body["timestamp"], int) and body["timestamp"] >= before


def test_security_headers_present(client):
    r = client.get("/health")
    assert r.headers["x-content-type-options"] == "nosniff"
    assert r.headers["x-frame-options"] == "SAMEORIGIN"


def test_index_page_served(client):
    r = client.get("/")
    assert r.status_code == 200
    assert "Place Finder" in r.text
    assert client.get("/static/app.js").status_code == 200


def test_cors_allows_localhost_only(client):
    ok = client.get("/health", headers={"Origin": "http://localhost:5173"})
    assert ok.headers["access-control-allow-origin"] == "http://localhost:5173"

    denied = client.get("/health", headers={"Origin": "https://evil.example"})
    assert "access-control-allow-origin" not in denied.headers

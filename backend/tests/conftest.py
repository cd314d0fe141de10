import os

os.environ.setdefault("LOG_TO_FILE", "false")

import httpx
import pytest
from fastapi.testclient import TestClient

from placefinder.core.config import Settings
from placefinder.main import create_app

SHIBUYA_RAMEN = {
    "status": "OK",
    "results": [
        {
            "name": "Ichiran Shibuya",
            "formatted_address": "1 Chome-22-7 Jinnan, Shibuya City, Tokyo",
            "geometry": {"location": {"lat": 35.6614, "lng": 139.7005}},
            "rating": 4.4,
            "user_ratings_total": 9123,
            "place_id": "ChIJ_ichiran",
        },
        {
            "name": "Afuri Ebisu",
            "formatted_address": "1 Chome-1-7 Ebisu, Shibuya City, Tokyo",
            "geometry": {"location": {"lat": 35.6484, "lng": 139.7101}},
            "rating": 4.2,
            "user_ratings_total": 4011,
            "place_id": "ChIJ_afuri",
        },
    ],
}


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class UpstreamStub:
    """
    Stands in for Google Places and the LLM backends behind httpx.MockTransport.
    Each attribute is either a JSON payload, an httpx.Response, or an exception to raise.
    """

    def __init__(self):
        self.places = {"status": "ZERO_RESULTS", "results": []}
        self.openai = {"choices": [{"message": {"content": "ramen in Shibuya"}}]}
        self.ollama = {"message": {"role": "assistant", "content": "ramen in Shibuya"}}
        self.requests: list[httpx.Request] = []

    def calls_to(self, fragment: str) -> list[httpx.Request]:
        return [r for r in self.requests if fragment in str(r.url)]

    def _reply(self, outcome, request: httpx.Request) -> httpx.Response:
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, httpx.Response):
            return outcome
        return httpx.Response(200, json=outcome)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "maps.googleapis.com":
            return self._reply(self.places, request)
        if request.url.path.endswith("/chat/completions"):
            return self._reply(self.openai, request)
        if request.url.path == "/api/chat":
            return self._reply(self.ollama, request)
        return httpx.Response(404, json={"error": "unexpected upstream call"})


def build_settings(**overrides) -> Settings:
    values = {
        "GOOGLE_MAPS_BROWSER_KEY": "browser-key",
        "GOOGLE_MAPS_SERVER_KEY": "server-key",
        "LLM_DISABLED": True,
        "LOG_TO_FILE": False,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def http_client(upstream):
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture
def make_client(http_client, clock):
    def _make(**overrides) -> TestClient:
        app = create_app(build_settings(**overrides), http_client=http_client, clock=clock)
        return TestClient(app)
    return _make


@pytest.fixture
def client(make_client):
    return make_client()

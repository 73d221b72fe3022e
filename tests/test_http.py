from http import HTTPStatus

import pytest

from pairchat import health
from pairchat.realtime.identity import ConnectionId
from pairchat.realtime.lobby import Lobby


@pytest.fixture
def fresh_lobby(monkeypatch):
    lobby = Lobby()
    monkeypatch.setattr(health, "lobby", lobby)
    return lobby


def test_health_reports_lobby_stats(client, fresh_lobby):
    for name in ("a", "b", "c"):
        fresh_lobby.declare_profile(ConnectionId(name), name)

    resp = client.get("/health/")

    assert resp.status_code == HTTPStatus.OK
    data = resp.json()
    assert data["status"] == "ok"
    assert data["lobby"] == {"profiles": 3, "waiting": 1, "sessions": 1}


def test_health_is_exempt_from_api_key(client, settings, fresh_lobby):
    settings.AUTH_API_KEY = "secret"
    assert client.get("/health/").status_code == HTTPStatus.OK


def test_other_paths_require_api_key(client, settings):
    settings.AUTH_API_KEY = "secret"

    assert client.get("/nope/").status_code == HTTPStatus.UNAUTHORIZED
    assert client.get("/nope/", HTTP_X_API_KEY="wrong").status_code == HTTPStatus.UNAUTHORIZED
    # A valid key gets past the middleware to normal URL resolution.
    assert client.get("/nope/", HTTP_X_API_KEY="secret").status_code == HTTPStatus.NOT_FOUND

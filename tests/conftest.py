"""
Pytest configuration and shared fixtures.

Adds src/ to sys.path so `core`, `adapters` and `cli` import without an
editable install, and provides a client wired to an in-memory
`httpx.MockTransport` so no test touches the network.
"""

import json
import sys
from pathlib import Path

import httpx
import pytest


def _ensure_paths_on_sys_path() -> None:
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

BASE_URL = "https://cinebot.test:8443"
IDPV = "2"
PASSKEY = "secretpasskey"


class RemoteStub:
    """Fake Cinebot server: records requests and replays queued responses."""

    def __init__(self):
        self.requests = []
        self._responses = []

    def reply(self, payload=None, *, text=None, status=200):
        if text is not None:
            self._responses.append(httpx.Response(status, text=text))
        else:
            self._responses.append(httpx.Response(status, json=payload))
        return self

    def ok(self, value=None):
        return self.reply({"success": True, "value": value})

    def fail(self, error, exception=None):
        payload = {"success": False, "value": None, "error": error}
        if exception is not None:
            payload["exception"] = exception
        return self.reply(payload)

    def raise_error(self, exc):
        self._responses.append(exc)
        return self

    def __call__(self, request):
        self.requests.append(request)
        if not self._responses:
            return httpx.Response(200, json={"success": True, "value": None})
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def last(self):
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep real CINEBOT_* variables and .env files out of the tests."""
    for key in ("CINEBOT_BASE_URL", "CINEBOT_IDPV", "CINEBOT_PASSKEY", "CINEBOT_TIMEOUT_SECONDS",
                "CINEBOT_CONNECT_TIMEOUT_SECONDS", "CINEBOT_VERIFY_TLS", "CINEBOT_USER_AGENT"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings():
    from core.config import build_settings

    return build_settings(_env_file=None, base_url=BASE_URL, idpv=IDPV, passkey=PASSKEY)


@pytest.fixture
def remote():
    return RemoteStub()


@pytest.fixture
def client(settings, remote):
    from adapters.cinebot_client import CinebotClient

    with CinebotClient.from_settings(settings, http_transport=httpx.MockTransport(remote)) as c:
        yield c

import sys
import os
import json
import threading

import pytest
import requests

# project root = tabulens/../
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tabulens.services.http import HttpClient  # noqa: E402

BASE_URL = "http://api.test"


def make_response(status: int = 200, payload=None, reason: str = "") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason
    resp._content = b"" if payload is None else json.dumps(payload).encode("utf-8")
    resp.headers["Content-Type"] = "application/json"
    return resp


class FakeSession:
    """Scripted stand-in for requests.Session: returns queued responses in order."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)

    def request(self, method, url, **kwargs):
        data = kwargs.get("data")
        if hasattr(data, "read"):
            # drain the body like urllib3 would, in small blocks
            while data.read(64):
                pass
        self.calls.append({"method": method, "url": url, **kwargs})
        nxt = self.responses.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt

    @property
    def paths(self):
        return [(c["method"], c["url"][len(BASE_URL):]) for c in self.calls]


_UNSET = object()


class StubGateway:
    """In-memory DatasetGateway.list() with optional blocking and failure."""

    def __init__(self, result=_UNSET, error=None):
        self.result = [] if result is _UNSET else result
        self.error = error
        self.calls = 0
        self.entered = threading.Event()
        self.release = None  # set to a threading.Event to block list()

    def list(self):
        self.calls += 1
        self.entered.set()
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.result


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def http(fake_session):
    return HttpClient(base_url=BASE_URL, timeout=5, session=fake_session)


@pytest.fixture
def clock():
    return FakeClock()

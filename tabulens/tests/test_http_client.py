# tabulens/tests/test_http_client.py

"""
HTTP adapter tests
------------------
Covers:
- JSON decoding and base URL handling
- One refresh + one retry on 401
- Bounded retry (a second 401 surfaces, no second refresh)
- Refresh failure -> AuthFailedError + login redirect hook
- Error mapping (404, 5xx, transport)
"""

import pytest
import requests

from tabulens.core.errors import (
    AuthExpiredError,
    AuthFailedError,
    NetworkError,
    NotFoundError,
    ServerError,
)
from tabulens.services.http import HttpClient, PreparedCall, percent

from conftest import BASE_URL, make_response


def test_get_returns_decoded_json(http, fake_session):
    fake_session.queue(make_response(200, [{"id": 1}]))

    assert http.get("/datasets/user") == [{"id": 1}]
    assert fake_session.paths == [("GET", "/datasets/user")]
    assert fake_session.calls[0]["timeout"] == 5


def test_empty_body_decodes_to_none(http, fake_session):
    fake_session.queue(make_response(204))
    assert http.delete("/datasets/3") is None


def test_base_url_trailing_slash_is_stripped(fake_session):
    client = HttpClient(base_url=BASE_URL + "/", session=fake_session)
    fake_session.queue(make_response(200, {}))
    client.get("/user/profile")
    assert fake_session.calls[0]["url"] == f"{BASE_URL}/user/profile"


def test_401_refreshes_once_and_retries(http, fake_session):
    fake_session.queue(
        make_response(401),
        make_response(200, {}),           # refresh
        make_response(200, {"ok": True}),  # retried original
    )

    assert http.get("/datasets/user") == {"ok": True}
    assert fake_session.paths == [
        ("GET", "/datasets/user"),
        ("POST", "/auth/refresh"),
        ("GET", "/datasets/user"),
    ]


def test_second_401_surfaces_without_second_refresh(http, fake_session):
    fake_session.queue(
        make_response(401),
        make_response(200, {}),
        make_response(401, {"message": "Session expired"}),
    )

    with pytest.raises(AuthExpiredError) as exc:
        http.get("/datasets/user")

    assert exc.value.message == "Session expired"
    refreshes = [p for p in fake_session.paths if p[1] == "/auth/refresh"]
    assert len(refreshes) == 1
    assert len(fake_session.calls) == 3


def test_refresh_failure_triggers_login_redirect(fake_session):
    redirects = []
    client = HttpClient(
        base_url=BASE_URL,
        session=fake_session,
        on_auth_failure=lambda: redirects.append("login"),
    )
    fake_session.queue(make_response(401), make_response(401))

    with pytest.raises(AuthFailedError):
        client.get("/datasets/user")

    assert redirects == ["login"]
    # original request is not re-sent after a failed refresh
    assert fake_session.paths == [("GET", "/datasets/user"), ("POST", "/auth/refresh")]


def test_retry_flag_is_per_call(http, fake_session):
    fake_session.queue(
        make_response(401), make_response(200, {}), make_response(200, {"n": 1}),
        make_response(401), make_response(200, {}), make_response(200, {"n": 2}),
    )

    assert http.get("/datasets/1") == {"n": 1}
    assert http.get("/datasets/2") == {"n": 2}
    assert [p for p in fake_session.paths if p[1] == "/auth/refresh"] == [("POST", "/auth/refresh")] * 2


def test_prepared_call_marks_itself_retried(http, fake_session):
    fake_session.queue(make_response(401), make_response(200, {}), make_response(200, {}))
    call = PreparedCall(method="GET", path="/user/profile")
    http.execute(call)
    assert call.retried is True


def test_error_mapping(http, fake_session):
    fake_session.queue(
        make_response(404, {"message": "Dataset not found"}),
        make_response(500),
    )

    with pytest.raises(NotFoundError) as nf:
        http.get("/datasets/99")
    assert nf.value.status_code == 404
    assert nf.value.message == "Dataset not found"

    with pytest.raises(ServerError) as se:
        http.get("/datasets/user")
    assert se.value.status_code == 500


def test_transport_failure_is_network_error(http, fake_session):
    fake_session.queue(requests.ConnectionError("connection refused"))

    with pytest.raises(NetworkError):
        http.get("/datasets/user")


def test_percent():
    assert percent(0, 200) == 0
    assert percent(50, 200) == 25
    assert percent(200, 200) == 100
    assert percent(0, 0) == 100

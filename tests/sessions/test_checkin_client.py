from __future__ import annotations

from typing import Any

import pytest
import requests

from src.qr_checkin.qr_checkin.core.constants import MSG_NETWORK_ERROR, MSG_SERVER_ERROR, MSG_TIMEOUT
from src.qr_checkin.qr_checkin.core.exceptions import CheckInRequestError, CheckInTimeoutError
from src.qr_checkin.qr_checkin.sessions.client import CheckInClient
from src.qr_checkin.qr_checkin.sessions.model import CheckInRequest

_NO_BODY = object()


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = _NO_BODY, reason: str = "OK"):
        self.status_code = status_code
        self.reason = reason
        self._body = body

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._body is _NO_BODY:
            raise ValueError("no JSON body")
        return self._body


class FakeSession:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self.headers: dict[str, str] = {}
        self.response = response or FakeResponse(body={})
        self.error = error
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


def make_client(session: FakeSession, **kwargs: Any) -> CheckInClient:
    return CheckInClient("https://api.example.com/api/", session=session, timeout=3, **kwargs)


def test_post_carries_token_organization_and_timeout():
    session = FakeSession(FakeResponse(body={"action": "check_in", "message": "Bienvenue"}))
    client = make_client(session)

    body = client.check_in(CheckInRequest("tok1234567890", employee_id="E1"), "acme")

    assert body == {"action": "check_in", "message": "Bienvenue"}
    call = session.calls[0]
    assert call["url"] == "https://api.example.com/api/hr/attendances/qr-check-in/"
    assert call["json"] == {"session_token": "tok1234567890", "employee_id": "E1"}
    assert call["headers"] == {"X-Organization-Slug": "acme"}
    assert call["params"] == {"organization_subdomain": "acme"}
    assert call["timeout"] == 3.0
    assert session.headers["Content-Type"] == "application/json"
    assert "Authorization" not in session.headers


def test_api_token_is_sent_as_bearer():
    session = FakeSession()
    make_client(session, api_token="secret")

    assert session.headers["Authorization"] == "Bearer secret"


def test_custom_endpoint_is_joined_once():
    client = CheckInClient("http://api.test/api", endpoint="checkin/", session=FakeSession())

    assert client.url == "http://api.test/api/checkin/"


def test_timeout_raises_timeout_error():
    client = make_client(FakeSession(error=requests.exceptions.ReadTimeout("slow")))

    with pytest.raises(CheckInTimeoutError) as exc:
        client.check_in(CheckInRequest("tok1234567890"), "acme")

    assert str(exc.value) == MSG_TIMEOUT


def test_connection_failure_raises_network_error():
    client = make_client(FakeSession(error=requests.exceptions.ConnectionError("refused")))

    with pytest.raises(CheckInRequestError) as exc:
        client.check_in(CheckInRequest("tok1234567890"), "acme")

    assert not isinstance(exc.value, CheckInTimeoutError)
    assert str(exc.value) == MSG_NETWORK_ERROR
    assert exc.value.status == 0


def test_rejection_keeps_status_and_body():
    data = {"session_token": ["Jane, vous avez déjà pointé votre arrivée aujourd'hui."]}
    client = make_client(FakeSession(FakeResponse(400, body=data, reason="Bad Request")))

    with pytest.raises(CheckInRequestError) as exc:
        client.check_in(CheckInRequest("tok1234567890"), "acme")

    assert exc.value.status == 400
    assert exc.value.data == data
    assert str(exc.value) == MSG_SERVER_ERROR


def test_rejection_message_comes_from_body():
    client = make_client(FakeSession(FakeResponse(403, body={"detail": "Accès refusé"}, reason="Forbidden")))

    with pytest.raises(CheckInRequestError) as exc:
        client.check_in(CheckInRequest("tok1234567890"), "acme")

    assert str(exc.value) == "Accès refusé"


def test_rejection_without_json_uses_reason():
    client = make_client(FakeSession(FakeResponse(502, reason="Bad Gateway")))

    with pytest.raises(CheckInRequestError) as exc:
        client.check_in(CheckInRequest("tok1234567890"), "acme")

    assert exc.value.data == {"message": "Bad Gateway"}
    assert str(exc.value) == "Bad Gateway"


def test_no_content_is_empty_dict():
    client = make_client(FakeSession(FakeResponse(204)))

    assert client.check_in(CheckInRequest("tok1234567890"), "acme") == {}


def test_non_object_body_is_empty_dict():
    client = make_client(FakeSession(FakeResponse(200, body=["unexpected"])))

    assert client.check_in(CheckInRequest("tok1234567890"), "acme") == {}


def test_success_with_invalid_json_is_server_error():
    client = make_client(FakeSession(FakeResponse(200)))

    with pytest.raises(CheckInRequestError) as exc:
        client.check_in(CheckInRequest("tok1234567890"), "acme")

    assert str(exc.value) == MSG_SERVER_ERROR


def test_close_closes_session():
    session = FakeSession()
    make_client(session).close()

    assert session.closed

import pytest
import requests

from fitbit_tcx.fitbit.fitbit_auth import (
    MSG_ALREADY_DONE,
    MSG_NO_TOKEN,
    MSG_STATE_MATCH,
    MSG_STATE_MISMATCH,
    RedirectListener,
    SessionState,
)
from fitbit_tcx.fitbit.fitbit_config import CALLBACK_PATH, TOKEN_RECEIVED_PATH


@pytest.fixture
def session():
    session = SessionState()
    session.new_state()
    return session


@pytest.fixture
def received():
    return []


@pytest.fixture
def listener(session, received):
    listener = RedirectListener(session, on_token=received.append, host="127.0.0.1", port=0)
    listener.serve_in_background()
    yield listener
    listener.shutdown()


def _url(listener, path):
    host, port = listener.address
    return f"http://{host}:{port}{path}"


def test_bridge_page_reads_fragment_and_reposts(listener):
    response = requests.get(_url(listener, CALLBACK_PATH), timeout=5)

    assert response.status_code == 200
    assert response.headers["Content-Type"].startswith("text/html")
    assert "window.location.hash" in response.text
    assert TOKEN_RECEIVED_PATH in response.text
    assert "access_token" in response.text


def test_unknown_path_is_404(listener):
    response = requests.get(_url(listener, "/favicon.ico"), timeout=5)

    assert response.status_code == 404


def test_matching_state_stores_token_and_shuts_down(listener, session, received):
    response = requests.get(
        _url(listener, TOKEN_RECEIVED_PATH),
        params={"token": "abc123", "state": session.expected_state},
        timeout=5,
    )

    assert response.text == MSG_STATE_MATCH
    assert session.done.wait(5)
    assert session.token == "abc123"
    assert received == ["abc123"]
    assert session.error is None


def test_mismatched_state_is_ignored(listener, session, received):
    response = requests.get(
        _url(listener, TOKEN_RECEIVED_PATH),
        params={"token": "abc123", "state": "not-the-state"},
        timeout=5,
    )

    assert response.text == MSG_STATE_MISMATCH
    assert not session.done.wait(0.3)
    assert session.token is None
    assert received == []


def test_missing_token_keeps_waiting(listener, session, received):
    response = requests.get(
        _url(listener, TOKEN_RECEIVED_PATH),
        params={"state": session.expected_state},
        timeout=5,
    )

    assert response.text == MSG_NO_TOKEN
    assert not session.done.wait(0.3)
    assert session.token is None
    assert received == []


def test_listener_still_serves_after_rejected_request(listener, session):
    requests.get(_url(listener, TOKEN_RECEIVED_PATH), params={"token": "x", "state": "bad"}, timeout=5)

    response = requests.get(
        _url(listener, TOKEN_RECEIVED_PATH),
        params={"token": "good", "state": session.expected_state},
        timeout=5,
    )

    assert response.text == MSG_STATE_MATCH
    assert session.done.wait(5)
    assert session.token == "good"


def test_duplicate_delivery_does_not_overwrite_token(session):
    listener = RedirectListener(session, host="127.0.0.1", port=0)

    first = listener.handle_completion("first", session.expected_state)
    second = listener.handle_completion("second", session.expected_state)

    assert first == (MSG_STATE_MATCH, True)
    assert second == (MSG_ALREADY_DONE, False)
    assert session.token == "first"


def test_post_handshake_error_is_recorded_and_listener_stops(session):
    def failing(token):
        raise RuntimeError("boom")

    listener = RedirectListener(session, on_token=failing, host="127.0.0.1", port=0)
    listener.serve_in_background()
    try:
        requests.get(
            _url(listener, TOKEN_RECEIVED_PATH),
            params={"token": "abc", "state": session.expected_state},
            timeout=5,
        )
        assert session.done.wait(5)
    finally:
        listener.shutdown()

    assert isinstance(session.error, RuntimeError)
    assert session.token == "abc"


def test_request_shutdown_runs_once(session):
    listener = RedirectListener(session, host="127.0.0.1", port=0)
    listener.serve_in_background()

    listener.request_shutdown()
    first_thread = listener._shutdown_thread
    listener.request_shutdown()
    listener.join(5)

    assert listener._shutdown_thread is first_thread
    assert session.done.is_set()

import socket
import threading
from urllib.parse import urlsplit

import pytest
import requests

from fitbit_tcx.errors import AuthTimeoutError, BrowserLaunchError, InvalidLength, ListenerError
from fitbit_tcx.fitbit.fitbit_auth import FitbitAuth
from fitbit_tcx.fitbit.fitbit_config import CALLBACK_PATH, TOKEN_RECEIVED_PATH


def _state_of(url):
    query = dict(pair.split("=", 1) for pair in urlsplit(url).query.split("&"))
    return query["state"]


def _fake_browser(auth, token="tok-123", state=None):
    """Simulate the browser: load the bridge page, then post the fragment values."""

    def open_url(url):
        sent_state = state if state is not None else _state_of(url)
        host, port = auth.listener.address
        base = f"http://{host}:{port}"

        def visit():
            requests.get(base + CALLBACK_PATH, timeout=5)
            requests.get(base + TOKEN_RECEIVED_PATH, params={"token": token, "state": sent_state}, timeout=5)

        threading.Thread(target=visit, daemon=True).start()

    return open_url


def _auth(fitbit_config, **kwargs):
    return FitbitAuth(fitbit_config, host="127.0.0.1", port=0, **kwargs)


def test_authenticate_returns_token_after_post_handshake_action(fitbit_config):
    auth = _auth(fitbit_config)
    auth.browser = _fake_browser(auth)
    seen = []

    token = auth.authenticate(on_token=seen.append, timeout=10)

    assert token == "tok-123"
    assert seen == ["tok-123"]
    assert auth.session.done.is_set()


def test_post_handshake_error_is_raised_on_caller(fitbit_config):
    auth = _auth(fitbit_config)
    auth.browser = _fake_browser(auth)

    def fail(token):
        raise ValueError("fetch failed")

    with pytest.raises(ValueError, match="fetch failed"):
        auth.authenticate(on_token=fail, timeout=10)


def test_state_mismatch_keeps_waiting_until_timeout(fitbit_config):
    auth = _auth(fitbit_config)
    auth.browser = _fake_browser(auth, state="forged")
    seen = []

    with pytest.raises(AuthTimeoutError):
        auth.authenticate(on_token=seen.append, timeout=0.5)

    assert seen == []
    assert auth.session.token is None


def test_browser_failure_is_fatal_and_releases_port(fitbit_config):
    auth = _auth(fitbit_config)

    def broken(url):
        raise BrowserLaunchError("no browser")

    auth.browser = broken
    with pytest.raises(BrowserLaunchError):
        auth.authenticate(timeout=1)

    host, port = auth.listener.address
    with socket.socket() as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))


def test_bind_failure_is_fatal(fitbit_config):
    with socket.socket() as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen(1)
        port = busy.getsockname()[1]

        auth = FitbitAuth(fitbit_config, host="127.0.0.1", port=port, browser=lambda url: None)
        with pytest.raises(ListenerError):
            auth.authenticate(timeout=1)


def test_invalid_verifier_length_fails_before_listening(fitbit_config):
    opened = []
    auth = _auth(fitbit_config, verifier_length=20, browser=opened.append)

    with pytest.raises(InvalidLength):
        auth.authenticate()

    assert opened == []
    assert auth.listener is None

# fitbit_tcx/fitbit/fitbit_auth.py
"""
Fitbit OAuth 2.0 authentication with PKCE.

The token comes back in the URL fragment, which browsers never send to the
server. A bridge page served on the local listener reads the fragment and
re-posts access_token and state to the completion endpoint.
"""

from __future__ import annotations

import secrets
import threading
from http.server import HTTPServer, BaseHTTPRequestHandler
from threading import Thread
from typing import Callable, Iterable, Optional, Tuple
from urllib.parse import quote, urlparse, parse_qs

from .fitbit_config import (
    AUTHORIZE_URL,
    CALLBACK_PATH,
    LISTENER_HOST,
    LISTENER_PORT,
    TOKEN_RECEIVED_PATH,
    FitbitConfig,
)
from .pkce import (
    VERIFIER_MIN_LENGTH,
    generate_code_challenge,
    generate_code_verifier,
    generate_random_string,
)
from ..errors import AuthTimeoutError, ListenerError
from ..utils.common import open_browser
from ..utils.log import setup_logger, mask_token

log = setup_logger("fitbit.auth")

BRIDGE_PAGE = """<html>
  <body>
    <script type="text/javascript">
      var fragmentString = window.location.hash.substr(1);
      var params = {};
      fragmentString.split("&").forEach(function (pair) {
        var keyValue = pair.split("=");
        params[keyValue[0]] = keyValue[1];
      });
      var accessToken = params["access_token"];
      var state = params["state"];
      if (accessToken && state) {
        fetch("%(token_path)s?token=" + encodeURIComponent(accessToken) +
              "&state=" + encodeURIComponent(state))
          .then(response => response.text())
          .then(data => {
            document.write("Access token and state received and sent to server.");
          });
      } else {
        document.write("Error: Access token or state not found in the URL fragment.");
      }
    </script>
  </body>
</html>
""" % {"token_path": TOKEN_RECEIVED_PATH}

MSG_NO_TOKEN = "No token received."
MSG_STATE_MATCH = "Token received. State matches with the one sent in auth URL."
MSG_STATE_MISMATCH = "Token received. The redirect request not originated from this app."
MSG_ALREADY_DONE = "Token already received."


def scope_string(scopes: Iterable[str]) -> str:
    """Join scopes with "+" (no trailing separator)."""
    return "+".join(scopes).rstrip("+")


class SessionState:
    """
    Values shared between the controller and the listener's handlers.

    Handlers write expected_state/token/error; the controller reads them only
    after ``done`` is set.
    """

    def __init__(self):
        self.expected_state: Optional[str] = None
        self.token: Optional[str] = None
        self.error: Optional[BaseException] = None
        self.completed = False
        self.done = threading.Event()

    def new_state(self) -> str:
        """Generate and remember the anti-forgery value for one auth URL."""
        self.expected_state = generate_random_string()
        return self.expected_state

    def state_matches(self, received: str) -> bool:
        if self.expected_state is None or received is None:
            return False
        return secrets.compare_digest(
            self.expected_state.encode("utf-8"), received.encode("utf-8")
        )


def build_auth_url(code_challenge: str, config: FitbitConfig, session: SessionState) -> str:
    """
    Build the implicit-grant authorization URL.

    A fresh state value is generated and stored on ``session``.
    """
    state = session.new_state()
    return (
        f"{AUTHORIZE_URL}?response_type=token"
        f"&client_id={quote(config.client_id, safe='')}"
        f"&redirect_uri={quote(config.redirect_url, safe='')}"
        f"&scope={scope_string(config.scopes)}"
        f"&code_challenge={code_challenge}"
        f"&code_challenge_method=S256"
        f"&state={state}"
    )


class RedirectListener:
    """
    Local HTTP endpoint receiving the OAuth redirect.

    Serves the bridge page on CALLBACK_PATH and accepts token/state on
    TOKEN_RECEIVED_PATH. Shuts itself down once, after a matching state and
    the post-handshake action have completed.
    """

    def __init__(
        self,
        session: SessionState,
        on_token: Optional[Callable[[str], None]] = None,
        host: str = LISTENER_HOST,
        port: int = LISTENER_PORT,
    ):
        self.session = session
        self.on_token = on_token
        self.host = host
        self.port = port
        self._server: Optional[HTTPServer] = None
        self._serve_thread: Optional[Thread] = None
        self._shutdown_thread: Optional[Thread] = None
        self._shutdown_lock = threading.Lock()
        self._shutdown_started = False

    @property
    def address(self) -> Tuple[str, int]:
        if self._server is None:
            return self.host, self.port
        host, port = self._server.server_address[:2]
        return host, port

    def bind(self) -> None:
        """Bind the listening socket."""
        try:
            self._server = HTTPServer((self.host, self.port), self._make_handler())
        except OSError as e:
            raise ListenerError(f"HTTP server failed to bind {self.host}:{self.port}: {e}") from e
        log.debug(f"[fitbit_auth] Redirect listener bound to port {self.address[1]}")

    def serve_in_background(self) -> None:
        """Serve requests on a daemon thread until shut down."""
        if self._server is None:
            self.bind()
        self._serve_thread = Thread(target=self._serve, name="redirect-listener", daemon=True)
        self._serve_thread.start()

    def _serve(self) -> None:
        try:
            self._server.serve_forever()
        except Exception as e:
            log.error(f"[fitbit_auth] HTTP server stopped unexpectedly: {e}")
            self.session.error = ListenerError(f"HTTP server failed: {e}")
            self.request_shutdown()

    def handle_completion(self, token: str, state: str) -> Tuple[str, bool]:
        """
        Apply a token-delivery request to the session.

        Returns:
            (message for the browser, whether the post-handshake action should run)
        """
        if not token:
            log.warning("[fitbit_auth] Redirect carried no token")
            return MSG_NO_TOKEN, False

        if self.session.completed:
            log.debug("[fitbit_auth] Ignoring duplicate token delivery")
            return MSG_ALREADY_DONE, False

        if not self.session.state_matches(state):
            log.warning("[fitbit_auth] State mismatch, ignoring redirect")
            return MSG_STATE_MISMATCH, False

        self.session.token = token
        self.session.completed = True
        log.info(f"[fitbit_auth] Access token received: {mask_token(token)}")
        return MSG_STATE_MATCH, True

    def run_post_handshake(self) -> None:
        """Run the post-handshake action, then shut the listener down."""
        try:
            if self.on_token is not None:
                self.on_token(self.session.token)
        except Exception as e:
            log.error(f"[fitbit_auth] Post-authorization step failed: {e}")
            self.session.error = e
        finally:
            self.request_shutdown()

    def request_shutdown(self) -> None:
        """
        Stop the server from a separate thread.

        HTTPServer.shutdown() blocks until serve_forever() returns, so it
        cannot be called from the handler that is being served.
        """
        with self._shutdown_lock:
            if self._shutdown_started:
                return
            self._shutdown_started = True
        self._shutdown_thread = Thread(target=self._shutdown, name="redirect-shutdown", daemon=True)
        self._shutdown_thread.start()

    def shutdown(self) -> None:
        """Stop the server from a thread other than the serving one and wait for it."""
        self.request_shutdown()
        self.join()

    def _shutdown(self) -> None:
        try:
            if self._server is not None:
                if self._serve_thread is not None:
                    self._server.shutdown()
                self._server.server_close()
            log.info("[fitbit_auth] Redirect listener stopped")
        finally:
            self.session.done.set()

    def join(self, timeout: Optional[float] = None) -> None:
        for thread in (self._shutdown_thread, self._serve_thread):
            if thread is not None and thread is not threading.current_thread():
                thread.join(timeout)

    def _make_handler(self):
        listener = self

        class RedirectHandler(BaseHTTPRequestHandler):
            def do_GET(self):  # noqa: N802
                parsed = urlparse(self.path)

                if parsed.path == CALLBACK_PATH:
                    self._respond(200, BRIDGE_PAGE, "text/html; charset=utf-8")
                    return

                if parsed.path == TOKEN_RECEIVED_PATH:
                    query = parse_qs(parsed.query)
                    token = query.get("token", [""])[0]
                    state = query.get("state", [""])[0]
                    message, proceed = listener.handle_completion(token, state)
                    self._respond(200, message, "text/plain; charset=utf-8")
                    if proceed:
                        listener.run_post_handshake()
                    return

                self.send_error(404, "Not Found")

            def _respond(self, status: int, body: str, content_type: str):
                payload = body.encode("utf-8")
                self.send_response(status)
                self.send_header("Content-Type", content_type)
                self.send_header("Content-Length", str(len(payload)))
                self.end_headers()
                self.wfile.write(payload)
                self.wfile.flush()

            def log_message(self, format, *args):
                # Request lines carry the token; keep them out of the console
                path = urlparse(getattr(self, "path", "")).path
                log.debug(f"[fitbit_auth] {self.address_string()} {self.command} {path}")

        return RedirectHandler


class FitbitAuth:
    """Runs one implicit-grant PKCE handshake and returns the access token."""

    def __init__(
        self,
        config: FitbitConfig,
        verifier_length: int = VERIFIER_MIN_LENGTH,
        browser: Callable[[str], None] = open_browser,
        host: str = LISTENER_HOST,
        port: int = LISTENER_PORT,
    ):
        """
        Args:
            config: FitbitConfig with client id, redirect URL and scopes
            verifier_length: PKCE code verifier length (43-128)
            browser: Callable opening a URL; raises BrowserLaunchError on failure
            host: Listener bind address
            port: Listener port (must match the registered redirect URL)
        """
        self.config = config
        self.verifier_length = verifier_length
        self.browser = browser
        self.host = host
        self.port = port
        self.session: Optional[SessionState] = None
        self.listener: Optional[RedirectListener] = None

    def authenticate(
        self,
        on_token: Optional[Callable[[str], None]] = None,
        timeout: Optional[float] = None,
    ) -> str:
        """
        Run the browser flow and block until it completes.

        Args:
            on_token: Action run on the listener thread once a matching token
                arrives; the listener shuts down after it returns
            timeout: Seconds to wait for the redirect, None waits forever

        Returns:
            The access token

        Raises:
            GenerationError, BrowserLaunchError, ListenerError, AuthTimeoutError,
            or whatever ``on_token`` raised
        """
        log.info("[fitbit_auth] Starting OAuth flow...")

        code_verifier = generate_code_verifier(self.verifier_length)
        code_challenge = generate_code_challenge(code_verifier)

        self.session = SessionState()
        auth_url = build_auth_url(code_challenge, self.config, self.session)

        self.listener = RedirectListener(self.session, on_token, self.host, self.port)
        self.listener.bind()

        log.info("[fitbit_auth] Opening browser for authorization...")
        try:
            self.browser(auth_url)
        except Exception:
            self.listener.shutdown()
            raise

        self.listener.serve_in_background()

        if not self.session.done.wait(timeout) and not self.session.completed:
            self.listener.shutdown()
            raise AuthTimeoutError(f"No authorization redirect within {timeout} seconds")

        # A redirect arrived in time; the export step itself is not bounded
        self.session.done.wait()
        self.listener.join()
        log.info("[fitbit_auth] Server stopped gracefully")

        if self.session.error is not None:
            raise self.session.error
        return self.session.token

# fitbit_tcx/fitbit/fitbit_config.py
"""
Fitbit Web API client settings and credentials loading.
Credentials are read from a local JSON file and held in memory only.
"""

from __future__ import annotations
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from ..config import DEFAULT_SCOPES
from ..errors import ConfigurationError
from ..utils.log import setup_logger

log = setup_logger("fitbit.config")

AUTHORIZE_URL = "https://www.fitbit.com/oauth2/authorize"
API_BASE_URL = "https://api.fitbit.com/1/user/-"

# Local redirect listener (must match the redirect URL registered with Fitbit)
LISTENER_HOST = "localhost"
LISTENER_PORT = 8080
CALLBACK_PATH = "/callback"
TOKEN_RECEIVED_PATH = "/token-received"


@dataclass
class FitbitConfig:
    """OAuth 2.0 client settings for a Fitbit "Personal" or "Client" app."""

    client_id: str
    redirect_url: str
    client_secret: Optional[str] = None  # unused by the implicit PKCE flow
    scopes: List[str] = field(default_factory=lambda: list(DEFAULT_SCOPES))

    def __post_init__(self):
        if not self.client_id or not self.redirect_url:
            raise ConfigurationError("The clientID and redirect URL cannot be empty.")

    @classmethod
    def from_json(cls, text: str, scopes: Optional[List[str]] = None) -> "FitbitConfig":
        """
        Build config from credentials JSON text.

        Expected keys: clientID, clientSecret (optional), redirectUrl.

        Raises:
            ConfigurationError: malformed JSON or missing client id / redirect URL
        """
        try:
            data = json.loads(text)
        except ValueError as e:
            raise ConfigurationError(f"failed to unmarshal JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError("failed to unmarshal JSON: expected an object")

        return cls(
            client_id=data.get("clientID") or "",
            redirect_url=data.get("redirectUrl") or "",
            client_secret=data.get("clientSecret") or None,
            scopes=list(scopes) if scopes is not None else list(DEFAULT_SCOPES),
        )

    @classmethod
    def from_file(cls, path: Union[str, Path], scopes: Optional[List[str]] = None) -> "FitbitConfig":
        """
        Read a credentials file.

        Raises:
            ConfigurationError: file missing or unreadable, or invalid content
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"failed to read file: {e}") from e

        config = cls.from_json(text, scopes)
        log.debug(f"[fitbit_config] Loaded credentials from {path} (client {config.client_id})")
        return config

# fitbit_tcx/fitbit/__init__.py
"""
Fitbit integration package.
Implements the OAuth 2.0 implicit grant with PKCE and a local redirect listener.
"""

from .fitbit_auth import FitbitAuth, RedirectListener, SessionState, build_auth_url
from .fitbit_client import FitbitClient
from .fitbit_config import FitbitConfig

__all__ = [
    "FitbitAuth",
    "FitbitClient",
    "FitbitConfig",
    "RedirectListener",
    "SessionState",
    "build_auth_url",
]

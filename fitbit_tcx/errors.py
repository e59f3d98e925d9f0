# fitbit_tcx/errors.py
"""
Error taxonomy for the exporter.

Every fatal condition raises a subclass of FitbitTcxError; the command-line
entry point turns those into a log message and exit status 1.
"""


class FitbitTcxError(Exception):
    """Base class for all exporter errors."""


class ConfigurationError(FitbitTcxError):
    """Credentials file missing, unreadable, or incomplete."""


class GenerationError(FitbitTcxError):
    """PKCE value generation failed."""


class InvalidLength(GenerationError):
    """Code verifier length outside [43, 128]."""


class EmptyInput(GenerationError):
    """Code challenge requested for an empty verifier."""


class BrowserLaunchError(FitbitTcxError):
    """The default browser could not be opened."""


class ListenerError(FitbitTcxError):
    """The local redirect listener failed to bind or serve."""


class AuthTimeoutError(FitbitTcxError):
    """No successful redirect arrived before the timeout."""


class FetchError(FitbitTcxError):
    """Upstream request failed or returned a malformed payload."""


class TimestampParseError(FitbitTcxError):
    """A timestamp is not valid RFC 3339."""


class SerializationError(FitbitTcxError):
    """The TCX document could not be serialized."""


class PersistenceError(FitbitTcxError):
    """The exported document could not be written."""


class SelectionError(FitbitTcxError):
    """No activity available or an invalid console choice."""


class TcxStructureError(FitbitTcxError):
    """The TCX document lacks an element the repair needs."""


class ExportError(FitbitTcxError):
    """The export step after authorization failed unexpectedly."""

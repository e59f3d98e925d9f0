"""Export Fitbit activities as TCX files other services accept."""

__version__ = "1.0.0"

"""Data models for the TCX exporter."""

from .activity import Activity

__all__ = ["Activity"]

# fitbit_tcx/tcx/__init__.py
"""
TCX document repair and timestamp helpers.
"""

from .tcx_transform import (
    ActivityCategory,
    ActivityTotals,
    inject_activity_tcx,
    parse_tcx,
    serialize_document,
    transform_document,
)
from .timestamps import convert_timestamp, parse_rfc3339

__all__ = [
    "ActivityCategory",
    "ActivityTotals",
    "convert_timestamp",
    "inject_activity_tcx",
    "parse_rfc3339",
    "parse_tcx",
    "serialize_document",
    "transform_document",
]

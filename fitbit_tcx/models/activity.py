# fitbit_tcx/models/activity.py
"""
Activity summary as returned by the Fitbit daily activity list.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict


@dataclass
class Activity:
    """One logged activity from /activities/date/{date}.json."""

    activity_name: str      # activityParentName, e.g. "Swim"
    name: str
    log_id: int
    duration_ms: int
    distance_km: float
    calories: int
    start_date: str = ""
    start_time: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Activity":
        """
        Build from an API dict.

        Raises:
            KeyError, TypeError, ValueError: required fields missing or of the wrong type
        """
        return cls(
            activity_name=data.get("activityParentName") or data.get("name", ""),
            name=data.get("name", ""),
            log_id=int(data["logId"]),
            duration_ms=int(data.get("duration", 0)),
            distance_km=float(data.get("distance", 0.0)),
            calories=int(data.get("calories", 0)),
            start_date=data.get("startDate", ""),
            start_time=data.get("startTime", ""),
        )

    @property
    def total_time(self) -> timedelta:
        return timedelta(milliseconds=self.duration_ms)

    @property
    def distance_meters(self) -> float:
        return self.distance_km * 1000.0

    @property
    def export_filename(self) -> str:
        return f"{self.activity_name}-{self.log_id}.tcx"


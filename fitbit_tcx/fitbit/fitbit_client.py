# fitbit_tcx/fitbit/fitbit_client.py
from __future__ import annotations

"""
Fitbit Web API client for the daily activity list and TCX exports.
"""

import json
from datetime import date
from typing import List
import xml.etree.ElementTree as ET

import requests

from .fitbit_config import API_BASE_URL
from ..errors import FetchError
from ..models.activity import Activity
from ..tcx.tcx_transform import parse_tcx
from ..utils.log import setup_logger

log = setup_logger("fitbit.client")

REQUEST_TIMEOUT = 30


class FitbitClient:
    """Client for the Fitbit Web API using a bearer access token."""

    def __init__(self, access_token: str, session: requests.Session = None):
        """
        Args:
            access_token: Token obtained by FitbitAuth
            session: Optional requests session (defaults to plain requests calls)
        """
        if not access_token:
            raise FetchError("No access token. Authenticate first.")
        self._access_token = access_token
        self._http = session or requests

    def _get(self, url: str, **kwargs) -> requests.Response:
        try:
            response = self._http.get(
                url,
                headers={"Authorization": f"Bearer {self._access_token}"},
                timeout=REQUEST_TIMEOUT,
                **kwargs,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise FetchError(f"Fitbit API returned {status} for {url}") from e
        except requests.RequestException as e:
            raise FetchError(f"Failed to fetch {url}: {e}") from e
        return response

    def get_activities(self, day: date) -> List[Activity]:
        """
        Fetch activities logged on a day.

        Args:
            day: Calendar date

        Returns:
            Activities in API order
        """
        url = f"{API_BASE_URL}/activities/date/{day.isoformat()}.json"
        log.info(f"[fitbit_client] Fetching activities for {day.isoformat()}...")

        response = self._get(url)
        try:
            payload = response.json()
        except ValueError as e:
            raise FetchError(f"Failed to unmarshal JSON: {e}") from e

        log.debug(f"[fitbit_client] Activity data: {json.dumps(payload, indent=2)}")

        if not isinstance(payload, dict):
            raise FetchError("Unexpected activity payload: expected a JSON object")

        entries = payload.get("activities", [])
        if not isinstance(entries, list) or not all(isinstance(item, dict) for item in entries):
            raise FetchError("Unexpected activity payload: 'activities' must be a list of objects")

        try:
            activities = [Activity.from_api(item) for item in entries]
        except (KeyError, TypeError, ValueError) as e:
            raise FetchError(f"Malformed activity entry: {e}") from e

        log.info(f"[fitbit_client] Found {len(activities)} activities")
        return activities

    def get_activity_tcx(self, log_id: int) -> ET.ElementTree:
        """
        Fetch the TCX export of one logged activity.

        Args:
            log_id: Activity logId

        Returns:
            Parsed TCX document
        """
        url = f"{API_BASE_URL}/activities/{log_id}.tcx"
        log.info(f"[fitbit_client] Downloading TCX for activity {log_id}...")

        response = self._get(url, params={"includePartialTCX": "true"})
        return parse_tcx(response.content)

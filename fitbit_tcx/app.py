# fitbit_tcx/app.py
"""
Command-line flow: authenticate, pick one activity of a day, export it as TCX.

Usage:
    fitbit-tcx 2024-09-07 [--credentials credentials.json] [--output-dir out]
"""

from __future__ import annotations
import argparse
import logging
import sys
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional

from .config import Config, DEFAULT_CONFIG
from .errors import ExportError, FitbitTcxError, SelectionError
from .fitbit.fitbit_auth import FitbitAuth
from .fitbit.fitbit_client import FitbitClient
from .fitbit.fitbit_config import FitbitConfig
from .models.activity import Activity
from .tcx.tcx_transform import inject_activity_tcx
from .utils.common import save_to_file
from .utils.log import enable_console_logging, setup_logger

log = setup_logger("app")


def choose_activity(activities: List[Activity], read_input: Callable[[str], str] = input) -> Activity:
    """
    Print the numbered activity list and read the user's choice.

    Raises:
        SelectionError: empty list, non-numeric or out-of-range choice
    """
    if not activities:
        raise SelectionError("No activities logged on that day.")

    print("Available Activities:")
    for index, activity in enumerate(activities, start=1):
        print(f"ID: {index}")
        print(f"Activity Name: {activity.name}")
        print(f"Distance: {activity.distance_km:.2f}")
        print(f"Start date: {activity.start_date} {activity.start_time}")
        print("-------------")

    raw = read_input("Enter the number of the activity you want to choose: ").strip()
    try:
        choice = int(raw)
    except ValueError:
        raise SelectionError(f"Invalid choice '{raw}'. Please enter a valid number.") from None
    if choice < 1 or choice > len(activities):
        raise SelectionError(f"Invalid choice {choice}. Please enter a number from 1 to {len(activities)}.")

    chosen = activities[choice - 1]
    print(f"You selected: {choice} {chosen.activity_name} {chosen.start_date} {chosen.start_time}")
    return chosen


class ExportPipeline:
    """Post-authorization step: fetch, choose, repair and save one activity."""

    def __init__(
        self,
        day: date,
        config: Config,
        read_input: Callable[[str], str] = input,
        client_factory: Callable[[str], FitbitClient] = FitbitClient,
    ):
        self.day = day
        self.config = config
        self.read_input = read_input
        self.client_factory = client_factory
        self.output_path: Optional[Path] = None

    def __call__(self, access_token: str) -> None:
        """
        Raises:
            FitbitTcxError: known failures pass through; anything else
                (e.g. EOFError from a closed stdin) becomes ExportError
        """
        try:
            self._export(access_token)
        except FitbitTcxError:
            raise
        except Exception as e:
            raise ExportError(f"Export failed: {type(e).__name__}: {e}") from e

    def _export(self, access_token: str) -> None:
        client = self.client_factory(access_token)
        activities = client.get_activities(self.day)
        chosen = choose_activity(activities, self.read_input)

        document = client.get_activity_tcx(chosen.log_id)
        xml_text = inject_activity_tcx(
            document,
            chosen.activity_name,
            chosen.total_time,
            chosen.distance_meters,
            chosen.calories,
            device_name=self.config.DEVICE_NAME,
        )
        print(xml_text)

        self.output_path = save_to_file(Path(self.config.OUTPUT_DIR) / chosen.export_filename, xml_text)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a date in the format YYYY-MM-DD") from None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="fitbit-tcx",
        description="Export one Fitbit activity as a TCX file other services accept.",
    )
    parser.add_argument("date", type=_parse_date, help="Day of the activity, YYYY-MM-DD")
    parser.add_argument("--credentials", type=Path, help="Credentials JSON (clientID, clientSecret, redirectUrl)")
    parser.add_argument("--output-dir", type=Path, help="Directory for the exported .tcx file")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for the browser redirect (default: wait forever)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None, config: Config = None) -> int:
    args = parse_args(argv)
    config = config or DEFAULT_CONFIG
    if args.credentials:
        config = replace(config, CREDENTIALS_FILE=args.credentials)
    if args.output_dir:
        config = replace(config, OUTPUT_DIR=args.output_dir)

    level = logging.DEBUG if args.verbose else logging.getLevelName(str(config.LOG_LEVEL).upper())
    if not isinstance(level, int):
        level = logging.INFO
    enable_console_logging(level)

    try:
        fitbit_config = FitbitConfig.from_file(config.CREDENTIALS_FILE, scopes=config.SCOPES)
        pipeline = ExportPipeline(args.date, config)
        auth = FitbitAuth(fitbit_config, verifier_length=config.VERIFIER_LENGTH)
        auth.authenticate(on_token=pipeline, timeout=args.timeout)
    except FitbitTcxError as e:
        log.error(f"[app] {e}")
        return 1
    except KeyboardInterrupt:
        log.warning("[app] Interrupted")
        return 130

    log.info(f"[app] Export written to {pipeline.output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

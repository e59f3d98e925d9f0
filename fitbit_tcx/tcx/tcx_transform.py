# fitbit_tcx/tcx/tcx_transform.py
"""
Repairs Fitbit TCX exports so that other services accept them.

Fitbit exports some categories without lap/track detail (Swim) or without a
device name (Treadmill, Weights). The category decides which repair runs;
unknown categories pass through unchanged.

Re-running the Swim repair on an already repaired document adds a second
lap and device name. Callers transform each export once.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Callable, Dict, Optional, Union
import xml.etree.ElementTree as ET

from .timestamps import format_utc, parse_rfc3339
from ..errors import FetchError, SerializationError, TcxStructureError
from ..utils.common import format_number
from ..utils.log import setup_logger

log = setup_logger("tcx.transform")

TCX_NS = "http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2"

XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

# TCX elements serialize unprefixed, xsi:type keeps its usual prefix
ET.register_namespace("", TCX_NS)
ET.register_namespace("xsi", XSI_NS)

DEFAULT_DEVICE_NAME = "Fitbit"
INDENT = "  "
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

# Activity children that must follow every Lap (TCX Activity_t sequence)
AFTER_LAP = ("Notes", "Training", "Creator", "Extensions")


class ActivityCategory(Enum):
    """Fitbit activity categories that need a repair, plus a catch-all."""

    SWIM = "Swim"
    TREADMILL = "Treadmill"
    WEIGHTS = "Weights"
    OTHER = "*"

    @classmethod
    def from_label(cls, label: str) -> "ActivityCategory":
        for category in (cls.SWIM, cls.TREADMILL, cls.WEIGHTS):
            if category.value == label:
                return category
        return cls.OTHER


@dataclass
class ActivityTotals:
    """Summary values from the activity list used to fill in the export."""

    label: str
    total_time: timedelta
    distance_meters: float
    calories: int
    device_name: str = DEFAULT_DEVICE_NAME


class _Tcx:
    """Namespace-aware element helpers bound to one document."""

    def __init__(self, root: ET.Element):
        self.root = root
        self.ns = root.tag[1:].split("}", 1)[0] if root.tag.startswith("{") else ""

    def tag(self, local: str) -> str:
        return f"{{{self.ns}}}{local}" if self.ns else local

    def local(self, element: ET.Element) -> str:
        return element.tag.rsplit("}", 1)[-1]

    def find(self, parent: ET.Element, local: str) -> Optional[ET.Element]:
        return parent.find(self.tag(local))

    def new(self, local: str, text: Optional[str] = None, **attrib: str) -> ET.Element:
        element = ET.Element(self.tag(local), attrib)
        if text is not None:
            element.text = text
        return element

    def sub(self, parent: ET.Element, local: str, text: Optional[str] = None, **attrib: str) -> ET.Element:
        element = self.new(local, text, **attrib)
        parent.append(element)
        return element

    def activity(self) -> ET.Element:
        activity = self.root.find(f"{self.tag('Activities')}/{self.tag('Activity')}")
        if activity is None:
            raise TcxStructureError("TCX document has no Activities/Activity element")
        return activity


def parse_tcx(text: Union[str, bytes]) -> ET.ElementTree:
    """
    Parse TCX text into an element tree.

    Raises:
        FetchError: the payload is not well-formed XML
    """
    try:
        return ET.ElementTree(ET.fromstring(text))
    except ET.ParseError as e:
        raise FetchError(f"Failed to parse XML: {e}") from e


def _add_device_name(tcx: _Tcx, activity: ET.Element, totals: ActivityTotals) -> None:
    """Insert Creator/Name as the first Creator child, creating Creator if absent."""
    creator = tcx.find(activity, "Creator")
    if creator is None:
        creator = tcx.new("Creator")
        extensions = tcx.find(activity, "Extensions")
        if extensions is not None:
            activity.insert(list(activity).index(extensions), creator)
        else:
            activity.append(creator)
    creator.insert(0, tcx.new("Name", totals.device_name))


def _lap_position(tcx: _Tcx, activity: ET.Element) -> int:
    """Index after Id and any existing laps, before Notes/Training/Creator."""
    children = list(activity)
    for index, child in enumerate(children):
        if tcx.local(child) in AFTER_LAP:
            return index
    return len(children)


def _synthesize_lap(tcx: _Tcx, activity: ET.Element, totals: ActivityTotals) -> None:
    """Build one Lap with a two-point Track spanning the whole activity."""
    id_element = tcx.find(activity, "Id")
    if id_element is None:
        raise TcxStructureError("TCX Activity has no Id element")

    # Parse first so a bad Id leaves the document untouched
    start = parse_rfc3339((id_element.text or "").strip())
    start_text = format_utc(start)
    end_text = format_utc(start + totals.total_time)
    distance_text = format_number(round(totals.distance_meters, 3))

    activity.set("Sport", totals.label)
    _add_device_name(tcx, activity, totals)

    lap = tcx.new("Lap", StartTime=start_text)
    tcx.sub(lap, "TotalTimeSeconds", format_number(totals.total_time.total_seconds()))
    tcx.sub(lap, "DistanceMeters", distance_text)
    tcx.sub(lap, "Calories", str(int(totals.calories)))
    tcx.sub(lap, "Intensity", "Active")
    tcx.sub(lap, "TriggerMethod", "Manual")

    track = tcx.sub(lap, "Track")
    for when, distance in ((start_text, "0"), (end_text, distance_text)):
        point = tcx.sub(track, "Trackpoint")
        tcx.sub(point, "Time", when)
        tcx.sub(point, "DistanceMeters", distance)

    activity.insert(_lap_position(tcx, activity), lap)
    log.debug(f"[tcx_transform] Synthesized lap {start_text} -> {end_text}, {distance_text} m")


def _device_name_only(tcx: _Tcx, activity: ET.Element, totals: ActivityTotals) -> None:
    _add_device_name(tcx, activity, totals)
    log.debug(f"[tcx_transform] Added device name '{totals.device_name}'")


TRANSFORMS: Dict[ActivityCategory, Optional[Callable[[_Tcx, ET.Element, ActivityTotals], None]]] = {
    ActivityCategory.SWIM: _synthesize_lap,
    ActivityCategory.TREADMILL: _device_name_only,
    ActivityCategory.WEIGHTS: _device_name_only,
    ActivityCategory.OTHER: None,
}


def transform_document(document: Union[ET.ElementTree, ET.Element], totals: ActivityTotals) -> ActivityCategory:
    """
    Apply the category's repair to the document in place.

    Returns:
        The category that was applied

    Raises:
        TimestampParseError: Swim export whose Id is not RFC 3339
        TcxStructureError: required Activity/Id element missing
    """
    root = document.getroot() if isinstance(document, ET.ElementTree) else document
    category = ActivityCategory.from_label(totals.label)
    transform = TRANSFORMS[category]

    if transform is None:
        log.info(f"[tcx_transform] No repair needed for '{totals.label}'")
        return category

    tcx = _Tcx(root)
    transform(tcx, tcx.activity(), totals)
    log.info(f"[tcx_transform] Repaired {category.value} export")
    return category


def serialize_document(document: Union[ET.ElementTree, ET.Element]) -> str:
    """
    Indent with two spaces and serialize with an XML declaration.

    Raises:
        SerializationError: the tree cannot be written
    """
    root = document.getroot() if isinstance(document, ET.ElementTree) else document
    try:
        ET.indent(root, space=INDENT)
        body = ET.tostring(root, encoding="unicode")
    except (AttributeError, TypeError, ValueError) as e:
        raise SerializationError(f"Failed to write XML to string: {e}") from e
    return f"{XML_DECLARATION}\n{body}\n"


def inject_activity_tcx(
    document: Union[ET.ElementTree, ET.Element],
    activity_name: str,
    total_time: timedelta,
    distance_meters: float,
    calories: int,
    device_name: str = DEFAULT_DEVICE_NAME,
) -> str:
    """Repair an export for its category and return the serialized TCX."""
    totals = ActivityTotals(
        label=activity_name,
        total_time=total_time,
        distance_meters=distance_meters,
        calories=calories,
        device_name=device_name,
    )
    transform_document(document, totals)
    return serialize_document(document)

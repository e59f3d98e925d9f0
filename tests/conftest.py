"""Shared fixtures for exporter tests."""

import pytest

from fitbit_tcx.fitbit.fitbit_config import FitbitConfig

SWIM_TCX = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<TrainingCenterDatabase xmlns="http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2">
  <Activities>
    <Activity Sport="Other">
      <Id>2024-01-01T00:00:00Z</Id>
      <Creator xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" xsi:type="Device_t">
        <UnitId>0</UnitId>
        <ProductID>0</ProductID>
      </Creator>
    </Activity>
  </Activities>
</TrainingCenterDatabase>
"""

TREADMILL_TCX = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<TrainingCenterDatabase xmlns="http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2">
  <Activities>
    <Activity Sport="Running">
      <Id>2024-03-05T18:30:00.000+01:00</Id>
      <Lap StartTime="2024-03-05T18:30:00.000+01:00">
        <TotalTimeSeconds>1800.0</TotalTimeSeconds>
        <DistanceMeters>5000.0</DistanceMeters>
        <Calories>320</Calories>
        <Intensity>Active</Intensity>
        <TriggerMethod>Manual</TriggerMethod>
      </Lap>
      <Creator>
        <UnitId>0</UnitId>
      </Creator>
    </Activity>
  </Activities>
</TrainingCenterDatabase>
"""

ANNOTATED_SWIM_TCX = """<TrainingCenterDatabase xmlns="http://www.garmin.com/xmlschemas/TrainingCenterDatabase/v2">
  <Activities>
    <Activity Sport="Other">
      <Id>2024-01-01T00:00:00Z</Id>
      <Notes>Pool session</Notes>
      <Training VirtualPartner="false">
        <Plan Type="Workout" IntervalWorkout="false"/>
      </Training>
      <Extensions/>
    </Activity>
  </Activities>
</TrainingCenterDatabase>
"""

PLAIN_SWIM_TCX ="""<TrainingCenterDatabase>
  <Activities>
    <Activity Sport="Other">
      <Id>2024-01-01T01:00:00+01:00</Id>
      <Creator/>
    </Activity>
  </Activities>
</TrainingCenterDatabase>
"""


@pytest.fixture
def fitbit_config():
    return FitbitConfig(
        client_id="test-client-id",
        redirect_url="https://test.com/redirect",
        scopes=["activity", "heartrate", "profile"],
    )

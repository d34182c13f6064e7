"""Shared fixtures for the metro dashboard tests."""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from metro_core.investment import parse_investment
from metro_core.models import ProjectRecord, ProjectStatus


def make_record(id, **overrides):
    """Build a ProjectRecord with sensible defaults for the fields a test does not care about."""
    fields = {
        "name": f"Line {id}",
        "city": "Delhi",
        "country": "India",
        "region": "India",
        "status": ProjectStatus.OPERATIONAL,
        "length_km": 10.0,
        "investment": "$1.0B",
        "no_of_stations": 10,
    }
    fields.update(overrides)
    fields["status"] = ProjectStatus.parse(fields["status"])
    fields["investment"] = parse_investment(fields["investment"])
    return ProjectRecord(id=id, **fields)


@pytest.fixture
def records():
    return [
        make_record(1, name="Red Line", city="Delhi", status="operational", length_km=26.46, investment="$3.2B"),
        make_record(2, name="Purple Line", city="Bangalore", status="operational", length_km=42.17, investment="$2.8B"),
        make_record(3, name="Aqua Line", city="Mumbai", status="under_construction", length_km=33.37, investment="$4.5B"),
        make_record(4, name="Circle Line", city="Singapore", country="Singapore", region="Asia",
                    status="completed", length_km=35.4, investment="SGD 5.7B", no_of_stations=None),
        make_record(5, name="Line 16", city="Paris", country="France", region="Europe",
                    status="delayed", length_km=29.0, investment="€5.3B"),
        make_record(6, name="Blue Line Extension", city="Delhi", status="planned", length_km=8.2, investment="TBD"),
    ]


@pytest.fixture
def document():
    return {
        "lastUpdated": "2024-05-01T10:00:00Z",
        "projects": [
            {
                "id": 1,
                "name": "Red Line (Line 1)",
                "city": "Delhi",
                "country": "India",
                "region": "India",
                "status": "operational",
                "operationalYear": 2002,
                "lengthKm": 26.46,
                "noOfStations": 21,
                "fromStation": "Rithala",
                "toStation": "Kundli",
                "investment": "$3.2B",
                "lineColor": "#E41E23",
                "description": "Delhi Metro Red Line connecting North Delhi",
            },
            {
                "id": 2,
                "name": "Grand Paris Express Line 15",
                "city": "Paris",
                "country": "France",
                "region": "Europe",
                "status": "ongoing",
                "completionYear": 2030,
                "lengthKm": 75.0,
                "investment": "€5.3B",
                "description": "Orbital line around Paris",
            },
        ],
    }

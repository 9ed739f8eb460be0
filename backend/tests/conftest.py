"""Shared fixtures for wellpath tests."""

import pytest

from wellpath.config import Settings

SAMPLE_POLYLINE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


@pytest.fixture
def settings():
    return Settings(
        directions_url="https://directions.test/json",
        directions_api_key="test-key",
        places_url="https://places.test/nearbysearch/json",
        places_api_key="places-key",
        overpass_url="https://overpass.test/api/interpreter",
        request_timeout=5.0,
        overpass_timeout=10.0,
    )


def make_step(instruction, start, end, distance="0.2 km", duration="3 mins"):
    return {
        "html_instructions": instruction,
        "distance": {"text": distance, "value": 200},
        "duration": {"text": duration, "value": 180},
        "start_location": {"lat": start[0], "lng": start[1]},
        "end_location": {"lat": end[0], "lng": end[1]},
        "travel_mode": "WALKING",
    }


def make_leg(meters, seconds, steps, distance_text=None, duration_text=None):
    return {
        "distance": {"text": distance_text or f"{meters} m", "value": meters},
        "duration": {"text": duration_text or f"{seconds // 60} mins", "value": seconds},
        "steps": steps,
    }


def make_directions_payload(legs, points=SAMPLE_POLYLINE, status="OK"):
    return {
        "status": status,
        "geocoded_waypoints": [],
        "routes": [
            {
                "summary": "Trail Loop",
                "legs": legs,
                "overview_polyline": {"points": points},
            }
        ],
    }

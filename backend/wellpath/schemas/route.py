from enum import Enum

from pydantic import BaseModel, Field

from wellpath.schemas.geo import Coordinate


class TravelMode(str, Enum):
    walking = "walking"
    driving = "driving"
    bicycling = "bicycling"


class TextValue(BaseModel):
    text: str
    value: float = Field(..., description="Meters for distances, seconds for durations")


class RouteStep(BaseModel):
    instruction: str
    distance: str
    duration: str
    start_location: Coordinate
    end_location: Coordinate

    model_config = {"frozen": True}


class RouteInfo(BaseModel):
    polyline: list[Coordinate]
    distance: TextValue
    duration: TextValue
    steps: list[RouteStep]
    legs: int = 1


class RouteRequest(BaseModel):
    waypoints: list[Coordinate] = Field(..., min_length=2, description="Ordered stops, origin first")
    mode: TravelMode = TravelMode.walking

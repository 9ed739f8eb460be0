from typing import Literal

from pydantic import BaseModel, Field

from wellpath.schemas.geo import Coordinate


class RankedPlace(BaseModel):
    id: str
    name: str
    coordinate: Coordinate
    kind: str
    distance_m: float

    model_config = {"frozen": True}


class NearbyRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    radius: int = Field(5000, description="Search radius in meters (100-50000)")
    provider: Literal["google", "overpass"] = "google"

    @property
    def center(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


class NearbyResponse(BaseModel):
    places: list[RankedPlace]
    status: str


class RankRequest(BaseModel):
    center: Coordinate
    candidates: list[dict]
    limit: int = Field(10, ge=0, le=100)

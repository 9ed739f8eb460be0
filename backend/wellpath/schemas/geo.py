from pydantic import BaseModel, Field


class Coordinate(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    model_config = {"frozen": True}


class DistanceRequest(BaseModel):
    a: Coordinate
    b: Coordinate


class DistanceResponse(BaseModel):
    distance_m: float
    text: str


class DecodeRequest(BaseModel):
    encoded: str
    precision: int = Field(5, ge=1, le=7)


class DecodeResponse(BaseModel):
    coordinates: list[Coordinate]


class FormatResponse(BaseModel):
    distance: str | None
    duration: str | None

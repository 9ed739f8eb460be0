"""Response shape of the Google-style Directions API.

Only the fields the client reads are declared; anything else the provider
sends is ignored. A missing declared field fails validation.
"""

from pydantic import BaseModel


class LatLng(BaseModel):
    lat: float
    lng: float


class ProviderText(BaseModel):
    text: str


class ProviderTextValue(ProviderText):
    value: float


class DirectionsStep(BaseModel):
    html_instructions: str = ""
    distance: ProviderText
    duration: ProviderText
    start_location: LatLng
    end_location: LatLng


class DirectionsLeg(BaseModel):
    distance: ProviderTextValue
    duration: ProviderTextValue
    steps: list[DirectionsStep] = []


class OverviewPolyline(BaseModel):
    points: str


class DirectionsRoute(BaseModel):
    legs: list[DirectionsLeg]
    overview_polyline: OverviewPolyline


class DirectionsResponse(BaseModel):
    status: str = "OK"
    routes: list[DirectionsRoute] = []
    error_message: str | None = None

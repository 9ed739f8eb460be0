import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException

from wellpath.config import Settings, get_settings
from wellpath.errors import PlacesError
from wellpath.schemas.geo import (
    DecodeRequest,
    DecodeResponse,
    DistanceRequest,
    DistanceResponse,
    FormatResponse,
)
from wellpath.schemas.places import NearbyRequest, NearbyResponse, RankedPlace, RankRequest
from wellpath.schemas.route import RouteInfo, RouteRequest
from wellpath.services.directions_client import DirectionsClient
from wellpath.services.place_ranker import rank_nearby
from wellpath.services.places_client import find_nature_spots, validate_radius
from wellpath.services.router import compute_route
from wellpath.utils.formatting import format_distance, format_duration
from wellpath.utils.geo import distance_m
from wellpath.utils.polyline import decode_polyline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1")


def get_transport() -> httpx.AsyncBaseTransport | None:
    """Outbound HTTP transport; None means a real network connection."""
    return None


def get_directions_client(
    settings: Settings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_transport),
) -> DirectionsClient:
    return DirectionsClient(settings, transport=transport)


@router.post("/route", response_model=RouteInfo)
async def route(req: RouteRequest, client: DirectionsClient = Depends(get_directions_client)):
    result = await compute_route(req.waypoints, req.mode, client=client)
    if result is None:
        raise HTTPException(status_code=404, detail="No route found")
    return result


@router.post("/places/nearby", response_model=NearbyResponse)
async def nearby_places(
    req: NearbyRequest,
    settings: Settings = Depends(get_settings),
    transport: httpx.AsyncBaseTransport | None = Depends(get_transport),
):
    try:
        radius_m = validate_radius(req.radius)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        places = await find_nature_spots(
            center=req.center,
            radius_m=radius_m,
            provider=req.provider,
            settings=settings,
            transport=transport,
        )
    except PlacesError as e:
        logger.error("Nearby places lookup failed: %s", e)
        raise HTTPException(status_code=502, detail=str(e))

    return NearbyResponse(places=places, status="OK" if places else "ZERO_RESULTS")


@router.post("/places/rank", response_model=list[RankedPlace])
async def rank_places(req: RankRequest):
    return rank_nearby(req.center, req.candidates, req.limit)


@router.post("/distance", response_model=DistanceResponse)
async def distance(req: DistanceRequest):
    meters = distance_m(req.a, req.b)
    return DistanceResponse(distance_m=meters, text=format_distance(meters))


@router.post("/polyline/decode", response_model=DecodeResponse)
async def polyline_decode(req: DecodeRequest):
    return DecodeResponse(coordinates=decode_polyline(req.encoded, req.precision))


@router.get("/format", response_model=FormatResponse)
async def format_values(meters: float | None = None, seconds: float | None = None):
    return FormatResponse(
        distance=format_distance(meters) if meters is not None else None,
        duration=format_duration(seconds) if seconds is not None else None,
    )

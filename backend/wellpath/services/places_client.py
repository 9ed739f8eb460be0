import logging

import httpx

from wellpath.config import Settings
from wellpath.errors import PlacesError
from wellpath.schemas.geo import Coordinate
from wellpath.schemas.places import RankedPlace
from wellpath.services.place_ranker import GOOGLE_RESULT_LIMIT, OVERPASS_RESULT_LIMIT, rank_nearby

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_M = 5000
MIN_RADIUS_M = 100
MAX_RADIUS_M = 50000

NATURE_TYPES = {"park", "natural_feature", "tourist_attraction", "point_of_interest"}

OVERPASS_NATURE_FILTERS = [
    '["leisure"~"^(park|nature_reserve|garden)$"]',
    '["natural"~"^(wood|water|beach|peak)$"]',
    '["boundary"="protected_area"]',
]


def validate_radius(radius_m: int | None) -> int:
    """Default a missing radius to 5 km and reject anything outside 100 m..50 km."""
    if not radius_m:
        return DEFAULT_RADIUS_M
    if radius_m < MIN_RADIUS_M or radius_m > MAX_RADIUS_M:
        raise ValueError(f"Radius must be between {MIN_RADIUS_M} and {MAX_RADIUS_M} meters")
    return radius_m


class GooglePlacesClient:
    """Nearby search against a Google Places style API, filtered to nature types."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.url = settings.places_url
        self.api_key = settings.places_api_key
        self.timeout = settings.request_timeout
        self._transport = transport

    async def search_nearby(
        self,
        center: Coordinate,
        radius_m: int = DEFAULT_RADIUS_M,
        place_type: str = "park",
    ) -> list[dict]:
        params = {
            "location": f"{center.latitude},{center.longitude}",
            "radius": str(radius_m),
            "type": place_type,
            "key": self.api_key,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(self.url, params=params)
        except httpx.TimeoutException:
            raise PlacesError("Places API timeout")
        except httpx.HTTPError as e:
            raise PlacesError(f"Places API unreachable: {e}")

        if resp.status_code != 200:
            raise PlacesError(f"Places API error {resp.status_code}: {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError:
            raise PlacesError("Places API returned invalid JSON")

        status = data.get("status")
        if status not in ("OK", "ZERO_RESULTS"):
            raise PlacesError(f"Places API returned status: {status}")

        results = data.get("results") or []
        return [place for place in results if any(t in NATURE_TYPES for t in place.get("types") or [])]


def _build_overpass_query(center: Coordinate, radius_m: int, timeout_s: int) -> str:
    around = f"(around:{radius_m},{center.latitude},{center.longitude})"
    statements = "\n".join(f"  nwr{flt}{around};" for flt in OVERPASS_NATURE_FILTERS)
    return f"""
[out:json][timeout:{timeout_s}];
(
{statements}
  relation["type"="route"]["route"~"^(hiking|foot)$"]{around};
);
out center tags;
"""


class OverpassPlacesClient:
    """Nature spots from OpenStreetMap via the Overpass API."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.url = settings.overpass_url
        self.timeout = settings.overpass_timeout
        self._transport = transport

    async def search_nearby(self, center: Coordinate, radius_m: int = DEFAULT_RADIUS_M) -> list[dict]:
        query = _build_overpass_query(center, radius_m, int(self.timeout) // 2)

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.url, data={"data": query})
        except httpx.TimeoutException:
            raise PlacesError("Overpass API timeout, try a smaller radius")
        except httpx.HTTPError as e:
            raise PlacesError(f"Overpass API unreachable: {e}")

        if resp.status_code == 429:
            raise PlacesError("Overpass API rate limit, please wait a moment and retry")

        if resp.status_code != 200:
            raise PlacesError(f"Overpass API error {resp.status_code}: {resp.text[:200]}")

        try:
            data = resp.json()
        except ValueError:
            raise PlacesError("Overpass API returned invalid JSON")

        return data.get("elements", [])


async def find_nature_spots(
    center: Coordinate,
    radius_m: int | None = DEFAULT_RADIUS_M,
    provider: str = "google",
    *,
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[RankedPlace]:
    """Fetch nature spots around center from the chosen provider and rank them by distance."""
    radius_m = validate_radius(radius_m)

    client: GooglePlacesClient | OverpassPlacesClient
    if provider == "google":
        client = GooglePlacesClient(settings, transport=transport)
        limit = GOOGLE_RESULT_LIMIT
    elif provider == "overpass":
        client = OverpassPlacesClient(settings, transport=transport)
        limit = OVERPASS_RESULT_LIMIT
    else:
        raise ValueError(f"Unknown places provider: {provider}")

    candidates = await client.search_nearby(center, radius_m)
    places = rank_nearby(center, candidates, limit)
    logger.info("Found %d nature spots via %s (%d candidates)", len(places), provider, len(candidates))
    return places

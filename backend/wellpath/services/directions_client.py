import html
import logging
import re
from collections.abc import Sequence

import httpx
from pydantic import ValidationError

from wellpath.config import Settings
from wellpath.errors import DirectionsError
from wellpath.schemas.directions import DirectionsResponse, DirectionsRoute, LatLng
from wellpath.schemas.geo import Coordinate
from wellpath.schemas.route import RouteInfo, RouteStep, TextValue, TravelMode
from wellpath.utils.formatting import format_distance, format_duration
from wellpath.utils.polyline import decode_polyline

logger = logging.getLogger(__name__)

HTML_TAG_RE = re.compile(r"<[^>]*>")
WHITESPACE_RE = re.compile(r"\s+")

ACCEPTED_STATUSES = {"OK", "ZERO_RESULTS"}


def strip_html(text: str) -> str:
    """Drop tags and entities from a provider instruction, e.g. 'Turn <b>left</b>' -> 'Turn left'."""
    plain = html.unescape(HTML_TAG_RE.sub(" ", text))
    return WHITESPACE_RE.sub(" ", plain).strip()


def _format_latlng(coord: Coordinate) -> str:
    return f"{coord.latitude},{coord.longitude}"


def _to_coordinate(loc: LatLng) -> Coordinate:
    return Coordinate(latitude=loc.lat, longitude=loc.lng)


def build_route_info(route: DirectionsRoute) -> RouteInfo:
    """
    Assemble a RouteInfo from one provider route.

    Every leg contributes: distances and durations are summed and steps are
    concatenated in leg order. With a single leg the provider's own display
    text is kept; otherwise the text is rebuilt from the totals.
    """
    if not route.legs:
        raise DirectionsError("Directions route has no legs")

    steps = []
    total_m = 0.0
    total_s = 0.0
    for leg in route.legs:
        total_m += leg.distance.value
        total_s += leg.duration.value
        for step in leg.steps:
            steps.append(
                RouteStep(
                    instruction=strip_html(step.html_instructions),
                    distance=step.distance.text,
                    duration=step.duration.text,
                    start_location=_to_coordinate(step.start_location),
                    end_location=_to_coordinate(step.end_location),
                )
            )

    if len(route.legs) == 1:
        distance_text = route.legs[0].distance.text
        duration_text = route.legs[0].duration.text
    else:
        distance_text = format_distance(total_m)
        duration_text = format_duration(total_s)

    return RouteInfo(
        polyline=decode_polyline(route.overview_polyline.points),
        distance=TextValue(text=distance_text, value=total_m),
        duration=TextValue(text=duration_text, value=total_s),
        steps=steps,
        legs=len(route.legs),
    )


class DirectionsClient:
    """Client for a Google-style Directions API. One GET per fetch, no retries."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.url = settings.directions_url
        self.api_key = settings.directions_api_key
        self.timeout = settings.request_timeout
        self._transport = transport

    def _build_params(
        self,
        origin: Coordinate,
        destination: Coordinate,
        intermediates: Sequence[Coordinate],
        mode: TravelMode,
    ) -> dict[str, str]:
        params = {
            "origin": _format_latlng(origin),
            "destination": _format_latlng(destination),
            "mode": mode.value,
            "key": self.api_key,
        }
        if intermediates:
            params["waypoints"] = "|".join(_format_latlng(wp) for wp in intermediates)
        return params

    async def fetch_route(
        self,
        origin: Coordinate,
        destination: Coordinate,
        intermediates: Sequence[Coordinate] = (),
        mode: TravelMode | str = TravelMode.walking,
    ) -> RouteInfo | None:
        """
        Fetch a route from origin to destination through the intermediate stops.

        Returns None when the provider finds no route or cannot be reached;
        an unknown travel mode raises ValueError.
        """
        mode = TravelMode(mode)
        params = self._build_params(origin, destination, intermediates, mode)
        try:
            return await self._request_route(params)
        except DirectionsError as e:
            logger.error("Directions request failed: %s", e)
            return None

    async def _request_route(self, params: dict[str, str]) -> RouteInfo | None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(self.url, params=params)
        except httpx.TimeoutException:
            raise DirectionsError("Directions API timeout")
        except httpx.HTTPError as e:
            raise DirectionsError(f"Directions API unreachable: {e}")

        if resp.status_code != 200:
            raise DirectionsError(f"Directions API error {resp.status_code}: {resp.text[:200]}")

        try:
            data = DirectionsResponse.model_validate(resp.json())
        except ValueError as e:
            # ValidationError and JSONDecodeError are both ValueErrors
            raise DirectionsError(f"Unexpected Directions API response: {e}")

        if data.status not in ACCEPTED_STATUSES:
            raise DirectionsError(f"Directions API returned status {data.status}: {data.error_message or ''}")

        if not data.routes:
            logger.warning("No routes found from %s to %s", params["origin"], params["destination"])
            return None

        route = data.routes[0]
        if len(route.legs) > 1:
            logger.debug("Aggregating %d legs", len(route.legs))

        try:
            return build_route_info(route)
        except ValidationError as e:
            raise DirectionsError(f"Directions API returned invalid coordinates: {e}")

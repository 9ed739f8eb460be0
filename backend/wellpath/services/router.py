import logging
from collections.abc import Sequence

from wellpath.schemas.geo import Coordinate
from wellpath.schemas.route import RouteInfo, TravelMode
from wellpath.services.directions_client import DirectionsClient

logger = logging.getLogger(__name__)


async def compute_route(
    waypoints: Sequence[Coordinate],
    mode: TravelMode | str = TravelMode.walking,
    *,
    client: DirectionsClient,
) -> RouteInfo | None:
    """
    Route through an ordered list of waypoints.

    The first waypoint is the origin, the last the destination, and the rest
    are passed through as intermediate stops in a single provider call.
    """
    if len(waypoints) < 2:
        logger.error("Need at least 2 waypoints to compute a route, got %d", len(waypoints))
        return None

    origin = waypoints[0]
    destination = waypoints[-1]
    intermediates = list(waypoints[1:-1])

    return await client.fetch_route(origin, destination, intermediates, mode)

"""Unit tests for the Directions API client."""

import httpx
import pytest

from wellpath.schemas.geo import Coordinate
from wellpath.schemas.route import TravelMode
from wellpath.services.directions_client import DirectionsClient, strip_html

from conftest import SAMPLE_POLYLINE, make_directions_payload, make_leg, make_step

ORIGIN = Coordinate(latitude=38.5, longitude=-120.2)
MIDDLE = Coordinate(latitude=40.7, longitude=-120.95)
DESTINATION = Coordinate(latitude=43.252, longitude=-126.453)


def transport_for(payload=None, status_code=200, requests=None, exc=None):
    """MockTransport returning a fixed response and recording requests."""

    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if exc is not None:
            raise exc(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


def single_leg_payload():
    return make_directions_payload(
        [
            make_leg(
                1200,
                900,
                [
                    make_step("Head <b>north</b> on <b>Main St</b>", (38.5, -120.2), (38.6, -120.2)),
                    make_step(
                        'Turn <b>left</b><div style="font-size:0.9em">Destination will be on the right</div>',
                        (38.6, -120.2),
                        (43.252, -126.453),
                    ),
                ],
                distance_text="1.2 km",
                duration_text="15 mins",
            )
        ]
    )


class TestStripHtml:
    """Instruction text cleanup."""

    def test_removes_tags(self):
        assert strip_html("Turn <b>left</b> onto <b>Oak Ave</b>") == "Turn left onto Oak Ave"

    def test_separates_block_elements(self):
        text = 'Turn <b>right</b><div style="font-size:0.9em">Pass by the lake</div>'
        assert strip_html(text) == "Turn right Pass by the lake"

    def test_unescapes_entities(self):
        assert strip_html("Walk past Smith&#39;s Park &amp; Garden") == "Walk past Smith's Park & Garden"

    def test_plain_text_unchanged(self):
        assert strip_html("Continue straight") == "Continue straight"


class TestRequest:
    """Request construction."""

    async def test_query_parameters(self, settings):
        requests = []
        client = DirectionsClient(settings, transport=transport_for(single_leg_payload(), requests=requests))

        await client.fetch_route(ORIGIN, DESTINATION, [MIDDLE], TravelMode.bicycling)

        assert len(requests) == 1
        params = requests[0].url.params
        assert requests[0].method == "GET"
        assert params["origin"] == "38.5,-120.2"
        assert params["destination"] == "43.252,-126.453"
        assert params["waypoints"] == "40.7,-120.95"
        assert params["mode"] == "bicycling"
        assert params["key"] == "test-key"

    async def test_multiple_waypoints_are_pipe_joined(self, settings):
        requests = []
        client = DirectionsClient(settings, transport=transport_for(single_leg_payload(), requests=requests))
        second = Coordinate(latitude=41.0, longitude=-121.0)

        await client.fetch_route(ORIGIN, DESTINATION, [MIDDLE, second])

        assert requests[0].url.params["waypoints"] == "40.7,-120.95|41.0,-121.0"

    async def test_no_waypoints_parameter_without_intermediates(self, settings):
        requests = []
        client = DirectionsClient(settings, transport=transport_for(single_leg_payload(), requests=requests))

        await client.fetch_route(ORIGIN, DESTINATION)

        assert "waypoints" not in requests[0].url.params
        assert requests[0].url.params["mode"] == "walking"

    async def test_mode_accepts_plain_string(self, settings):
        requests = []
        client = DirectionsClient(settings, transport=transport_for(single_leg_payload(), requests=requests))

        await client.fetch_route(ORIGIN, DESTINATION, mode="driving")

        assert requests[0].url.params["mode"] == "driving"

    async def test_unknown_mode_raises(self, settings):
        requests = []
        client = DirectionsClient(settings, transport=transport_for(single_leg_payload(), requests=requests))

        with pytest.raises(ValueError):
            await client.fetch_route(ORIGIN, DESTINATION, mode="flying")
        assert requests == []


class TestResponse:
    """Response parsing and route assembly."""

    async def test_single_leg_route(self, settings):
        client = DirectionsClient(settings, transport=transport_for(single_leg_payload()))

        route = await client.fetch_route(ORIGIN, DESTINATION)

        assert route is not None
        assert route.legs == 1
        assert route.distance.text == "1.2 km"
        assert route.distance.value == 1200
        assert route.duration.text == "15 mins"
        assert route.duration.value == 900
        assert len(route.polyline) == 3
        assert route.polyline[0].latitude == pytest.approx(38.5)
        assert [s.instruction for s in route.steps] == [
            "Head north on Main St",
            "Turn left Destination will be on the right",
        ]
        assert route.steps[0].distance == "0.2 km"
        assert route.steps[0].duration == "3 mins"
        assert route.steps[1].end_location == Coordinate(latitude=43.252, longitude=-126.453)

    async def test_all_legs_are_aggregated(self, settings):
        payload = make_directions_payload(
            [
                make_leg(1000, 600, [make_step("Leg one", (38.5, -120.2), (40.7, -120.95))]),
                make_leg(2500, 3000, [
                    make_step("Leg two a", (40.7, -120.95), (42.0, -123.0)),
                    make_step("Leg two b", (42.0, -123.0), (43.252, -126.453)),
                ]),
            ]
        )
        client = DirectionsClient(settings, transport=transport_for(payload))

        route = await client.fetch_route(ORIGIN, DESTINATION, [MIDDLE])

        assert route.legs == 2
        assert route.distance.value == 3500
        assert route.distance.text == "3.5 km"
        assert route.duration.value == 3600
        assert route.duration.text == "1h 0m"
        assert [s.instruction for s in route.steps] == ["Leg one", "Leg two a", "Leg two b"]

    async def test_empty_polyline(self, settings):
        payload = make_directions_payload([make_leg(10, 10, [])], points="")
        client = DirectionsClient(settings, transport=transport_for(payload))

        route = await client.fetch_route(ORIGIN, DESTINATION)

        assert route.polyline == []
        assert route.steps == []

    async def test_zero_results_returns_none(self, settings):
        payload = {"status": "ZERO_RESULTS", "routes": []}
        client = DirectionsClient(settings, transport=transport_for(payload))

        assert await client.fetch_route(ORIGIN, DESTINATION) is None


class TestFailures:
    """Provider failures become None instead of exceptions."""

    async def test_http_error_status(self, settings):
        client = DirectionsClient(settings, transport=transport_for({"error": "boom"}, status_code=500))
        assert await client.fetch_route(ORIGIN, DESTINATION) is None

    async def test_provider_error_status(self, settings):
        payload = {"status": "REQUEST_DENIED", "routes": [], "error_message": "The provided API key is invalid."}
        client = DirectionsClient(settings, transport=transport_for(payload))
        assert await client.fetch_route(ORIGIN, DESTINATION) is None

    async def test_unexpected_shape(self, settings):
        payload = {"status": "OK", "routes": [{"legs": []}]}
        client = DirectionsClient(settings, transport=transport_for(payload))
        assert await client.fetch_route(ORIGIN, DESTINATION) is None

    async def test_route_without_legs(self, settings):
        payload = {"status": "OK", "routes": [{"legs": [], "overview_polyline": {"points": SAMPLE_POLYLINE}}]}
        client = DirectionsClient(settings, transport=transport_for(payload))
        assert await client.fetch_route(ORIGIN, DESTINATION) is None

    async def test_invalid_json(self, settings):
        def handler(request):
            return httpx.Response(200, text="<html>not json</html>")

        client = DirectionsClient(settings, transport=httpx.MockTransport(handler))
        assert await client.fetch_route(ORIGIN, DESTINATION) is None

    async def test_out_of_range_step_location(self, settings):
        payload = make_directions_payload([make_leg(10, 10, [make_step("Bad", (95.0, 0.0), (0.0, 0.0))])])
        client = DirectionsClient(settings, transport=transport_for(payload))
        assert await client.fetch_route(ORIGIN, DESTINATION) is None

    async def test_connection_error(self, settings):
        client = DirectionsClient(
            settings,
            transport=transport_for(exc=lambda request: httpx.ConnectError("refused", request=request)),
        )
        assert await client.fetch_route(ORIGIN, DESTINATION) is None

    async def test_timeout(self, settings):
        client = DirectionsClient(
            settings,
            transport=transport_for(exc=lambda request: httpx.ReadTimeout("slow", request=request)),
        )
        assert await client.fetch_route(ORIGIN, DESTINATION) is None


class TestLegTotals:
    """Leg distance and duration values are required for the totals."""

    @pytest.mark.parametrize("field", ["distance", "duration"])
    async def test_leg_without_value_is_rejected(self, settings, field):
        first = make_leg(1000, 600, [make_step("Leg one", (38.5, -120.2), (40.7, -120.95))])
        second = make_leg(2500, 3000, [make_step("Leg two", (40.7, -120.95), (43.252, -126.453))])
        del second[field]["value"]
        client = DirectionsClient(settings, transport=transport_for(make_directions_payload([first, second])))

        assert await client.fetch_route(ORIGIN, DESTINATION, [MIDDLE]) is None

    async def test_step_text_without_value_is_accepted(self, settings):
        step = make_step("Walk", (38.5, -120.2), (43.252, -126.453))
        del step["distance"]["value"]
        del step["duration"]["value"]
        client = DirectionsClient(settings, transport=transport_for(make_directions_payload([make_leg(800, 600, [step])])))

        route = await client.fetch_route(ORIGIN, DESTINATION)

        assert route.distance.value == 800
        assert route.steps[0].distance == "0.2 km"

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from pydantic import ValidationError

from wellpath.schemas.geo import Coordinate
from wellpath.schemas.places import RankedPlace
from wellpath.utils.geo import distance_m

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "nature"
UNNAMED_PLACE = "Unnamed spot"

# Result caps per provider path
GOOGLE_RESULT_LIMIT = 10
OVERPASS_RESULT_LIMIT = 3


@dataclass(frozen=True)
class CategoryRule:
    """
    Maps provider type strings and OSM tags to a category.

    tags maps a tag key to the accepted values; None accepts any value.
    """

    category: str
    types: frozenset[str] = frozenset()
    tags: Mapping[str, frozenset[str] | None] = field(default_factory=dict)

    def matches(self, types: Iterable[str], tags: Mapping[str, str]) -> bool:
        if any(t in self.types for t in types):
            return True
        for key, values in self.tags.items():
            if key in tags and (values is None or (isinstance(tags[key], str) and tags[key] in values)):
                return True
        return False


# Checked in order; first match wins
DEFAULT_CATEGORY_RULES: tuple[CategoryRule, ...] = (
    CategoryRule(
        "park",
        types=frozenset({"park"}),
        tags={"leisure": frozenset({"park", "garden"})},
    ),
    CategoryRule(
        "reserve",
        tags={
            "leisure": frozenset({"nature_reserve"}),
            "boundary": frozenset({"protected_area", "national_park"}),
        },
    ),
    CategoryRule(
        "water",
        tags={"natural": frozenset({"water", "beach", "spring", "wetland"}), "waterway": None},
    ),
    CategoryRule(
        "forest",
        tags={"natural": frozenset({"wood"}), "landuse": frozenset({"forest"})},
    ),
    CategoryRule(
        "peak",
        tags={"natural": frozenset({"peak", "ridge", "cliff"})},
    ),
    CategoryRule(
        "trail",
        tags={
            "route": frozenset({"hiking", "foot"}),
            "highway": frozenset({"path", "footway", "track"}),
        },
    ),
    CategoryRule(
        "campground",
        types=frozenset({"campground"}),
        tags={"tourism": frozenset({"camp_site"})},
    ),
    CategoryRule(
        "viewpoint",
        types=frozenset({"tourist_attraction"}),
        tags={"tourism": frozenset({"viewpoint", "attraction"})},
    ),
)


def _as_coordinate(lat, lng) -> Coordinate | None:
    if lat is None or lng is None:
        return None
    try:
        return Coordinate(latitude=float(lat), longitude=float(lng))
    except (TypeError, ValueError, ValidationError):
        return None


def extract_coordinate(candidate: Mapping) -> Coordinate | None:
    """
    Find the position of a raw place record.

    Accepts OSM nodes (lat/lon), OSM ways and relations queried with
    `out center` (center.lat/center.lon), Google places
    (geometry.location.lat/lng) and already-normalized latitude/longitude.
    """
    if "lat" in candidate:
        return _as_coordinate(candidate.get("lat"), candidate.get("lon", candidate.get("lng")))

    center = candidate.get("center")
    if isinstance(center, Mapping):
        return _as_coordinate(center.get("lat"), center.get("lon", center.get("lng")))

    geometry = candidate.get("geometry")
    if isinstance(geometry, Mapping) and isinstance(geometry.get("location"), Mapping):
        location = geometry["location"]
        return _as_coordinate(location.get("lat"), location.get("lng", location.get("lon")))

    if "latitude" in candidate:
        return _as_coordinate(candidate.get("latitude"), candidate.get("longitude"))

    return None


def _tags(candidate: Mapping) -> Mapping:
    tags = candidate.get("tags")
    return tags if isinstance(tags, Mapping) else {}


def _types(candidate: Mapping) -> list[str]:
    types = candidate.get("types")
    if not isinstance(types, (list, tuple)):
        return []
    return [t for t in types if isinstance(t, str)]


def classify(candidate: Mapping, rules: Sequence[CategoryRule] = DEFAULT_CATEGORY_RULES) -> str:
    types = _types(candidate)
    tags = _tags(candidate)
    for rule in rules:
        if rule.matches(types, tags):
            return rule.category
    return DEFAULT_CATEGORY


def _place_id(candidate: Mapping, index: int) -> str:
    if candidate.get("place_id"):
        return str(candidate["place_id"])
    if "id" in candidate and "type" in candidate:
        return f"{candidate['type']}/{candidate['id']}"
    if "id" in candidate:
        return str(candidate["id"])
    return str(index)


def _place_name(candidate: Mapping) -> str:
    for name in (candidate.get("name"), _tags(candidate).get("name")):
        if isinstance(name, str) and name:
            return name
    return UNNAMED_PLACE


def rank_nearby(
    center: Coordinate,
    candidates: Iterable[Mapping],
    limit: int,
    rules: Sequence[CategoryRule] = DEFAULT_CATEGORY_RULES,
) -> list[RankedPlace]:
    """
    Return the `limit` candidates closest to center, nearest first.

    Candidates without a usable position, or whose fields cannot be read,
    are skipped. Equal distances keep their input order.
    """
    if limit <= 0:
        return []

    ranked: list[RankedPlace] = []
    skipped = 0
    for index, candidate in enumerate(candidates):
        coord = extract_coordinate(candidate)
        if coord is None:
            skipped += 1
            continue
        try:
            place = RankedPlace(
                id=_place_id(candidate, index),
                name=_place_name(candidate),
                coordinate=coord,
                kind=classify(candidate, rules),
                distance_m=distance_m(center, coord),
            )
        except ValidationError:
            skipped += 1
            continue
        ranked.append(place)

    if skipped:
        logger.debug("Skipped %d unusable candidates", skipped)

    ranked.sort(key=lambda place: place.distance_m)
    return ranked[:limit]

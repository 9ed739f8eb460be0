"""Encoded polyline codec.

Each coordinate is stored as the delta from the previous one, in fixed-point
degrees (10**precision), zigzag-encoded and split into little-endian 5-bit
groups. Every group is offset by 63 into printable ASCII; 0x20 marks that
another group follows. Google uses precision 5, Valhalla precision 6.
"""

import math
from collections.abc import Iterable

from wellpath.schemas.geo import Coordinate

DEFAULT_PRECISION = 5


def _read_value(encoded: str, index: int) -> tuple[int | None, int]:
    """Read one zigzag value starting at index. Returns (None, index) if the string ends mid-value."""
    result = 0
    shift = 0
    while index < len(encoded):
        b = ord(encoded[index]) - 63
        index += 1
        result |= (b & 0x1F) << shift
        shift += 5
        if b < 0x20:
            return (~(result >> 1) if result & 1 else result >> 1), index
    return None, index


def decode_polyline(encoded: str, precision: int = DEFAULT_PRECISION) -> list[Coordinate]:
    """
    Decode a polyline string into coordinates in path order.

    Malformed input never raises: decoding stops at the last complete
    coordinate. Passing anything other than a string is a TypeError.
    """
    if not isinstance(encoded, str):
        raise TypeError(f"encoded polyline must be str, got {type(encoded).__name__}")

    factor = 10**precision
    coords: list[Coordinate] = []
    index = 0
    lat = 0
    lng = 0

    while index < len(encoded):
        dlat, index = _read_value(encoded, index)
        if dlat is None:
            break
        dlng, index = _read_value(encoded, index)
        if dlng is None:
            break
        lat += dlat
        lng += dlng
        # Provider data, not range-checked here
        coords.append(Coordinate.model_construct(latitude=lat / factor, longitude=lng / factor))

    return coords


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else (value << 1)
    chunks = []
    while value >= 0x20:
        chunks.append(chr((0x20 | (value & 0x1F)) + 63))
        value >>= 5
    chunks.append(chr(value + 63))
    return "".join(chunks)


def encode_polyline(
    coords: Iterable[Coordinate | tuple[float, float]],
    precision: int = DEFAULT_PRECISION,
) -> str:
    """Encode coordinates (or (lat, lng) pairs) into a polyline string."""
    factor = 10**precision
    prev_lat = 0
    prev_lng = 0
    out = []
    for coord in coords:
        if isinstance(coord, Coordinate):
            lat, lng = coord.latitude, coord.longitude
        else:
            lat, lng = coord
        ilat = _round_half_away(lat * factor)
        ilng = _round_half_away(lng * factor)
        out.append(_encode_value(ilat - prev_lat))
        out.append(_encode_value(ilng - prev_lng))
        prev_lat = ilat
        prev_lng = ilng
    return "".join(out)

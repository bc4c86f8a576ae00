"""
Location resolution for the map views.

An event's location descriptor may carry explicit coordinates, a named
place, a province, or several of those. The resolver turns it into
something a map can plot:

1. explicit latitude/longitude, projected onto the illustrative SVG map
   or passed through unchanged for the tile map;
2. exact lookup of the place name (or modern name, or province) in a
   table of historically significant places;
3. bidirectional substring match between the name and the table keys;
4. the Vietnam centroid, with a warning.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_PLACE = "Vietnam"

# Illustrative SVG map bounds (viewBox 600 x 1200)
SVG_LNG_MIN, SVG_LNG_SPAN = 102.0, 8.0
SVG_LAT_MAX, SVG_LAT_SPAN = 24.0, 16.0


@dataclass(frozen=True)
class Point:
    """Position on the SVG canvas."""
    x: float
    y: float


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float


Coordinates = Union[Point, LatLng]


class Projection(str, Enum):
    SVG = "svg"
    LATLNG = "latlng"


SVG_PLACES = {
    # Northern Vietnam
    "Hà Nội": Point(150, 150),
    "Hanoi": Point(150, 150),
    "Thăng Long": Point(150, 150),
    "Phú Thọ": Point(140, 120),
    "Phong Châu": Point(140, 120),
    "Bạch Đằng": Point(165, 170),
    "Điện Biên Phủ": Point(120, 90),
    "Cao Bằng": Point(155, 60),
    # North-Central
    "Thanh Hóa": Point(145, 260),
    "Nghệ An": Point(140, 320),
    "Hà Tĩnh": Point(145, 360),
    # Central
    "Huế": Point(155, 430),
    "Thừa Thiên Huế": Point(155, 430),
    "Đà Nẵng": Point(160, 460),
    "Quảng Nam": Point(158, 490),
    "Hội An": Point(158, 495),
    # South-Central
    "Quy Nhơn": Point(165, 580),
    "Nha Trang": Point(168, 630),
    "Đà Lạt": Point(155, 650),
    # Southern
    "Sài Gòn": Point(145, 740),
    "Saigon": Point(145, 740),
    "Hồ Chí Minh": Point(145, 740),
    "Cần Thơ": Point(135, 770),
    "Cà Mau": Point(128, 785),
    # Default
    "Vietnam": Point(150, 400),
    "Việt Nam": Point(150, 400),
}

LATLNG_PLACES = {
    "Hà Nội": LatLng(21.0285, 105.8542),
    "Hanoi": LatLng(21.0285, 105.8542),
    "Thăng Long": LatLng(21.0285, 105.8542),
    "Phú Thọ": LatLng(21.3227, 105.4020),
    "Phong Châu": LatLng(21.3450, 105.2860),
    "Bạch Đằng": LatLng(20.9300, 106.7800),
    "Điện Biên Phủ": LatLng(21.3860, 103.0230),
    "Cao Bằng": LatLng(22.6657, 106.2577),
    "Thanh Hóa": LatLng(19.8067, 105.7852),
    "Nghệ An": LatLng(18.6796, 105.6813),
    "Hà Tĩnh": LatLng(18.3428, 105.9057),
    "Huế": LatLng(16.4637, 107.5909),
    "Thừa Thiên Huế": LatLng(16.4637, 107.5909),
    "Đà Nẵng": LatLng(16.0544, 108.2022),
    "Quảng Nam": LatLng(15.5394, 108.0191),
    "Hội An": LatLng(15.8801, 108.3380),
    "Quy Nhơn": LatLng(13.7820, 109.2190),
    "Nha Trang": LatLng(12.2388, 109.1967),
    "Đà Lạt": LatLng(11.9404, 108.4583),
    "Sài Gòn": LatLng(10.8231, 106.6297),
    "Saigon": LatLng(10.8231, 106.6297),
    "Hồ Chí Minh": LatLng(10.8231, 106.6297),
    "Cần Thơ": LatLng(10.0452, 105.7469),
    "Cà Mau": LatLng(9.1769, 105.1524),
    "Vietnam": LatLng(14.0583, 108.2772),
    "Việt Nam": LatLng(14.0583, 108.2772),
}


def _number(value) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return None


def coordinates_of(location) -> Optional[LatLng]:
    """
    Explicit coordinates of a location descriptor, if it has any.

    Accepts ``{"lat", "lng"}``, a GeoJSON point, or a ``[lng, lat]`` pair.
    """
    if not isinstance(location, dict):
        return None
    coords = location.get("coordinates")

    if isinstance(coords, dict) and "coordinates" in coords:
        coords = coords["coordinates"]  # GeoJSON point
    if isinstance(coords, dict):
        lat, lng = _number(coords.get("lat")), _number(coords.get("lng"))
    elif isinstance(coords, (list, tuple)) and len(coords) == 2:
        lng, lat = _number(coords[0]), _number(coords[1])
    else:
        return None

    if lat is None or lng is None:
        return None
    return LatLng(lat, lng)


def project_to_svg(point: LatLng) -> Point:
    """Linear projection onto the illustrative map, screen-down is south."""
    x = (point.lng - SVG_LNG_MIN) / SVG_LNG_SPAN * 200 + 250
    y = (SVG_LAT_MAX - point.lat) / SVG_LAT_SPAN * 1000 + 100
    return Point(x, y)


def place_names(location) -> list[str]:
    """Names to look up, most specific first."""
    if isinstance(location, str):
        return [location] if location else []
    if not isinstance(location, dict):
        return []
    names = []
    for key in ("name", "modernName", "province"):
        value = location.get(key)
        if isinstance(value, str) and value and value not in names:
            names.append(value)
    return names


class LocationResolver:
    """Resolves location descriptors for one map renderer."""

    def __init__(self, projection: Projection = Projection.SVG, places: Optional[dict] = None):
        self.projection = Projection(projection)
        if places is None:
            places = SVG_PLACES if self.projection is Projection.SVG else LATLNG_PLACES
        self.places = places

    def resolve(self, location) -> Optional[Coordinates]:
        """Plot-ready coordinates, or None when there is no descriptor at all."""
        if not location:
            return None

        explicit = coordinates_of(location)
        if explicit is not None:
            if self.projection is Projection.SVG:
                return project_to_svg(explicit)
            return explicit

        names = place_names(location)
        for name in names:
            if name in self.places:
                return self.places[name]

        if names:
            wanted = names[0].casefold()
            for key, coords in self.places.items():
                candidate = key.casefold()
                if candidate in wanted or wanted in candidate:
                    return coords

        logger.warning("Location not found in map: %r", names[0] if names else location)
        return self.places.get(DEFAULT_PLACE)

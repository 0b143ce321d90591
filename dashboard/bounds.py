"""
Bounding rectangles for drill-down viewport targets.

Two entry points share the same folding logic:

* ``bounds_of_coordinates`` walks raw, untagged coordinate arrays of any
  depth. A position is recognized because its first element is not itself
  a sequence.
* ``bounds_of_geometry`` / ``bounds_of_features`` walk tagged geometries
  parsed from GeoJSON.

Empty input yields None ("no bounds") so callers can skip the viewport
change. Longitudes are folded with plain min/max; geometries crossing the
antimeridian produce an overly wide box.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Sequence, Tuple

from loguru import logger

from .geometry import Geometry, GeometryError, Position, from_geojson


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle in longitude/latitude degrees."""

    min_longitude: float
    min_latitude: float
    max_longitude: float
    max_latitude: float

    @property
    def center(self) -> Tuple[float, float]:
        """(longitude, latitude) of the rectangle's midpoint."""
        return (
            (self.min_longitude + self.max_longitude) / 2,
            (self.min_latitude + self.max_latitude) / 2,
        )

    def union(self, other: Optional["Bounds"]) -> "Bounds":
        if other is None:
            return self
        return Bounds(
            min_longitude=min(self.min_longitude, other.min_longitude),
            min_latitude=min(self.min_latitude, other.min_latitude),
            max_longitude=max(self.max_longitude, other.max_longitude),
            max_latitude=max(self.max_latitude, other.max_latitude),
        )

    def to_fit_bounds(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """South-west and north-east corners as ((lng, lat), (lng, lat))."""
        return (
            (self.min_longitude, self.min_latitude),
            (self.max_longitude, self.max_latitude),
        )

    @classmethod
    def from_value(cls, value: Any) -> Optional["Bounds"]:
        """
        Parse a precomputed ``bounds`` feature property.

        Accepts ``[[minLng, minLat], [maxLng, maxLat]]`` or the flat
        ``[minLng, minLat, maxLng, maxLat]`` form. Anything else returns None.
        """
        if not isinstance(value, (list, tuple)):
            return None
        try:
            if len(value) == 2 and all(isinstance(corner, (list, tuple)) for corner in value):
                (west, south), (east, north) = value
            elif len(value) == 4:
                west, south, east, north = value
            else:
                return None
            return cls(float(west), float(south), float(east), float(north))
        except (TypeError, ValueError):
            logger.debug(f"Ignoring unparseable bounds value: {value!r}")
            return None


class _Accumulator:
    """Running min/max over folded positions."""

    def __init__(self) -> None:
        self.min_longitude = float("inf")
        self.min_latitude = float("inf")
        self.max_longitude = float("-inf")
        self.max_latitude = float("-inf")
        self.count = 0

    def fold(self, longitude: float, latitude: float) -> None:
        self.min_longitude = min(self.min_longitude, longitude)
        self.max_longitude = max(self.max_longitude, longitude)
        self.min_latitude = min(self.min_latitude, latitude)
        self.max_latitude = max(self.max_latitude, latitude)
        self.count += 1

    def fold_all(self, positions: Iterable[Position]) -> None:
        for longitude, latitude in positions:
            self.fold(longitude, latitude)

    def result(self) -> Optional[Bounds]:
        if not self.count:
            return None
        return Bounds(self.min_longitude, self.min_latitude, self.max_longitude, self.max_latitude)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _descend(values: Sequence[Any], acc: _Accumulator) -> None:
    for item in values:
        if not _is_sequence(item) or not item:
            continue
        if _is_sequence(item[0]):
            _descend(item, acc)
        else:
            acc.fold(float(item[0]), float(item[1]))


def bounds_of_coordinates(coordinates: Sequence[Any]) -> Optional[Bounds]:
    """
    Bounding box of an arbitrarily nested coordinate array.

    Works the same for a list of positions, a ring, a polygon with holes or
    a multi-polygon, without knowing which one it was given.

    Args:
        coordinates: Nested lists ending in [longitude, latitude] pairs

    Returns:
        Bounds, or None when no position was found
    """
    acc = _Accumulator()
    if _is_sequence(coordinates) and coordinates:
        if _is_sequence(coordinates[0]):
            _descend(coordinates, acc)
        else:
            # A bare position, e.g. a Point's coordinates
            acc.fold(float(coordinates[0]), float(coordinates[1]))
    return acc.result()


def bounds_of_geometry(geometry: Optional[Geometry]) -> Optional[Bounds]:
    """Bounding box of a tagged geometry, None if it has no positions."""
    if geometry is None:
        return None
    acc = _Accumulator()
    acc.fold_all(geometry.positions())
    return acc.result()


def bounds_of_features(collection: Optional[Mapping[str, Any]]) -> Optional[Bounds]:
    """
    Bounding box enclosing every feature of a GeoJSON FeatureCollection.

    Features with null or unparseable geometry are skipped.

    Args:
        collection: GeoJSON FeatureCollection dictionary

    Returns:
        Bounds over all features, or None for an empty collection
    """
    if not collection or not collection.get("features"):
        return None

    combined: Optional[Bounds] = None
    for feature in collection["features"]:
        try:
            geometry = from_geojson(feature.get("geometry"))
        except GeometryError as e:
            logger.warning(f"⚠️ Skipping feature with invalid geometry: {e}")
            continue
        feature_bounds = bounds_of_geometry(geometry)
        if feature_bounds is None:
            continue
        combined = feature_bounds if combined is None else combined.union(feature_bounds)
    return combined

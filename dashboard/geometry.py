"""
Tagged GeoJSON geometry variants.

Boundary and ward files arrive as GeoJSON dictionaries whose coordinate
nesting depth depends on the geometry type. Parsing them into explicit
variants lets the bounds calculation walk positions without probing array
shapes.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Mapping, Optional, Sequence, Tuple, Union

Position = Tuple[float, float]
Ring = Tuple[Position, ...]


@dataclass(frozen=True)
class Point:
    coordinates: Position

    def positions(self) -> Iterator[Position]:
        yield self.coordinates


@dataclass(frozen=True)
class MultiPoint:
    coordinates: Tuple[Position, ...]

    def positions(self) -> Iterator[Position]:
        yield from self.coordinates


@dataclass(frozen=True)
class LineString:
    coordinates: Tuple[Position, ...]

    def positions(self) -> Iterator[Position]:
        yield from self.coordinates


@dataclass(frozen=True)
class MultiLineString:
    lines: Tuple[LineString, ...]

    def positions(self) -> Iterator[Position]:
        for line in self.lines:
            yield from line.positions()


@dataclass(frozen=True)
class Polygon:
    """Exterior ring followed by any holes."""

    rings: Tuple[Ring, ...]

    def positions(self) -> Iterator[Position]:
        for ring in self.rings:
            yield from ring


@dataclass(frozen=True)
class MultiPolygon:
    polygons: Tuple[Polygon, ...]

    def positions(self) -> Iterator[Position]:
        for polygon in self.polygons:
            yield from polygon.positions()


@dataclass(frozen=True)
class GeometryCollection:
    geometries: Tuple["Geometry", ...]

    def positions(self) -> Iterator[Position]:
        for geometry in self.geometries:
            yield from geometry.positions()


Geometry = Union[
    Point, MultiPoint, LineString, MultiLineString, Polygon, MultiPolygon, GeometryCollection
]


class GeometryError(ValueError):
    """Raised for GeoJSON geometries that cannot be parsed."""


def _position(value: Sequence[Any]) -> Position:
    if len(value) < 2:
        raise GeometryError(f"Position needs longitude and latitude, got {value!r}")
    return (float(value[0]), float(value[1]))


def _positions(values: Sequence[Sequence[Any]]) -> Tuple[Position, ...]:
    return tuple(_position(value) for value in values)


def _polygon(rings: Sequence[Sequence[Sequence[Any]]]) -> Polygon:
    return Polygon(rings=tuple(_positions(ring) for ring in rings))


def from_geojson(geometry: Optional[Mapping[str, Any]]) -> Optional[Geometry]:
    """
    Parse a GeoJSON geometry object into its tagged variant.

    Args:
        geometry: GeoJSON geometry dictionary, or None for null geometries

    Returns:
        Parsed geometry, or None when the feature has no geometry

    Raises:
        GeometryError: Unknown type or malformed coordinates
    """
    if geometry is None:
        return None

    kind = geometry.get("type")
    try:
        if kind == "GeometryCollection":
            parsed = (from_geojson(child) for child in geometry.get("geometries", []))
            return GeometryCollection(geometries=tuple(g for g in parsed if g is not None))

        coordinates = geometry.get("coordinates")
        if coordinates is None:
            raise GeometryError(f"{kind} geometry has no coordinates")

        if kind == "Point":
            return Point(coordinates=_position(coordinates))
        if kind == "MultiPoint":
            return MultiPoint(coordinates=_positions(coordinates))
        if kind == "LineString":
            return LineString(coordinates=_positions(coordinates))
        if kind == "MultiLineString":
            return MultiLineString(
                lines=tuple(LineString(coordinates=_positions(line)) for line in coordinates)
            )
        if kind == "Polygon":
            return _polygon(coordinates)
        if kind == "MultiPolygon":
            return MultiPolygon(polygons=tuple(_polygon(polygon) for polygon in coordinates))
    except GeometryError:
        raise
    except (TypeError, IndexError, ValueError) as e:
        raise GeometryError(f"Malformed {kind} coordinates: {e}") from e

    raise GeometryError(f"Unsupported geometry type: {kind!r}")

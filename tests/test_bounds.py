import pytest

from dashboard.bounds import (
    Bounds,
    bounds_of_coordinates,
    bounds_of_features,
    bounds_of_geometry,
)
from dashboard.geometry import GeometryError, MultiPolygon, Polygon, from_geojson


def test_single_wrapped_point():
    bounds = bounds_of_coordinates([[28.3, -13.5]])
    assert bounds.min_longitude == bounds.max_longitude == 28.3
    assert bounds.min_latitude == bounds.max_latitude == -13.5


def test_bare_position():
    assert bounds_of_coordinates([28.3, -13.5]) == Bounds(28.3, -13.5, 28.3, -13.5)


def test_two_disjoint_polygons():
    coords = [
        [[[10, 0], [20, 0], [20, 5], [10, 0]]],
        [[[30, 1], [40, 1], [40, 6], [30, 1]]],
    ]
    bounds = bounds_of_coordinates(coords)
    assert bounds.min_longitude == 10
    assert bounds.max_longitude == 40
    assert bounds.min_latitude == 0
    assert bounds.max_latitude == 6


def test_polygon_with_hole():
    outer = [[0, 0], [10, 0], [10, 10], [0, 10], [0, 0]]
    hole = [[2, 2], [4, 2], [4, 4], [2, 2]]
    assert bounds_of_coordinates([outer, hole]) == Bounds(0, 0, 10, 10)


@pytest.mark.parametrize("empty", [[], [[]], [[[]]]])
def test_empty_coordinates_have_no_bounds(empty):
    assert bounds_of_coordinates(empty) is None


def test_tagged_geometry_matches_raw_descent():
    raw = {
        "type": "MultiPolygon",
        "coordinates": [
            [[[10, 0], [20, 0], [20, 5], [10, 0]]],
            [[[30, 1], [40, 1], [40, 6], [30, 1]]],
        ],
    }
    geometry = from_geojson(raw)
    assert isinstance(geometry, MultiPolygon)
    assert isinstance(geometry.polygons[0], Polygon)
    assert bounds_of_geometry(geometry) == bounds_of_coordinates(raw["coordinates"])


def test_unknown_geometry_type():
    with pytest.raises(GeometryError):
        from_geojson({"type": "Circle", "coordinates": [0, 0]})


def test_feature_collection_bounds(wards):
    bounds = bounds_of_features(wards)
    assert bounds == Bounds(28.25, -15.45, 28.35, -15.35)
    assert bounds.to_fit_bounds() == ((28.25, -15.45), (28.35, -15.35))


def test_empty_collection_has_no_bounds():
    assert bounds_of_features({"type": "FeatureCollection", "features": []}) is None
    assert bounds_of_features(None) is None


def test_null_geometries_are_skipped(wards):
    wards["features"].append({"type": "Feature", "properties": {}, "geometry": None})
    assert bounds_of_features(wards) == Bounds(28.25, -15.45, 28.35, -15.35)


@pytest.mark.parametrize(
    "value",
    [[[28.0, -15.0], [29.0, -14.0]], [28.0, -15.0, 29.0, -14.0]],
)
def test_precomputed_bounds_forms(value):
    assert Bounds.from_value(value) == Bounds(28.0, -15.0, 29.0, -14.0)


@pytest.mark.parametrize("value", [None, "28,-15,29,-14", [1, 2, 3], [["a", "b"], [1, 2]]])
def test_unusable_precomputed_bounds(value):
    assert Bounds.from_value(value) is None


def test_union_and_center():
    combined = Bounds(0, 0, 1, 1).union(Bounds(2, -1, 3, 0.5))
    assert combined == Bounds(0, -1, 3, 1)
    assert combined.center == (1.5, 0.0)

"""Shared fixtures: a small synthetic constituency layer, results and wards."""

import json
import sys
from pathlib import Path

import pytest
import yaml
from loguru import logger

sys.path.insert(0, str(Path(__file__).parent.parent))

from dashboard.models import ResultRecord  # noqa: E402


def square(west, south, east, north):
    return [[[west, south], [east, south], [east, north], [west, north], [west, south]]]


def feature(const_no, name, district, province, coordinates, kind="Polygon", **extra):
    properties = {"ConstNo": const_no, "ConstName": name, "DistName": district, "PovName": province}
    properties.update(extra)
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": kind, "coordinates": coordinates},
    }


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")


@pytest.fixture
def constituencies():
    return {
        "type": "FeatureCollection",
        "features": [
            feature(1, "Lusaka Central", "Lusaka", "Lusaka", square(28.2, -15.5, 28.4, -15.3)),
            feature(2, "Kabwata", "Lusaka", "Lusaka", square(28.3, -15.5, 28.5, -15.4)),
            feature(
                3,
                "Chipata Central",
                "Chipata",
                "Eastern",
                [square(32.5, -13.7, 32.7, -13.5), square(32.8, -13.9, 32.9, -13.8)],
                kind="MultiPolygon",
            ),
        ],
    }


@pytest.fixture
def results_json():
    return {
        "1": {
            "winner": "UPND",
            "votes": 30120,
            "margin": 41.2,
            "totalVotes": 52000,
            "results": [
                {"party": "UPND", "votes": 30120, "percentage": 57.9},
                {"party": "PF", "votes": 8700, "percentage": 16.7},
            ],
        },
        "2": {"winner": "UPND", "votes": 21000, "margin": 12.5, "totalVotes": 40000},
        "3": {"winner": "PF", "votes": 18000, "margin": 8.0, "totalVotes": 31000},
    }


@pytest.fixture
def results(results_json):
    return {int(key): ResultRecord.from_json(int(key), entry) for key, entry in results_json.items()}


@pytest.fixture
def wards():
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"wardName": "Kamwala"},
                "geometry": {"type": "Polygon", "coordinates": square(28.25, -15.45, 28.3, -15.4)},
            },
            {
                "type": "Feature",
                "properties": {"wardName": "Kabulonga"},
                "geometry": {"type": "Polygon", "coordinates": square(28.3, -15.42, 28.35, -15.35)},
            },
        ],
    }


@pytest.fixture
def project_dir(tmp_path, constituencies, results_json, wards):
    """A project tree with data files and a config.yaml pointing at them."""
    data_dir = tmp_path / "data"
    (data_dir / "wards").mkdir(parents=True)
    (data_dir / "election_results.json").write_text(json.dumps(results_json))
    (data_dir / "constituencies.geojson").write_text(json.dumps(constituencies))
    (data_dir / "wards" / "LUSAKA_CENTRAL.geojson").write_text(json.dumps(wards))

    config = {
        "project_name": "Test Election",
        "input_files": {
            "results_json": "data/election_results.json",
            "constituencies_geojson": "data/constituencies.geojson",
            "wards_location": "data/wards",
        },
        "directories": {"output": "out"},
    }
    (tmp_path / "config.yaml").write_text(yaml.safe_dump(config))
    return tmp_path

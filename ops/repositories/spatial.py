"""Boundary data access for the constituency and ward layers."""

import re
from typing import Any, Dict, Optional, Union

from loguru import logger
from shapely.errors import ShapelyError
from shapely.geometry import shape
from shapely.validation import explain_validity

from dashboard.errors import LoadFailure
from dashboard.models import normalize_constituency_id

from .fetch import fetch_json, join_location


def ward_filename(constituency_name: str) -> str:
    """
    File name of a constituency's ward GeoJSON.

    Whitespace runs and slashes become underscores and the result is
    upper-cased: "Lusaka Central" -> "LUSAKA_CENTRAL.geojson".
    """
    stem = re.sub(r"\s+", "_", constituency_name).replace("/", "_").upper()
    return f"{stem}.geojson"


def validate_feature_collection(data: Any, source: str) -> Dict[str, Any]:
    """
    Check that a decoded document is a GeoJSON FeatureCollection.

    Geometries that shapely reports as invalid are logged, not repaired:
    the map only needs their outline and bounds.

    Raises:
        LoadFailure: The document is not a FeatureCollection
    """
    if not isinstance(data, dict) or data.get("type") != "FeatureCollection":
        raise LoadFailure(source, "expected a GeoJSON FeatureCollection")
    features = data.get("features")
    if not isinstance(features, list):
        raise LoadFailure(source, "FeatureCollection has no features list")

    invalid = 0
    for index, feature in enumerate(features):
        geometry = feature.get("geometry") if isinstance(feature, dict) else None
        if geometry is None:
            continue
        try:
            geom = shape(geometry)
        except (ShapelyError, ValueError, TypeError, AttributeError) as e:
            invalid += 1
            logger.debug(f"  Feature {index}: unreadable geometry ({e})")
            continue
        if not geom.is_valid:
            invalid += 1
            logger.debug(f"  Feature {index}: {explain_validity(geom)}")

    valid = len(features) - invalid
    logger.debug(f"  ✓ Valid geometries: {valid}/{len(features)}")
    if invalid:
        logger.warning(f"⚠️ {invalid} features in {source} have invalid geometry")
    return data


class BoundaryRepository:
    """
    Loads the constituency boundary layer and per-constituency ward layers.

    Example:
        boundaries = BoundaryRepository(
            constituencies_location="data/zambia_constituencies_simplified.geojson",
            wards_location="data/wards",
        )
        constituencies = boundaries.load_constituencies()
        wards = boundaries.load_wards("Lusaka Central")
    """

    def __init__(
        self,
        constituencies_location: str,
        wards_location: Optional[str] = None,
        id_property: str = "ConstNo",
        name_property: str = "ConstName",
        timeout: float = 30,
    ):
        self.constituencies_location = constituencies_location
        self.wards_location = wards_location
        self.id_property = id_property
        self.name_property = name_property
        self.timeout = timeout

    def load_constituencies(self) -> Dict[str, Any]:
        """
        Load the constituency boundary FeatureCollection.

        Raises:
            LoadFailure: The file could not be fetched or is not GeoJSON
        """
        location = self.constituencies_location
        logger.info(f"🗺️ Loading constituency boundaries from {location}")
        data = validate_feature_collection(fetch_json(location, timeout=self.timeout), location)
        logger.success(f"  ✅ Loaded {len(data['features']):,} constituency features")
        return data

    def ward_location(self, constituency_name: str) -> str:
        if not self.wards_location:
            raise LoadFailure(constituency_name, "no ward data location configured")
        return join_location(self.wards_location, ward_filename(constituency_name))

    def load_wards(self, constituency_name: str) -> Dict[str, Any]:
        """
        Load the ward FeatureCollection of one constituency.

        Args:
            constituency_name: Constituency name as found in the boundary layer

        Raises:
            LoadFailure: No ward file exists for the constituency or it is unreadable
        """
        location = self.ward_location(constituency_name)
        logger.debug(f"🏘️ Loading wards for {constituency_name} from {location}")
        return validate_feature_collection(fetch_json(location, timeout=self.timeout), location)

    def find_constituency(
        self, constituencies: Dict[str, Any], key: Union[int, str]
    ) -> Optional[Dict[str, Any]]:
        """
        Find a constituency feature by id or by (case-insensitive) name.

        Args:
            constituencies: FeatureCollection to search
            key: Constituency id or name

        Returns:
            Matching feature or None
        """
        wanted_id = normalize_constituency_id(key)
        wanted_name = str(key).strip().casefold()
        for feature in constituencies.get("features", []):
            properties = feature.get("properties") or {}
            if wanted_id is not None:
                if normalize_constituency_id(properties.get(self.id_property)) == wanted_id:
                    return feature
            elif str(properties.get(self.name_property, "")).strip().casefold() == wanted_name:
                return feature
        return None

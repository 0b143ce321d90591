"""
Join constituency boundaries with election results.

The join is a pure transform: it never mutates the boundary collection or
the result records, and the returned collection shares no mutable objects
with its inputs. Features without a matching record ("no data yet") pass
through with only the derived ``fillColor`` added.
"""

import copy
from typing import Any, Dict, Mapping, Optional

from loguru import logger

from .colors import DEFAULT_RESOLVER, ColorResolver
from .models import ResultRecord, normalize_constituency_id

DEFAULT_ID_PROPERTY = "ConstNo"
FILL_COLOR_PROPERTY = "fillColor"


def join_feature(
    feature: Mapping[str, Any],
    results: Mapping[int, ResultRecord],
    resolver: ColorResolver = DEFAULT_RESOLVER,
    id_property: str = DEFAULT_ID_PROPERTY,
) -> Dict[str, Any]:
    """
    Enrich a single feature with its result record and display color.

    Args:
        feature: GeoJSON Feature dictionary
        results: Result records keyed by integer constituency id
        resolver: Color resolver for the winner label
        id_property: Feature property holding the constituency id

    Returns:
        New feature dictionary
    """
    original = feature.get("properties") or {}
    properties = dict(original)

    key = normalize_constituency_id(original.get(id_property))
    record = results.get(key) if key is not None else None
    if record is not None:
        # Result fields take precedence on key collisions
        properties.update(record.to_properties())

    properties[FILL_COLOR_PROPERTY] = resolver.resolve(properties.get("winner"))

    joined = {k: copy.deepcopy(v) for k, v in feature.items() if k != "properties"}
    joined["properties"] = copy.deepcopy(properties)
    return joined


def join_results(
    collection: Mapping[str, Any],
    results: Optional[Mapping[int, ResultRecord]],
    resolver: ColorResolver = DEFAULT_RESOLVER,
    id_property: str = DEFAULT_ID_PROPERTY,
) -> Dict[str, Any]:
    """
    Merge a boundary FeatureCollection with result records.

    Args:
        collection: GeoJSON FeatureCollection of constituency boundaries
        results: Result records keyed by integer constituency id. None (not
            loaded or failed to load) is treated as an empty mapping.
        resolver: Color resolver used for ``fillColor``
        id_property: Feature property holding the constituency id

    Returns:
        New FeatureCollection with joined properties
    """
    results = results or {}
    features = collection.get("features") or []

    joined_features = [join_feature(f, results, resolver, id_property) for f in features]
    matched = sum(1 for f in joined_features if f["properties"].get("winner"))

    logger.debug(
        f"🔗 Joined {len(joined_features)} features with {len(results)} result records "
        f"({matched} with a winner, {len(joined_features) - matched} without)"
    )

    joined = {k: copy.deepcopy(v) for k, v in collection.items() if k != "features"}
    joined["features"] = joined_features
    return joined


class JoinCache:
    """
    Memoizes the last join and recomputes only when an input changes.

    Inputs are compared by identity: loading a new results mapping or a new
    boundary collection invalidates the cached collection, re-rendering with
    the same objects does not.
    """

    def __init__(
        self,
        resolver: ColorResolver = DEFAULT_RESOLVER,
        id_property: str = DEFAULT_ID_PROPERTY,
    ):
        self.resolver = resolver
        self.id_property = id_property
        self._collection: Optional[Mapping[str, Any]] = None
        self._results: Optional[Mapping[int, ResultRecord]] = None
        self._value: Optional[Dict[str, Any]] = None
        self.computations = 0

    def get(
        self,
        collection: Mapping[str, Any],
        results: Optional[Mapping[int, ResultRecord]],
    ) -> Dict[str, Any]:
        stale = (
            self._value is None
            or collection is not self._collection
            or results is not self._results
        )
        if stale:
            self._value = join_results(collection, results, self.resolver, self.id_property)
            self._collection = collection
            self._results = results
            self.computations += 1
        return self._value

    def invalidate(self) -> None:
        self._collection = None
        self._results = None
        self._value = None

"""
Geometry normalization module for Sheets Map Creator.

Spreadsheet authors paste geometries into a cell in whatever form they have at hand:
a FeatureCollection exported from a drawing tool, a single Feature, a bare geometry
object, or just the coordinate array. This module turns any of those into a list of
GeoJSON Feature dicts so the rest of the pipeline only ever sees one shape.

Bare coordinate arrays carry no type, so the type is guessed from how deep the first
number sits:

    [x, y]                      -> Point
    [[x, y], ...]               -> LineString
    [[[x, y], ...], ...]        -> Polygon
    anything deeper or empty    -> MultiPolygon

Functions:
    classify_coordinates: Infer the GeometryType of a bare coordinate array
    normalize: Convert a raw geometry value into a list of Feature dicts
"""

from enum import Enum
from numbers import Number
from typing import Any, Dict, List

from core.errors import GeometryParseError
from utils.logger import get_logger

logger = get_logger(__name__)


class GeometryType(str, Enum):
    """Geometry types that can be inferred from bare coordinates."""

    POINT = 'Point'
    LINESTRING = 'LineString'
    POLYGON = 'Polygon'
    MULTIPOLYGON = 'MultiPolygon'


# Checked in order; each step looks one level deeper into the first-element chain
_DEPTH_PROBE = (GeometryType.POINT, GeometryType.LINESTRING, GeometryType.POLYGON)


def _is_number(value: Any) -> bool:
    # JSON true/false parse to bool, which is an int subclass
    return isinstance(value, Number) and not isinstance(value, bool)


def classify_coordinates(coordinates: List) -> GeometryType:
    """
    Infer the geometry type of a bare coordinate array.

    Walks down the first element of each nesting level. The first level whose
    first element is a number decides the type; if no number is found within three
    levels the type falls back to MultiPolygon.

    Parameters:
    -----------
    coordinates : List
        Nested coordinate array without a 'type' key

    Returns:
    --------
    GeometryType
        Inferred geometry type

    Note:
        Empty arrays (at any level) never reach a number and therefore classify as
        MultiPolygon. This is a known ambiguity of the depth probe and is kept as the
        documented fallback rather than treated as an error.

    Example:
        >>> classify_coordinates([[0, 0], [1, 1]])
        <GeometryType.LINESTRING: 'LineString'>
        >>> classify_coordinates([])
        <GeometryType.MULTIPOLYGON: 'MultiPolygon'>
    """
    probe = coordinates
    for geometry_type in _DEPTH_PROBE:
        if not isinstance(probe, list) or not probe:
            break
        first = probe[0]
        if _is_number(first):
            return geometry_type
        probe = first
    else:
        return GeometryType.MULTIPOLYGON

    logger.warning(
        "Ambiguous coordinate nesting (empty or non-numeric); "
        "falling back to MultiPolygon"
    )
    return GeometryType.MULTIPOLYGON


def normalize(raw: Any) -> List[Dict]:
    """
    Convert a raw geometry value into a list of GeoJSON Feature dicts.

    Rules, evaluated in order:
    1. FeatureCollection -> its features, unchanged
    2. Feature -> one-element list containing it
    3. Any other dict with a 'type' key (bare geometry) -> wrapped in a Feature
    4. List (bare coordinates) -> type inferred by classify_coordinates, wrapped
       in a Feature

    Features produced by rules 3 and 4 have no 'properties' key; the caller attaches
    them.

    Parameters:
    -----------
    raw : Any
        Parsed JSON value from a geometry cell

    Returns:
    --------
    List[Dict]
        Feature dicts in source order

    Raises:
    -------
    GeometryParseError
        If the value is neither a typed GeoJSON object nor a coordinate array
        (e.g. a string, a number, null, or a dict without 'type'), or if a
        FeatureCollection's 'features' is not an array

    Example:
        >>> normalize([[0, 0], [1, 1]])
        [{'type': 'Feature', 'geometry': {'type': 'LineString', 'coordinates': [[0, 0], [1, 1]]}}]
    """
    if isinstance(raw, dict):
        geojson_type = raw.get('type')

        if geojson_type == 'FeatureCollection':
            features = raw.get('features')
            if features is None:
                return []
            if not isinstance(features, list):
                raise GeometryParseError("FeatureCollection 'features' is not an array")
            return list(features)

        if geojson_type == 'Feature':
            return [raw]

        if 'type' in raw:
            return [{'type': 'Feature', 'geometry': raw}]

        raise GeometryParseError("Object has no 'type' and is not a coordinate array")

    if isinstance(raw, list):
        geometry_type = classify_coordinates(raw)
        return [{
            'type': 'Feature',
            'geometry': {'type': geometry_type.value, 'coordinates': raw}
        }]

    raise GeometryParseError(f"Expected GeoJSON object or coordinate array, got {type(raw).__name__}")

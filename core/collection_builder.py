"""
Feature collection building module for Sheets Map Creator.

This module converts rows read from a sheet into renderable data:
- Geometry rows become one aggregate GeoJSON FeatureCollection
- Point rows become a list of marker placements

Only rows whose inclusion column holds the literal marker "y" contribute. A single
unparseable row aborts the whole build so that a broken sheet never partially
replaces what is already on the map.

Functions:
    build_feature_collection: Build a FeatureCollection from geometry rows
    build_point_placements: Build marker placements from latitude/longitude rows
"""

import json
import math
from typing import Dict, List, Optional, Sequence

from core.errors import CoordinateParseError, GeometryParseError
from core.geometry_normalizer import normalize
from utils.logger import get_logger

logger = get_logger(__name__)

INCLUSION_MARKER = 'y'

Row = Dict[str, Optional[str]]


def _is_included(row: Row, inclusion_column: Optional[str]) -> bool:
    if inclusion_column is None:
        return True
    return row.get(inclusion_column) == INCLUSION_MARKER


def _reject_constant(name: str):
    # Python's json accepts NaN and Infinity, which are not valid JSON
    raise ValueError(f"Non-finite number {name} in geometry")


def _row_properties(row: Row, property_columns: Sequence[str]) -> Dict[str, Optional[str]]:
    return {column: row.get(column) for column in property_columns}


def build_feature_collection(
    rows: Sequence[Row],
    inclusion_column: str,
    geometry_column: str,
    property_columns: Sequence[str]
) -> Dict:
    """
    Build a single FeatureCollection from geometry rows.

    For each included row the geometry cell is parsed as JSON and normalized into
    one or more features; every feature gets its own copy of the row's property
    columns.

    Parameters:
    -----------
    rows : Sequence[Row]
        Rows in sheet order (column name -> cell value)
    inclusion_column : str
        Column that must equal "y" (exact, case-sensitive) for a row to be mapped
    geometry_column : str
        Column holding the geometry JSON
    property_columns : Sequence[str]
        Columns copied into each feature's properties

    Returns:
    --------
    Dict
        GeoJSON FeatureCollection; features follow row order, then the order of
        features within a row

    Raises:
    -------
    GeometryParseError
        If an included row's geometry cell is missing, malformed JSON, not a
        geometry, or expands to a feature without geometry

    Example:
        >>> rows = [{'include': 'y', 'geometry': '[[0,0],[1,1]]', 'name': 'A'}]
        >>> fc = build_feature_collection(rows, 'include', 'geometry', ['name'])
        >>> fc['features'][0]['geometry']['type']
        'LineString'
    """
    collection = {'type': 'FeatureCollection', 'features': []}
    skipped = 0

    for row_number, row in enumerate(rows, start=1):
        if not _is_included(row, inclusion_column):
            skipped += 1
            continue

        cell = row.get(geometry_column)
        if cell is None or not cell.strip():
            raise GeometryParseError("Geometry cell is empty", row_number, geometry_column)

        try:
            raw = json.loads(cell, parse_constant=_reject_constant)
        except ValueError as e:
            raise GeometryParseError(f"Invalid geometry JSON: {e}", row_number, geometry_column) from e

        try:
            entries = normalize(raw)
        except GeometryParseError as e:
            raise GeometryParseError(str(e), row_number, geometry_column) from e

        properties = _row_properties(row, property_columns)
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get('geometry'):
                raise GeometryParseError("Feature has no geometry", row_number, geometry_column)
            feature = dict(entry)
            feature['properties'] = dict(properties)
            collection['features'].append(feature)

    logger.debug(
        f"Built {len(collection['features'])} feature(s) from {len(rows)} row(s) "
        f"({skipped} excluded)"
    )

    return collection


def _parse_coordinate(value: Optional[str], row_number: int, column: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise CoordinateParseError(f"Not a number: {value!r}", row_number, column) from e

    # float() also accepts 'nan' and 'inf'
    if not math.isfinite(number):
        raise CoordinateParseError(f"Not a finite number: {value!r}", row_number, column)

    return number


def build_point_placements(
    rows: Sequence[Row],
    latitude_column: str,
    longitude_column: str,
    property_columns: Sequence[str],
    inclusion_column: Optional[str] = None
) -> List[Dict]:
    """
    Build marker placements from point rows.

    Args:
        rows: Rows in sheet order
        latitude_column: Column holding the latitude
        longitude_column: Column holding the longitude
        property_columns: Columns copied into each placement's properties
        inclusion_column: Optional column that must equal "y"; when None every row
            is mapped

    Returns:
        List of {'location': [lat, lon], 'properties': {...}} dicts in row order

    Raises:
        CoordinateParseError: If a row has a latitude or longitude that is not a finite
            number, or a latitude outside [-90, 90]

    Note:
        Rows where both coordinate cells are blank are skipped; published sheets
        often end with such rows.
    """
    placements = []

    for row_number, row in enumerate(rows, start=1):
        if not _is_included(row, inclusion_column):
            continue

        lat_cell = row.get(latitude_column)
        lon_cell = row.get(longitude_column)
        if not (lat_cell or '').strip() and not (lon_cell or '').strip():
            logger.debug(f"Skipping row {row_number}: no coordinates")
            continue

        lat = _parse_coordinate(lat_cell, row_number, latitude_column)
        lon = _parse_coordinate(lon_cell, row_number, longitude_column)
        if not -90 <= lat <= 90:
            raise CoordinateParseError(f"Latitude out of range: {lat_cell!r}", row_number, latitude_column)

        placements.append({
            'location': [lat, lon],
            'properties': _row_properties(row, property_columns)
        })

    logger.debug(f"Built {len(placements)} point placement(s) from {len(rows)} row(s)")

    return placements

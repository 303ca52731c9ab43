"""
Map building module for Sheets Map Creator.

This module creates the interactive Leaflet map with Folium and keeps its two data
layers (geometries and point observations) up to date as sheets are loaded.

Functions:
    create_base_map: Create the folium map with tiles and the selection panel
    build_geometry_layer: Turn a FeatureCollection into a styled GeoJson layer
    build_point_layer: Turn point placements into a group of markers

Classes:
    MapSurface: Attach/detach layers on a folium map
    MapSession: One map plus its layer lifecycle and selection state
"""

from typing import Dict, List, Optional, Sequence

import folium

from config.config_loader import (
    load_layer_settings,
    load_map_settings,
    load_marker_settings
)
from core.collection_builder import Row, build_feature_collection, build_point_placements
from core.layer_lifecycle import LayerKind, LayerLifecycleManager
from core.selection_panel import PANEL_BODY_KEY, PANEL_TITLE_KEY, SelectionPanelController
from utils.popup_formatters import format_observation_body
from utils.logger import get_logger

logger = get_logger(__name__)


def create_base_map(map_settings: Dict, selection: SelectionPanelController) -> folium.Map:
    """
    Create the base Leaflet map.

    Parameters:
    -----------
    map_settings : Dict
        Settings from load_map_settings (center, zoom, tiles, attribution, max_zoom)
    selection : SelectionPanelController
        Controller whose panel element is added to the map

    Returns:
    --------
    folium.Map
        Map with one tile layer and the selection panel, no data layers yet
    """
    m = folium.Map(
        location=map_settings['center'],
        zoom_start=map_settings['zoom'],
        tiles=None
    )

    folium.TileLayer(
        map_settings['tiles'],
        attr=map_settings.get('attribution'),
        max_zoom=map_settings['max_zoom'],
        control=False
    ).add_to(m)

    # The panel must be rendered before any layer binds clicks to it
    selection.panel.add_to(m)

    return m


def build_geometry_layer(
    collection: Dict,
    layer_settings: Dict,
    selection: SelectionPanelController
) -> folium.GeoJson:
    """
    Create a GeoJson layer for a FeatureCollection.

    Each feature's panel title and body are stored in its properties (the caller's
    collection is not modified), and a single click binding on the layer opens the
    panel for whichever feature was clicked.

    Parameters:
    -----------
    collection : Dict
        FeatureCollection from build_feature_collection
    layer_settings : Dict
        Settings from load_layer_settings(config, 'geometries')
    selection : SelectionPanelController
        Panel controller for click bindings

    Returns:
    --------
    folium.GeoJson
        Layer ready to be attached to the map
    """
    title_column = layer_settings['title_column']
    body_column = layer_settings['body_column']

    features = []
    for feature in collection['features']:
        properties = dict(feature.get('properties') or {})
        properties[PANEL_TITLE_KEY] = properties.get(title_column) or ''
        properties[PANEL_BODY_KEY] = properties.get(body_column) or ''
        features.append({**feature, 'properties': properties})

    data = {'type': 'FeatureCollection', 'features': features}

    style = dict(layer_settings['style'])
    hover_style = dict(layer_settings['hover_style'])

    # Folium samples the first feature to validate style functions
    if features:
        geojson_layer = folium.GeoJson(
            data,
            name=layer_settings['name'],
            style_function=lambda feature: style,
            highlight_function=lambda feature: hover_style
        )
    else:
        geojson_layer = folium.GeoJson(data, name=layer_settings['name'])

    selection.bind(geojson_layer)

    return geojson_layer


def _create_marker(location: List[float], marker_settings: Dict, tooltip: Optional[str]):
    marker_type = marker_settings['marker_type']
    radius = marker_settings['marker_radius']

    if marker_type == 'circleMarker':
        return folium.CircleMarker(location=location, radius=radius, tooltip=tooltip)
    elif marker_type == 'circle':
        return folium.Circle(location=location, radius=radius, tooltip=tooltip)

    return folium.Marker(
        location=location,
        tooltip=tooltip,
        icon=folium.Icon(
            icon=marker_settings['icon'],
            icon_color=marker_settings['icon_color'],
            color=marker_settings['marker_color'],
            prefix='fa'
        )
    )


def build_point_layer(
    placements: Sequence[Dict],
    layer_settings: Dict,
    marker_settings: Dict,
    selection: SelectionPanelController
) -> folium.FeatureGroup:
    """
    Create a marker group for point placements.

    Marker type comes from marker_settings: 'marker' (icon marker), 'circleMarker'
    (radius in pixels) or 'circle' (radius in metres).

    Parameters:
    -----------
    placements : Sequence[Dict]
        Placements from build_point_placements
    layer_settings : Dict
        Settings from load_layer_settings(config, 'points')
    marker_settings : Dict
        Settings from load_marker_settings
    selection : SelectionPanelController
        Panel controller for click bindings

    Returns:
    --------
    folium.FeatureGroup
        Group of markers ready to be attached to the map
    """
    group = folium.FeatureGroup(name=layer_settings['name'])
    tooltip_columns = layer_settings.get('tooltip_columns') or []

    for placement in placements:
        properties = placement['properties']

        tooltip_parts = [properties.get(col) for col in tooltip_columns]
        tooltip = ' / '.join(part for part in tooltip_parts if part) or None

        marker = _create_marker(placement['location'], marker_settings, tooltip)
        marker.add_to(group)

        selection.bind(
            marker,
            title=properties.get(layer_settings['title_column']) or '',
            body=format_observation_body(
                properties,
                layer_settings['body_columns'],
                layer_settings.get('image_column'),
                layer_settings.get('image_width', 270)
            )
        )

    return group


class MapSurface:
    """Display surface backed by a folium map."""

    def __init__(self, map_obj: folium.Map):
        self.map = map_obj

    def attach(self, layer) -> None:
        layer.add_to(self.map)

    def detach(self, layer) -> None:
        # branca has no public API for removing a child element
        self.map._children.pop(layer.get_name(), None)
        layer._parent = None

    def layer_names(self) -> List[str]:
        return list(self.map._children.keys())


class MapSession:
    """
    One interactive map and the state needed to refresh it.

    Owns the folium map, the LayerLifecycleManager for its two layer kinds and the
    SelectionPanelController for its side panel. The last successfully loaded data
    for each kind is kept in ``collections`` for export.

    Example:
        >>> session = MapSession(load_config())
        >>> session.load_geometries(read_rows('geometries.csv'))
        >>> session.map.save('index.html')
    """

    def __init__(self, config: Dict):
        self.config = config
        self.map_settings = load_map_settings(config)
        self.marker_settings = load_marker_settings(config)
        self.layer_settings = {
            kind: load_layer_settings(config, kind.value) for kind in LayerKind
        }

        panel_settings = self.map_settings['panel']
        self.selection = SelectionPanelController(
            panel_id=panel_settings['id'],
            position=panel_settings['position'],
            placeholder_title=panel_settings['placeholder_title']
        )

        self.map = create_base_map(self.map_settings, self.selection)
        self.surface = MapSurface(self.map)
        self.layers = LayerLifecycleManager(self.surface)
        self.collections: Dict[LayerKind, object] = {}

    def load_geometries(self, rows: Sequence[Row]) -> Dict:
        """
        Build the geometry collection from rows and replace the geometry layer.

        Raises:
            GeometryParseError: If any included row is malformed; the displayed layer
                is left untouched
        """
        settings = self.layer_settings[LayerKind.GEOMETRIES]

        collection = build_feature_collection(
            rows,
            settings['inclusion_column'],
            settings['geometry_column'],
            settings['property_columns']
        )

        layer = build_geometry_layer(collection, settings, self.selection)
        self.layers.replace(LayerKind.GEOMETRIES, layer)
        self.collections[LayerKind.GEOMETRIES] = collection

        logger.info(f"  - {settings['name']}: {len(collection['features'])} feature(s) displayed")
        return collection

    def load_points(self, rows: Sequence[Row]) -> List[Dict]:
        """
        Build point placements from rows and replace the point layer.

        Raises:
            CoordinateParseError: If a row has a non-numeric coordinate; the displayed
                layer is left untouched
        """
        settings = self.layer_settings[LayerKind.POINTS]

        placements = build_point_placements(
            rows,
            settings['latitude_column'],
            settings['longitude_column'],
            settings['property_columns'],
            inclusion_column=settings.get('inclusion_column')
        )

        layer = build_point_layer(placements, settings, self.marker_settings, self.selection)
        self.layers.replace(LayerKind.POINTS, layer)
        self.collections[LayerKind.POINTS] = placements

        logger.info(f"  - {settings['name']}: {len(placements)} marker(s) displayed")
        return placements

    def load(self, kind: LayerKind, rows: Sequence[Row]):
        """Dispatch rows to the entry point for kind."""
        if LayerKind(kind) == LayerKind.GEOMETRIES:
            return self.load_geometries(rows)
        return self.load_points(rows)

    def feature_collection(self, kind: LayerKind) -> Optional[Dict]:
        """
        Return the last loaded data for kind as a GeoJSON FeatureCollection.

        Point placements are converted to Point features ([lon, lat] order).
        Returns None if kind has not been loaded.
        """
        kind = LayerKind(kind)
        data = self.collections.get(kind)
        if data is None:
            return None

        if kind == LayerKind.GEOMETRIES:
            return data

        return {
            'type': 'FeatureCollection',
            'features': [
                {
                    'type': 'Feature',
                    'geometry': {
                        'type': 'Point',
                        'coordinates': [placement['location'][1], placement['location'][0]]
                    },
                    'properties': placement['properties']
                }
                for placement in data
            ]
        }

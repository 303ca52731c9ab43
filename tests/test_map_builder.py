"""Tests for map building and the per-kind load entry points of MapSession."""

import folium
import pytest

from core.errors import CoordinateParseError, GeometryParseError
from core.layer_lifecycle import LayerKind
from core.map_builder import MapSurface, build_geometry_layer, build_point_layer
from core.selection_panel import PANEL_BODY_KEY, PANEL_TITLE_KEY, SelectionPanelController
from config.config_loader import load_layer_settings, load_marker_settings


def marker_settings(marker_type):
    return load_marker_settings({'settings': {'markers': {'marker_type': marker_type, 'marker_radius': 50}}})


class TestBuildGeometryLayer:
    """FeatureCollection to styled GeoJson layer."""

    def test_panel_content_stored_in_properties(self):
        collection = {'type': 'FeatureCollection', 'features': [{
            'type': 'Feature',
            'geometry': {'type': 'LineString', 'coordinates': [[0, 0], [1, 1]]},
            'properties': {'name': 'A', 'description': '<b>Road</b>'},
        }]}
        layer = build_geometry_layer(collection, load_layer_settings({}, 'geometries'),
                                     SelectionPanelController())
        props = layer.data['features'][0]['properties']
        assert props[PANEL_TITLE_KEY] == 'A'
        assert props[PANEL_BODY_KEY] == '<b>Road</b>'
        # Source collection is left as built
        assert PANEL_TITLE_KEY not in collection['features'][0]['properties']

    def test_empty_collection(self):
        collection = {'type': 'FeatureCollection', 'features': []}
        layer = build_geometry_layer(collection, load_layer_settings({}, 'geometries'),
                                     SelectionPanelController())
        assert isinstance(layer, folium.GeoJson)
        assert layer.data['features'] == []


class TestBuildPointLayer:
    """Placements to a marker group, honoring the configured marker type."""

    @pytest.fixture
    def placements(self):
        return [
            {'location': [41.0, -4.0], 'properties': {'Especie': 'Bubo bubo', 'Fecha': '2021-04-02'}},
            {'location': [41.1, -4.1], 'properties': {'Especie': 'Vulpes vulpes', 'Fecha': None}},
        ]

    @pytest.mark.parametrize("marker_type, expected", [
        ('marker', folium.Marker),
        ('circleMarker', folium.CircleMarker),
        ('circle', folium.Circle),
        ('Circle', folium.Marker),
    ])
    def test_marker_type(self, placements, marker_type, expected):
        """Unrecognized (including wrong-case) marker types fall back to plain markers."""
        group = build_point_layer(placements, load_layer_settings({}, 'points'),
                                  marker_settings(marker_type), SelectionPanelController())
        markers = list(group._children.values())
        assert len(markers) == 2
        assert all(type(marker) is expected for marker in markers)

    def test_each_marker_bound_to_panel(self, placements):
        group = build_point_layer(placements, load_layer_settings({}, 'points'),
                                  marker_settings('marker'), SelectionPanelController())
        for marker in group._children.values():
            bindings = [child for child in marker._children.values()
                        if child.__class__.__name__ == 'PanelClickBinding']
            assert len(bindings) == 1
        first_binding = [child for child in list(group._children.values())[0]._children.values()
                         if child.__class__.__name__ == 'PanelClickBinding'][0]
        assert first_binding.title == 'Bubo bubo'


class TestMapSurface:
    """Attach/detach on a real folium map."""

    def test_detach_removes_layer(self):
        m = folium.Map(location=[0, 0], zoom_start=2, tiles=None)
        surface = MapSurface(m)
        group = folium.FeatureGroup(name='Points')
        surface.attach(group)
        assert group.get_name() in surface.layer_names()
        surface.detach(group)
        assert group.get_name() not in surface.layer_names()
        assert group.get_name() not in m.get_root().render()


class TestMapSession:
    """Per-kind entry points: build, then replace."""

    def test_load_geometries(self, session, geometry_rows):
        collection = session.load_geometries(geometry_rows)
        assert len(collection['features']) == 2
        assert isinstance(session.layers.active(LayerKind.GEOMETRIES), folium.GeoJson)
        assert session.collections[LayerKind.GEOMETRIES] is collection

    def test_load_points(self, session, point_rows):
        placements = session.load_points(point_rows)
        assert len(placements) == 2
        assert isinstance(session.layers.active(LayerKind.POINTS), folium.FeatureGroup)

    def test_reload_replaces_rendered_layer(self, session, geometry_rows):
        """Only the latest generation of a kind ends up in the page."""
        session.load_geometries(geometry_rows)
        first = session.layers.active(LayerKind.GEOMETRIES)
        session.load_geometries(geometry_rows[:1])
        second = session.layers.active(LayerKind.GEOMETRIES)
        html = session.map.get_root().render()
        assert first.get_name() not in html
        assert second.get_name() in html

    def test_malformed_rows_keep_previous_layer(self, session, geometry_rows):
        session.load_geometries(geometry_rows)
        displayed = session.layers.active(LayerKind.GEOMETRIES)
        with pytest.raises(GeometryParseError):
            session.load_geometries(geometry_rows + [{'include': 'y', 'geometry': '{broken'}])
        assert session.layers.active(LayerKind.GEOMETRIES) is displayed
        assert len(session.collections[LayerKind.GEOMETRIES]['features']) == 2

    def test_bad_points_keep_previous_layer(self, session, point_rows):
        session.load_points(point_rows)
        displayed = session.layers.active(LayerKind.POINTS)
        with pytest.raises(CoordinateParseError):
            session.load_points([{'lat': 'x', 'lon': '1'}])
        assert session.layers.active(LayerKind.POINTS) is displayed

    def test_load_dispatches_by_kind(self, session, geometry_rows, point_rows):
        session.load('geometries', geometry_rows)
        session.load(LayerKind.POINTS, point_rows)
        assert session.layers.active(LayerKind.GEOMETRIES) is not None
        assert session.layers.active(LayerKind.POINTS) is not None

    def test_points_exported_as_lon_lat(self, session, point_rows):
        session.load_points(point_rows)
        fc = session.feature_collection(LayerKind.POINTS)
        assert fc['features'][0]['geometry'] == {'type': 'Point', 'coordinates': [-4.07, 41.02]}

    def test_feature_collection_before_load(self, session):
        assert session.feature_collection(LayerKind.GEOMETRIES) is None

    def test_rendered_page_has_panel_and_layers(self, session, geometry_rows, point_rows):
        session.load_geometries(geometry_rows)
        session.load_points(point_rows)
        html = session.map.get_root().render()
        assert 'L.control.sidebar' in html
        assert 'eachLayer' in html
        assert '"Capreolus capreolus"' in html

"""Shared fixtures for Sheets Map Creator tests."""

from __future__ import annotations

import pytest

from core.map_builder import MapSession


@pytest.fixture
def config():
    """Minimal in-memory configuration; everything else comes from defaults."""
    return {
        'settings': {'center': [41.0, -4.0], 'zoom': 9},
        'layers': {
            'geometries': {'source_url': 'https://sheets.example/geometries.csv'},
            'points': {'source_url': 'https://sheets.example/points.csv'},
        },
    }


@pytest.fixture
def session(config):
    return MapSession(config)


@pytest.fixture
def geometry_rows():
    return [
        {'include': 'y', 'name': 'Line A', 'description': 'First road', 'geometry': '[[0,0],[1,1]]'},
        {'include': 'n', 'name': 'Hidden', 'description': 'Not mapped', 'geometry': '[[5,5],[6,6]]'},
        {'include': 'y', 'name': 'Area B', 'description': 'Crossing area',
         'geometry': '[[[0,0],[2,0],[2,2],[0,0]]]'},
    ]


@pytest.fixture
def point_rows():
    return [
        {'N': '1', 'Especie': 'Capreolus capreolus', 'Fecha': '2021-03-14', 'Foto': '',
         'lat': '41.02', 'lon': '-4.07'},
        {'N': '2', 'Especie': 'Bubo bubo', 'Fecha': '2021-04-02',
         'Foto': 'https://example.org/bubo.jpg', 'lat': '41.15', 'lon': '-4.16'},
    ]

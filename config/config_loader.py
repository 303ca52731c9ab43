"""
Configuration loading for Sheets Map Creator.

This module handles loading and validation of the map configuration JSON file.

Constants:
    PROJECT_ROOT: Root directory of the project
    CONFIG_DIR: Configuration files directory
    OUTPUT_DIR: Output files directory
    DATA_DIR: Seed data directory

Functions:
    load_config: Load and validate map configuration from JSON
    load_map_settings: Map-level settings merged with defaults
    load_marker_settings: Point marker settings merged with defaults
    load_layer_settings: Per-kind layer settings merged with defaults
"""

import copy
import json
from pathlib import Path
from typing import Dict, Optional, Union

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
CONFIG_DIR = PROJECT_ROOT / 'config'
OUTPUT_DIR = PROJECT_ROOT / 'outputs'
DATA_DIR = PROJECT_ROOT / 'data'

MARKER_TYPES = ('marker', 'circleMarker', 'circle')

MAP_DEFAULTS = {
    'center': [41.11, -4.00],
    'zoom': 9,
    'tiles': 'OpenStreetMap',
    'attribution': None,
    'max_zoom': 18,
    'title': 'Sheets Map',
    'output_dir': None,
    'request_timeout': 30,
    'max_workers': 2,
    'panel': {
        'id': 'my-info-panel',
        'position': 'right',
        'placeholder_title': 'Nothing selected'
    }
}

MARKER_DEFAULTS = {
    'marker_type': 'marker',
    'marker_radius': 100,
    'icon': 'info-circle',
    'icon_color': 'white',
    'marker_color': 'blue'
}

LAYER_DEFAULTS = {
    'geometries': {
        'name': 'Geometries',
        'source_url': None,
        'seed_file': None,
        'inclusion_column': 'include',
        'geometry_column': 'geometry',
        'property_columns': ['name', 'description'],
        'title_column': 'name',
        'body_column': 'description',
        'style': {'color': '#2ca25f', 'fillColor': '#99d8c9', 'weight': 2},
        'hover_style': {'color': 'green', 'fillColor': '#2ca25f', 'weight': 3}
    },
    'points': {
        'name': 'Points',
        'source_url': None,
        'seed_file': None,
        'inclusion_column': None,
        'latitude_column': 'lat',
        'longitude_column': 'lon',
        'property_columns': [
            'N', 'Usuario', 'Clase', 'Especie', 'Fecha', 'Seguridad_id',
            'Frecuencia_paso', 'Carretera', 'Pk', 'Foto', 'Observaciones'
        ],
        'title_column': 'Especie',
        'body_columns': [
            'N', 'Usuario', 'Fecha', 'Seguridad_id', 'Frecuencia_paso',
            'Carretera', 'Pk', 'Observaciones'
        ],
        'image_column': 'Foto',
        'image_width': 270,
        'tooltip_columns': ['Especie', 'Fecha']
    }
}


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict:
    """
    Load map configuration from JSON file.

    Reads map_config.json (or the given path) and validates basic structure.

    Parameters:
    -----------
    config_path : Optional[Union[str, Path]]
        Alternative configuration file; defaults to CONFIG_DIR/map_config.json

    Returns:
    --------
    Dict
        Configuration dictionary with 'layers' and 'settings' keys

    Raises:
    -------
    FileNotFoundError
        If configuration file doesn't exist
    json.JSONDecodeError
        If configuration file contains invalid JSON
    KeyError
        If required configuration keys are missing
    """
    config_path = Path(config_path) if config_path else CONFIG_DIR / 'map_config.json'

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        config = json.load(f)

    # Validate required keys
    if 'layers' not in config:
        raise KeyError("Configuration missing required 'layers' key")
    if 'settings' not in config:
        raise KeyError("Configuration missing required 'settings' key")

    # Relative seed files resolve against the config file's directory
    config['_config_dir'] = str(config_path.parent)

    return config


def load_map_settings(config: Dict) -> Dict:
    """
    Load map-level settings from configuration.

    Defaults:
        - center: [41.11, -4.00]
        - zoom: 9
        - tiles: 'OpenStreetMap'
        - request_timeout: 30 (seconds, per sheet download)
        - panel: id 'my-info-panel', right side, 'Nothing selected' placeholder

    Note:
        The nested 'panel' section is merged key by key, so a config that only
        overrides the placeholder title keeps the default panel id.
    """
    settings = config.get('settings', {})
    result = {**copy.deepcopy(MAP_DEFAULTS), **settings}
    result['panel'] = {**MAP_DEFAULTS['panel'], **settings.get('panel', {})}
    return result


def load_marker_settings(config: Dict) -> Dict:
    """
    Load point marker settings from configuration.

    Recognized marker types are 'marker', 'circleMarker' and 'circle' (case-sensitive).
    Anything else is treated as 'marker'. The radius is in pixels for circleMarker,
    metres for circle, and unused for marker.
    """
    markers = config.get('settings', {}).get('markers', {})
    result = {**MARKER_DEFAULTS, **markers}

    if result['marker_type'] not in MARKER_TYPES:
        result['marker_type'] = 'marker'

    return result


def load_layer_settings(config: Dict, kind: str) -> Dict:
    """
    Load settings for one layer kind ('geometries' or 'points').

    Args:
        config: Configuration dictionary
        kind: Layer kind value

    Returns:
        Dictionary with layer settings; 'seed_file' is resolved to an absolute path

    Raises:
        KeyError: If kind is not a known layer kind
    """
    if kind not in LAYER_DEFAULTS:
        raise KeyError(f"Unknown layer kind: {kind}")

    layer = config.get('layers', {}).get(kind, {})
    result = {**copy.deepcopy(LAYER_DEFAULTS[kind]), **layer}

    seed_file = result.get('seed_file')
    if seed_file:
        seed_path = Path(seed_file)
        if not seed_path.is_absolute():
            base_dir = Path(config.get('_config_dir', CONFIG_DIR))
            seed_path = base_dir / seed_path
        result['seed_file'] = str(seed_path)

    return result

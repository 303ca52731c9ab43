"""
Output generation module for Sheets Map Creator.

This module handles saving the generated map and data files to the output directory.
Creates a timestamped directory structure with HTML map, GeoJSON data files, and metadata.

Functions:
    layer_bounds: Compute the bounding box of a FeatureCollection
    generate_output: Save map, data files, and metadata to output directory
"""

import json
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Optional

import geopandas as gpd

from config.config_loader import OUTPUT_DIR
from core.layer_lifecycle import LayerKind
from core.map_builder import MapSession
from utils.logger import get_logger

logger = get_logger(__name__)


def layer_bounds(collection: Dict) -> Optional[List[float]]:
    """
    Compute [minx, miny, maxx, maxy] of a FeatureCollection.

    Returns None for an empty collection or when the geometries cannot be built
    (sheet geometries are not validated before display).
    """
    if not collection['features']:
        return None

    try:
        gdf = gpd.GeoDataFrame.from_features(collection['features'], crs='EPSG:4326')
        bounds = gdf.total_bounds.tolist()
    except Exception as e:
        logger.warning(f"Could not compute layer bounds: {e}")
        return None

    # Empty geometries produce NaN bounds
    if any(value != value for value in bounds):
        return None

    return bounds


def generate_output(
    session: MapSession,
    output_name: Optional[str] = None,
    refresh_status: Optional[Dict[LayerKind, str]] = None,
    output_dir: Optional[Path] = None
) -> Path:
    """
    Generate output directory with HTML map, GeoJSON data files and metadata.

    Creates an output directory containing:
    - index.html: Interactive Leaflet map
    - metadata.json: Feature counts, bounds and refresh outcome per layer kind
    - data/: One GeoJSON file per loaded layer kind

    Parameters:
    -----------
    session : MapSession
        Session holding the map and the last loaded data per kind
    output_name : Optional[str]
        Custom output directory name (defaults to timestamped name)
    refresh_status : Optional[Dict[LayerKind, str]]
        Outcome per kind from refresh_layers, recorded in metadata.json
    output_dir : Optional[Path]
        Parent directory (defaults to the 'output_dir' setting, then OUTPUT_DIR)

    Returns:
    --------
    Path
        Path to output directory

    Example:
        >>> output_path = generate_output(session)
        >>> output_path
        Path('outputs/sheets_map_20250108_143022')
    """
    logger.info("=" * 80)
    logger.info("Generating Output Files")
    logger.info("=" * 80)

    if output_name is None:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        output_name = f"sheets_map_{timestamp}"

    if output_dir is None:
        configured_dir = session.map_settings.get('output_dir')
        output_dir = Path(configured_dir) if configured_dir else OUTPUT_DIR

    output_path = Path(output_dir) / output_name
    output_path.mkdir(parents=True, exist_ok=True)

    data_path = output_path / 'data'
    data_path.mkdir(exist_ok=True)

    logger.info(f"Output directory: {output_path}")

    layers_summary = {}
    refresh_status = refresh_status or {}

    for kind in LayerKind:
        collection = session.feature_collection(kind)
        status = refresh_status.get(kind)

        if collection is None:
            layers_summary[kind.value] = {
                'feature_count': 0,
                'bounds': None,
                'refresh': status
            }
            continue

        logger.info(f"  - Saving {kind.value} features...")
        layer_file = data_path / f'{kind.value}.geojson'
        with open(layer_file, 'w', encoding='utf-8') as f:
            json.dump(collection, f, ensure_ascii=False)

        layers_summary[kind.value] = {
            'feature_count': len(collection['features']),
            'bounds': layer_bounds(collection),
            'refresh': status,
            'generation': session.layers.generation(kind)
        }

    logger.info("  - Saving interactive map...")
    map_file = output_path / 'index.html'
    session.map.save(str(map_file))

    logger.info("  - Saving metadata...")
    summary = {
        'generated_at': datetime.now().isoformat(),
        'layers': layers_summary,
        'total_features': sum(layer['feature_count'] for layer in layers_summary.values())
    }

    with open(output_path / 'metadata.json', 'w', encoding='utf-8') as f:
        json.dump(summary, f, indent=2)

    logger.info("")
    logger.info("=" * 80)
    logger.info("✓ Output Generation Complete")
    logger.info("=" * 80)
    logger.info(f"Files saved to: {output_path}")
    logger.info("  - index.html (interactive map)")
    logger.info("  - metadata.json (summary statistics)")
    logger.info(f"  - data/ ({len(list(data_path.glob('*.geojson')))} GeoJSON files)")
    logger.info("")
    logger.info(f"To view the map, open: {map_file}")
    logger.info("=" * 80)

    return output_path

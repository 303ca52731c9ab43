"""
Core modules for Sheets Map Creator.

This package contains the main functional modules for turning spreadsheet rows
into an interactive map.

Modules:
    errors: Application error types
    geometry_normalizer: Infer and normalize geometries from sheet cells
    collection_builder: Build FeatureCollections and point placements from rows
    layer_lifecycle: Keep one displayed layer per layer kind
    selection_panel: Side panel selection state and its map elements
    map_builder: Create the folium map and load layers into it
    sheet_reader: Read rows from local CSV files or published sheets
    refresh: Fetch published sheets concurrently and replace layers on arrival
    output_generator: Save map, data files and metadata
"""

__version__ = '1.0.0'

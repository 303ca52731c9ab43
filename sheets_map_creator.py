#!/usr/bin/env python
"""
Sheets Map Creator
==================
Builds an interactive Leaflet web map from two spreadsheet tables: one with
area/line geometries and one with point observations. Seed CSV files are shown
first, then replaced by the live published sheets as they arrive. Clicking a
feature opens its details in a side panel.
"""

import argparse
import time
from pathlib import Path
from typing import Optional

from utils.logger import setup_logging, get_logger

from config.config_loader import load_config
from core.errors import CoordinateParseError, GeometryParseError
from core.map_builder import MapSession
from core.output_generator import generate_output
from core.refresh import refresh_layers
from core.sheet_reader import read_rows


def load_seed_layers(session: MapSession) -> None:
    """
    Display the locally stored seed tables before the live sheets are fetched.

    A missing or unparseable seed file is logged and skipped; the live sheet can
    still fill that layer.
    """
    logger = get_logger(__name__)

    for kind, settings in session.layer_settings.items():
        seed_file = settings.get('seed_file')
        if not seed_file:
            continue

        logger.info(f"Loading seed data for {kind.value}: {seed_file}")
        try:
            session.load(kind, read_rows(seed_file))
        except FileNotFoundError as e:
            logger.warning(f"  ⚠ {e}")
        except (GeometryParseError, CoordinateParseError) as e:
            logger.warning(f"  ⚠ Seed data rejected: {e}")
        except Exception as e:
            logger.error(f"  ✗ Unexpected error loading seed data for {kind.value}: {e}", exc_info=True)


def main(config_path: Optional[str] = None, output_name: Optional[str] = None,
         offline: bool = False) -> Optional[Path]:
    """
    Main execution workflow for Sheets Map Creator.

    Workflow Steps:
    1. Setup logging to console and file
    2. Load configuration
    3. Display seed data for each layer kind
    4. Fetch the published sheets and replace layers on arrival (skipped offline)
    5. Generate output files

    Parameters:
    -----------
    config_path : Optional[str]
        Configuration file (defaults to config/map_config.json)
    output_name : Optional[str]
        Custom name for output directory (defaults to timestamped name)
    offline : bool
        Only use seed data, do not fetch the published sheets

    Returns:
    --------
    Optional[Path]
        Path to output directory if successful, None if failed
    """
    workflow_start_time = time.time()

    log_file = setup_logging()
    logger = get_logger(__name__)

    logger.info("=" * 80)
    logger.info("SHEETS MAP CREATOR - Spreadsheet Geometries and Observations")
    logger.info("=" * 80)
    logger.info(f"Log file: {log_file}")
    logger.info("")

    try:
        config = load_config(config_path)
        session = MapSession(config)
        logger.info("Configuration loaded")
        logger.info("")

        load_seed_layers(session)
        logger.info("")

        refresh_status = {}
        if offline:
            logger.info("Offline mode: using seed data only")
        else:
            refresh_status = refresh_layers(session)

        output_path = generate_output(session, output_name, refresh_status=refresh_status)

        total_execution_time = time.time() - workflow_start_time

        logger.info("")
        logger.info("✓ WORKFLOW COMPLETE")
        logger.info(f"✓ Total execution time: {total_execution_time:.2f} seconds")
        logger.info(f"✓ Output directory: {output_path}")
        logger.info(f"✓ Log file: {log_file}")
        logger.info("")

        return output_path

    except Exception as e:
        elapsed_time = time.time() - workflow_start_time

        logger.error("")
        logger.error("=" * 80)
        logger.error("✗ WORKFLOW FAILED")
        logger.error("=" * 80)
        logger.error(f"Error: {str(e)}", exc_info=True)
        logger.error(f"Workflow failed after {elapsed_time:.2f} seconds")
        logger.error(f"See log file for details: {log_file}")
        logger.error("=" * 80)
        return None


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Render spreadsheet geometries and point observations on a Leaflet map."
    )
    parser.add_argument("--config", help="Path to map configuration JSON")
    parser.add_argument("--output", help="Output directory name")
    parser.add_argument("--offline", action="store_true",
                        help="Use seed data only, do not fetch published sheets")
    args = parser.parse_args()

    output_dir = main(args.config, args.output, offline=args.offline)

    if output_dir:
        print(f"\n✓ Success! Open {output_dir / 'index.html'} in your browser.")
    else:
        print("\n✗ Failed to generate map. Check log file for details.")

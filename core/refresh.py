"""
Sheet refresh module for Sheets Map Creator.

Downloads the published sheet for every configured layer kind concurrently and
applies each result to the map as soon as it arrives. Downloads run on worker
threads; building layers and replacing them always happens on the calling thread,
in completion order, so the last result to arrive wins.

A kind whose download fails, or whose rows cannot be parsed or rendered, keeps the
layer it was already showing (usually the seed data).

Functions:
    refresh_layers: Fetch all sheets and replace layers on arrival
"""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Optional

from core.errors import CoordinateParseError, GeometryParseError, SheetFetchError
from core.layer_lifecycle import LayerKind
from core.map_builder import MapSession
from core.sheet_reader import fetch_rows
from utils.logger import get_logger

logger = get_logger(__name__)

STATUS_UPDATED = 'updated'
STATUS_FETCH_FAILED = 'fetch_failed'
STATUS_REJECTED = 'rejected'


def refresh_layers(
    session: MapSession,
    sources: Optional[Dict[LayerKind, str]] = None,
    timeout: Optional[int] = None,
    max_workers: Optional[int] = None
) -> Dict[LayerKind, str]:
    """
    Fetch the published sheet for each layer kind and replace its layer on arrival.

    Parameters:
    -----------
    session : MapSession
        Session whose layers are replaced
    sources : Optional[Dict[LayerKind, str]]
        Sheet URL per kind; defaults to each layer's configured 'source_url'
        (kinds without one are skipped)
    timeout : Optional[int]
        Per-request timeout in seconds; defaults to the 'request_timeout' setting
    max_workers : Optional[int]
        Download threads; defaults to the 'max_workers' setting

    Returns:
    --------
    Dict[LayerKind, str]
        Outcome per kind: 'updated', 'fetch_failed' or 'rejected'
    """
    if sources is None:
        sources = {
            kind: settings['source_url']
            for kind, settings in session.layer_settings.items()
            if settings.get('source_url')
        }

    if not sources:
        logger.info("No sheet URLs configured, skipping refresh")
        return {}

    timeout = timeout or session.map_settings['request_timeout']
    max_workers = max_workers or session.map_settings['max_workers']

    logger.info("=" * 80)
    logger.info("Refreshing Layers from Published Sheets")
    logger.info("=" * 80)

    results: Dict[LayerKind, str] = {}

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(fetch_rows, url, timeout): LayerKind(kind)
            for kind, url in sources.items()
        }

        for future in as_completed(futures):
            kind = futures[future]

            try:
                rows = future.result()
            except SheetFetchError as e:
                logger.warning(f"  ⚠ {kind.value}: {e}")
                logger.warning("    Keeping previously displayed layer")
                results[kind] = STATUS_FETCH_FAILED
                continue

            try:
                session.load(kind, rows)
            except (GeometryParseError, CoordinateParseError) as e:
                logger.warning(f"  ⚠ {kind.value}: refresh rejected - {e}")
                logger.warning("    Keeping previously displayed layer")
                results[kind] = STATUS_REJECTED
                continue
            except Exception as e:
                logger.error(f"  ✗ {kind.value}: unexpected error building layer - {e}", exc_info=True)
                logger.warning("    Keeping previously displayed layer")
                results[kind] = STATUS_REJECTED
                continue

            results[kind] = STATUS_UPDATED

    updated = sum(1 for status in results.values() if status == STATUS_UPDATED)
    logger.info(f"✓ {updated} of {len(results)} layer(s) refreshed")
    logger.info("")

    return results

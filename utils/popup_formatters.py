"""
Panel formatting utilities for Sheets Map Creator.

This module formats sheet values for display in the selection side panel.
Handles special cases like URLs (converted to clickable links), photo columns
(rendered as images) and empty cells.

Functions:
    format_panel_value: Format a single value for display in panel HTML
    format_observation_body: Build the panel body for a point observation
"""

from html import escape
from typing import Any, Dict, Optional, Sequence


def format_panel_value(col: str, value: Any) -> str:
    """
    Format panel values, converting URLs to clickable hyperlinks.

    Detects URLs in column names or values and converts them to HTML links.
    Long URLs are truncated for better display. Empty cells render as an empty string.
    Cell text is HTML-escaped, since the panel inserts it as markup.

    Parameters:
    -----------
    col : str
        Column name (used to detect URL fields)
    value : Any
        Value to format

    Returns:
    --------
    str
        HTML string for the panel body

    Examples:
        >>> format_panel_value('Carretera', 'N-110')
        'N-110'

        >>> format_panel_value('Pk', None)
        ''

        >>> format_panel_value('url', 'https://example.com')
        '<a href="https://example.com" target="_blank">https://example.com</a>'
    """
    # Handle None and NaN values
    if value is None or (isinstance(value, float) and value != value):  # NaN check
        return ''

    value_str = str(value)

    is_url = 'url' in col.lower() or value_str.startswith(('http://', 'https://'))

    if is_url and value_str:
        if len(value_str) <= 60:
            display_text = value_str
        else:
            display_text = f"{value_str[:57]}..."

        return f'<a href="{escape(value_str)}" target="_blank">{escape(display_text)}</a>'

    return escape(value_str)


def format_observation_body(
    properties: Dict[str, Optional[str]],
    body_columns: Sequence[str],
    image_column: Optional[str] = None,
    image_width: int = 270
) -> str:
    """
    Build the side panel body for a point observation.

    One "Column: value<br/>" line per body column in the configured order,
    followed by the photo when the image column has a value.

    Args:
        properties: Feature properties (column -> cell value)
        body_columns: Columns listed in the body
        image_column: Column holding a photo URL, or None
        image_width: Rendered photo width in pixels

    Returns:
        HTML string
    """
    lines = [f"{col}: {format_panel_value(col, properties.get(col))}<br/>" for col in body_columns]

    image_url = properties.get(image_column) if image_column else None
    if image_url:
        lines.append(f'<img src="{escape(image_url)}" width="{image_width}">')

    return ''.join(lines)

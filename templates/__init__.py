"""
HTML templates for Sheets Map Creator.

This package contains Jinja2 templates for the interactive map UI elements.

Templates:
    selection_panel.html: Leaflet sidebar panel showing the selected feature
    panel_click_binding.html: Click handlers that open the panel for a layer
"""

__version__ = '1.0.0'

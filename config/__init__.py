"""
Configuration package for Sheets Map Creator.

This package contains configuration loading and validation.

Modules:
    config_loader: Load map configuration from JSON and merge defaults
"""

__version__ = '1.0.0'

"""
Utility modules for Sheets Map Creator.

This package contains utility functions and helpers used throughout the application.

Modules:
    logger: Logging configuration and setup
    popup_formatters: Side panel value formatting utilities
"""

__version__ = '1.0.0'

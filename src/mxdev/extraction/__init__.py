"""
Extraction module for the regional development analysis.

Loads the regional indicator table and enforces its schema.
"""

from .loader import load_regions, missing_table_help, validate_regions

__all__ = [
    "load_regions",
    "missing_table_help",
    "validate_regions",
]

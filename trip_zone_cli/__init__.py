"""
Trip Zone CLI
=============

Command-line front end for the trip zone analyzer.

Usage:
    trip-zone data/trips.csv --top-zones 10 --top-slots 10
"""

from .cli import main

__all__ = ['main']

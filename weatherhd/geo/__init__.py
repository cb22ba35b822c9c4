"""
Planar geometry helpers for warning polygons.
"""

from .polygon import parse_polygon, point_in_polygon

__all__ = ['parse_polygon', 'point_in_polygon']

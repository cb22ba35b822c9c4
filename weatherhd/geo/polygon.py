"""
Warning polygon parsing and containment.

NWS polygons arrive as "lat,lon lat,lon ..." strings. Containment is a
planar ray cast: fine at county scale, wrong across the antimeridian.
"""

import math
from typing import List, Optional, Sequence, Tuple

Point = Tuple[float, float]

# smallest latitude delta used as a divisor
EPSILON = 1e-12


def _parse_point(token: str) -> Optional[Point]:
    parts = token.split(',')
    if len(parts) != 2:
        return None
    try:
        lat = float(parts[0])
        lon = float(parts[1])
    except ValueError:
        return None
    if not (math.isfinite(lat) and math.isfinite(lon)):
        return None
    return (lat, lon)


def parse_polygon(text: Optional[str]) -> Optional[List[Point]]:
    """
    Parse a whitespace separated list of "lat,lon" pairs.

    Malformed tokens are dropped. Returns None unless at least three valid
    points remain.
    """
    if not text:
        return None

    points = []
    for token in text.split():
        point = _parse_point(token)
        if point is not None:
            points.append(point)

    return points if len(points) >= 3 else None


def point_in_polygon(lat: float, lon: float, polygon: Optional[Sequence[Point]]) -> bool:
    """
    Ray casting test for (lat, lon) against a list of (lat, lon) vertices.

    Longitude is x, latitude is y. Points exactly on an edge get a
    deterministic but unspecified answer.
    """
    if not polygon or len(polygon) < 3:
        return False

    inside = False
    j = len(polygon) - 1
    for i in range(len(polygon)):
        yi, xi = polygon[i]
        yj, xj = polygon[j]

        if (yi > lat) != (yj > lat):
            dy = yj - yi
            if abs(dy) < EPSILON:
                dy = EPSILON
            if lon < (xj - xi) * (lat - yi) / dy + xi:
                inside = not inside
        j = i

    return inside

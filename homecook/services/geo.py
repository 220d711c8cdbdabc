# homecook/services/geo.py
"""
Great-circle distance helpers used by meal and cook discovery.

No spatial index: candidates are fetched, annotated with a haversine
distance, filtered by radius and optionally sorted nearest first.
"""
from __future__ import annotations

import math
from typing import Callable, Iterable, List, Optional, TypeVar

from homecook.models.common import Coordinates

T = TypeVar("T")

EARTH_RADIUS_KM = 6371.0


def distance_km(a: Coordinates, b: Coordinates) -> float:
    """Haversine distance between two coordinates, in kilometers."""
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.latitude))
        * math.cos(math.radians(b.latitude))
        * math.sin(d_lon / 2) ** 2
    )
    # rounding can push h just past 1 for near-antipodal points
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def distance_between(
    origin: Optional[Coordinates], target: Optional[Coordinates]
) -> Optional[float]:
    """Distance when both points are known, else None."""
    if origin is None or target is None:
        return None
    return distance_km(origin, target)


def within_radius(distance: Optional[float], radius_km: Optional[float]) -> bool:
    """
    Radius filter. A radius of 0 (or None) means "any distance".
    Candidates with no computable distance are never excluded.
    """
    if not radius_km or radius_km <= 0:
        return True
    if distance is None:
        return True
    return distance <= radius_km


def sort_nearest_first(items: Iterable[T], distance_of: Callable[[T], Optional[float]]) -> List[T]:
    """Stable ascending sort by distance; items without one go last."""
    items = list(items)
    known = [i for i in items if distance_of(i) is not None]
    unknown = [i for i in items if distance_of(i) is None]
    known.sort(key=distance_of)
    return known + unknown


def format_distance(km: Optional[float]) -> Optional[str]:
    """'300 m' under a kilometer, otherwise '1.2 km'."""
    if km is None:
        return None
    if km < 1:
        return f"{km * 1000:.0f} m"
    return f"{km:.1f} km"

"""
Geometry utilities for coordinate transformations and distance calculations
"""

import math
from typing import Sequence, Tuple

import numpy as np

M_PER_DEG_LAT = 111000


class GeometryUtils:
    """Utility functions for geometric operations"""

    @staticmethod
    def degrees_to_local_point(
        lon: float,
        lat: float,
        ref_lon: float,
        ref_lat: float
    ) -> Tuple[float, float]:
        """Convert one lon/lat pair to local x/y metres from reference"""
        m_per_deg_lon = M_PER_DEG_LAT * math.cos(math.radians(ref_lat))
        return ((lon - ref_lon) * m_per_deg_lon, (lat - ref_lat) * M_PER_DEG_LAT)

    @staticmethod
    def local_to_degrees_point(
        x: float,
        y: float,
        ref_lon: float,
        ref_lat: float
    ) -> Tuple[float, float]:
        """Convert one local x/y pair in metres back to lon/lat"""
        m_per_deg_lon = M_PER_DEG_LAT * math.cos(math.radians(ref_lat))
        return (ref_lon + x / m_per_deg_lon, ref_lat + y / M_PER_DEG_LAT)

    @staticmethod
    def distance(a: Sequence[float], b: Sequence[float]) -> float:
        return math.hypot(a[0] - b[0], a[1] - b[1])

    @staticmethod
    def distances_to(point: Sequence[float], coords: Sequence[Sequence[float]]) -> np.ndarray:
        """Euclidean distance from point to every coordinate"""
        arr = np.asarray(coords, dtype=float).reshape(-1, 2)
        return np.hypot(arr[:, 0] - point[0], arr[:, 1] - point[1])

    @staticmethod
    def pairwise_distances(
        coords_a: Sequence[Sequence[float]],
        coords_b: Sequence[Sequence[float]]
    ) -> np.ndarray:
        """Distance matrix with rows for coords_a and columns for coords_b"""
        a = np.asarray(coords_a, dtype=float).reshape(-1, 2)
        b = np.asarray(coords_b, dtype=float).reshape(-1, 2)
        dx = a[:, 0][:, np.newaxis] - b[:, 0][np.newaxis, :]
        dy = a[:, 1][:, np.newaxis] - b[:, 1][np.newaxis, :]
        return np.hypot(dx, dy)

    @staticmethod
    def coordinate_key(point: Sequence[float], precision: int) -> Tuple[float, float]:
        """Hashable key under which nearly identical coordinates collide"""
        x = round(float(point[0]), precision)
        y = round(float(point[1]), precision)
        return (x, y)

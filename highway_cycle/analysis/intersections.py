"""
Intersection node insertion

Highways extracted by name rarely carry the junction nodes they share with
other highways. This module finds geometric crossings between segments of
different roads and splices a vertex at each crossing into both polylines.
"""

from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger
from shapely.geometry import LineString, Point
from shapely.geometry.base import BaseGeometry

from .geometry_utils import GeometryUtils
from .road_set import RoadSet, VertexAllocator
from ..config import get_config

XY = Tuple[float, float]


class IntersectionType(Enum):
    """How two polylines meet"""
    NO_INTERSECTION = -1
    INTERSECTION_NOT_AT_VERTEX = 0
    INTERSECTION_AT_VERTEX = 2


def _as_geometry(coords: Sequence[XY]) -> BaseGeometry:
    if len(coords) == 1:
        return Point(coords[0])
    return LineString(coords)


def _intersection_points(geom: BaseGeometry) -> Optional[List[XY]]:
    """
    Point coordinates of an intersection result

    Returns None when any part of the result is not a point (collinear overlap).
    """
    if geom.is_empty:
        return []
    if geom.geom_type == "Point":
        return [(geom.x, geom.y)]
    if geom.geom_type in ("MultiPoint", "GeometryCollection"):
        points = []
        for part in geom.geoms:
            part_points = _intersection_points(part)
            if part_points is None:
                return None
            points.extend(part_points)
        return points
    return None


def _precision(precision: Optional[int]) -> int:
    if precision is None:
        return get_config().geometry.coordinate_precision
    return precision


def has_vertex(coords: Sequence[XY], point: XY, precision: Optional[int] = None) -> bool:
    """Whether point coincides with one of coords"""
    precision = _precision(precision)
    key = GeometryUtils.coordinate_key(point, precision)
    return any(GeometryUtils.coordinate_key(c, precision) == key for c in coords)


def intersection_type(
    first: Sequence[XY],
    second: Sequence[XY],
    precision: Optional[int] = None
) -> IntersectionType:
    """
    Classify the intersection of two polylines

    Args:
        first: Polyline whose vertices are checked
        second: Polyline tested against it
        precision: Decimal places for vertex matching (config default)

    Returns:
        NO_INTERSECTION when the lines do not meet, INTERSECTION_AT_VERTEX when
        every intersection point is already a vertex of first, otherwise
        INTERSECTION_NOT_AT_VERTEX
    """
    precision = _precision(precision)
    inter = _as_geometry(first).intersection(_as_geometry(second))
    if inter.is_empty:
        return IntersectionType.NO_INTERSECTION

    points = _intersection_points(inter)
    if points is None:
        return IntersectionType.INTERSECTION_NOT_AT_VERTEX

    keys = {GeometryUtils.coordinate_key(c, precision) for c in first}
    if all(GeometryUtils.coordinate_key(p, precision) in keys for p in points):
        return IntersectionType.INTERSECTION_AT_VERTEX
    return IntersectionType.INTERSECTION_NOT_AT_VERTEX


def crossing_point(
    a: Sequence[XY],
    b: Sequence[XY],
    precision: Optional[int] = None
) -> Optional[XY]:
    """
    The single point at which two polylines cross

    Returns None for no intersection, collinear overlaps and multiple
    distinct crossings; these are left unresolved.
    """
    precision = _precision(precision)
    points = _intersection_points(_as_geometry(a).intersection(_as_geometry(b)))
    if not points:
        return None

    distinct = {}
    for p in points:
        distinct.setdefault(GeometryUtils.coordinate_key(p, precision), p)
    if len(distinct) != 1:
        return None
    x, y = next(iter(distinct.values()))
    return (float(x), float(y))


def locate_insertion_index(point: XY, coords: Sequence[XY]) -> int:
    """
    Position at which point is spliced into coords

    The nearest existing vertex decides the neighbourhood. For an interior
    vertex, the point goes on the side of whichever neighbour is closer to it.
    For an endpoint, the point goes beyond the end when the endpoint's
    neighbour is closer to the endpoint than to the point, otherwise just inside.
    """
    n = len(coords)
    if n < 2:
        return n

    d = GeometryUtils.distances_to(point, coords)
    di = int(np.argmin(d))

    if di == 0:
        d12 = GeometryUtils.distance(coords[0], coords[1])
        return 0 if d12 < d[1] else 1
    if di == n - 1:
        d12 = GeometryUtils.distance(coords[n - 2], coords[n - 1])
        return n if d12 < d[n - 2] else n - 1
    if d[di - 1] < d[di + 1]:
        return di
    return di + 1


def add_intersection_nodes(
    road_set: RoadSet,
    allocator: VertexAllocator,
    precision: Optional[int] = None
) -> int:
    """
    Insert a vertex at every single-point crossing between different roads

    Each crossing gets one freshly allocated id, spliced into every polyline
    of the pair that does not already hold a vertex at that coordinate.

    Args:
        road_set: Roads to modify in place
        allocator: Vertex id allocator for this call
        precision: Decimal places for vertex matching (config default)

    Returns:
        Number of crossings inserted
    """
    precision = _precision(precision)
    n_roads = len(road_set)
    inserted = 0
    skipped = 0

    for i in range(n_roads):
        candidates = [
            (k, m)
            for k in range(n_roads) if k != i
            for m in range(len(road_set.roads[k].segments))
        ]
        for j in range(len(road_set.roads[i].segments)):
            for k, m in candidates:
                seg_coords = road_set.segment_coords(i, j)
                other_coords = road_set.segment_coords(k, m)

                forward = intersection_type(other_coords, seg_coords, precision)
                if forward == IntersectionType.NO_INTERSECTION:
                    continue
                backward = intersection_type(seg_coords, other_coords, precision)
                if (forward == IntersectionType.INTERSECTION_AT_VERTEX and
                        backward == IntersectionType.INTERSECTION_AT_VERTEX):
                    continue

                point = crossing_point(seg_coords, other_coords, precision)
                if point is None:
                    skipped += 1
                    logger.debug(
                        f"Skipping non-point intersection between road {i} segment {j} "
                        f"and road {k} segment {m}"
                    )
                    continue

                vid = None
                for road_index, seg_index, coords in ((i, j, seg_coords), (k, m, other_coords)):
                    if has_vertex(coords, point, precision):
                        continue
                    if vid is None:
                        vid = road_set.add_vertex(point, allocator)
                    position = locate_insertion_index(point, coords)
                    road_set.insert_vertex(road_index, seg_index, position, vid)

                if vid is not None:
                    inserted += 1
                    logger.debug(
                        f"Inserted intersection vertex {vid} at ({point[0]:.6f}, {point[1]:.6f}) "
                        f"between '{road_set.roads[i].name}' and '{road_set.roads[k].name}'"
                    )

    if skipped:
        logger.debug(f"Skipped {skipped} degenerate intersections")
    logger.info(f"Added {inserted} intersection nodes across {n_roads} roads")
    return inserted

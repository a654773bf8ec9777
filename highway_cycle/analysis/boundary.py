"""
Boundary polygon tracing from an assembled road set
"""

from typing import List, Optional

from loguru import logger
from shapely.geometry import LineString, Polygon
from shapely.ops import polygonize, unary_union

from .road_set import RoadSet


def road_lines(road_set: RoadSet) -> List[LineString]:
    """Every segment with at least two distinct vertices as a LineString"""
    lines = []
    for i, j, seg in road_set.iter_segments():
        coords = road_set.segment_coords(i, j)
        if len(set(coords)) >= 2:
            lines.append(LineString(coords))
    return lines


def trace_boundary(road_set: RoadSet) -> Optional[Polygon]:
    """
    Outer boundary of the region enclosed by the roads

    Segments are noded against each other and polygonized; the faces are
    merged and the exterior of the largest merged part is returned.

    Returns:
        Polygon without holes, or None if the roads enclose nothing
    """
    lines = road_lines(road_set)
    if not lines:
        return None

    noded = unary_union(lines)
    faces = list(polygonize(noded))
    if not faces:
        logger.info("Roads enclose no area; no boundary traced")
        return None

    merged = unary_union(faces)
    if merged.geom_type == "MultiPolygon":
        logger.debug(f"Boundary has {len(merged.geoms)} disjoint parts, keeping the largest")
        merged = max(merged.geoms, key=lambda g: g.area)

    boundary = Polygon(merged.exterior.coords)
    logger.info(f"Traced boundary with {len(boundary.exterior.coords) - 1} vertices, area {boundary.area:.2f}")
    return boundary


def boundary_coordinates(boundary: Optional[Polygon]) -> List[List[float]]:
    """Closed, ordered [x, y] sequence of a boundary polygon"""
    if boundary is None or boundary.is_empty:
        return []
    return [[float(x), float(y)] for x, y in boundary.exterior.coords]

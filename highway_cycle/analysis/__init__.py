"""
Highway cycle analysis modules
"""

from .road_set import Vertex, VertexAllocator, Segment, Road, RoadSet
from .geometry_utils import GeometryUtils
from .intersections import IntersectionType, intersection_type, add_intersection_nodes
from .connectivity import build_connectivity_matrix, fundamental_cycles, longest_cycle
from .cycle_extender import CycleExtender, ExtensionResult, NodePair
from .highway_cycle import get_highway_cycle
from .boundary import trace_boundary, boundary_coordinates

__all__ = [
    "Vertex",
    "VertexAllocator",
    "Segment",
    "Road",
    "RoadSet",
    "GeometryUtils",
    "IntersectionType",
    "intersection_type",
    "add_intersection_nodes",
    "build_connectivity_matrix",
    "fundamental_cycles",
    "longest_cycle",
    "CycleExtender",
    "ExtensionResult",
    "NodePair",
    "get_highway_cycle",
    "trace_boundary",
    "boundary_coordinates",
]

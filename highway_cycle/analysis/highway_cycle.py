"""
Highway cycle assembly

Sequentially connects the closest nodes of adjacent highways until the set of
highways forms a cycle:

  1. Add intersection nodes at junctions where these don't already exist
  2. Fill a connectivity matrix between highways and take the longest cycle
  3. Insert connections between highways until the longest cycle spans them all
"""

from typing import Optional

from loguru import logger

from .connectivity import build_connectivity_matrix, longest_cycle
from .cycle_extender import CycleExtender, ExtensionResult
from .intersections import add_intersection_nodes
from .road_set import RoadSet, VertexAllocator, validate_road_set
from ..config import PipelineConfig, get_config, validate_config


def get_highway_cycle(road_set: RoadSet, config: Optional[PipelineConfig] = None) -> ExtensionResult:
    """
    Extend a set of highways in place until they connect into one cycle

    Args:
        road_set: Highways to assemble; modified in place
        config: Pipeline configuration (global config if None)

    Returns:
        ExtensionResult whose `complete` flag tells whether the cycle spans
        every highway

    Raises:
        TypeError, ValueError: road_set is missing, empty or malformed
    """
    config = config or get_config()
    validate_config(config)
    validate_road_set(road_set)

    precision = config.geometry.coordinate_precision
    allocator = VertexAllocator.for_road_set(road_set)
    logger.info(f"Assembling cycle from {len(road_set)} highways ({road_set.n_vertices} vertices)")

    inserted = add_intersection_nodes(road_set, allocator, precision)
    conmat = build_connectivity_matrix(road_set, precision)

    extender = CycleExtender(config.cycle, precision)
    result = extender.extend(road_set, conmat)
    result.intersection_nodes_added = inserted

    if result.connecting_nodes_added and config.cycle.renode_after_extension:
        renoded = add_intersection_nodes(road_set, allocator, precision)
        result.intersection_nodes_added += renoded
        if renoded:
            result.conmat |= build_connectivity_matrix(road_set, precision)
            cycle, cyc_len = longest_cycle(result.conmat)
            if cyc_len > result.cycle_length:
                result.cycle, result.cycle_length = cycle, cyc_len

    if result.complete:
        logger.info(f"Cycle spans all {result.n_roads} highways after {result.steps} extension steps")
    else:
        logger.info(f"Returning partial cycle over {result.cycle_length} of {result.n_roads} highways")
    return result

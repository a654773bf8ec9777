"""
Cycle extension

When the road graph holds no cycle through every road, synthetic links are
added one at a time. Each round tries every missing link on a copy of the
connectivity matrix, keeps the one giving the longest cycle, and grafts the
closest pair of vertices of the two roads onto each other's terminal nodes.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
from loguru import logger

from .connectivity import build_connectivity_matrix, longest_cycle
from .geometry_utils import GeometryUtils
from .road_set import RoadSet
from ..config import CycleConfig, get_config

XY = Tuple[float, float]

NO_CYCLE_WARNING = "No cycles can be found or made"
NOT_EXTENDABLE_WARNING = "Cycle unable to be extended through all ways"


@dataclass
class NodePair:
    """Closest vertices of two roads chosen for connection"""
    road_i: int
    road_j: int
    vid_i: int
    xy_i: XY
    vid_j: int
    xy_j: XY
    distance: float


@dataclass
class Trial:
    """Longest cycle obtained by adding the single link (i, j)"""
    i: int
    j: int
    cycle: List[int]
    length: int


@dataclass
class ExtensionResult:
    """Final state of the cycle search"""
    cycle: List[int]
    cycle_length: int
    n_roads: int
    conmat: np.ndarray
    steps: int = 0
    intersection_nodes_added: int = 0
    connecting_nodes_added: int = 0
    connections: List[NodePair] = field(default_factory=list)
    warning: Optional[str] = None

    @property
    def complete(self) -> bool:
        return self.n_roads > 0 and self.cycle_length >= self.n_roads


def nearest_nodes(road_set: RoadSet, road_i: int, road_j: int) -> NodePair:
    """
    Closest pair of vertices between two roads

    Both roads are flattened across their segments; the first minimum of the
    distance matrix in row-major order wins.
    """
    verts_i = road_set.road_vertices(road_i)
    verts_j = road_set.road_vertices(road_j)
    if not verts_i or not verts_j:
        raise ValueError(f"Roads {road_i} and {road_j} must both have vertices")

    d = GeometryUtils.pairwise_distances([xy for _, xy in verts_i], [xy for _, xy in verts_j])
    di, dj = np.unravel_index(int(np.argmin(d)), d.shape)
    vid_i, xy_i = verts_i[di]
    vid_j, xy_j = verts_j[dj]
    return NodePair(
        road_i=road_i,
        road_j=road_j,
        vid_i=vid_i,
        xy_i=xy_i,
        vid_j=vid_j,
        xy_j=xy_j,
        distance=float(d[di, dj])
    )


def insert_connecting_node(road_set: RoadSet, road_index: int, anchor_vid: int, new_vid: int) -> bool:
    """
    Graft new_vid next to anchor_vid when the anchor is a terminal node

    The segment holding the anchor at its highest position is used. The new
    vertex is prepended when the anchor is first, appended when it is last,
    and nothing happens for interior anchors.

    Returns:
        True if a vertex was inserted
    """
    road = road_set.roads[road_index]
    if new_vid in road.vertex_ids:
        return False

    positions = [seg.position(anchor_vid) for seg in road.segments]
    if not positions or max(positions) < 0:
        return False

    best = max(positions)
    seg_index = positions.index(best)
    seg = road.segments[seg_index]
    if best == 0:
        road_set.insert_vertex(road_index, seg_index, 0, new_vid)
    elif best == len(seg) - 1:
        road_set.insert_vertex(road_index, seg_index, len(seg), new_vid)
    else:
        logger.debug(f"Anchor {anchor_vid} is interior to '{road.name}', no node inserted")
        return False

    logger.debug(f"Grafted vertex {new_vid} onto '{road.name}' next to {anchor_vid}")
    return True


class CycleExtender:
    """
    Extend the longest road cycle by single synthetic links

    Usage:
        extender = CycleExtender()
        result = extender.extend(road_set, conmat)
    """

    def __init__(self, cycle_config: Optional[CycleConfig] = None, precision: Optional[int] = None):
        config = get_config()
        self.cycle_config = cycle_config or config.cycle
        self.precision = precision if precision is not None else config.geometry.coordinate_precision

    def trial_lengths(self, conmat: np.ndarray) -> List[Trial]:
        """Longest cycle for every missing upper-triangle link, row-major"""
        n = conmat.shape[0]
        trials = []
        for i in range(n):
            for j in range(i + 1, n):
                if conmat[i, j]:
                    continue
                trial = conmat.copy()
                trial[i, j] = True
                trial[j, i] = True
                cycle, length = longest_cycle(trial)
                trials.append(Trial(i, j, cycle, length))
        return trials

    def max_steps(self, n_roads: int) -> int:
        if self.cycle_config.max_extension_steps is not None:
            return self.cycle_config.max_extension_steps
        return n_roads * (n_roads - 1) // 2

    def extend(self, road_set: RoadSet, conmat: Optional[np.ndarray] = None) -> ExtensionResult:
        """
        Add links until a cycle spans every road or no link helps

        Args:
            road_set: Roads to modify in place
            conmat: Starting connectivity matrix (built from road_set if None)

        Returns:
            ExtensionResult; a warning is logged and recorded when the cycle
            could not be completed
        """
        n_roads = len(road_set)
        if conmat is None:
            conmat = build_connectivity_matrix(road_set, self.precision)
        conmat = np.array(conmat, dtype=bool)

        cycle, cyc_len = longest_cycle(conmat)
        result = ExtensionResult(cycle=cycle, cycle_length=cyc_len, n_roads=n_roads, conmat=conmat)
        logger.info(f"Initial longest cycle covers {cyc_len} of {n_roads} roads")
        max_steps = self.max_steps(n_roads)

        while result.cycle_length < n_roads:
            trials = [t for t in self.trial_lengths(result.conmat) if t.length > 0]
            if not trials:
                result.warning = NO_CYCLE_WARNING
                break
            if result.steps >= max_steps:
                result.warning = NOT_EXTENDABLE_WARNING
                break

            best = max(trials, key=lambda t: t.length)
            if best.length <= result.cycle_length:
                result.warning = NOT_EXTENDABLE_WARNING
                break

            result.conmat[best.i, best.j] = True
            result.conmat[best.j, best.i] = True
            result.cycle = best.cycle
            result.cycle_length = best.length

            pair = nearest_nodes(road_set, best.i, best.j)
            result.connections.append(pair)
            if insert_connecting_node(road_set, best.i, pair.vid_i, pair.vid_j):
                result.connecting_nodes_added += 1
            if insert_connecting_node(road_set, best.j, pair.vid_j, pair.vid_i):
                result.connecting_nodes_added += 1

            # Grafted vertices may be shared with further roads
            result.conmat |= build_connectivity_matrix(road_set, self.precision)
            cycle, cyc_len = longest_cycle(result.conmat)
            if cyc_len > result.cycle_length:
                result.cycle, result.cycle_length = cycle, cyc_len

            result.steps += 1
            logger.info(
                f"Linked '{road_set.roads[best.i].name}' to '{road_set.roads[best.j].name}' "
                f"({pair.distance:.3f} apart): cycle now covers {result.cycle_length} of {n_roads} roads"
            )

        if result.warning:
            logger.warning(f"{result.warning} (cycle covers {result.cycle_length} of {n_roads} roads)")
        return result

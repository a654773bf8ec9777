"""
Road connectivity and cycle search

Roads are the nodes of the graph; two roads are adjacent when they share a
vertex. Cycles are the fundamental cycles of a depth-first spanning forest.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import networkx as nx
import numpy as np
from loguru import logger

from .geometry_utils import GeometryUtils
from .road_set import RoadSet
from ..config import get_config


def build_connectivity_matrix(road_set: RoadSet, precision: Optional[int] = None) -> np.ndarray:
    """
    Symmetric boolean adjacency between roads

    Road i connects to road j when any vertex id or (rounded) coordinate of i
    also appears in j. The diagonal is left False.
    """
    if precision is None:
        precision = get_config().geometry.coordinate_precision

    n = len(road_set)
    road_ids = []
    road_keys = []
    for road in road_set.roads:
        ids = set(road.vertex_ids)
        road_ids.append(ids)
        road_keys.append({GeometryUtils.coordinate_key(road_set.coords(vid), precision) for vid in ids})

    conmat = np.zeros((n, n), dtype=bool)
    for i in range(n):
        for j in range(i + 1, n):
            if road_ids[i] & road_ids[j] or road_keys[i] & road_keys[j]:
                conmat[i, j] = True
                conmat[j, i] = True

    logger.debug(f"Connectivity matrix: {int(np.triu(conmat, 1).sum())} links between {n} roads")
    return conmat


def road_graph(conmat: np.ndarray) -> nx.Graph:
    """Undirected graph over road indices, edges added in ascending order"""
    conmat = np.asarray(conmat, dtype=bool)
    if conmat.ndim != 2 or conmat.shape[0] != conmat.shape[1]:
        raise ValueError(f"Connectivity matrix must be square, got shape {conmat.shape}")

    G = nx.Graph()
    G.add_nodes_from(range(conmat.shape[0]))
    rows, cols = np.nonzero(np.triu(conmat, 1))
    G.add_edges_from(zip(rows.tolist(), cols.tolist()))
    return G


def fundamental_cycles(conmat: np.ndarray) -> List[List[int]]:
    """
    All fundamental cycles of the road graph

    A depth-first spanning forest is grown from the lowest index of each
    component, visiting neighbours in ascending order. Every non-tree edge
    (u, v) closes the cycle u -> LCA(u, v) -> v through the tree.

    Returns:
        List of cycles, each a list of road indices in traversal order
    """
    G = road_graph(conmat)
    cycles = []
    seen = set()

    for root in sorted(G.nodes):
        if root in seen or G.degree(root) == 0:
            continue

        parent: Dict[int, Optional[int]] = {root: None}
        parent.update(nx.dfs_predecessors(G, source=root))
        depth = {root: 0}
        for node in nx.dfs_preorder_nodes(G, source=root):
            if parent[node] is not None:
                depth[node] = depth[parent[node]] + 1
        seen.update(parent)

        def path_between(a: int, b: int) -> List[int]:
            pa, pb = [a], [b]
            ua, ub = a, b
            while depth[ua] > depth[ub]:
                ua = parent[ua]
                pa.append(ua)
            while depth[ub] > depth[ua]:
                ub = parent[ub]
                pb.append(ub)
            while ua != ub:
                ua = parent[ua]
                pa.append(ua)
                ub = parent[ub]
                pb.append(ub)
            return pa + list(reversed(pb[:-1]))

        component_edges = sorted(
            (min(u, v), max(u, v)) for u, v in G.edges(parent.keys())
        )
        for u, v in dict.fromkeys(component_edges):
            if parent.get(v) == u or parent.get(u) == v:
                continue
            cycle = path_between(u, v)
            if len(cycle) >= 3:
                cycles.append(cycle)

    return cycles


def longest_cycle(conmat: np.ndarray) -> Tuple[List[int], int]:
    """
    Longest fundamental cycle of the road graph

    Without any fundamental cycle, a single connected pair of roads counts as
    a cycle of length 2 (out along one road and back along the other). A graph
    without edges, or one on which the search fails, has length 0.

    Returns:
        (cycle, length) where cycle is a list of road indices
    """
    try:
        cycles = fundamental_cycles(conmat)
    except (nx.NetworkXException, ValueError, KeyError) as e:
        logger.debug(f"Cycle computation failed, treating as no cycle: {e}")
        return [], 0

    if cycles:
        best = max(cycles, key=len)
        return best, len(set(best))

    edges = np.argwhere(np.triu(np.asarray(conmat, dtype=bool), 1))
    if len(edges):
        i, j = edges[0]
        return [int(i), int(j)], 2
    return [], 0


def is_cycle(cycle: Sequence[int], conmat: np.ndarray) -> bool:
    """Whether consecutive and wrap-around roads of cycle are all connected"""
    if len(cycle) < 2 or len(set(cycle)) != len(cycle):
        return False
    return all(
        bool(conmat[cycle[k], cycle[(k + 1) % len(cycle)]])
        for k in range(len(cycle))
    )

"""
Tests for the connectivity matrix and cycle finder
"""

import sys
from pathlib import Path

import numpy as np

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from highway_cycle.analysis.connectivity import (
    build_connectivity_matrix,
    fundamental_cycles,
    is_cycle,
    longest_cycle,
)
from highway_cycle.analysis.intersections import add_intersection_nodes
from highway_cycle.analysis.road_set import RoadSet, VertexAllocator


def _matrix(n, edges):
    conmat = np.zeros((n, n), dtype=bool)
    for i, j in edges:
        conmat[i, j] = True
        conmat[j, i] = True
    return conmat


def _pairwise_crossing_roads():
    # Four lines in general position, every pair crossing once within x in [-10, 10]
    lines = [(0.1, 0.0), (-0.2, 1.0), (0.5, -1.0), (-1.0, 2.0)]
    return RoadSet.from_coordinates([
        [[(-10.0, -10.0 * a + b), (10.0, 10.0 * a + b)]] for a, b in lines
    ])


def test_matrix_from_shared_coordinates():
    road_set = RoadSet.from_coordinates([
        [[(0.0, 0.0), (1.0, 0.0)]],
        [[(1.0, 0.0), (1.0, 1.0)]],
        [[(5.0, 5.0), (6.0, 6.0)]],
    ])
    conmat = build_connectivity_matrix(road_set)

    assert conmat.dtype == bool
    assert conmat[0, 1] and conmat[1, 0]
    assert not conmat[0, 2] and not conmat[1, 2]
    assert not conmat.diagonal().any()
    assert (conmat == conmat.T).all()


def test_matrix_from_shared_ids():
    road_set = RoadSet.from_coordinates([[[(0.0, 0.0), (1.0, 0.0)]], [[(3.0, 3.0)]]])
    road_set.roads[1].segments[0].vertex_ids.append(1)
    assert build_connectivity_matrix(road_set)[0, 1]


def test_complete_graph_has_spanning_fundamental_cycle():
    conmat = _matrix(4, [(0, 1), (0, 2), (0, 3), (1, 2), (1, 3), (2, 3)])
    cycles = fundamental_cycles(conmat)

    assert [0, 1, 2, 3] in cycles
    assert len(cycles) == 3
    cycle, length = longest_cycle(conmat)
    assert length == 4
    assert is_cycle(cycle, conmat)


def test_square_cycle():
    conmat = _matrix(4, [(0, 2), (0, 3), (1, 2), (1, 3)])
    cycle, length = longest_cycle(conmat)
    assert length == 4
    assert sorted(cycle) == [0, 1, 2, 3]
    assert is_cycle(cycle, conmat)


def test_triangle_with_pendant_road():
    conmat = _matrix(4, [(0, 1), (1, 2), (0, 2), (2, 3)])
    cycle, length = longest_cycle(conmat)
    assert length == 3
    assert sorted(cycle) == [0, 1, 2]


def test_disconnected_components_are_searched():
    conmat = _matrix(6, [(0, 1), (3, 4), (4, 5), (3, 5)])
    cycle, length = longest_cycle(conmat)
    assert length == 3
    assert sorted(cycle) == [3, 4, 5]


def test_acyclic_graph_counts_connected_pair():
    conmat = _matrix(3, [(0, 1), (1, 2)])
    assert fundamental_cycles(conmat) == []
    assert longest_cycle(conmat) == ([0, 1], 2)


def test_graph_without_edges_has_no_cycle():
    assert longest_cycle(np.zeros((3, 3), dtype=bool)) == ([], 0)


def test_cycle_failure_is_treated_as_no_cycle():
    assert longest_cycle(np.zeros((2, 3), dtype=bool)) == ([], 0)


def test_is_cycle():
    conmat = _matrix(3, [(0, 1), (1, 2)])
    assert is_cycle([0, 1], conmat)
    assert not is_cycle([0, 1, 2], conmat)
    assert not is_cycle([0, 1, 0], conmat)
    assert not is_cycle([1], conmat)


def test_pairwise_crossings_span_all_roads_after_insertion():
    road_set = _pairwise_crossing_roads()
    assert add_intersection_nodes(road_set, VertexAllocator.for_road_set(road_set)) == 6

    conmat = build_connectivity_matrix(road_set)
    assert conmat.sum() == 12
    cycle, length = longest_cycle(conmat)
    assert length == len(road_set)
    assert is_cycle(cycle, conmat)

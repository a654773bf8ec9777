"""
Tests for the intersection predicate and intersection node insertion
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from highway_cycle.analysis.intersections import (
    IntersectionType,
    add_intersection_nodes,
    crossing_point,
    has_vertex,
    intersection_type,
    locate_insertion_index,
)
from highway_cycle.analysis.road_set import RoadSet, VertexAllocator

DIAGONAL = [(0.0, 0.0), (2.0, 2.0)]
ANTI_DIAGONAL = [(0.0, 2.0), (2.0, 0.0)]


def _assemble(road_set: RoadSet) -> int:
    return add_intersection_nodes(road_set, VertexAllocator.for_road_set(road_set))


def test_no_intersection():
    assert intersection_type([(0, 0), (1, 0)], [(0, 1), (1, 1)]) == IntersectionType.NO_INTERSECTION


def test_crossing_not_at_vertex():
    assert intersection_type(ANTI_DIAGONAL, DIAGONAL) == IntersectionType.INTERSECTION_NOT_AT_VERTEX


def test_crossing_at_vertex_of_first_polyline_only():
    with_vertex = [(0.0, 0.0), (1.0, 1.0), (2.0, 2.0)]
    assert intersection_type(with_vertex, ANTI_DIAGONAL) == IntersectionType.INTERSECTION_AT_VERTEX
    assert intersection_type(ANTI_DIAGONAL, with_vertex) == IntersectionType.INTERSECTION_NOT_AT_VERTEX


def test_collinear_overlap_has_no_crossing_point():
    a = [(0.0, 0.0), (2.0, 0.0)]
    b = [(1.0, 0.0), (3.0, 0.0)]
    assert intersection_type(a, b) == IntersectionType.INTERSECTION_NOT_AT_VERTEX
    assert crossing_point(a, b) is None


def test_crossing_point():
    x, y = crossing_point(DIAGONAL, ANTI_DIAGONAL)
    assert x == pytest.approx(1.0)
    assert y == pytest.approx(1.0)


def test_multiple_crossings_are_skipped():
    zigzag = [(0.0, 0.0), (1.0, 2.0), (2.0, 0.0)]
    line = [(0.0, 1.0), (2.0, 1.0)]
    assert crossing_point(zigzag, line) is None


def test_no_crossing_point_for_disjoint_lines():
    assert crossing_point([(0, 0), (1, 0)], [(0, 1), (1, 1)]) is None


def test_has_vertex_uses_precision():
    coords = [(0.0, 0.0), (1.0, 1.0)]
    assert has_vertex(coords, (1.0 + 1e-12, 1.0), precision=9)
    assert not has_vertex(coords, (1.001, 1.0), precision=9)


@pytest.mark.parametrize("point, expected", [
    ((0.6, 0.0), 1),    # interior, closer to previous neighbour
    ((1.4, 0.0), 2),    # interior, closer to next neighbour
    ((-0.5, 0.0), 0),   # beyond the first vertex
    ((0.3, 0.0), 1),    # just inside the first vertex
    ((3.5, 0.0), 4),    # beyond the last vertex
    ((2.8, 0.0), 3),    # just inside the last vertex
])
def test_locate_insertion_index(point, expected):
    coords = [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0), (3.0, 0.0)]
    assert locate_insertion_index(point, coords) == expected


def test_locate_insertion_index_single_vertex():
    assert locate_insertion_index((1.0, 1.0), [(0.0, 0.0)]) == 1


def test_crossing_inserted_into_both_roads_with_shared_id():
    road_set = RoadSet.from_coordinates([[DIAGONAL], [ANTI_DIAGONAL]])

    assert _assemble(road_set) == 1

    seg_a = road_set.roads[0].segments[0].vertex_ids
    seg_b = road_set.roads[1].segments[0].vertex_ids
    assert seg_a == [0, 4, 1]
    assert seg_b == [2, 4, 3]
    assert road_set.coords(4) == pytest.approx((1.0, 1.0))


def test_t_junction_only_inserts_into_crossed_road():
    road_set = RoadSet.from_coordinates([
        [[(0.0, 0.0), (2.0, 0.0)]],
        [[(1.0, 0.0), (1.0, 2.0)]],
    ])

    assert _assemble(road_set) == 1
    assert road_set.segment_coords(0, 0) == [(0.0, 0.0), (1.0, 0.0), (2.0, 0.0)]
    assert road_set.roads[1].segments[0].vertex_ids == [2, 3]


def test_existing_shared_vertex_is_left_alone():
    road_set = RoadSet.from_coordinates([
        [[(0.0, 0.0), (1.0, 1.0), (2.0, 2.0)]],
        [[(0.0, 2.0), (1.0, 1.0), (2.0, 0.0)]],
    ])
    assert _assemble(road_set) == 0
    assert road_set.n_vertices == 6


def test_insertion_is_idempotent_and_preserves_order():
    road_set = RoadSet.from_coordinates([
        [[(-2.0, 0.0), (0.0, 0.0), (2.0, 0.0)], [(3.0, -1.0), (3.0, 1.0)]],
        [[(-1.0, -1.0), (-1.0, 1.0)], [(1.0, -1.0), (1.0, 1.0)]],
        [[(-3.0, 0.5), (4.0, 0.5)]],
    ])
    original = [[list(seg.vertex_ids) for seg in road.segments] for road in road_set.roads]

    first = _assemble(road_set)
    assert first == 5
    assert _assemble(road_set) == 0

    for road, segs in zip(road_set.roads, original):
        for seg, ids in zip(road.segments, segs):
            assert [vid for vid in seg.vertex_ids if vid in ids] == ids


def test_every_crossing_shared_by_coordinate():
    road_set = RoadSet.from_coordinates([
        [[(-2.0, 0.0), (2.0, 0.0)]],
        [[(-1.0, -1.0), (-1.0, 1.0)]],
        [[(1.0, -1.0), (1.0, 1.0)]],
    ])
    _assemble(road_set)

    horizontal = road_set.segment_coords(0, 0)
    for k in (1, 2):
        point = crossing_point(horizontal, road_set.segment_coords(k, 0))
        assert point is not None
        assert has_vertex(horizontal, point)
        assert has_vertex(road_set.segment_coords(k, 0), point)

"""
Tests for boundary tracing from assembled roads
"""

import sys
from pathlib import Path

import pytest
from shapely.geometry import Point

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from highway_cycle.analysis import RoadSet, boundary_coordinates, get_highway_cycle, trace_boundary
from highway_cycle.analysis.boundary import road_lines


def test_triangle_boundary():
    road_set = RoadSet.from_coordinates([
        [[(-1.0, 0.0), (5.0, 0.0)]],
        [[(0.0, -1.0), (2.5, 5.0)]],
        [[(4.0, -1.0), (1.5, 5.0)]],
    ])
    get_highway_cycle(road_set)
    boundary = trace_boundary(road_set)

    assert boundary is not None
    assert boundary.area == pytest.approx(0.5 * (3.5 - 0.5 + 1.0 / 6.0) * 3.8)
    assert boundary.contains(Point(2.0, 1.0))
    assert not boundary.interiors


def test_connected_open_path_encloses_area():
    road_set = RoadSet.from_coordinates([
        [[(0.0, 0.0), (2.0, 0.0)]],
        [[(1.0, -1.0), (1.0, 3.0)]],
        [[(0.0, 2.0), (2.0, 2.0)]],
    ])
    get_highway_cycle(road_set)
    boundary = trace_boundary(road_set)

    assert boundary.area == pytest.approx(2.0)
    assert boundary.contains(Point(0.5, 1.0))


def test_parallel_roads_enclose_nothing():
    road_set = RoadSet.from_coordinates([
        [[(0.0, 0.0), (10.0, 0.0)]],
        [[(0.0, 1.0), (10.0, 1.0)]],
    ])
    assert trace_boundary(road_set) is None


def test_boundary_coordinates_are_closed():
    road_set = RoadSet.from_coordinates([
        [[(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0), (0.0, 0.0)]],
    ])
    coords = boundary_coordinates(trace_boundary(road_set))

    assert len(coords) == 5
    assert coords[0] == coords[-1]
    assert boundary_coordinates(None) == []


def test_degenerate_segments_are_not_lines():
    road_set = RoadSet.from_coordinates([
        [[(0.0, 0.0), (0.0, 0.0)]],
        [[(0.0, 0.0), (1.0, 1.0)]],
    ])
    assert len(road_lines(road_set)) == 1

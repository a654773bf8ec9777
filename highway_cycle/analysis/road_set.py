"""
Road set data model

Roads hold ordered segments, segments hold vertex ids, and a single arena maps
every vertex id to its planar coordinate. Insertion is a splice into a list of
ids; coordinates are never copied between roads.
"""

import math
from numbers import Real
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple
from dataclasses import dataclass, field

import numpy as np

XY = Tuple[float, float]


@dataclass
class Vertex:
    """An identified planar point"""
    id: int
    x: float
    y: float

    @property
    def xy(self) -> XY:
        return (self.x, self.y)


class VertexAllocator:
    """
    Monotonic vertex id allocator scoped to one assembly call

    Ids handed out by allocate() are never repeated and never decrease.
    """

    def __init__(self, start: int = 0):
        self._next = start

    @classmethod
    def for_road_set(cls, road_set: "RoadSet") -> "VertexAllocator":
        return cls(road_set.max_vertex_id + 1)

    @property
    def next_id(self) -> int:
        return self._next

    def allocate(self) -> int:
        vid = self._next
        self._next += 1
        return vid


@dataclass
class Segment:
    """One contiguous polyline of a road, as ordered vertex ids"""
    vertex_ids: List[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.vertex_ids)

    def position(self, vid: int) -> int:
        """Last position of vid in this segment, -1 if absent"""
        for i in range(len(self.vertex_ids) - 1, -1, -1):
            if self.vertex_ids[i] == vid:
                return i
        return -1


@dataclass
class Road:
    """A named, possibly disconnected collection of segments"""
    name: str
    segments: List[Segment] = field(default_factory=list)

    @property
    def vertex_ids(self) -> List[int]:
        return [vid for seg in self.segments for vid in seg.vertex_ids]


def _is_sequence(obj) -> bool:
    if isinstance(obj, (str, bytes)):
        return False
    return isinstance(obj, (Sequence, np.ndarray))


def _as_xy(point, road_index: int, seg_index: int) -> XY:
    if not _is_sequence(point):
        raise TypeError(
            f"Coordinate in road {road_index}, segment {seg_index} must be an (x, y) pair, got {point!r}"
        )
    if len(point) < 2:
        raise ValueError(f"Coordinate in road {road_index}, segment {seg_index} has fewer than 2 values")
    x, y = point[0], point[1]
    if isinstance(x, bool) or isinstance(y, bool) or not isinstance(x, Real) or not isinstance(y, Real):
        raise ValueError(f"Coordinate in road {road_index}, segment {seg_index} is not numeric: {point!r}")
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"Coordinate in road {road_index}, segment {seg_index} is not finite: {point!r}")
    return (float(x), float(y))


class RoadSet:
    """
    Ordered collection of roads sharing one vertex arena

    Road indices are the nodes of the connectivity graph.
    """

    def __init__(self, roads: Optional[List[Road]] = None, vertices: Optional[Dict[int, XY]] = None):
        self.roads: List[Road] = roads if roads is not None else []
        self.vertices: Dict[int, XY] = vertices if vertices is not None else {}

    @classmethod
    def from_coordinates(
        cls,
        roads: Sequence[Sequence[Sequence[Sequence[float]]]],
        names: Optional[Sequence[str]] = None
    ) -> "RoadSet":
        """
        Build a road set from nested road -> segment -> coordinate sequences

        Vertex ids are allocated sequentially from 0 in reading order.

        Args:
            roads: One entry per road, each a sequence of segments, each a
                sequence of (x, y) pairs
            names: Optional road names, same length as roads

        Returns:
            RoadSet
        """
        validate_road_input(roads)
        if names is not None and len(names) != len(roads):
            raise ValueError(f"Got {len(names)} names for {len(roads)} roads")

        road_set = cls()
        allocator = VertexAllocator(0)
        for i, segments in enumerate(roads):
            name = str(names[i]) if names is not None else f"road_{i}"
            road = Road(name=name)
            for j, seg in enumerate(segments):
                ids = []
                for point in seg:
                    ids.append(road_set.add_vertex(_as_xy(point, i, j), allocator))
                road.segments.append(Segment(ids))
            road_set.roads.append(road)
        return road_set

    def __len__(self) -> int:
        return len(self.roads)

    @property
    def names(self) -> List[str]:
        return [road.name for road in self.roads]

    @property
    def max_vertex_id(self) -> int:
        return max(self.vertices) if self.vertices else -1

    @property
    def n_vertices(self) -> int:
        """Number of vertex occurrences across all segments"""
        return sum(len(seg) for road in self.roads for seg in road.segments)

    def coords(self, vid: int) -> XY:
        return self.vertices[vid]

    def vertex(self, vid: int) -> Vertex:
        x, y = self.vertices[vid]
        return Vertex(vid, x, y)

    def add_vertex(self, xy: XY, allocator: VertexAllocator) -> int:
        """Register a new vertex in the arena and return its id"""
        vid = allocator.allocate()
        if vid in self.vertices:
            raise ValueError(f"Vertex id {vid} is already allocated")
        self.vertices[vid] = (float(xy[0]), float(xy[1]))
        return vid

    def insert_vertex(self, road_index: int, seg_index: int, position: int, vid: int) -> None:
        """Splice an existing arena vertex into a segment at position"""
        if vid not in self.vertices:
            raise KeyError(f"Vertex id {vid} is not in the arena")
        self.roads[road_index].segments[seg_index].vertex_ids.insert(position, vid)

    def segment_coords(self, road_index: int, seg_index: int) -> List[XY]:
        seg = self.roads[road_index].segments[seg_index]
        return [self.vertices[vid] for vid in seg.vertex_ids]

    def road_vertices(self, road_index: int) -> List[Tuple[int, XY]]:
        """All (id, xy) pairs of a road, flattened across segments in order"""
        return [(vid, self.vertices[vid]) for vid in self.roads[road_index].vertex_ids]

    def iter_segments(self) -> Iterable[Tuple[int, int, Segment]]:
        for i, road in enumerate(self.roads):
            for j, seg in enumerate(road.segments):
                yield i, j, seg

    def transform(self, fn: Callable[[float, float], XY]) -> None:
        """Map every arena coordinate through fn in place"""
        for vid, (x, y) in list(self.vertices.items()):
            nx, ny = fn(x, y)
            self.vertices[vid] = (float(nx), float(ny))

    def bounds(self) -> Tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) over vertices used by any segment"""
        used = {vid for road in self.roads for vid in road.vertex_ids}
        xs = [self.vertices[vid][0] for vid in used]
        ys = [self.vertices[vid][1] for vid in used]
        return (min(xs), min(ys), max(xs), max(ys))

    def to_coordinates(self) -> List[List[List[List[float]]]]:
        return [
            [[list(self.vertices[vid]) for vid in seg.vertex_ids] for seg in road.segments]
            for road in self.roads
        ]


def validate_road_input(roads) -> None:
    """
    Fail fast on a missing, empty or malformed road collection

    Raises:
        TypeError: roads or its members are not sequences
        ValueError: roads, a road or a segment is empty
    """
    if roads is None:
        raise ValueError("highways must be given")
    if not _is_sequence(roads):
        raise TypeError(f"highways must be a list of roads, got {type(roads).__name__}")
    if len(roads) == 0:
        raise ValueError("highways must contain at least one road")

    for i, road in enumerate(roads):
        if not _is_sequence(road):
            raise TypeError(f"Road {i} must be a list of segments, got {type(road).__name__}")
        if len(road) == 0:
            raise ValueError(f"Road {i} has no segments")
        for j, seg in enumerate(road):
            if not _is_sequence(seg):
                raise TypeError(f"Road {i}, segment {j} must be a list of coordinates, got {type(seg).__name__}")
            if len(seg) == 0:
                raise ValueError(f"Road {i}, segment {j} has no coordinates")


def validate_road_set(road_set: RoadSet) -> None:
    """Same checks as validate_road_input, for an already-built RoadSet"""
    if road_set is None:
        raise ValueError("highways must be given")
    if not isinstance(road_set, RoadSet):
        raise TypeError(f"highways must be a RoadSet, got {type(road_set).__name__}")
    if len(road_set) == 0:
        raise ValueError("highways must contain at least one road")
    for i, road in enumerate(road_set.roads):
        if not road.segments:
            raise ValueError(f"Road {i} ({road.name}) has no segments")
        for j, seg in enumerate(road.segments):
            if not seg.vertex_ids:
                raise ValueError(f"Road {i} ({road.name}), segment {j} has no vertices")
            missing = [vid for vid in seg.vertex_ids if vid not in road_set.vertices]
            if missing:
                raise ValueError(f"Road {i} ({road.name}), segment {j} references unknown vertices {missing}")

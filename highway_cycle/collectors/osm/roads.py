"""
Road-specific logic

Groups highway ways by name into roads and builds the RoadSet
"""

from collections import OrderedDict
from typing import Dict, List, Optional, Sequence, Tuple

from loguru import logger

from .models import OSMWay
from ...analysis.geometry_utils import GeometryUtils
from ...analysis.road_set import Road, RoadSet, Segment, VertexAllocator
from ...config import PipelineConfig, get_config

Chain = List[Tuple[Optional[int], Tuple[float, float]]]


class RoadProcessor:
    """Turns OSM highway ways into named, segmented roads"""

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or get_config()
        self.precision = self.config.geometry.coordinate_precision

    def select_highways(self, ways: List[OSMWay], names: Optional[Sequence[str]] = None) -> List[OSMWay]:
        """
        Highway ways to assemble

        With names, keep ways whose name tag is listed; otherwise keep ways
        whose highway type is configured.
        """
        selected = []
        for way in ways:
            if way.highway is None or len(way.get_coordinates()) < 2:
                continue
            if names is not None:
                if way.tags.get(self.config.name_tag) in names:
                    selected.append(way)
            elif way.highway in self.config.highway_types:
                selected.append(way)
        return selected

    def group_by_name(
        self,
        ways: List[OSMWay],
        names: Optional[Sequence[str]] = None
    ) -> "OrderedDict[str, List[OSMWay]]":
        """Ways grouped by name, in names order or first-seen order"""
        groups: "OrderedDict[str, List[OSMWay]]" = OrderedDict()
        if names is not None:
            for name in names:
                groups[name] = []
        for way in ways:
            name = way.tags.get(self.config.name_tag, self.config.unnamed_road)
            groups.setdefault(name, []).append(way)

        for name in [n for n, g in groups.items() if not g]:
            logger.warning(f"No highway ways found named '{name}'")
            del groups[name]
        return groups

    def join_ways(self, ways: List[OSMWay]) -> List[Chain]:
        """
        Chain ways that share endpoints into longer segments

        Ways are reversed where needed; the duplicated junction point is dropped.
        """
        chains: List[Chain] = [
            list(zip(way.get_node_ids(), [(float(c[0]), float(c[1])) for c in way.get_coordinates()]))
            for way in ways
        ]

        def key(entry) -> Tuple[float, float]:
            return GeometryUtils.coordinate_key(entry[1], self.precision)

        joined = []
        while chains:
            current = chains.pop(0)
            merged = True
            while merged:
                merged = False
                for k, other in enumerate(chains):
                    if key(current[0]) == key(current[-1]):
                        break  # closed loop
                    if key(current[-1]) == key(other[0]):
                        current = current + other[1:]
                    elif key(current[-1]) == key(other[-1]):
                        current = current + list(reversed(other))[1:]
                    elif key(current[0]) == key(other[-1]):
                        current = other + current[1:]
                    elif key(current[0]) == key(other[0]):
                        current = list(reversed(other)) + current[1:]
                    else:
                        continue
                    chains.pop(k)
                    merged = True
                    break
            joined.append(current)
        return joined

    def build_road_set(self, ways: List[OSMWay], names: Optional[Sequence[str]] = None) -> RoadSet:
        """
        Build a RoadSet from OSM ways

        Args:
            ways: Parsed OSM ways
            names: Optional highway names to assemble, in cycle order

        Returns:
            RoadSet with one road per name; OSM node ids are kept as vertex ids
        """
        groups = self.group_by_name(self.select_highways(ways, names), names)
        if not groups:
            raise ValueError("No highways found to assemble")

        chains_by_road = OrderedDict((name, self.join_ways(group)) for name, group in groups.items())
        known_ids = [
            vid for chains in chains_by_road.values()
            for chain in chains for vid, _ in chain if vid is not None
        ]
        allocator = VertexAllocator(max(known_ids) + 1 if known_ids else 0)

        road_set = RoadSet()
        for name, chains in chains_by_road.items():
            road = Road(name=name)
            ids_by_key: Dict[Tuple[float, float], int] = {}
            for chain in chains:
                seg = Segment()
                for vid, xy in chain:
                    k = GeometryUtils.coordinate_key(xy, self.precision)
                    if vid is None:
                        vid = ids_by_key.get(k)
                    if vid is None:
                        vid = road_set.add_vertex(xy, allocator)
                    elif vid not in road_set.vertices:
                        road_set.vertices[vid] = xy
                    ids_by_key.setdefault(k, vid)
                    seg.vertex_ids.append(vid)
                road.segments.append(seg)
            road_set.roads.append(road)
            logger.debug(f"Road '{name}': {len(road.segments)} segments from {len(groups[name])} ways")

        logger.info(f"Built {len(road_set)} roads from {sum(len(g) for g in groups.values())} highway ways")
        return road_set

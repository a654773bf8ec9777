"""
OSM highway data models

Nodes and ways as read from an Overpass response; only what the road
assembly needs is kept.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class OSMNode:
    """Overpass node with its WGS84 position"""
    id: int
    lat: float
    lon: float
    tags: Dict[str, str] = field(default_factory=dict)

    @property
    def lon_lat(self) -> List[float]:
        return [self.lon, self.lat]


@dataclass
class OSMWay:
    """Overpass way; geometry is set for 'out geom' responses"""
    id: int
    nodes: List[OSMNode]
    tags: Dict[str, str]
    geometry: Optional[List[List[float]]] = None  # [lon, lat] pairs
    node_ids: List[int] = field(default_factory=list)  # as listed, resolved or not

    @property
    def highway(self) -> Optional[str]:
        return self.tags.get("highway")

    def get_coordinates(self) -> List[List[float]]:
        """[lon, lat] per point, inline geometry first, resolved nodes otherwise"""
        if self.geometry:
            return self.geometry
        return [node.lon_lat for node in self.nodes]

    def get_node_ids(self) -> List[Optional[int]]:
        """Node id for each coordinate, None where unknown"""
        n = len(self.get_coordinates())
        if len(self.node_ids) == n:
            return list(self.node_ids)
        if not self.geometry and len(self.nodes) == n:
            return [node.id for node in self.nodes]
        return [None] * n

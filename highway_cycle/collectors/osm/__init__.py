"""
OpenStreetMap highway input module

- Models: Data structures (OSMNode, OSMWay)
- Parser: Overpass response parsing
- Roads: Grouping highway ways into named roads
"""

from .models import OSMNode, OSMWay
from .parser import OSMResponseParser
from .roads import RoadProcessor

__all__ = [
    "OSMNode",
    "OSMWay",
    "OSMResponseParser",
    "RoadProcessor",
]

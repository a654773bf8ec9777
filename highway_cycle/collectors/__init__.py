"""
Data collectors for the highway cycle assembler

- OSM: highway ways from Overpass JSON, grouped into roads
"""

from .osm import OSMResponseParser, RoadProcessor

__all__ = [
    "OSMResponseParser",
    "RoadProcessor",
]

"""
Overpass JSON reader

Turns the 'elements' of an Overpass response into OSMNode and OSMWay objects.
Both 'out body' (ways reference node ids) and 'out geom' (ways carry inline
lat/lon) are accepted.
"""

from typing import Any, Dict, List, Optional, Tuple

from loguru import logger

from .models import OSMNode, OSMWay


class OSMResponseParser:
    """Reads nodes and ways from Overpass responses"""

    @staticmethod
    def _inline_geometry(element: Dict[str, Any]) -> Optional[List[List[float]]]:
        """[lon, lat] pairs of an 'out geom' way, None for 'out body'"""
        if "geometry" not in element:
            return None
        points = []
        for point in element["geometry"]:
            if isinstance(point, dict):
                points.append([point.get("lon"), point.get("lat")])
            elif isinstance(point, list) and len(point) >= 2:
                points.append(point)
        return points

    @staticmethod
    def parse_elements(data: Dict[str, Any]) -> Tuple[Dict[int, OSMNode], List[OSMWay]]:
        """
        Read nodes and ways from an Overpass response

        Nodes are read before ways, so element order in the response does not
        matter.

        Args:
            data: Decoded Overpass JSON

        Returns:
            (nodes by id, ways in response order)

        Raises:
            TypeError: data is not a decoded JSON object
        """
        if not isinstance(data, dict):
            raise TypeError(f"Overpass response must be a dict, got {type(data).__name__}")

        elements = data.get("elements", [])
        nodes: Dict[int, OSMNode] = {
            el["id"]: OSMNode(id=el["id"], lat=el["lat"], lon=el["lon"], tags=el.get("tags", {}))
            for el in elements if el.get("type") == "node"
        }

        ways: List[OSMWay] = []
        for el in elements:
            if el.get("type") != "way":
                continue

            geometry = OSMResponseParser._inline_geometry(el)
            node_ids = list(el.get("nodes", []))
            resolved = [nodes[nid] for nid in node_ids if nid in nodes]
            if geometry is None and len(resolved) < len(node_ids):
                logger.debug(f"Way {el['id']}: {len(node_ids) - len(resolved)} unresolved nodes")

            ways.append(OSMWay(
                id=el["id"],
                nodes=resolved,
                tags=el.get("tags", {}),
                geometry=geometry,
                node_ids=node_ids
            ))

        logger.debug(f"Parsed {len(nodes)} nodes and {len(ways)} ways")
        return nodes, ways

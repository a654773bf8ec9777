"""
Main Pipeline Orchestrator for highway cycle assembly

  1. Input: RoadSet, nested coordinates, or an Overpass JSON response
  2. Group highway ways by name into roads (OSM input only)
  3. Project to local metres (OSM input only)
  4. Insert intersection nodes, build connectivity, extend the cycle
  5. Trace the enclosing boundary polygon
  6. Assemble the report
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger
from shapely.geometry import Polygon

from .analysis import (
    ExtensionResult,
    GeometryUtils,
    RoadSet,
    boundary_coordinates,
    get_highway_cycle,
    trace_boundary,
)
from .collectors import OSMResponseParser, RoadProcessor
from .config import PipelineConfig, get_config, validate_config
from .models import GeoJSONMultiLineString, GeoJSONPolygon, HighwayCycleReport, HighwayFeature


@dataclass
class HighwayCycleOutcome:
    """Assembled road set together with its cycle and boundary"""
    road_set: RoadSet
    result: ExtensionResult
    boundary: Optional[Polygon] = None

    @property
    def complete(self) -> bool:
        return self.result.complete

    @property
    def boundary_coordinates(self) -> List[List[float]]:
        return boundary_coordinates(self.boundary)


class HighwayCyclePipeline:
    """
    Assemble named highways into a closed boundary

    Usage:
        pipeline = HighwayCyclePipeline()
        outcome = pipeline.run_from_osm(overpass_json, names=["High Street", "Mill Lane"])
        report = pipeline.build_report(outcome)
    """

    def __init__(self, config: Optional[PipelineConfig] = None):
        self.config = config or get_config()
        validate_config(self.config)
        self.parser = OSMResponseParser()
        self.road_processor = RoadProcessor(self.config)

    def run(self, road_set: RoadSet) -> HighwayCycleOutcome:
        """
        Assemble a road set in place and trace its boundary

        Args:
            road_set: Roads in planar coordinates

        Returns:
            HighwayCycleOutcome; check `complete` to know whether the cycle
            spans every road
        """
        result = get_highway_cycle(road_set, self.config)
        boundary = trace_boundary(road_set)
        return HighwayCycleOutcome(road_set=road_set, result=result, boundary=boundary)

    def run_from_coordinates(
        self,
        roads: Sequence[Sequence[Sequence[Sequence[float]]]],
        names: Optional[Sequence[str]] = None
    ) -> HighwayCycleOutcome:
        """Build a RoadSet from nested coordinates and run"""
        return self.run(RoadSet.from_coordinates(roads, names))

    def run_from_osm(
        self,
        data: Dict[str, Any],
        names: Optional[Sequence[str]] = None
    ) -> HighwayCycleOutcome:
        """
        Assemble highways from an Overpass JSON response

        Coordinates are projected to local metres around the bbox centre for
        the assembly when configured, and projected back afterwards.

        Args:
            data: Overpass response ('out body' or 'out geom')
            names: Optional highway names; all configured highway types if None
        """
        _, ways = self.parser.parse_elements(data)
        road_set = self.road_processor.build_road_set(ways, names)

        if not self.config.project_to_local:
            return self.run(road_set)

        min_x, min_y, max_x, max_y = road_set.bounds()
        ref_lon = (min_x + max_x) / 2
        ref_lat = (min_y + max_y) / 2
        logger.debug(f"Projecting to local metres around ({ref_lat:.6f}, {ref_lon:.6f})")

        road_set.transform(lambda x, y: GeometryUtils.degrees_to_local_point(x, y, ref_lon, ref_lat))
        result = get_highway_cycle(road_set, self.config)
        road_set.transform(lambda x, y: GeometryUtils.local_to_degrees_point(x, y, ref_lon, ref_lat))
        return HighwayCycleOutcome(road_set=road_set, result=result, boundary=trace_boundary(road_set))

    def build_report(self, outcome: HighwayCycleOutcome) -> HighwayCycleReport:
        """Serialisable report of an outcome"""
        road_set = outcome.road_set
        result = outcome.result
        names = road_set.names

        roads = []
        for i, road in enumerate(road_set.roads):
            roads.append(HighwayFeature(
                name=road.name,
                index=i,
                geometry=GeoJSONMultiLineString(
                    coordinates=[[list(road_set.coords(vid)) for vid in seg.vertex_ids] for seg in road.segments]
                ),
                vertex_ids=[list(seg.vertex_ids) for seg in road.segments],
                n_vertices=sum(len(seg) for seg in road.segments)
            ))

        boundary = None
        boundary_area = None
        if outcome.boundary is not None:
            boundary = GeoJSONPolygon(coordinates=[outcome.boundary_coordinates])
            boundary_area = float(outcome.boundary.area)

        return HighwayCycleReport(
            road_names=names,
            n_roads=len(road_set),
            roads=roads,
            cycle=[int(i) for i in result.cycle],
            cycle_names=[names[i] for i in result.cycle],
            cycle_length=result.cycle_length,
            complete=result.complete,
            extension_steps=result.steps,
            intersection_nodes_added=result.intersection_nodes_added,
            connecting_nodes_added=result.connecting_nodes_added,
            warning=result.warning,
            boundary=boundary,
            boundary_area=boundary_area
        )

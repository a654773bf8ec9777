"""
Pydantic models for the highway cycle report
Serialisable view of an assembled road set and its boundary
"""

from datetime import datetime, timezone
from typing import List, Optional, Literal
from pydantic import BaseModel, Field


# ============================================================
# GeoJSON Types
# ============================================================

class GeoJSONPolygon(BaseModel):
    type: Literal["Polygon"] = "Polygon"
    coordinates: List[List[List[float]]]  # [[[x, y], ...]]


class GeoJSONMultiLineString(BaseModel):
    type: Literal["MultiLineString"] = "MultiLineString"
    coordinates: List[List[List[float]]]  # one [[x, y], ...] per segment


# ============================================================
# Road Models
# ============================================================

class HighwayFeature(BaseModel):
    name: str
    index: int
    geometry: GeoJSONMultiLineString
    vertex_ids: List[List[int]]  # Parallel to geometry.coordinates
    n_vertices: int


# ============================================================
# Main Report Model
# ============================================================

class HighwayCycleReport(BaseModel):
    """Outcome of assembling highways into a closed cycle"""

    created_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    # Roads
    road_names: List[str]
    n_roads: int
    roads: List[HighwayFeature] = Field(default_factory=list)

    # Cycle
    cycle: List[int] = Field(default_factory=list)
    cycle_names: List[str] = Field(default_factory=list)
    cycle_length: int = 0
    complete: bool = False

    # Bookkeeping
    extension_steps: int = 0
    intersection_nodes_added: int = 0
    connecting_nodes_added: int = 0
    warning: Optional[str] = None

    # Boundary traced from the final road set
    boundary: Optional[GeoJSONPolygon] = None
    boundary_area: Optional[float] = None

"""
Highway cycle assembler

Connects independently drawn road centerlines into one closed cycle and
traces the boundary polygon it encloses.
"""

from .config import PipelineConfig, get_config
from .analysis import RoadSet, get_highway_cycle, trace_boundary
from .pipeline import HighwayCyclePipeline, HighwayCycleOutcome

__all__ = [
    "PipelineConfig",
    "get_config",
    "RoadSet",
    "get_highway_cycle",
    "trace_boundary",
    "HighwayCyclePipeline",
    "HighwayCycleOutcome",
]

"""
Configuration settings for the highway cycle assembler
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class GeometryConfig:
    """Geometric matching settings"""
    # Decimal places used when deciding whether two coordinates are the same vertex
    coordinate_precision: int = 9


@dataclass
class CycleConfig:
    """Cycle extension settings"""
    # Upper bound on committed extension edges (None = number of road pairs)
    max_extension_steps: Optional[int] = None

    # Re-run intersection node insertion once synthetic connections are grafted
    renode_after_extension: bool = True


@dataclass
class PipelineConfig:
    """Pipeline configuration"""
    geometry: GeometryConfig = field(default_factory=GeometryConfig)
    cycle: CycleConfig = field(default_factory=CycleConfig)

    # Project lon/lat input to local metres before assembling the cycle
    project_to_local: bool = True

    # OSM highway values kept when no explicit road names are requested
    highway_types: List[str] = field(default_factory=lambda: [
        "motorway",
        "trunk",
        "primary",
        "secondary",
        "tertiary",
        "unclassified",
        "residential",
        "living_street",
    ])

    # OSM tag used to group ways into named roads
    name_tag: str = "name"
    unnamed_road: str = "Unnamed Road"


# Global config instance
config = PipelineConfig()


def get_config() -> PipelineConfig:
    """Get global configuration"""
    return config


def validate_config(config: PipelineConfig) -> None:
    """
    Validate that all required configuration values are set.
    Raises ValueError if any required value is missing or invalid.
    """
    errors = []

    if not hasattr(config, 'geometry') or config.geometry is None:
        errors.append("geometry configuration is required but not set")
    elif config.geometry.coordinate_precision is None:
        errors.append("geometry.coordinate_precision is required but not set")
    elif config.geometry.coordinate_precision < 0 or config.geometry.coordinate_precision > 15:
        errors.append(
            f"geometry.coordinate_precision must be between 0 and 15, got {config.geometry.coordinate_precision}"
        )

    if not hasattr(config, 'cycle') or config.cycle is None:
        errors.append("cycle configuration is required but not set")
    elif config.cycle.max_extension_steps is not None and config.cycle.max_extension_steps < 0:
        errors.append(f"cycle.max_extension_steps must not be negative, got {config.cycle.max_extension_steps}")

    if not getattr(config, 'name_tag', None):
        errors.append("name_tag is required in config but not set")

    if errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        raise ValueError(error_msg)

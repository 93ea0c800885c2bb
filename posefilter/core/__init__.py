"""
Core module - Configuration, constants, and exceptions for posefilter
"""

from .config import (
    PipelineConfig,
    KalmanConfig,
    LowPassConfig,
    GeometryConfig,
)
from .constants import (
    VNECT_JOINT_NAMES,
    VNECT_DERIVATIONS,
    NUM_VNECT_JOINTS,
    NUM_VNECT_MEASURED_JOINTS,
)
from .exceptions import (
    PoseFilterException,
    InvalidParameter,
    TopologyError,
    ShapeMismatch,
    InvalidMeasurement,
    DegenerateGeometry,
    ConfigError,
    DataLoadError,
    handle_posefilter_exception,
)

__all__ = [
    "PipelineConfig",
    "KalmanConfig",
    "LowPassConfig",
    "GeometryConfig",
    "VNECT_JOINT_NAMES",
    "VNECT_DERIVATIONS",
    "NUM_VNECT_JOINTS",
    "NUM_VNECT_MEASURED_JOINTS",
    "PoseFilterException",
    "InvalidParameter",
    "TopologyError",
    "ShapeMismatch",
    "InvalidMeasurement",
    "DegenerateGeometry",
    "ConfigError",
    "DataLoadError",
    "handle_posefilter_exception",
]

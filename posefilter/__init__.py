"""
posefilter - Temporal stabilization of 3D skeletons from pose estimators

A Python package for:
- Deriving implied joints (hip, neck, head, spine) from estimator output
- Per-axis Kalman filtering of every joint
- Optional cascaded low-pass smoothing
- Offline replay of recorded sequences (NPY / CSV) with plots
"""

__version__ = "0.1.0"
__author__ = "posefilter developers"

# Core imports (numpy / pyyaml only)
from .core.config import PipelineConfig, KalmanConfig, LowPassConfig, GeometryConfig
from .core.constants import (
    VNECT_JOINT_NAMES,
    VNECT_DERIVATIONS,
    NUM_VNECT_JOINTS,
    NUM_VNECT_MEASURED_JOINTS,
)
from .core.exceptions import (
    PoseFilterException,
    InvalidParameter,
    TopologyError,
    ShapeMismatch,
    InvalidMeasurement,
    DegenerateGeometry,
    ConfigError,
    DataLoadError,
)
from .skeleton import JointSet, DerivedJointComputer
from .filtering import (
    AxisKalmanFilter,
    LowPassCascade,
    PoseFilterPipeline,
    JointState,
    initialize,
)


# Lazy imports for modules with heavier dependencies
def __getattr__(name):
    """Lazy loading for IO and plotting helpers"""
    if name == "SequenceLoader":
        from .io.sequence_loader import SequenceLoader
        return SequenceLoader
    elif name == "CSVWriter":
        from .io.csv_handler import CSVWriter
        return CSVWriter
    elif name == "CSVReader":
        from .io.csv_handler import CSVReader
        return CSVReader
    elif name == "plot_joint_trajectory":
        from .visualization.plots import plot_joint_trajectory
        return plot_joint_trajectory
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    # Version
    "__version__",
    # Config
    "PipelineConfig",
    "KalmanConfig",
    "LowPassConfig",
    "GeometryConfig",
    # Constants
    "VNECT_JOINT_NAMES",
    "VNECT_DERIVATIONS",
    "NUM_VNECT_JOINTS",
    "NUM_VNECT_MEASURED_JOINTS",
    # Exceptions
    "PoseFilterException",
    "InvalidParameter",
    "TopologyError",
    "ShapeMismatch",
    "InvalidMeasurement",
    "DegenerateGeometry",
    "ConfigError",
    "DataLoadError",
    # Skeleton
    "JointSet",
    "DerivedJointComputer",
    # Filtering
    "AxisKalmanFilter",
    "LowPassCascade",
    "PoseFilterPipeline",
    "JointState",
    "initialize",
    # IO
    "SequenceLoader",
    "CSVWriter",
    "CSVReader",
    # Visualization
    "plot_joint_trajectory",
]

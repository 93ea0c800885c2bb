"""
Custom exceptions for the pose filtering pipeline

Provides specific exception types for:
- Configuration and topology errors
- Per-frame measurement errors
- Degenerate skeleton geometry
- Recorded sequence loading errors
"""


class PoseFilterException(Exception):
    """
    Base exception class for all posefilter exceptions

    All custom exceptions should inherit from this class for easy
    exception catching and handling at the application level.
    """
    pass


class InvalidParameter(PoseFilterException, ValueError):
    """
    Raised when a filter parameter is out of its valid range

    Reasons:
    - Kalman process noise Q <= 0
    - Kalman measurement noise R <= 0
    - Low-pass alpha outside [0, 1]
    - Low-pass depth < 1 while the cascade is enabled

    The pipeline is never constructed when this is raised.

    Example:
        >>> from posefilter.core.config import KalmanConfig
        >>> try:
        ...     KalmanConfig(q=0.0)
        ... except InvalidParameter as e:
        ...     print(f"Bad filter setup: {e}")
    """
    pass


class TopologyError(InvalidParameter):
    """
    Raised when a skeleton topology is inconsistent

    Reasons:
    - Duplicate joint names
    - Derivation rule references an undefined joint
    - Derivation rule has the wrong number of source joints
    - Derived joint reads another derived joint computed later
    """
    pass


class ShapeMismatch(PoseFilterException, ValueError):
    """
    Raised when a frame's measurement vector does not match the topology

    The frame is rejected as a whole; persistent filter state is left
    unmodified so the caller can resupply data on the next frame.
    """
    pass


class InvalidMeasurement(PoseFilterException, ValueError):
    """
    Raised when a frame contains NaN or infinite coordinates

    Same recovery policy as ShapeMismatch: the frame is rejected and no
    filter state is touched.
    """
    pass


class DegenerateGeometry(PoseFilterException):
    """
    Derived-joint computation hit a zero-length normalization vector

    Normally tolerated: the derived joint falls back to its previous raw
    value and the condition is logged as a warning. Only raised when the
    pipeline runs with strict geometry checking.
    """

    def __init__(self, joint: str, message: str = ""):
        self.joint = joint
        super().__init__(message or f"Degenerate geometry while deriving '{joint}'")


class ConfigError(PoseFilterException):
    """
    Raised when a configuration file is missing or malformed

    Example:
        >>> from posefilter.core.config import PipelineConfig
        >>> try:
        ...     config = PipelineConfig.from_yaml("nonexistent.yaml")
        ... except ConfigError as e:
        ...     print(f"Configuration error: {e}")
    """
    pass


class DataLoadError(PoseFilterException):
    """
    Raised when a recorded pose sequence fails to load

    Applicable to:
    - NPY / NPZ joint position arrays
    - CSV joint position tables
    """
    pass


def handle_posefilter_exception(e: PoseFilterException) -> str:
    """
    Format a posefilter exception for reporting

    Args:
        e: The PoseFilterException instance

    Returns:
        Formatted error message string
    """
    return f"[{type(e).__name__}] {e}"

"""
Per-frame pose filtering pipeline

Orchestrates one frame:
1. Validate the measurement vector against the topology
2. Place measured joints and derive the implied ones
3. Kalman-update every joint
4. Optionally run the low-pass cascade on every joint

Frames must be submitted in arrival order by a single caller; filter state
depends on every earlier frame.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union, Mapping, Any

import numpy as np

from .kalman import AxisKalmanFilter
from .lowpass import LowPassCascade
from ..core.config import PipelineConfig, KalmanConfig, LowPassConfig, GeometryConfig
from ..core.constants import DEFAULT_KALMAN_Q, DEFAULT_KALMAN_R
from ..core.exceptions import ShapeMismatch, InvalidMeasurement, DegenerateGeometry, ConfigError
from ..skeleton.topology import JointSet
from ..skeleton.derived import DerivedJointComputer

logger = logging.getLogger(__name__)


@dataclass
class JointState:
    """Snapshot of everything the pipeline keeps for one joint"""
    name: str
    index: int
    derived: bool
    raw: np.ndarray
    filtered: np.ndarray
    kalman_estimate: np.ndarray
    kalman_covariance: np.ndarray
    kalman_gain: np.ndarray
    low_pass_history: Optional[np.ndarray]


class PoseFilterPipeline:
    """
    Stateful single-skeleton filter

    Example:
        >>> pipeline = PoseFilterPipeline(JointSet.default(), PipelineConfig())
        >>> output = pipeline.process_frame(frame)  # frame: (24, 3)
        >>> output.shape
        (28, 3)
    """

    def __init__(self, joints: JointSet, config: Optional[PipelineConfig] = None):
        """
        Args:
            joints: Skeleton topology
            config: Filter configuration (defaults if None)
        """
        self.joints = joints
        self.config = config or PipelineConfig()

        n = joints.num_joints
        self.kalman = AxisKalmanFilter(n, q=self.config.kalman.q, r=self.config.kalman.r)
        self.low_pass: Optional[LowPassCascade] = None
        if self.config.low_pass.enabled:
            self.low_pass = LowPassCascade(n, alpha=self.config.low_pass.alpha,
                                           depth=self.config.low_pass.depth)
        self.deriver = DerivedJointComputer(joints, eps=self.config.geometry.eps,
                                            strict=self.config.geometry.strict)

        self.raw = np.zeros((n, 3), dtype=np.float64)
        self.filtered = np.zeros((n, 3), dtype=np.float64)
        self.frame_count = 0
        self.last_warnings: List[DegenerateGeometry] = []

        logger.info(
            "Pose filter pipeline ready: %d joints (%d measured), Q=%g R=%g, low-pass %s",
            n, joints.num_measured, self.kalman.q, self.kalman.r,
            f"alpha={self.low_pass.alpha} depth={self.low_pass.depth}" if self.low_pass else "off",
        )

    @classmethod
    def from_config(cls, config: PipelineConfig, joints: Optional[JointSet] = None) -> "PoseFilterPipeline":
        """Build a pipeline for ``joints`` (default VNect skeleton)"""
        return cls(joints or JointSet.default(), config)

    @property
    def low_pass_enabled(self) -> bool:
        return self.low_pass is not None

    def _validate(self, measurements) -> np.ndarray:
        try:
            frame = np.asarray(measurements, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise ShapeMismatch(f"Measurements are not a (num_measured, 3) array: {e}")
        expected = (self.joints.num_measured, 3)
        if frame.shape != expected:
            raise ShapeMismatch(f"Expected measurements of shape {expected}, got {frame.shape}")
        if not np.all(np.isfinite(frame)):
            bad = sorted({self.joints.measured_names[i]
                          for i in np.argwhere(~np.isfinite(frame))[:, 0]})
            raise InvalidMeasurement(f"Non-finite coordinates for joints: {bad}")
        return frame

    def process_frame(self, measurements: Union[np.ndarray, Sequence[Sequence[float]]]) -> np.ndarray:
        """
        Filter one frame

        Args:
            measurements: (num_measured, 3) positions, one per measured joint
                in topology order

        Returns:
            (num_joints, 3) filtered positions in topology order

        Raises:
            ShapeMismatch: Wrong number of joints or coordinates
            InvalidMeasurement: NaN or infinite coordinates
            DegenerateGeometry: Only with strict geometry checking

        Persistent state is untouched when any of these is raised.
        """
        frame = self._validate(measurements)

        raw = self.raw.copy()
        raw[self.joints.measured_indices] = frame
        previous = self.raw if self.frame_count > 0 else None
        warnings = self.deriver.compute(raw, previous)

        # Derivation complete; from here on the frame is committed
        self.raw[...] = raw
        estimate = self.kalman.update(raw)
        if self.low_pass is not None:
            estimate = self.low_pass.apply(estimate)
        self.filtered[...] = estimate
        self.frame_count += 1
        self.last_warnings = warnings

        logger.debug("Frame %d filtered (%d geometry fallbacks)", self.frame_count, len(warnings))
        return self.filtered.copy()

    def process_sequence(self, frames: np.ndarray) -> np.ndarray:
        """
        Filter a recorded sequence in order

        Args:
            frames: (T, num_measured, 3) measurements

        Returns:
            (T, num_joints, 3) filtered positions
        """
        frames = np.asarray(frames, dtype=np.float64)
        if frames.ndim != 3:
            raise ShapeMismatch(f"Expected a (T, {self.joints.num_measured}, 3) sequence, got {frames.shape}")

        output = np.empty((frames.shape[0], self.joints.num_joints, 3), dtype=np.float64)
        for t, frame in enumerate(frames):
            output[t] = self.process_frame(frame)
        return output

    def reset(self) -> None:
        """Return all persistent filter state to its initial values in place"""
        self.kalman.reset()
        if self.low_pass is not None:
            self.low_pass.reset()
        self.raw.fill(0.0)
        self.filtered.fill(0.0)
        self.frame_count = 0
        self.last_warnings = []

    def positions(self) -> Dict[str, np.ndarray]:
        """Latest filtered position per joint name"""
        return {name: self.filtered[i].copy() for i, name in enumerate(self.joints.names)}

    def joint_state(self, name: str) -> JointState:
        i = self.joints.index(name)
        kalman = self.kalman.state(i)
        return JointState(
            name=name,
            index=i,
            derived=self.joints.is_derived(name),
            raw=self.raw[i].copy(),
            filtered=self.filtered[i].copy(),
            kalman_estimate=kalman.estimate,
            kalman_covariance=kalman.covariance,
            kalman_gain=kalman.gain,
            low_pass_history=self.low_pass.history[i].copy() if self.low_pass is not None else None,
        )

    def state_snapshot(self) -> Dict[str, Any]:
        """Copies of every piece of persistent state"""
        snapshot = {
            'raw': self.raw.copy(),
            'filtered': self.filtered.copy(),
            'kalman_x': self.kalman.x.copy(),
            'kalman_p': self.kalman.p.copy(),
            'kalman_k': self.kalman.k.copy(),
            'frame_count': self.frame_count,
        }
        if self.low_pass is not None:
            snapshot['low_pass_history'] = self.low_pass.history.copy()
        return snapshot


def initialize(
    topology: Optional[JointSet] = None,
    kalman_q: float = DEFAULT_KALMAN_Q,
    kalman_r: float = DEFAULT_KALMAN_R,
    low_pass: Optional[Union[LowPassConfig, Mapping[str, Any]]] = None,
    geometry: Optional[GeometryConfig] = None,
) -> PoseFilterPipeline:
    """
    Build a pipeline from individual parameters

    Args:
        topology: Skeleton topology (default VNect skeleton)
        kalman_q: Process noise, > 0
        kalman_r: Measurement noise, > 0
        low_pass: LowPassConfig or dict with enabled / alpha / depth
        geometry: Derived-joint settings

    Returns:
        PoseFilterPipeline

    Raises:
        InvalidParameter: If any parameter is out of range
        ConfigError: If low_pass has unknown keys

    Example:
        >>> pipeline = initialize(kalman_q=0.001, kalman_r=0.0015,
        ...                       low_pass={'enabled': True, 'alpha': 0.1, 'depth': 6})
    """
    if low_pass is None:
        low_pass = LowPassConfig()
    elif not isinstance(low_pass, LowPassConfig):
        try:
            low_pass = LowPassConfig(**low_pass)
        except TypeError as e:
            raise ConfigError(f"Invalid low-pass keys: {e}")

    config = PipelineConfig(
        kalman=KalmanConfig(q=kalman_q, r=kalman_r),
        low_pass=low_pass,
        geometry=geometry or GeometryConfig(),
    )
    return PoseFilterPipeline(topology or JointSet.default(), config)

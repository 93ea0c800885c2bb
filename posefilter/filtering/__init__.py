"""
Filtering module - Temporal stabilization of joint positions

Provides:
- Per-axis Kalman filter bank
- Cascaded low-pass smoothing
- Per-frame pipeline tying derivation and filtering together
"""

from .kalman import AxisKalmanFilter, AxisKalmanState, kalman_step
from .lowpass import LowPassCascade
from .pipeline import PoseFilterPipeline, JointState, initialize

__all__ = [
    # Kalman
    "AxisKalmanFilter",
    "AxisKalmanState",
    "kalman_step",
    # Low-pass
    "LowPassCascade",
    # Pipeline
    "PoseFilterPipeline",
    "JointState",
    "initialize",
]

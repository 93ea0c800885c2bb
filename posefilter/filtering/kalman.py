"""
Per-axis Kalman filtering for joint positions

Provides:
- kalman_step: one scalar Kalman update (works elementwise on arrays)
- AxisKalmanFilter: bank of independent filters, one per (joint, axis)

Each filter has a constant-position model with unit measurement, so the
predict and update phases fold into a single step:

    K  = (P + Q) / (P + Q + R)
    P' = R (P + Q) / (R + P + Q)
    X' = X + (z - X) K
"""

from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from ..core.constants import DEFAULT_KALMAN_Q, DEFAULT_KALMAN_R
from ..core.exceptions import InvalidParameter

ArrayLike = Union[float, np.ndarray]


def kalman_step(
    x: ArrayLike,
    p: ArrayLike,
    z: ArrayLike,
    q: float,
    r: float
) -> Tuple[ArrayLike, ArrayLike, ArrayLike]:
    """
    Single Kalman update

    Args:
        x: Current estimate
        p: Current error covariance
        z: Measurement
        q: Process noise (> 0)
        r: Measurement noise (> 0)

    Returns:
        (x', p', k) new estimate, new covariance and the gain used

    Example:
        >>> x, p, k = kalman_step(0.0, 0.0, 1.0, q=1.0, r=1.0)
        >>> print(x, p, k)  # 0.5 0.5 0.5
    """
    prior = p + q
    k = prior / (prior + r)
    p_new = r * prior / (r + prior)
    x_new = x + (z - x) * k
    return x_new, p_new, k


@dataclass
class AxisKalmanState:
    """Snapshot of one joint's (x, y, z) filter state"""
    estimate: np.ndarray
    covariance: np.ndarray
    gain: np.ndarray


class AxisKalmanFilter:
    """
    Independent scalar Kalman filters for every (joint, axis) pair

    State arrays have shape (num_joints, 3). All filters start from zero,
    a cold start the estimates converge away from within a few frames.

    Example:
        >>> kf = AxisKalmanFilter(num_joints=28, q=0.001, r=0.0015)
        >>> estimate = kf.update(measurements)  # (28, 3)
    """

    def __init__(self, num_joints: int, q: float = DEFAULT_KALMAN_Q, r: float = DEFAULT_KALMAN_R):
        """
        Args:
            num_joints: Number of joints to filter
            q: Process noise, strictly positive
            r: Measurement noise, strictly positive

        Raises:
            InvalidParameter: If q or r is not finite and strictly positive
        """
        if not (np.isfinite(q) and q > 0):
            raise InvalidParameter(f"Kalman Q must be finite and > 0, got {q}")
        if not (np.isfinite(r) and r > 0):
            raise InvalidParameter(f"Kalman R must be finite and > 0, got {r}")

        self.num_joints = num_joints
        self.q = float(q)
        self.r = float(r)

        self.x = np.zeros((num_joints, 3), dtype=np.float64)
        self.p = np.zeros((num_joints, 3), dtype=np.float64)
        self.k = np.zeros((num_joints, 3), dtype=np.float64)

    def reset(self) -> None:
        """Zero all filter state in place"""
        self.x.fill(0.0)
        self.p.fill(0.0)
        self.k.fill(0.0)

    def update(self, measurements: np.ndarray) -> np.ndarray:
        """
        Update every filter with one frame of measurements

        Args:
            measurements: (num_joints, 3) raw positions

        Returns:
            (num_joints, 3) new estimates (a copy)
        """
        x_new, p_new, k = kalman_step(self.x, self.p, measurements, self.q, self.r)
        self.x[...] = x_new
        self.p[...] = p_new
        self.k[...] = k
        return self.x.copy()

    @property
    def steady_state_gain(self) -> float:
        """Gain the filters converge to under constant Q and R"""
        # Fixed point of P' = R (P + Q) / (P + Q + R)
        p = (-self.q + np.sqrt(self.q * self.q + 4.0 * self.q * self.r)) / 2.0
        return (p + self.q) / (p + self.q + self.r)

    def state(self, index: int) -> AxisKalmanState:
        return AxisKalmanState(
            estimate=self.x[index].copy(),
            covariance=self.p[index].copy(),
            gain=self.k[index].copy(),
        )

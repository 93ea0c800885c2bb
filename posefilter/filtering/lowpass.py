"""
Cascaded low-pass smoothing applied after the Kalman stage

Each joint keeps a short history of ``depth`` stages. Stage 0 receives the
newest Kalman estimate and every later stage is a single-pole exponential
filter fed by the stage before it, so smoothing and lag both grow with
depth while ``alpha`` stays the only free parameter.
"""

import numpy as np

from ..core.constants import DEFAULT_LOWPASS_ALPHA, DEFAULT_LOWPASS_DEPTH
from ..core.exceptions import InvalidParameter


class LowPassCascade:
    """
    Fixed-depth exponential smoothing cascade for every joint

    ``alpha`` is the weight of the upstream stage: 1 passes the Kalman
    output through unchanged, values near 0 smooth heavily. At exactly 0
    only stage 0 is refreshed, so with ``depth > 1`` the output stays at
    its value from the last reset (zeros) regardless of input.

    Example:
        >>> lp = LowPassCascade(num_joints=28, alpha=0.1, depth=6)
        >>> smoothed = lp.apply(kalman_estimates)  # (28, 3)
    """

    def __init__(
        self,
        num_joints: int,
        alpha: float = DEFAULT_LOWPASS_ALPHA,
        depth: int = DEFAULT_LOWPASS_DEPTH
    ):
        if not 0.0 <= alpha <= 1.0:
            raise InvalidParameter(f"alpha must be between 0 and 1, got {alpha}")
        if depth < 1:
            raise InvalidParameter(f"depth must be >= 1, got {depth}")

        self.num_joints = num_joints
        self.alpha = float(alpha)
        self.depth = int(depth)

        # (joint, stage, axis); stage 0 is the newest, least smoothed value
        self.history = np.zeros((num_joints, self.depth, 3), dtype=np.float64)

    def reset(self) -> None:
        """Zero the history in place"""
        self.history.fill(0.0)

    def apply(self, estimates: np.ndarray) -> np.ndarray:
        """
        Push one frame of estimates through the cascade

        Args:
            estimates: (num_joints, 3) Kalman-filtered positions

        Returns:
            (num_joints, 3) output of the last stage (a copy)
        """
        self.history[:, 0] = estimates
        for i in range(1, self.depth):
            self.history[:, i] = (self.history[:, i - 1] * self.alpha
                                  + self.history[:, i] * (1.0 - self.alpha))
        return self.history[:, -1].copy()

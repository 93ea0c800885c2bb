"""
Derived joint computation

Fills in joints the pose estimator does not emit (hip, neck, head, spine)
from the measured joints of the same frame, following the topology's
derivation rules.
"""

import logging
from typing import List, Optional

import numpy as np

from .topology import JointSet, DerivationRule
from ..core.constants import DEFAULT_GEOMETRY_EPS
from ..core.exceptions import DegenerateGeometry

logger = logging.getLogger(__name__)


def midpoint(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    return (a + b) / 2.0


def project_head(
    right_ear: np.ndarray,
    left_ear: np.ndarray,
    nose: np.ndarray,
    neck: np.ndarray,
    eps: float = DEFAULT_GEOMETRY_EPS,
) -> Optional[np.ndarray]:
    """
    Project the nose onto the neck-to-ear-midpoint axis

    Args:
        right_ear, left_ear, nose, neck: (3,) positions
        eps: Minimum axis length

    Returns:
        (3,) head position anchored at the neck, or None when the ear
        midpoint coincides with the neck and the axis is undefined
    """
    head_vec = midpoint(right_ear, left_ear) - neck
    length = np.linalg.norm(head_vec)
    if not length > eps:
        return None

    axis = head_vec / length
    nose_vec = nose - neck
    return neck + axis * np.dot(axis, nose_vec)


class DerivedJointComputer:
    """
    Computes derived joints in place on a raw position array

    Degenerate head geometry falls back to the joint's previous raw value
    (or to the neck on the first frame) unless ``strict`` is set, in which
    case DegenerateGeometry is raised.
    """

    def __init__(self, joints: JointSet, eps: float = DEFAULT_GEOMETRY_EPS, strict: bool = False):
        self.joints = joints
        self.eps = eps
        self.strict = strict

    def compute(
        self,
        raw: np.ndarray,
        previous_raw: Optional[np.ndarray] = None,
    ) -> List[DegenerateGeometry]:
        """
        Write derived joints into ``raw``

        Only the derived rows of ``raw`` are written; measured rows are
        read-only here.

        Args:
            raw: (num_joints, 3) array with measured joints populated
            previous_raw: Last frame's raw array, used for fallbacks

        Returns:
            Degenerate geometry events recorded this frame

        Raises:
            DegenerateGeometry: In strict mode only
        """
        events = []
        for rule in self.joints.rules:
            value = self._evaluate(rule, raw)
            if value is None:
                event = DegenerateGeometry(rule.joint)
                if self.strict:
                    raise event
                value = self._fallback(rule, raw, previous_raw)
                logger.warning("%s; falling back to %s", event,
                               "previous value" if previous_raw is not None else "anchor joint")
                events.append(event)
            raw[rule.joint_index] = value
        return events

    def _evaluate(self, rule: DerivationRule, raw: np.ndarray) -> Optional[np.ndarray]:
        src = [raw[i] for i in rule.source_indices]

        if rule.kind == 'alias':
            return src[0].copy()
        if rule.kind == 'midpoint':
            return midpoint(src[0], src[1])
        if rule.kind == 'torso_midpoint':
            return midpoint(src[0], midpoint(src[1], src[2]))
        if rule.kind == 'head_projection':
            return project_head(src[0], src[1], src[2], src[3], eps=self.eps)

        raise ValueError(f"Unhandled derivation kind: {rule.kind}")

    @staticmethod
    def _fallback(rule: DerivationRule, raw: np.ndarray, previous_raw: Optional[np.ndarray]) -> np.ndarray:
        if previous_raw is not None:
            return previous_raw[rule.joint_index].copy()
        # anchor is the last source (neck for head_projection)
        return raw[rule.source_indices[-1]].copy()

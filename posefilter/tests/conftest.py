"""Shared fixtures for posefilter tests"""

import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from posefilter.skeleton.topology import JointSet


def make_frame(joints: JointSet, rng: np.random.Generator, scale: float = 1.0) -> np.ndarray:
    """Random measurement frame with a well-defined head axis"""
    frame = rng.uniform(-scale, scale, size=(joints.num_measured, 3))
    # keep the ears well above the shoulders so the neck-to-ear axis is never zero
    for name in ('left_ear', 'right_ear'):
        frame[joints.measured_names.index(name), 1] += 4.0 * scale
    return frame


@pytest.fixture
def joints():
    return JointSet.default()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def frame(joints, rng):
    return make_frame(joints, rng)

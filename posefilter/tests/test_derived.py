"""
Tests for derived joint computation
"""

import logging

import numpy as np
import pytest

from posefilter.core.exceptions import DegenerateGeometry
from posefilter.skeleton.derived import DerivedJointComputer, project_head, midpoint


def _raw(joints, **points):
    raw = np.zeros((joints.num_joints, 3))
    for name, value in points.items():
        raw[joints.index(name)] = value
    return raw


def test_hip(joints):
    """hip = midpoint(abdomen, midpoint(right thigh, left thigh))"""
    raw = _raw(joints, right_thigh=(1, 0, 0), left_thigh=(-1, 0, 0), abdomen_upper=(0, 2, 0))
    DerivedJointComputer(joints).compute(raw)
    np.testing.assert_allclose(raw[joints.index('hip')], [0, 1, 0])


def test_neck(joints):
    """neck = midpoint of the shoulders"""
    raw = _raw(joints, right_shoulder=(1, 1, 0), left_shoulder=(-1, 1, 0),
               right_ear=(0.1, 2, 0), left_ear=(-0.1, 2, 0))
    DerivedJointComputer(joints).compute(raw)
    np.testing.assert_allclose(raw[joints.index('neck')], [0, 1, 0])


def test_spine_aliases_abdomen(joints, frame):
    """spine copies the abdomen position"""
    raw = np.zeros((joints.num_joints, 3))
    raw[joints.measured_indices] = frame
    DerivedJointComputer(joints).compute(raw)
    np.testing.assert_array_equal(raw[joints.index('spine')], raw[joints.index('abdomen_upper')])


def test_head_projection(joints):
    """Nose is projected onto the neck-to-ear axis"""
    raw = _raw(joints,
               right_shoulder=(1, 1, 0), left_shoulder=(-1, 1, 0),
               right_ear=(0.1, 2, 0), left_ear=(-0.1, 2, 0),
               nose=(0, 1.5, 0.5))
    DerivedJointComputer(joints).compute(raw)
    np.testing.assert_allclose(raw[joints.index('head')], [0, 1.5, 0])


def test_project_head_colinear_with_axis():
    """Result lies on the axis through the neck and ear midpoint"""
    neck = np.array([0.0, 0.0, 0.0])
    head = project_head(np.array([1.0, 2.0, 0.0]), np.array([-1.0, 2.0, 2.0]),
                        np.array([3.0, 1.0, -1.0]), neck)
    axis = midpoint(np.array([1.0, 2.0, 0.0]), np.array([-1.0, 2.0, 2.0])) - neck
    np.testing.assert_allclose(np.cross(head - neck, axis), 0.0, atol=1e-12)


def test_project_head_degenerate_returns_none():
    neck = np.array([0.0, 1.0, 0.0])
    assert project_head(np.array([1.0, 1.0, 0.0]), np.array([-1.0, 1.0, 0.0]),
                        np.array([0.0, 2.0, 0.0]), neck) is None


def test_only_derived_rows_written(joints, frame):
    """Measured joints are untouched by derivation"""
    raw = np.zeros((joints.num_joints, 3))
    raw[joints.measured_indices] = frame
    before = raw[joints.measured_indices].copy()

    DerivedJointComputer(joints).compute(raw)
    np.testing.assert_array_equal(raw[joints.measured_indices], before)


def test_deterministic(joints, frame):
    a = np.zeros((joints.num_joints, 3))
    a[joints.measured_indices] = frame
    b = a.copy()
    computer = DerivedJointComputer(joints)
    computer.compute(a)
    computer.compute(b)
    np.testing.assert_array_equal(a, b)


def _degenerate_raw(joints):
    # ear midpoint coincides with the neck
    return _raw(joints, right_shoulder=(1, 1, 0), left_shoulder=(-1, 1, 0),
                right_ear=(0.5, 1, 0), left_ear=(-0.5, 1, 0), nose=(0, 2, 1))


def test_degenerate_head_first_frame_uses_neck(joints, caplog):
    """Without history the head falls back to the neck and a warning is logged"""
    raw = _degenerate_raw(joints)
    with caplog.at_level(logging.WARNING, logger="posefilter.skeleton.derived"):
        events = DerivedJointComputer(joints).compute(raw)

    assert len(events) == 1
    assert isinstance(events[0], DegenerateGeometry)
    assert events[0].joint == 'head'
    np.testing.assert_allclose(raw[joints.index('head')], raw[joints.index('neck')])
    assert np.all(np.isfinite(raw))
    assert any("head" in record.getMessage() for record in caplog.records)


def test_degenerate_head_reuses_previous(joints):
    """With history the head keeps its previous raw value"""
    previous = np.zeros((joints.num_joints, 3))
    previous[joints.index('head')] = (0.3, 2.5, 0.1)

    raw = _degenerate_raw(joints)
    events = DerivedJointComputer(joints).compute(raw, previous)

    assert len(events) == 1
    np.testing.assert_array_equal(raw[joints.index('head')], [0.3, 2.5, 0.1])


def test_degenerate_head_strict(joints):
    """Strict mode raises instead of falling back"""
    raw = _degenerate_raw(joints)
    with pytest.raises(DegenerateGeometry):
        DerivedJointComputer(joints, strict=True).compute(raw)


def test_no_events_for_regular_frame(joints, frame):
    raw = np.zeros((joints.num_joints, 3))
    raw[joints.measured_indices] = frame
    assert DerivedJointComputer(joints).compute(raw) == []

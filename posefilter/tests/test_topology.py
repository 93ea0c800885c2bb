"""
Tests for skeleton topology construction and validation
"""

import numpy as np
import pytest

from posefilter.core.constants import VNECT_JOINT_NAMES
from posefilter.core.exceptions import TopologyError, InvalidParameter
from posefilter.skeleton.topology import JointSet


def test_default_skeleton(joints):
    """VNect skeleton: 28 joints, the first 24 measured"""
    assert joints.num_joints == 28
    assert len(joints) == 28
    assert joints.num_measured == 24
    assert joints.measured_names == tuple(VNECT_JOINT_NAMES[:24])
    assert set(joints.derived_names) == {'hip', 'head', 'neck', 'spine'}
    np.testing.assert_array_equal(joints.measured_indices, np.arange(24))


def test_name_index_bijection(joints):
    """Every name maps to its own index and back"""
    for i, name in enumerate(joints.names):
        assert joints.index(name) == i
        assert joints.names[joints.index(name)] == name
    assert joints.index('hip') == 24
    assert joints.index('neck') == 26

    with pytest.raises(KeyError):
        joints.index('tail')


def test_neck_derived_before_head(joints):
    """Head reads the derived neck, so neck must come first"""
    order = joints.derivation_order
    assert order.index('neck') < order.index('head')
    assert set(order) == {'hip', 'head', 'neck', 'spine'}


def test_rules_resolve_indices(joints):
    """Rules carry the indices of their sources"""
    rule = next(r for r in joints.rules if r.joint == 'hip')
    assert rule.kind == 'torso_midpoint'
    assert rule.joint_index == joints.index('hip')
    assert rule.source_indices == tuple(joints.index(s) for s in ('abdomen_upper', 'right_thigh', 'left_thigh'))


def test_is_derived(joints):
    assert joints.is_derived('spine')
    assert not joints.is_derived('nose')
    assert 'nose' in joints
    assert 'tail' not in joints


def test_custom_topology():
    """Any skeleton can be described, not just the default one"""
    joints = JointSet(['a', 'mid', 'b', 'copy'], {
        'mid': ('midpoint', ('a', 'b')),
        'copy': ('alias', ('mid',)),
    })
    assert joints.measured_names == ('a', 'b')
    assert joints.derivation_order == ('mid', 'copy')
    np.testing.assert_array_equal(joints.measured_indices, [0, 2])


@pytest.mark.parametrize("names,derivations", [
    # duplicate joint
    (['a', 'a'], {}),
    # empty topology
    ([], {}),
    # derived joint not in names
    (['a', 'b'], {'c': ('alias', ('a',))}),
    # undefined source joint
    (['a', 'b'], {'b': ('alias', ('z',))}),
    # wrong arity
    (['a', 'b', 'c'], {'c': ('midpoint', ('a',))}),
    # unknown kind
    (['a', 'b'], {'b': ('average', ('a',))}),
    # self reference
    (['a', 'b'], {'b': ('alias', ('b',))}),
    # cycle between derived joints
    (['a', 'b', 'c'], {'b': ('alias', ('c',)), 'c': ('alias', ('b',))}),
])
def test_invalid_topologies(names, derivations):
    """Inconsistent topologies fail at construction"""
    with pytest.raises(TopologyError):
        JointSet(names, derivations)


def test_topology_error_is_invalid_parameter():
    with pytest.raises(InvalidParameter):
        JointSet(['a', 'a'])

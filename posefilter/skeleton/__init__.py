"""
Skeleton module - Joint topology and derived joints

Provides:
- JointSet topology with validated derivation rules
- Derived joint computation (hip, neck, head, spine)
"""

from .topology import JointSet, DerivationRule
from .derived import DerivedJointComputer, midpoint, project_head

__all__ = [
    # Topology
    "JointSet",
    "DerivationRule",
    # Derived joints
    "DerivedJointComputer",
    "midpoint",
    "project_head",
]

"""
Skeleton topology for the pose filtering pipeline

Provides:
- Validated bijection between joint names and array indices
- Measured vs derived joint split
- Derivation rules and their evaluation order

The topology is built and validated once; nothing here is recomputed per
frame.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple, Mapping, Optional

import numpy as np

from ..core.constants import VNECT_JOINT_NAMES, VNECT_DERIVATIONS, DERIVATION_ARITY
from ..core.exceptions import TopologyError


@dataclass(frozen=True)
class DerivationRule:
    """How one derived joint is computed from other joints"""
    joint: str
    kind: str
    sources: Tuple[str, ...]
    joint_index: int
    source_indices: Tuple[int, ...]


class JointSet:
    """
    Fixed skeleton topology

    Joints listed in ``derivations`` are derived; every other joint is
    measured and is expected in the measurement vector in declared order.

    Example:
        >>> joints = JointSet.default()
        >>> joints.index('neck')
        26
        >>> joints.num_measured
        24
    """

    def __init__(
        self,
        names: Sequence[str],
        derivations: Optional[Mapping[str, Tuple[str, Sequence[str]]]] = None,
    ):
        """
        Build and validate a topology

        Args:
            names: Joint names in topology order
            derivations: Mapping derived joint -> (rule kind, source joints)

        Raises:
            TopologyError: If the topology is inconsistent
        """
        self.names: Tuple[str, ...] = tuple(names)
        if not self.names:
            raise TopologyError("Topology must contain at least one joint")

        self._index: Dict[str, int] = {}
        for i, name in enumerate(self.names):
            if name in self._index:
                raise TopologyError(f"Duplicate joint name: {name!r}")
            self._index[name] = i

        derivations = dict(derivations or {})
        for joint, (kind, sources) in derivations.items():
            if joint not in self._index:
                raise TopologyError(f"Derived joint {joint!r} is not in the topology")
            if kind not in DERIVATION_ARITY:
                raise TopologyError(f"Unknown derivation kind {kind!r} for {joint!r}")
            if len(sources) != DERIVATION_ARITY[kind]:
                raise TopologyError(
                    f"Derivation {kind!r} for {joint!r} needs {DERIVATION_ARITY[kind]} "
                    f"sources, got {len(sources)}"
                )
            for source in sources:
                if source not in self._index:
                    raise TopologyError(f"Derivation for {joint!r} references undefined joint {source!r}")
                if source == joint:
                    raise TopologyError(f"Derived joint {joint!r} depends on itself")

        self.derived_names: Tuple[str, ...] = tuple(n for n in self.names if n in derivations)
        self.measured_names: Tuple[str, ...] = tuple(n for n in self.names if n not in derivations)
        self.measured_indices = np.array([self._index[n] for n in self.measured_names], dtype=np.intp)
        self.derived_indices = np.array([self._index[n] for n in self.derived_names], dtype=np.intp)

        self.rules: Tuple[DerivationRule, ...] = self._order_rules(derivations)

    def _order_rules(self, derivations) -> Tuple[DerivationRule, ...]:
        """Order rules so every derived source is computed before it is read"""
        ordered: List[DerivationRule] = []
        done = set(self.measured_names)
        pending = [n for n in self.names if n in derivations]

        while pending:
            ready = [n for n in pending if all(s in done for s in derivations[n][1])]
            if not ready:
                raise TopologyError(f"Cyclic derivation dependencies among {pending}")
            for joint in ready:
                kind, sources = derivations[joint]
                ordered.append(DerivationRule(
                    joint=joint,
                    kind=kind,
                    sources=tuple(sources),
                    joint_index=self._index[joint],
                    source_indices=tuple(self._index[s] for s in sources),
                ))
                done.add(joint)
                pending.remove(joint)

        return tuple(ordered)

    @classmethod
    def default(cls) -> "JointSet":
        """VNect 28-joint skeleton: 24 measured joints plus hip, head, neck, spine"""
        return cls(VNECT_JOINT_NAMES, VNECT_DERIVATIONS)

    @property
    def num_joints(self) -> int:
        return len(self.names)

    @property
    def num_measured(self) -> int:
        return len(self.measured_names)

    @property
    def derivation_order(self) -> Tuple[str, ...]:
        return tuple(rule.joint for rule in self.rules)

    def index(self, name: str) -> int:
        """Array index of a joint"""
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"Unknown joint: {name!r}") from None

    def is_derived(self, name: str) -> bool:
        return name in self.derived_names

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, name: str) -> bool:
        return name in self._index

    def __repr__(self) -> str:
        return (f"JointSet(joints={self.num_joints}, measured={self.num_measured}, "
                f"derived={list(self.derivation_order)})")

"""
Visualization module - Plots of filtered joint trajectories
"""

from .plots import plot_joint_trajectory

__all__ = [
    "plot_joint_trajectory",
]

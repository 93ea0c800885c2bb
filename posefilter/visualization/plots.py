"""
Trajectory plots for inspecting filter behaviour

Provides:
- Raw vs filtered x/y/z trajectory of one joint over a sequence
"""

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from ..core.constants import AXES


def plot_joint_trajectory(
    raw: np.ndarray,
    filtered: np.ndarray,
    joint_name: str,
    output_path: str,
    fps: Optional[float] = None
) -> Path:
    """
    Plot raw and filtered trajectories of a single joint

    Args:
        raw: (T, 3) raw positions of the joint
        filtered: (T, 3) filtered positions of the joint
        joint_name: Name used in the title
        output_path: PNG file to write
        fps: If given, the x axis is in seconds instead of frames

    Returns:
        Path of the written image

    Example:
        >>> i = joints.index('head')
        >>> plot_joint_trajectory(raw_seq[:, i], out_seq[:, i], 'head', 'head.png')
    """
    raw = np.asarray(raw)
    filtered = np.asarray(filtered)
    if raw.shape != filtered.shape or raw.ndim != 2 or raw.shape[1] != 3:
        raise ValueError(f"Expected two (T, 3) arrays, got {raw.shape} and {filtered.shape}")

    t = np.arange(raw.shape[0], dtype=np.float64)
    if fps:
        t = t / fps

    fig, axes = plt.subplots(3, 1, figsize=(12, 8), sharex=True)
    for i, (ax, axis_name) in enumerate(zip(axes, AXES)):
        ax.plot(t, raw[:, i], color='gray', alpha=0.5, linewidth=1, label='raw')
        ax.plot(t, filtered[:, i], color='tab:blue', linewidth=1.5, label='filtered')
        ax.set_ylabel(axis_name, fontsize=11)
        ax.grid(True, alpha=0.3)

    axes[0].legend(loc='best', fontsize=9)
    axes[0].set_title(f'{joint_name} trajectory', fontsize=12, fontweight='bold')
    axes[-1].set_xlabel('Time (s)' if fps else 'Frame', fontsize=11)

    plt.tight_layout()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

    return output_path

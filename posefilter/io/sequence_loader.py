"""
Loading of recorded pose estimator output

Supports:
- NPY arrays of shape (T, num_measured, 3)
- NPZ archives holding that array under 'joint_positions'
- CSV tables in the layout written by CSVWriter
"""

from pathlib import Path
from typing import Optional

import numpy as np

from .csv_handler import CSVReader
from ..core.constants import NPZ_POSITIONS_KEY
from ..core.exceptions import DataLoadError
from ..skeleton.topology import JointSet


class SequenceLoader:
    """
    Load a recorded sequence of measured joint positions

    Example:
        >>> from posefilter.io import SequenceLoader
        >>> frames = SequenceLoader.load("session_01.npy")
        >>> print(frames.shape)
        (900, 24, 3)
    """

    @staticmethod
    def load(path: str, joints: Optional[JointSet] = None) -> np.ndarray:
        """
        Load a sequence, dispatching on file suffix

        Args:
            path: .npy, .npz or .csv file
            joints: Topology the sequence must match (default VNect skeleton)

        Returns:
            (T, joints.num_measured, 3) float64 array

        Raises:
            DataLoadError: If the file is missing, unsupported or malformed
        """
        path = Path(path)
        joints = joints or JointSet.default()

        if not path.exists():
            raise DataLoadError(f"Sequence file not found: {path}")

        suffix = path.suffix.lower()
        if suffix in ('.npy', '.npz'):
            frames = SequenceLoader.load_npy(path)
        elif suffix == '.csv':
            frames = CSVReader.read_positions(path, joints.measured_names)
        else:
            raise DataLoadError(f"Unsupported sequence format '{suffix}': {path}")

        expected = (joints.num_measured, 3)
        if frames.ndim != 3 or frames.shape[1:] != expected:
            raise DataLoadError(
                f"Expected sequence of shape (T, {expected[0]}, 3), got {frames.shape}: {path}"
            )
        return frames

    @staticmethod
    def load_npy(npy_path: str) -> np.ndarray:
        """
        Load joint positions from NPY or NPZ

        Raises:
            DataLoadError: If the file cannot be read
        """
        npy_path = Path(npy_path)

        try:
            data = np.load(npy_path, allow_pickle=False)
            if isinstance(data, np.lib.npyio.NpzFile):
                with data:
                    if NPZ_POSITIONS_KEY not in data.files:
                        raise DataLoadError(
                            f"NPZ file has no '{NPZ_POSITIONS_KEY}' array: {npy_path}"
                        )
                    data = data[NPZ_POSITIONS_KEY]
        except DataLoadError:
            raise
        except (OSError, ValueError) as e:
            raise DataLoadError(f"Failed to load NPY file {npy_path}: {e}")

        return np.asarray(data, dtype=np.float64)

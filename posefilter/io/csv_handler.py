"""
CSV handling for joint position sequences

Provides:
- PoseFrameRow dataclass (one frame of 3D joint positions)
- CSV writing of filtered skeletons
- CSV reading of recorded or filtered sequences

Layout: one row per frame, a 'frame' column followed by
{joint}_x, {joint}_y, {joint}_z for every joint.
"""

import csv
from pathlib import Path
from dataclasses import dataclass
from typing import List, Dict, Sequence

import numpy as np

from ..core.exceptions import DataLoadError
from ..core.constants import AXES, CSV_FRAME_COLUMN, csv_position_columns


@dataclass
class PoseFrameRow:
    """Dataclass for one frame of joint positions"""
    frame: int
    positions: np.ndarray  # (num_joints, 3)

    @classmethod
    def from_dict(cls, d: Dict, joint_names: Sequence[str]) -> "PoseFrameRow":
        """Create instance from a CSV row dictionary"""
        positions = np.array(
            [[float(d[f'{name}_{axis}']) for axis in AXES] for name in joint_names],
            dtype=np.float64,
        )
        return cls(frame=int(d[CSV_FRAME_COLUMN]), positions=positions)

    def to_dict(self, joint_names: Sequence[str]) -> Dict:
        """Convert to a CSV row dictionary"""
        d = {CSV_FRAME_COLUMN: self.frame}
        for name, point in zip(joint_names, self.positions):
            for axis, value in zip(AXES, point):
                d[f'{name}_{axis}'] = float(value)
        return d


class CSVWriter:
    """CSV writing for joint position sequences"""

    @staticmethod
    def write_rows(output_path: str, rows: List[PoseFrameRow], joint_names: Sequence[str]) -> None:
        """
        Write frame rows to CSV

        Args:
            output_path: Path to output CSV file
            rows: List of PoseFrameRow instances
            joint_names: Joint names matching each row's positions
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with open(output_path, 'w', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=csv_position_columns(joint_names))
            writer.writeheader()

            for row in rows:
                writer.writerow(row.to_dict(joint_names))

    @staticmethod
    def write_positions(output_path: str, frames: np.ndarray, joint_names: Sequence[str]) -> None:
        """
        Write a (T, num_joints, 3) array to CSV

        Example:
            >>> from posefilter.io import CSVWriter
            >>> filtered = pipeline.process_sequence(recording)
            >>> CSVWriter.write_positions('filtered.csv', filtered, pipeline.joints.names)
        """
        frames = np.asarray(frames)
        if frames.ndim != 3 or frames.shape[1:] != (len(joint_names), 3):
            raise ValueError(
                f"Expected frames of shape (T, {len(joint_names)}, 3), got {frames.shape}"
            )
        rows = [PoseFrameRow(frame=t, positions=p) for t, p in enumerate(frames)]
        CSVWriter.write_rows(output_path, rows, joint_names)


class CSVReader:
    """CSV reading for joint position sequences"""

    @staticmethod
    def read_rows(csv_path: str, joint_names: Sequence[str]) -> List[PoseFrameRow]:
        """
        Read frame rows from CSV, sorted by frame number

        Args:
            csv_path: Path to CSV file
            joint_names: Joints whose columns to read

        Returns:
            List of PoseFrameRow

        Raises:
            DataLoadError: If CSV cannot be read or columns are missing
        """
        csv_path = Path(csv_path)

        if not csv_path.exists():
            raise DataLoadError(f"CSV file not found: {csv_path}")

        try:
            with open(csv_path, 'r', newline='') as f:
                reader = csv.DictReader(f)
                rows = [PoseFrameRow.from_dict(row, joint_names) for row in reader]
        except (KeyError, ValueError, csv.Error) as e:
            raise DataLoadError(f"Failed to read pose CSV {csv_path}: {e}")

        return sorted(rows, key=lambda r: r.frame)

    @staticmethod
    def read_positions(csv_path: str, joint_names: Sequence[str]) -> np.ndarray:
        """
        Read a CSV as a (T, len(joint_names), 3) array

        Example:
            >>> from posefilter.io import CSVReader
            >>> frames = CSVReader.read_positions('recording.csv', joints.measured_names)
        """
        rows = CSVReader.read_rows(csv_path, joint_names)
        if not rows:
            return np.empty((0, len(joint_names), 3), dtype=np.float64)
        return np.stack([row.positions for row in rows])

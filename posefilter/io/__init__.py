"""
IO module - Recorded sequence loading and saving

Provides unified interfaces for:
- NPY / NPZ joint position arrays
- CSV reading/writing with dataclass rows
"""

from .sequence_loader import SequenceLoader
from .csv_handler import (
    CSVWriter,
    CSVReader,
    PoseFrameRow,
)

__all__ = [
    "SequenceLoader",
    "CSVWriter",
    "CSVReader",
    "PoseFrameRow",
]

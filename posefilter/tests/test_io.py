"""
Tests for recorded sequence loading and CSV output
"""

import csv

import numpy as np
import pytest

from posefilter.core.exceptions import DataLoadError
from posefilter.io import SequenceLoader, CSVWriter, CSVReader, PoseFrameRow

from .conftest import make_frame


@pytest.fixture
def sequence(joints, rng):
    return np.stack([make_frame(joints, rng) for _ in range(6)])


def test_csv_layout(tmp_path, joints, sequence):
    """Header is frame followed by {joint}_{axis} columns"""
    path = tmp_path / "out" / "seq.csv"
    CSVWriter.write_positions(str(path), sequence, joints.measured_names)

    with open(path, newline='') as f:
        reader = csv.reader(f)
        header = next(reader)
        rows = list(reader)

    assert header[:4] == ['frame', 'right_shoulder_x', 'right_shoulder_y', 'right_shoulder_z']
    assert len(header) == 1 + 24 * 3
    assert len(rows) == 6
    assert rows[2][0] == '2'


def test_csv_read_back(tmp_path, joints, sequence):
    path = tmp_path / "seq.csv"
    CSVWriter.write_positions(str(path), sequence, joints.measured_names)

    loaded = CSVReader.read_positions(str(path), joints.measured_names)
    np.testing.assert_allclose(loaded, sequence)


def test_csv_rows_sorted_by_frame(tmp_path):
    names = ['a']
    rows = [PoseFrameRow(frame=2, positions=np.array([[2.0, 2.0, 2.0]])),
            PoseFrameRow(frame=0, positions=np.array([[0.0, 0.0, 0.0]]))]
    path = tmp_path / "rows.csv"
    CSVWriter.write_rows(str(path), rows, names)

    read = CSVReader.read_rows(str(path), names)
    assert [r.frame for r in read] == [0, 2]


def test_csv_missing_columns(tmp_path, joints):
    path = tmp_path / "short.csv"
    path.write_text("frame,nose_x\n0,1.0\n")
    with pytest.raises(DataLoadError):
        CSVReader.read_positions(str(path), joints.measured_names)


def test_write_positions_shape_check(tmp_path, joints):
    with pytest.raises(ValueError):
        CSVWriter.write_positions(str(tmp_path / "x.csv"), np.zeros((3, 5, 3)), joints.measured_names)


def test_load_npy(tmp_path, joints, sequence):
    path = tmp_path / "seq.npy"
    np.save(path, sequence.astype(np.float32))

    frames = SequenceLoader.load(str(path), joints)
    assert frames.dtype == np.float64
    np.testing.assert_allclose(frames, sequence, rtol=1e-6)


def test_load_npz(tmp_path, joints, sequence):
    path = tmp_path / "seq.npz"
    np.savez(path, joint_positions=sequence)
    np.testing.assert_array_equal(SequenceLoader.load(str(path), joints), sequence)

    other = tmp_path / "other.npz"
    np.savez(other, something_else=sequence)
    with pytest.raises(DataLoadError):
        SequenceLoader.load(str(other), joints)


def test_load_csv(tmp_path, joints, sequence):
    path = tmp_path / "seq.csv"
    CSVWriter.write_positions(str(path), sequence, joints.measured_names)
    np.testing.assert_allclose(SequenceLoader.load(str(path)), sequence)


def test_load_errors(tmp_path, joints):
    with pytest.raises(DataLoadError):
        SequenceLoader.load(str(tmp_path / "missing.npy"))

    txt = tmp_path / "seq.txt"
    txt.write_text("hello")
    with pytest.raises(DataLoadError):
        SequenceLoader.load(str(txt))

    wrong = tmp_path / "wrong.npy"
    np.save(wrong, np.zeros((4, 28, 3)))
    with pytest.raises(DataLoadError):
        SequenceLoader.load(str(wrong), joints)

    corrupt = tmp_path / "corrupt.npy"
    corrupt.write_bytes(b"not a numpy file")
    with pytest.raises(DataLoadError):
        SequenceLoader.load(str(corrupt), joints)

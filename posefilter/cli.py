"""
Command line entry point: filter a recorded pose sequence

Usage:
    posefilter recording.npy --output filtered.csv
    posefilter recording.csv --config configs/default.yaml --low-pass --plot head neck
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import numpy as np
from tqdm import tqdm

from .core.config import PipelineConfig
from .core.exceptions import (
    PoseFilterException,
    InvalidMeasurement,
    InvalidParameter,
    handle_posefilter_exception,
)
from .filtering.pipeline import PoseFilterPipeline
from .io import SequenceLoader, CSVWriter
from .skeleton.topology import JointSet

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure console logging for the command line tool"""
    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    # repeated main() calls replace the previous console handler
    for handler in list(root_logger.handlers):
        if getattr(handler, 'posefilter_console', False):
            root_logger.removeHandler(handler)
    console_handler.posefilter_console = True
    root_logger.addHandler(console_handler)

    # per-frame debug lines only with --verbose
    logging.getLogger('posefilter.filtering').setLevel(logging.DEBUG if verbose else logging.INFO)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='posefilter',
        description='Stabilize a recorded 3D pose sequence with per-joint Kalman and low-pass filtering',
    )
    parser.add_argument("input", help="Recorded sequence (.npy, .npz or .csv), shape (T, 24, 3)")
    parser.add_argument("--config", type=str, default=None, help="YAML pipeline configuration")
    parser.add_argument("--output", type=str, default=None,
                        help="Output CSV path (default: <input>.filtered.csv)")
    parser.add_argument("--q", type=float, default=None, help="Override Kalman process noise")
    parser.add_argument("--r", type=float, default=None, help="Override Kalman measurement noise")
    parser.add_argument("--low-pass", action="store_true", help="Enable the low-pass cascade")
    parser.add_argument("--alpha", type=float, default=None, help="Override low-pass alpha")
    parser.add_argument("--depth", type=int, default=None, help="Override low-pass depth")
    parser.add_argument("--plot", nargs='*', default=[], metavar="JOINT",
                        help="Joints to plot (raw vs filtered)")
    parser.add_argument("--plot-dir", type=str, default=None,
                        help="Directory for plots (default: next to the output CSV)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> PipelineConfig:
    """Config file, then environment, then command line overrides"""
    config = PipelineConfig.from_yaml(args.config) if args.config else PipelineConfig()
    data = PipelineConfig.from_env(config).to_dict()

    if args.q is not None:
        data['kalman']['q'] = args.q
    if args.r is not None:
        data['kalman']['r'] = args.r
    if args.low_pass:
        data['low_pass']['enabled'] = True
    if args.alpha is not None:
        data['low_pass']['alpha'] = args.alpha
    if args.depth is not None:
        data['low_pass']['depth'] = args.depth

    return PipelineConfig.from_dict(data)


def run(args: argparse.Namespace) -> Path:
    """
    Filter the input sequence and write results

    Returns:
        Path of the filtered CSV
    """
    joints = JointSet.default()
    unknown = [name for name in args.plot if name not in joints]
    if unknown:
        raise InvalidParameter(f"Unknown joints to plot: {unknown}")

    config = build_config(args)
    logger.info("Configuration:\n%s", config)

    frames = SequenceLoader.load(args.input, joints)
    logger.info("Loaded %d frames from %s", len(frames), args.input)

    pipeline = PoseFilterPipeline(joints, config)
    raw_seq = np.zeros((len(frames), joints.num_joints, 3), dtype=np.float64)
    out_seq = np.zeros((len(frames), joints.num_joints, 3), dtype=np.float64)
    skipped = 0
    fallbacks = 0

    for t, frame in enumerate(tqdm(frames, desc="Filtering", unit="frame")):
        try:
            out_seq[t] = pipeline.process_frame(frame)
            fallbacks += len(pipeline.last_warnings)
        except InvalidMeasurement as e:
            logger.warning("Skipping frame %d: %s", t, e)
            skipped += 1
            if t > 0:
                out_seq[t] = out_seq[t - 1]
        raw_seq[t] = pipeline.raw

    output_path = Path(args.output) if args.output else Path(args.input).with_suffix('.filtered.csv')
    CSVWriter.write_positions(output_path, out_seq, joints.names)
    logger.info("Saved: %s (%d frames, %d skipped, %d geometry fallbacks)",
                output_path, len(out_seq), skipped, fallbacks)

    if args.plot:
        from .visualization import plot_joint_trajectory

        plot_dir = Path(args.plot_dir) if args.plot_dir else output_path.parent
        for name in args.plot:
            i = joints.index(name)
            png = plot_joint_trajectory(raw_seq[:, i], out_seq[:, i], name, plot_dir / f'{name}_trajectory.png')
            logger.info("Saved: %s", png)

    return output_path


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    try:
        run(args)
    except PoseFilterException as e:
        logger.error(handle_posefilter_exception(e))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())

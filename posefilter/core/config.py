"""
Configuration management for the pose filtering pipeline

Central configuration system supporting:
- Dataclass-based configs validated on construction
- YAML file loading and saving
- Environment variable overrides
"""

import math
import os
import yaml
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional, Dict, Any

from .constants import (
    DEFAULT_KALMAN_Q,
    DEFAULT_KALMAN_R,
    DEFAULT_LOWPASS_ALPHA,
    DEFAULT_LOWPASS_DEPTH,
    DEFAULT_GEOMETRY_EPS,
)
from .exceptions import InvalidParameter, ConfigError


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass
class KalmanConfig:
    """Noise parameters shared by every per-axis Kalman filter"""
    q: float = DEFAULT_KALMAN_Q  # process noise
    r: float = DEFAULT_KALMAN_R  # measurement noise

    def __post_init__(self):
        """Validate configuration"""
        if not (math.isfinite(self.q) and self.q > 0):
            raise InvalidParameter(f"Kalman Q must be finite and > 0, got {self.q}")
        if not (math.isfinite(self.r) and self.r > 0):
            raise InvalidParameter(f"Kalman R must be finite and > 0, got {self.r}")


@dataclass
class LowPassConfig:
    """Configuration for the cascaded low-pass stage"""
    enabled: bool = False
    alpha: float = DEFAULT_LOWPASS_ALPHA
    depth: int = DEFAULT_LOWPASS_DEPTH

    def __post_init__(self):
        """Validate configuration"""
        if not 0.0 <= self.alpha <= 1.0:
            raise InvalidParameter(f"alpha must be between 0 and 1, got {self.alpha}")
        if self.enabled and self.depth < 1:
            raise InvalidParameter(f"depth must be >= 1 when low-pass is enabled, got {self.depth}")


@dataclass
class GeometryConfig:
    """Configuration for derived-joint computation"""
    eps: float = DEFAULT_GEOMETRY_EPS
    strict: bool = False  # raise DegenerateGeometry instead of falling back

    def __post_init__(self):
        """Validate configuration"""
        if not self.eps >= 0:
            raise InvalidParameter(f"eps must be >= 0, got {self.eps}")


@dataclass
class PipelineConfig:
    """Master configuration class combining all subconfigs"""
    kalman: KalmanConfig = field(default_factory=KalmanConfig)
    low_pass: LowPassConfig = field(default_factory=LowPassConfig)
    geometry: GeometryConfig = field(default_factory=GeometryConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        """
        Build configuration from a nested dictionary

        Args:
            data: Dict with optional 'kalman', 'low_pass' and 'geometry' sections

        Returns:
            PipelineConfig instance

        Raises:
            ConfigError: If a section contains unknown keys
            InvalidParameter: If a value is out of range
        """
        try:
            return cls(
                kalman=KalmanConfig(**(data.get('kalman') or {})),
                low_pass=LowPassConfig(**(data.get('low_pass') or {})),
                geometry=GeometryConfig(**(data.get('geometry') or {})),
            )
        except TypeError as e:
            raise ConfigError(f"Invalid configuration keys: {e}")

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "PipelineConfig":
        """
        Load configuration from YAML file

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            PipelineConfig instance

        Raises:
            ConfigError: If YAML file is missing or its format is invalid
            InvalidParameter: If a value is out of range
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise ConfigError(f"Config file not found: {yaml_path}")

        try:
            with open(yaml_path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML format in {yaml_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping at top level of {yaml_path}")

        return cls.from_dict(data)

    @classmethod
    def from_env(cls, base_config: Optional["PipelineConfig"] = None) -> "PipelineConfig":
        """
        Create config from environment variables

        Supports environment variables like:
        - POSEFILTER_KALMAN_Q
        - POSEFILTER_KALMAN_R
        - POSEFILTER_LOWPASS_ENABLED
        - POSEFILTER_LOWPASS_ALPHA
        - POSEFILTER_LOWPASS_DEPTH
        - POSEFILTER_GEOMETRY_STRICT

        Overrides are re-validated, so an out-of-range value raises
        InvalidParameter just like it would in the constructor. A value that
        does not parse as a number raises ConfigError.

        Args:
            base_config: Base configuration to override (default: new config)

        Returns:
            PipelineConfig instance with environment overrides
        """
        data = (base_config or cls()).to_dict()

        try:
            if 'POSEFILTER_KALMAN_Q' in os.environ:
                data['kalman']['q'] = float(os.environ['POSEFILTER_KALMAN_Q'])
            if 'POSEFILTER_KALMAN_R' in os.environ:
                data['kalman']['r'] = float(os.environ['POSEFILTER_KALMAN_R'])

            if 'POSEFILTER_LOWPASS_ENABLED' in os.environ:
                data['low_pass']['enabled'] = _parse_bool(os.environ['POSEFILTER_LOWPASS_ENABLED'])
            if 'POSEFILTER_LOWPASS_ALPHA' in os.environ:
                data['low_pass']['alpha'] = float(os.environ['POSEFILTER_LOWPASS_ALPHA'])
            if 'POSEFILTER_LOWPASS_DEPTH' in os.environ:
                data['low_pass']['depth'] = int(os.environ['POSEFILTER_LOWPASS_DEPTH'])

            if 'POSEFILTER_GEOMETRY_STRICT' in os.environ:
                data['geometry']['strict'] = _parse_bool(os.environ['POSEFILTER_GEOMETRY_STRICT'])
        except ValueError as e:
            raise ConfigError(f"Invalid environment override: {e}")

        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary"""
        return asdict(self)

    def to_yaml(self, yaml_path: str) -> None:
        """
        Save configuration to YAML file

        Args:
            yaml_path: Path to save YAML configuration
        """
        yaml_path = Path(yaml_path)
        yaml_path.parent.mkdir(parents=True, exist_ok=True)

        with open(yaml_path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)

    def __str__(self) -> str:
        """String representation of config"""
        return yaml.dump(self.to_dict(), default_flow_style=False, sort_keys=False)

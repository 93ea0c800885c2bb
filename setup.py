#!/usr/bin/env python
"""
Setup configuration for posefilter package

Installation:
    pip install -e .

Installation with development dependencies:
    pip install -e ".[dev]"
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

setup(
    name="posefilter",
    version="0.1.0",
    description="Temporal stabilization and joint completion for 3D pose estimator output",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="posefilter developers",
    author_email="",
    license="MIT",
    python_requires=">=3.8",

    packages=find_packages(include=["posefilter*"]),

    # Core dependencies
    install_requires=[
        # Numerics
        "numpy>=1.21.0",

        # Configuration
        "pyyaml>=5.4.0",

        # Progress bars
        "tqdm>=4.60.0",

        # Visualization
        "matplotlib>=3.4.0",
    ],

    # Optional dependencies for development and testing
    extras_require={
        "dev": [
            "pytest>=6.2.0",
            "pytest-cov>=2.12.0",
            # Reference Kalman implementation for cross-checks
            "filterpy>=1.4.5",
            "black>=21.0",
            "isort>=5.9.0",
            "flake8>=3.9.0",
            "mypy>=0.910",
        ],
        "test": [
            "pytest>=6.2.0",
            "pytest-cov>=2.12.0",
            "filterpy>=1.4.5",
        ],
    },

    # Entry points for CLI tools
    entry_points={
        "console_scripts": [
            "posefilter=posefilter.cli:main",
        ],
    },

    # Metadata
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Topic :: Multimedia :: Graphics :: 3D Modeling",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],

    keywords="pose-estimation kalman-filter motion-capture skeleton smoothing",
)

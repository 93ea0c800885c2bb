"""
Tests module - Unit and integration tests for posefilter

Provides:
- Core module tests (config, exceptions)
- Skeleton tests (topology, derived joints)
- Filtering tests (Kalman, low-pass, pipeline)
- IO, plotting and command line tests
"""

__all__ = []

"""Centralized package information for kubecfg.

This module provides a single source of truth for the package name and
version. The version also feeds the default user agent.
"""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["PACKAGE_NAME", "PACKAGE_VERSION"]

PACKAGE_NAME = "kubecfg"

try:
    PACKAGE_VERSION = version(PACKAGE_NAME)
except PackageNotFoundError:
    PACKAGE_VERSION = "unknown"

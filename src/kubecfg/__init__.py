"""Kubernetes client configuration resolver."""

from kubecfg.config import ConfigBuilder, ConfigResolver, ResolvedConfig, auto_configure
from kubecfg.errors import (
    ContextNotFoundError,
    InvalidPropertyError,
    KubeConfigError,
    KubeConfigParseError,
)

__all__ = [
    "ConfigBuilder",
    "ConfigResolver",
    "ContextNotFoundError",
    "InvalidPropertyError",
    "KubeConfigError",
    "KubeConfigParseError",
    "ResolvedConfig",
    "auto_configure",
]

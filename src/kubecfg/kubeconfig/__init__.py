"""
Kubeconfig document model and parser.
"""

from .models import (
    AuthInfo,
    AuthProviderConfig,
    Cluster,
    Context,
    KubeConfigDocument,
    NamedAuthInfo,
    NamedCluster,
    NamedContext,
)
from .parser import parse_file, parse_string

__all__ = [
    "AuthInfo",
    "AuthProviderConfig",
    "Cluster",
    "Context",
    "KubeConfigDocument",
    "NamedAuthInfo",
    "NamedCluster",
    "NamedContext",
    "parse_file",
    "parse_string",
]

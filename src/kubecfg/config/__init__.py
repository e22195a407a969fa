"""
Client configuration resolution.

Discovers how to reach a Kubernetes API server from kubeconfig files, the
in-cluster service account and environment options, and produces frozen
:class:`ResolvedConfig` snapshots. :class:`ConfigBuilder` layers explicit
values on top; :meth:`ConfigResolver.refresh` re-derives a snapshot when
credentials rotate.
"""

from .builder import ConfigBuilder
from .env import EnvironmentProbe
from .filesystem import FileSystem, LocalFileSystem
from .merge import file_for_context, merge_documents
from .models import (
    ConfigSource,
    KeyAlgorithm,
    RequestConfig,
    ResolvedConfig,
    TlsVersion,
    TokenProvider,
)
from .resolver import ConfigResolver, ResolutionState


def auto_configure(context: str | None = None) -> ResolvedConfig:
    """Resolve a configuration from the process environment and default locations."""
    return ConfigResolver().auto_configure(context)


__all__ = [
    "ConfigBuilder",
    "ConfigResolver",
    "ConfigSource",
    "EnvironmentProbe",
    "FileSystem",
    "KeyAlgorithm",
    "LocalFileSystem",
    "RequestConfig",
    "ResolutionState",
    "ResolvedConfig",
    "TlsVersion",
    "TokenProvider",
    "auto_configure",
    "file_for_context",
    "merge_documents",
]

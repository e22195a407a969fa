"""Resolution pipeline and refresh.

The resolver walks a small state machine::

    EMPTY -> FILE_DISCOVERED | SERVICE_IDENTITY -> ENV_OVERRIDDEN -> NORMALIZED -> RESOLVED

Kubeconfig files win over the in-cluster service account: once a usable
file is found the service-account fallback is skipped entirely. Environment
overrides always run next, and normalization always runs last.

Example:
    >>> from kubecfg.config import ConfigResolver
    >>> resolver = ConfigResolver()
    >>> config = resolver.auto_configure()
    >>> config.master_url
    'https://my-cluster:6443/'
    >>> config = resolver.refresh(config)
"""

import logging
from collections.abc import Callable, Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from kubecfg.errors import ContextNotFoundError
from kubecfg.kubeconfig.models import KubeConfigDocument
from kubecfg.kubeconfig.parser import parse_string

from .env import EnvironmentProbe
from .filesystem import FileSystem, LocalFileSystem
from .locator import find_kubeconfig_files, load_contents
from .merge import file_for_context, merge_documents
from .models import ResolvedConfig
from .normalize import normalize
from .service_account import try_namespace_from_path, try_service_account
from .tls import https_available as default_https_available

logger = logging.getLogger(__name__)

__all__ = ["ConfigResolver", "ResolutionState", "apply_explicit_overrides"]


class ResolutionState(str, Enum):
    EMPTY = "empty"
    FILE_DISCOVERED = "file_discovered"
    SERVICE_IDENTITY = "service_identity"
    ENV_OVERRIDDEN = "env_overridden"
    NORMALIZED = "normalized"
    RESOLVED = "resolved"


def apply_explicit_overrides(
    config: ResolvedConfig,
    overrides: Mapping[str, Any],
    https_available: Callable[[ResolvedConfig], bool],
    fs: FileSystem | None = None,
    probe: EnvironmentProbe | None = None,
) -> ResolvedConfig:
    """Overlay values the caller set explicitly and remember them on the snapshot.

    ``overrides`` maps field names to values; the ``request_config`` entry,
    if any, maps RequestConfig field names to values. An explicit namespace
    marks the namespace as non-default. The result is normalized again, with
    ``probe`` consulted for a forced key algorithm, and an explicit
    ``client_key_algo`` wins over both.
    """
    if not overrides:
        return config

    changes = dict(overrides)
    request_changes = changes.pop("request_config", None)
    if request_changes:
        changes["request_config"] = config.request_config.model_copy(update=request_changes)
    if "namespace" in changes:
        changes["default_namespace"] = False

    updated = normalize(
        config.evolve(**changes, explicit_overrides=overrides), https_available, probe, fs
    )
    if overrides.get("client_key_algo") is not None:
        updated = updated.evolve(client_key_algo=overrides["client_key_algo"])
    return updated


class ConfigResolver:
    """Produces :class:`ResolvedConfig` snapshots from the available sources.

    Args:
        probe: Option lookup; defaults to the process environment
        fs: Filesystem access; defaults to the local filesystem
        https_available: Predicate deciding the scheme of scheme-less master URLs
        home_dir: Home directory for the default kubeconfig location;
            detected from the environment when None
    """

    def __init__(
        self,
        probe: EnvironmentProbe | None = None,
        fs: FileSystem | None = None,
        https_available: Callable[[ResolvedConfig], bool] | None = None,
        home_dir: str | None = None,
    ):
        self.probe = probe or EnvironmentProbe()
        self.fs = fs or LocalFileSystem()
        self.https_available = https_available or default_https_available
        self.home_dir = home_dir

    def _transition(self, state: ResolutionState) -> None:
        logger.debug(f"Configuration resolution state: {state.value}")

    def _normalize(self, config: ResolvedConfig, use_probe: bool = True) -> ResolvedConfig:
        normalized = normalize(
            config, self.https_available, self.probe if use_probe else None, self.fs
        )
        self._transition(ResolutionState.NORMALIZED)
        return normalized

    def _post_auto_configure(self, config: ResolvedConfig) -> ResolvedConfig:
        config = self.probe.apply(config)
        self._transition(ResolutionState.ENV_OVERRIDDEN)
        return self._normalize(config)

    def _read_documents(self, paths: list[Path]) -> list[KubeConfigDocument]:
        documents = []
        for path in paths:
            contents = load_contents(path, self.fs)
            if contents is None:
                continue
            documents.append(parse_string(contents, str(path)).with_source(path.absolute()))
        return documents

    def empty(self) -> ResolvedConfig:
        """Return the compiled-in defaults, without consulting any source."""
        return self._normalize(ResolvedConfig(), use_probe=False)

    def auto_configure(self, context: str | None = None) -> ResolvedConfig:
        """Resolve a configuration from kubeconfig files or the service account.

        Args:
            context: Kubeconfig context to select; None uses the current context

        Raises:
            ContextNotFoundError: If ``context`` is not defined in the kubeconfig
            KubeConfigParseError: If a kubeconfig file is malformed
        """
        self._transition(ResolutionState.EMPTY)
        config = ResolvedConfig()

        files = find_kubeconfig_files(self.probe, self.fs, self.home_dir)
        documents = self._read_documents(files)
        if documents:
            self._transition(ResolutionState.FILE_DISCOVERED)
            config = merge_documents(config, context, *documents, fs=self.fs)
        else:
            self._transition(ResolutionState.SERVICE_IDENTITY)
            config = try_service_account(config, self.probe, self.fs)
            config = try_namespace_from_path(config, self.probe, self.fs)

        config = self._post_auto_configure(config).evolve(auto_configured=True)
        self._transition(ResolutionState.RESOLVED)
        return config

    def from_kubeconfig(self, source: str | Path, context: str | None = None) -> ResolvedConfig:
        """Build a configuration from a kubeconfig path or YAML text.

        A :class:`~pathlib.Path`, or a string without line breaks, is read as
        a file path; any other string is parsed as kubeconfig YAML.
        """
        if isinstance(source, Path) or "\n" not in source:
            return self.from_kubeconfig_file(source, context)
        return self.from_kubeconfig_string(source, context)

    def from_kubeconfig_file(self, path: str | Path, context: str | None = None) -> ResolvedConfig:
        """Build a configuration from one kubeconfig file, without environment overrides.

        Raises:
            OSError: If the file cannot be read
            ContextNotFoundError: If ``context`` is not defined in the file
            KubeConfigParseError: If the file is malformed
        """
        path = Path(path)
        document = parse_string(self.fs.read_text(path), str(path)).with_source(path.absolute())
        return self._from_documents(context, document)

    def from_kubeconfig_string(self, text: str, context: str | None = None) -> ResolvedConfig:
        """Build a configuration from kubeconfig YAML text, without environment overrides."""
        return self._from_documents(context, parse_string(text))

    def _from_documents(
        self, context: str | None, *documents: KubeConfigDocument
    ) -> ResolvedConfig:
        config = merge_documents(ResolvedConfig(), context, *documents, fs=self.fs)
        self._transition(ResolutionState.FILE_DISCOVERED)
        config = self._normalize(config, use_probe=False)
        self._transition(ResolutionState.RESOLVED)
        return config

    def refresh(self, config: ResolvedConfig) -> ResolvedConfig:
        """Re-derive ``config`` from its original source.

        Returns ``config`` itself when it carries an explicit token, when its
        source cannot be read anymore, or when it was built from explicit
        values only. Otherwise returns a new snapshot; values the caller set
        through the builder are applied again on top of it.

        Raises:
            KubeConfigParseError: If the backing kubeconfig became malformed
        """
        if config.oauth_token:
            logger.debug("Explicit OAuth token set, skipping refresh")
            return config

        context_name = config.current_context_name
        if config.auto_configured:
            try:
                refreshed = self.auto_configure(context_name)
            except ContextNotFoundError as e:
                logger.warning(f"Could not refresh configuration: {e}")
                return config
            return apply_explicit_overrides(
                refreshed, config.explicit_overrides, self.https_available, self.fs, self.probe
            )

        source = file_for_context(config.current_context)
        if source is None:
            logger.debug("Configuration has no source to refresh from")
            return config

        contents = load_contents(source, self.fs)
        if contents is None:
            return config

        document = parse_string(contents, str(source)).with_source(source)
        try:
            refreshed = merge_documents(ResolvedConfig(), context_name, document, fs=self.fs)
        except ContextNotFoundError as e:
            logger.warning(f"Could not refresh configuration from {source}: {e}")
            return config

        probe: EnvironmentProbe | None = self.probe
        if self.probe.disable_auto_config():
            probe = None
            refreshed = self._normalize(refreshed, use_probe=False)
        else:
            refreshed = self._post_auto_configure(refreshed)
        return apply_explicit_overrides(
            refreshed, config.explicit_overrides, self.https_available, self.fs, probe
        )

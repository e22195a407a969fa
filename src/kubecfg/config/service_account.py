"""In-cluster service-account fallback.

Used when no kubeconfig file is found. Inside a pod the API server address
is published through ``KUBERNETES_SERVICE_HOST`` / ``KUBERNETES_SERVICE_PORT``
and the service-account token, CA bundle and namespace are mounted under
``/var/run/secrets/kubernetes.io/serviceaccount``. Every step is
best-effort: a missing file leaves its field unset.
"""

import logging
from typing import Any

from . import properties as props
from .env import EnvironmentProbe
from .filesystem import FileSystem, LocalFileSystem
from .models import ConfigSource, ResolvedConfig

logger = logging.getLogger(__name__)

__all__ = ["join_host_port", "try_namespace_from_path", "try_service_account"]


def join_host_port(host: str, port: str) -> str:
    if ":" in host:
        # IPv6 literal
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _find_token_file(probe: EnvironmentProbe, fs: FileSystem) -> str | None:
    token_path = probe.get(props.SERVICE_ACCOUNT_TOKEN_FILE)
    if token_path is not None:
        return token_path
    if fs.is_file(props.SERVICE_ACCOUNT_TOKEN_PATH):
        return props.SERVICE_ACCOUNT_TOKEN_PATH
    logger.debug(
        "Could not find the service account token at the default location: "
        f"[{props.SERVICE_ACCOUNT_TOKEN_PATH}]. Ignoring."
    )
    return None


def try_service_account(
    config: ResolvedConfig,
    probe: EnvironmentProbe,
    fs: FileSystem | None = None,
) -> ResolvedConfig:
    """Fill master URL, CA file and auto-discovered token from the pod environment."""
    logger.debug("Trying to configure client from service account...")
    fs = fs or LocalFileSystem()
    changes: dict[str, Any] = {}

    host = probe.get(props.SERVICE_HOST)
    port = probe.get(props.SERVICE_PORT)
    if host is not None and port is not None:
        host_port = join_host_port(host, port)
        logger.debug(f"Found service account host and port: {host_port}")
        changes["master_url"] = f"{props.HTTPS_PROTOCOL_PREFIX}{host_port}"

    if probe.get_bool(props.TRY_SERVICE_ACCOUNT, True):
        ca_path = probe.get(props.CA_CERT_FILE, props.SERVICE_ACCOUNT_CA_CRT_PATH)
        if fs.is_file(ca_path):
            logger.debug(f"Found service account ca cert at: [{ca_path}].")
            changes["ca_cert_file"] = ca_path
        else:
            logger.debug(f"Did not find service account ca cert at: [{ca_path}].")

        token_path = _find_token_file(probe, fs)
        if token_path is not None:
            try:
                token = fs.read_text(token_path).strip()
                logger.debug(f"Found service account token at: [{token_path}].")
                changes["auto_oauth_token"] = token
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(
                    f"Error reading service account token from: [{token_path}]. Ignoring. ({e})"
                )

    if changes:
        changes["source"] = ConfigSource.SERVICE_ACCOUNT
    return config.evolve(**changes)


def try_namespace_from_path(
    config: ResolvedConfig,
    probe: EnvironmentProbe,
    fs: FileSystem | None = None,
) -> ResolvedConfig:
    """Set the namespace from the mounted service-account namespace file."""
    logger.debug(
        "Trying to configure client namespace from Kubernetes service account namespace path..."
    )
    if not probe.get_bool(props.TRY_NAMESPACE_PATH, True):
        return config

    fs = fs or LocalFileSystem()
    namespace_path = probe.get(props.NAMESPACE_FILE, props.SERVICE_ACCOUNT_NAMESPACE_PATH)
    if not fs.is_file(namespace_path):
        logger.debug(f"Did not find service account namespace at: [{namespace_path}]. Ignoring.")
        return config

    logger.debug(f"Found service account namespace at: [{namespace_path}].")
    try:
        namespace = fs.read_text(namespace_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading service account namespace from: [{namespace_path}]: {e}")
        return config
    return config.evolve(namespace=namespace.replace("\r", "").replace("\n", ""))

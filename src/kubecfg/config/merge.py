"""Merge parsed kubeconfig documents into a configuration snapshot.

Documents are merged in order: a cluster, user or context defined again in
a later document replaces the earlier definition of the same name. The
selected context (explicit name, else the ``current-context`` marker of the
last document declaring one) decides which cluster and user become
authoritative.
"""

import logging
import os
from pathlib import Path
from typing import Any, TypeVar

from kubecfg.errors import ContextNotFoundError
from kubecfg.kubeconfig.models import (
    AuthInfo,
    Cluster,
    KubeConfigDocument,
    NamedAuthInfo,
    NamedCluster,
    NamedContext,
)

from . import properties as props
from .filesystem import FileSystem, LocalFileSystem
from .models import ConfigSource, ResolvedConfig
from .normalize import key_algorithm_for

logger = logging.getLogger(__name__)

__all__ = ["file_for_context", "merge_documents"]

_Named = TypeVar("_Named", NamedCluster, NamedAuthInfo, NamedContext)

# Auth-provider config keys holding a usable bearer token, in preference order
_AUTH_PROVIDER_TOKEN_KEYS = ("access-token", "id-token")


def _merge_named(entries: list[list[_Named]]) -> dict[str, _Named]:
    merged: dict[str, _Named] = {}
    for group in entries:
        for entry in group:
            merged[entry.name] = entry
    return merged


def _absolutify(path: str | None, source_file: Path | None) -> str | None:
    """Resolve a path from a kubeconfig relative to the file that declared it."""
    if path is None or source_file is None or os.path.isabs(path):
        return path
    return str(source_file.parent / path)


def file_for_context(context: NamedContext | None) -> Path | None:
    """Return the kubeconfig file a context was read from, if known."""
    if context is None:
        return None
    return context.source_file


def _select_context_name(
    context_name: str | None, documents: tuple[KubeConfigDocument, ...]
) -> str | None:
    if context_name:
        return context_name
    selected = None
    for document in documents:
        if document.current_context:
            selected = document.current_context
    return selected


def _cluster_changes(cluster: Cluster, source_file: Path | None) -> dict[str, Any]:
    insecure = bool(cluster.insecure_skip_tls_verify)
    master_url = cluster.server or ""
    changes: dict[str, Any] = {
        "master_url": master_url,
        "trust_certs": insecure,
        "disable_hostname_verification": insecure,
        "tls_server_name": cluster.tls_server_name,
        "ca_cert_data": cluster.certificate_authority_data,
        "ca_cert_file": _absolutify(cluster.certificate_authority, source_file),
    }

    proxy_url = cluster.proxy_url
    if proxy_url:
        if proxy_url.startswith(props.SOCKS5_PROTOCOL_PREFIX):
            if master_url.startswith(props.HTTPS_PROTOCOL_PREFIX):
                changes["https_proxy"] = proxy_url
            else:
                changes["http_proxy"] = proxy_url
        elif proxy_url.startswith(props.HTTPS_PROTOCOL_PREFIX):
            changes["https_proxy"] = proxy_url
        elif proxy_url.startswith(props.HTTP_PROTOCOL_PREFIX):
            changes["http_proxy"] = proxy_url
        else:
            logger.warning(f"Ignoring proxy-url with unsupported scheme: {proxy_url}")
    return changes


def _read_token_file(token_file: str, fs: FileSystem) -> str | None:
    try:
        return fs.read_text(token_file).strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Error reading token file [{token_file}]. Ignoring. ({e})")
        return None


def _auth_info_changes(
    user: AuthInfo, source_file: Path | None, fs: FileSystem
) -> dict[str, Any]:
    client_key_file = _absolutify(user.client_key, source_file)
    changes: dict[str, Any] = {
        "client_cert_file": _absolutify(user.client_certificate, source_file),
        "client_cert_data": user.client_certificate_data,
        "client_key_file": client_key_file,
        "client_key_data": user.client_key_data,
        "client_key_algo": key_algorithm_for(client_key_file, user.client_key_data, fs),
        "username": user.username,
        "password": user.password,
        "impersonate_username": user.impersonate,
        "impersonate_groups": list(user.impersonate_groups),
        "impersonate_extras": {k: list(v) for k, v in user.impersonate_user_extra.items()},
    }

    token = user.token
    if not token and user.token_file:
        token = _read_token_file(_absolutify(user.token_file, source_file) or "", fs)
    if not token and user.auth_provider is not None:
        changes["auth_provider"] = user.auth_provider
        for key in _AUTH_PROVIDER_TOKEN_KEYS:
            value = user.auth_provider.config.get(key)
            if value:
                token = str(value)
                break
    changes["auto_oauth_token"] = token
    return changes


def merge_documents(
    target: ResolvedConfig,
    context_name: str | None,
    *documents: KubeConfigDocument,
    fs: FileSystem | None = None,
) -> ResolvedConfig:
    """Merge ``documents`` over ``target`` and return the new snapshot.

    Args:
        target: The snapshot to merge into
        context_name: Context to select; None selects the declared current context
        documents: Parsed kubeconfig documents, in precedence order (last wins)
        fs: Filesystem used to read token and key files

    Returns:
        A snapshot holding the merged context list, the selected context and
        the cluster/user settings it points at

    Raises:
        ContextNotFoundError: If ``context_name`` names no known context
    """
    fs = fs or LocalFileSystem()
    clusters = _merge_named([d.clusters for d in documents])
    users = _merge_named([d.users for d in documents])
    contexts = _merge_named([d.contexts for d in documents])

    changes: dict[str, Any] = {
        "contexts": list(contexts.values()),
        "source": ConfigSource.KUBECONFIG,
    }

    selected_name = _select_context_name(context_name, documents)
    if selected_name is None:
        logger.debug("No current context declared in kubeconfig")
        return target.evolve(**changes)

    current = contexts.get(selected_name)
    if current is None:
        raise ContextNotFoundError(selected_name, list(contexts))

    logger.debug(f"Using kubeconfig context: {selected_name}")
    changes["current_context"] = current
    changes["namespace"] = current.context.namespace

    named_cluster = clusters.get(current.context.cluster or "")
    if named_cluster is None:
        logger.warning(
            f"Context '{selected_name}' references unknown cluster '{current.context.cluster}'"
        )
        return target.evolve(**changes)
    changes.update(_cluster_changes(named_cluster.cluster, named_cluster.source_file))

    named_user = users.get(current.context.user or "")
    if named_user is not None:
        changes.update(_auth_info_changes(named_user.user, named_user.source_file, fs))
    elif current.context.user:
        logger.warning(
            f"Context '{selected_name}' references unknown user '{current.context.user}'"
        )

    return target.evolve(**changes)

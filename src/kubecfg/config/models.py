"""Resolved configuration snapshot.

:class:`ResolvedConfig` is the output of every resolution pass: how to reach
the API server, which TLS material to use, how to authenticate, and the
timing policy in :class:`RequestConfig`. Instances are frozen; stages of
the pipeline derive new snapshots with :meth:`ResolvedConfig.evolve`.

The one exception is the auto-discovered bearer token. It lives in a
private attribute that :meth:`ResolvedConfig.update_auto_oauth_token`
replaces with a single reference assignment, so threads issuing requests
observe either the previous or the new token.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import ConfigDict, Field, PrivateAttr

from kubecfg.kubeconfig.models import AuthProviderConfig, NamedContext
from kubecfg.models import KubecfgBaseModel
from kubecfg.version import PACKAGE_NAME, PACKAGE_VERSION

from . import properties as props

__all__ = [
    "ConfigSource",
    "KeyAlgorithm",
    "RequestConfig",
    "ResolvedConfig",
    "TlsVersion",
    "TokenProvider",
]

_UNSET: Any = object()

_REDACTED = "***"
_SECRET_FIELDS = (
    "oauth_token",
    "auto_oauth_token",
    "password",
    "proxy_password",
    "client_key_data",
    "client_key_passphrase",
    "trust_store_passphrase",
    "key_store_passphrase",
)


class KeyAlgorithm(str, Enum):
    RSA = "RSA"
    EC = "EC"


class TlsVersion(str, Enum):
    TLS_1_3 = "TLSv1.3"
    TLS_1_2 = "TLSv1.2"
    TLS_1_1 = "TLSv1.1"
    TLS_1_0 = "TLSv1"
    SSL_3_0 = "SSLv3"


class ConfigSource(str, Enum):
    """Where the discovery stage of a resolution pass found its values."""

    DEFAULTS = "defaults"
    KUBECONFIG = "kubeconfig"
    SERVICE_ACCOUNT = "service_account"


class TokenProvider(ABC):
    """Supplies bearer tokens on demand, e.g. from an external credential helper."""

    @abstractmethod
    def get_token(self) -> str | None:
        """Return the current token, or None if none is available."""


class RequestConfig(KubecfgBaseModel):
    """Per-request timing and retry policy.

    All durations are milliseconds. A ``watch_reconnect_limit`` of -1 means
    unlimited reconnects.
    """

    watch_reconnect_interval: int = props.DEFAULT_WATCH_RECONNECT_INTERVAL
    watch_reconnect_limit: int = props.DEFAULT_WATCH_RECONNECT_LIMIT
    request_timeout: int = props.DEFAULT_REQUEST_TIMEOUT
    upload_request_timeout: int = props.DEFAULT_UPLOAD_REQUEST_TIMEOUT
    request_retry_backoff_limit: int = props.DEFAULT_REQUEST_RETRY_BACKOFF_LIMIT
    request_retry_backoff_interval: int = props.DEFAULT_REQUEST_RETRY_BACKOFF_INTERVAL
    scale_timeout: int = props.DEFAULT_SCALE_TIMEOUT
    logging_interval: int = props.DEFAULT_LOGGING_INTERVAL


class ResolvedConfig(KubecfgBaseModel):
    """Fully merged and normalized client configuration.

    Bearer tokens have three slots. ``oauth_token`` is the explicit token:
    only callers set it, and once set it is never replaced by discovery or
    refresh. The auto-discovered token comes from kubeconfig files, the
    service-account mount or the ``kubernetes.auth.token`` option and may be
    replaced at any time. ``oauth_token_provider`` is consulted when no
    explicit token is set. See :meth:`bearer_token`.

    Certificate and key material may be given either inline (``*_data``,
    base64 encoded as in kubeconfig files) or as file paths (``*_file``).
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    master_url: str = props.DEFAULT_MASTER_URL
    api_version: str = props.DEFAULT_API_VERSION
    namespace: str | None = None
    default_namespace: bool = True

    trust_certs: bool = False
    disable_hostname_verification: bool = False
    tls_server_name: str | None = None
    ca_cert_file: str | None = None
    ca_cert_data: str | None = None
    client_cert_file: str | None = None
    client_cert_data: str | None = None
    client_key_file: str | None = None
    client_key_data: str | None = None
    client_key_algo: KeyAlgorithm | None = None
    client_key_passphrase: str = props.DEFAULT_CLIENT_KEY_PASSPHRASE
    trust_store_file: str | None = None
    trust_store_passphrase: str | None = None
    key_store_file: str | None = None
    key_store_passphrase: str | None = None

    oauth_token: str | None = None
    oauth_token_provider: TokenProvider | None = Field(default=None, exclude=True)
    username: str | None = None
    password: str | None = None
    auth_provider: AuthProviderConfig | None = None

    impersonate_username: str | None = None
    impersonate_groups: list[str] = Field(default_factory=list)
    impersonate_extras: dict[str, list[str]] = Field(default_factory=dict)

    http_proxy: str | None = None
    https_proxy: str | None = None
    proxy_username: str | None = None
    proxy_password: str | None = None
    no_proxy: list[str] = Field(default_factory=list)

    tls_versions: list[TlsVersion] = Field(
        default_factory=lambda: [TlsVersion.TLS_1_3, TlsVersion.TLS_1_2]
    )
    websocket_ping_interval: int = props.DEFAULT_WEBSOCKET_PING_INTERVAL
    connection_timeout: int = props.DEFAULT_CONNECTION_TIMEOUT
    max_concurrent_requests: int = props.DEFAULT_MAX_CONCURRENT_REQUESTS
    max_concurrent_requests_per_host: int = props.DEFAULT_MAX_CONCURRENT_REQUESTS_PER_HOST
    http2_disable: bool = False
    user_agent: str = f"{PACKAGE_NAME}/{PACKAGE_VERSION}"
    custom_headers: dict[str, str] = Field(default_factory=dict)

    request_config: RequestConfig = Field(default_factory=RequestConfig)

    contexts: list[NamedContext] = Field(default_factory=list)
    current_context: NamedContext | None = None
    auto_configured: bool = False
    source: ConfigSource = ConfigSource.DEFAULTS

    _auto_oauth_token: str | None = PrivateAttr(default=None)
    _explicit_overrides: dict[str, Any] = PrivateAttr(default_factory=dict)

    @property
    def auto_oauth_token(self) -> str | None:
        return self._auto_oauth_token

    def update_auto_oauth_token(self, token: str | None) -> None:
        """Replace the auto-discovered token in place."""
        self._auto_oauth_token = token

    @property
    def explicit_overrides(self) -> dict[str, Any]:
        """Values the caller set explicitly through the builder."""
        return dict(self._explicit_overrides)

    @property
    def current_context_name(self) -> str | None:
        return self.current_context.name if self.current_context else None

    @property
    def file(self) -> Path | None:
        """The kubeconfig file backing the current context, if any."""
        return self.current_context.source_file if self.current_context else None

    def evolve(self, **changes: Any) -> ResolvedConfig:
        """Return a new snapshot with ``changes`` applied.

        ``auto_oauth_token`` and ``explicit_overrides`` are accepted next to
        regular fields.
        """
        auto_token = changes.pop("auto_oauth_token", _UNSET)
        overrides = changes.pop("explicit_overrides", _UNSET)
        updated = self.model_copy(update=changes)
        if auto_token is not _UNSET:
            updated._auto_oauth_token = auto_token
        if overrides is not _UNSET:
            updated._explicit_overrides = dict(overrides)
        return updated

    def with_request_config(self, request_config: RequestConfig) -> ResolvedConfig:
        """Return a copy using ``request_config``; this snapshot is left untouched."""
        return self.evolve(request_config=request_config)

    def bearer_token(self) -> str | None:
        """Return the token to send: explicit, then provider, then auto-discovered."""
        if self.oauth_token:
            return self.oauth_token
        if self.oauth_token_provider is not None:
            token = self.oauth_token_provider.get_token()
            if token:
                return token
        return self._auto_oauth_token

    def to_display_dict(self, redact: bool = True) -> dict[str, Any]:
        """Serialize for display, masking credentials unless ``redact`` is False."""
        data = self.model_dump(mode="json", exclude_none=True)
        if self._auto_oauth_token is not None:
            data["auto_oauth_token"] = self._auto_oauth_token
        if self.current_context is not None:
            data["current_context"] = self.current_context.name
        data["contexts"] = [c.name for c in self.contexts]
        if redact:
            for name in _SECRET_FIELDS:
                if data.get(name):
                    data[name] = _REDACTED
            if self.auth_provider is not None and self.auth_provider.config:
                data["auth_provider"]["config"] = {
                    key: _REDACTED for key in self.auth_provider.config
                }
        return data
